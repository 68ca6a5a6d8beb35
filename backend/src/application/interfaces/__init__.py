"""Application interfaces - Port definitions for external services."""

from .audit_logger import AuditEvent, IAuditLogger
from .credit_bureau import ICreditBureau
from .disclosure_registry import IDisclosureRegistry
from .document_generator import IDocumentGenerator
from .notification_dispatcher import INotificationDispatcher
from .payment_gateway import IPaymentGateway

__all__ = [
    "AuditEvent",
    "IAuditLogger",
    "ICreditBureau",
    "IDisclosureRegistry",
    "IDocumentGenerator",
    "INotificationDispatcher",
    "IPaymentGateway",
]
