"""Domain Enums - Constant values used across the domain."""

from .application_status import ApplicationStatus
from .payment_status import PaymentRequestStatus, PaymentStatus
from .lease_signature_status import LeaseSignatureStatus
from .roles import UserRole, SignerRole
from .rejection_category import RejectionCategory
from .capability import Capability
from .document_kind import DocumentKind

__all__ = [
    "ApplicationStatus",
    "PaymentRequestStatus",
    "PaymentStatus",
    "LeaseSignatureStatus",
    "UserRole",
    "SignerRole",
    "RejectionCategory",
    "Capability",
    "DocumentKind",
]
