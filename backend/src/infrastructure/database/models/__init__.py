"""SQLAlchemy ORM models."""

from .application_model import ApplicationModel
from .audit_log_model import AuditLogModel
from .lease_signature_model import LeaseSignatureModel
from .property_model import PropertyModel
from .user_model import UserModel

__all__ = [
    "ApplicationModel",
    "AuditLogModel",
    "LeaseSignatureModel",
    "PropertyModel",
    "UserModel",
]
