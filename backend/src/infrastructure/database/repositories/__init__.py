"""Repository implementations."""

from .sqlalchemy_application_repository import SQLAlchemyApplicationRepository
from .sqlalchemy_audit_logger import LoggingAuditLogger, SQLAlchemyAuditLogger
from .sqlalchemy_lease_signature_repository import SQLAlchemyLeaseSignatureRepository
from .sqlalchemy_property_repository import SQLAlchemyPropertyRepository

__all__ = [
    "SQLAlchemyApplicationRepository",
    "LoggingAuditLogger",
    "SQLAlchemyAuditLogger",
    "SQLAlchemyLeaseSignatureRepository",
    "SQLAlchemyPropertyRepository",
]
