"""Domain Repository Interfaces - Abstract definitions."""

from .application_repository import IApplicationRepository
from .lease_signature_repository import ILeaseSignatureRepository
from .property_repository import IPropertyRepository

__all__ = [
    "IApplicationRepository",
    "ILeaseSignatureRepository",
    "IPropertyRepository",
]
