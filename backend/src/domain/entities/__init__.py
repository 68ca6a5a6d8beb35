"""Domain Entities - Objects with identity."""

from .application import Application, utc_now
from .lease_signature import DEFAULT_ATTESTATION, LeaseSignature
from .property import Property, UserAccount

__all__ = [
    "Application",
    "utc_now",
    "DEFAULT_ATTESTATION",
    "LeaseSignature",
    "Property",
    "UserAccount",
]
