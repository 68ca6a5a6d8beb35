"""Account roles and the lease signer roles derived from them."""

from enum import Enum
from typing import Optional


class SignerRole(str, Enum):
    """Party a lease signature is recorded for."""

    TENANT = "tenant"
    LANDLORD = "landlord"

    def __str__(self) -> str:
        return self.value


class UserRole(str, Enum):
    """Closed set of account roles known to the marketplace."""

    RENTER = "renter"
    LANDLORD = "landlord"
    OWNER = "owner"
    PROPERTY_MANAGER = "property_manager"
    AGENT = "agent"
    ADMIN = "admin"

    @property
    def signer_role(self) -> Optional[SignerRole]:
        """Normalized lease signer role, or None when the account cannot sign."""
        return _SIGNER_ROLES.get(self)

    def __str__(self) -> str:
        return self.value


_SIGNER_ROLES = {
    UserRole.RENTER: SignerRole.TENANT,
    UserRole.LANDLORD: SignerRole.LANDLORD,
    UserRole.OWNER: SignerRole.LANDLORD,
    UserRole.ADMIN: SignerRole.LANDLORD,
}
