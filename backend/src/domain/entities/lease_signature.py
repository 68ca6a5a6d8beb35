"""Immutable lease e-signature record."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from domain.enums import SignerRole

DEFAULT_ATTESTATION = "I certify under penalty of perjury that this is my legal signature."


@dataclass(frozen=True)
class LeaseSignature:
    """
    One role-scoped signature on the lease of an approved application.

    Rows are written once and never updated or deleted; ``is_locked`` is
    always True.
    """

    application_id: UUID
    signer_user_id: UUID
    signer_role: SignerRole
    signer_name: str
    signature_data: str
    state_code: str
    state_disclosure_acknowledged: bool
    attestation_text: str = DEFAULT_ATTESTATION
    id: UUID = field(default_factory=uuid4)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    consent_esign: bool = True
    consent_terms: bool = True
    pet_policy_acknowledged: Optional[bool] = None
    vehicle_disclosure_acknowledged: Optional[bool] = None
    damage_disclosure_acknowledged: Optional[bool] = None
    signed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_locked: bool = True

    def __post_init__(self) -> None:
        if not self.is_locked:
            raise ValueError("Lease signatures are locked at creation")
        if not self.signer_name or not self.signer_name.strip():
            raise ValueError("Signer name cannot be empty")
        if not self.signature_data:
            raise ValueError("Signature data cannot be empty")

    def __str__(self) -> str:
        return f"{self.signer_role.value} signature by {self.signer_name}"
