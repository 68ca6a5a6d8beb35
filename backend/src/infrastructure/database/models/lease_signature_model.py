"""Lease signature SQLAlchemy model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.session import Base


class LeaseSignatureModel(Base):
    """
    SQLAlchemy model for lease signatures.

    Insert-only. The unique constraint allows one signature per role.
    """

    __tablename__ = "lease_signatures"
    __table_args__ = (
        UniqueConstraint("application_id", "signer_role", name="uq_lease_signatures_application_role"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    application_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("applications.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    signer_user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    signer_role: Mapped[str] = mapped_column(String(16), nullable=False)
    signer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    signature_data: Mapped[str] = mapped_column(Text, nullable=False)

    # Request context
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Consents and disclosures
    consent_esign: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    consent_terms: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    pet_policy_acknowledged: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    vehicle_disclosure_acknowledged: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    damage_disclosure_acknowledged: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    state_code: Mapped[str] = mapped_column(String(8), nullable=False)
    state_disclosure_acknowledged: Mapped[bool] = mapped_column(Boolean, nullable=False)
    attestation_text: Mapped[str] = mapped_column(Text, nullable=False)

    signed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<LeaseSignatureModel(application_id={self.application_id}, role={self.signer_role})>"
