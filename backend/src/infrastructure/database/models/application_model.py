"""Application SQLAlchemy model."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.session import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationModel(Base):
    """
    SQLAlchemy model for rental applications.

    Applicant sections, the property snapshot, the status history and the
    embedded payment request are stored as JSON documents.
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_applications_user_property"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, index=True, nullable=False)
    property_id: Mapped[UUID] = mapped_column(Uuid, index=True, nullable=False)

    # Lifecycle
    status: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    previous_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status_history: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # Scoring
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    score_breakdown: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    scored_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Applicant sections
    personal_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    employment: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    co_applicants: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    rental_history: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    documents: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    legal_disclosures: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    legal_acceptance: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    state_disclosures: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    last_saved_step: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Property terms at apply time
    snapshot: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Payment
    payment_request: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Review
    rejection_category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    reviewed_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Documents and lease
    disclosure_pdf_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    lease_pdf_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    signed_lease_pdf_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    lease_signature_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    lease_fully_signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Timestamps
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<ApplicationModel(id={self.id}, status={self.status}, version={self.version})>"
