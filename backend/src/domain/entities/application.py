"""Rental application aggregate."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from domain.enums import ApplicationStatus, LeaseSignatureStatus, RejectionCategory
from domain.value_objects import (
    CoApplicant,
    DocumentStatus,
    Employment,
    LegalAcceptance,
    LegalDisclosures,
    PaymentRequest,
    PersonalInfo,
    PropertySnapshot,
    RejectionDetails,
    RentalHistory,
    ScoreBreakdown,
    StateDisclosureAck,
    StatusChange,
    StatusHistory,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Application:
    """
    A tenant's request to rent one property.

    This is the aggregate root of the lifecycle engine. The property
    snapshot is captured once at creation and can never be replaced;
    the status history only grows.

    Attributes:
        id: Application identifier
        user_id: Applicant account
        property_id: Property applied for
        status: Current lifecycle status
        previous_status: Status before the last transition
        score: Total suitability score (0-100)
        score_breakdown: Per-category score detail
        status_history: Append-only transition log
        snapshot: Property terms at apply time
        payment_request: Embedded fee payment sub-record
        version: Optimistic concurrency counter, bumped on every write
    """

    user_id: UUID
    property_id: UUID
    id: UUID = field(default_factory=uuid4)
    status: ApplicationStatus = ApplicationStatus.DRAFT
    previous_status: Optional[ApplicationStatus] = None

    score: Optional[int] = None
    score_breakdown: Optional[ScoreBreakdown] = None
    scored_at: Optional[datetime] = None
    status_history: StatusHistory = field(default_factory=StatusHistory)

    personal_info: Optional[PersonalInfo] = None
    employment: Optional[Employment] = None
    co_applicants: list[CoApplicant] = field(default_factory=list)
    rental_history: Optional[RentalHistory] = None
    documents: dict[str, DocumentStatus] = field(default_factory=dict)
    legal_disclosures: LegalDisclosures = field(default_factory=LegalDisclosures)
    legal_acceptance: Optional[LegalAcceptance] = None
    state_disclosures: dict[str, StateDisclosureAck] = field(default_factory=dict)
    last_saved_step: Optional[int] = None

    snapshot: Optional[PropertySnapshot] = None
    payment_request: Optional[PaymentRequest] = None

    rejection_category: Optional[RejectionCategory] = None
    rejection_reason: Optional[str] = None
    rejection_details: Optional[RejectionDetails] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None

    disclosure_pdf_url: Optional[str] = None
    lease_pdf_url: Optional[str] = None
    signed_lease_pdf_url: Optional[str] = None
    lease_signature_status: Optional[LeaseSignatureStatus] = None
    lease_fully_signed_at: Optional[datetime] = None

    submitted_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    version: int = 1

    def __setattr__(self, name, value) -> None:
        if name == "snapshot":
            current = getattr(self, "snapshot", None)
            if current is not None and value != current:
                raise AttributeError("The property snapshot cannot change once captured")
        super().__setattr__(name, value)

    def transition_to(
        self,
        new_status: ApplicationStatus,
        changed_by: UUID,
        reason: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> StatusChange:
        """
        Move to a new status and append the change to the history.

        Legality is decided by the transition validator before this is called.

        Returns:
            The appended history entry
        """
        at = at or utc_now()
        entry = StatusChange(
            status=new_status,
            changed_at=at,
            changed_by=changed_by,
            reason=reason,
            previous_status=self.status,
        )
        self.previous_status = self.status
        self.status = new_status
        self.status_history.append(entry)
        self.updated_at = at
        return entry

    def apply_score(self, breakdown: ScoreBreakdown, at: Optional[datetime] = None) -> None:
        """Replace the whole score breakdown."""
        self.score_breakdown = breakdown
        self.score = breakdown.total_score
        self.scored_at = at or utc_now()

    @property
    def has_payment_request(self) -> bool:
        return self.payment_request is not None

    @property
    def is_draft(self) -> bool:
        return self.status == ApplicationStatus.DRAFT

    def touch(self) -> None:
        self.updated_at = utc_now()

    def __str__(self) -> str:
        return f"Application({self.id}, {self.status.value})"
