"""Application-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from application.services import TransitionRequest
from domain.entities import Application
from domain.enums import ApplicationStatus
from domain.value_objects import ScoreBreakdown


class ApplicantSections(BaseModel):
    """Applicant-supplied sections; omitted sections are left unchanged."""

    personal_info: Optional[dict[str, Any]] = None
    employment: Optional[dict[str, Any]] = None
    co_applicants: Optional[list[dict[str, Any]]] = None
    rental_history: Optional[dict[str, Any]] = None
    documents: Optional[dict[str, Any]] = None
    legal_disclosures: Optional[dict[str, Any]] = None
    state_disclosures: Optional[dict[str, Any]] = None

    def sections(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, include=set(ApplicantSections.model_fields))


class CreateApplicationRequest(ApplicantSections):
    """Request schema for starting an application."""

    property_id: UUID = Field(..., description="Property to apply for")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "property_id": "6f1c1f9e-5f55-4a56-9d3e-0d9f1a3a9a11",
                    "personal_info": {"first_name": "Ada", "last_name": "Lovelace"},
                }
            ]
        }
    }


class AutosaveRequest(ApplicantSections):
    """Request schema for saving draft progress."""

    step: Optional[int] = Field(None, ge=0, description="Last completed form step")

    def payload(self) -> dict[str, Any]:
        data = self.sections()
        if self.step is not None:
            data["step"] = self.step
        return data


class StatusUpdateRequest(BaseModel):
    """Request schema for a status change."""

    status: ApplicationStatus
    reason: Optional[str] = Field(None, max_length=2000)
    legal_acceptance: Optional[bool] = None
    payment_amount: Optional[str] = None
    payment_purpose: Optional[str] = None
    payment_message: Optional[str] = None
    rejection_category: Optional[str] = None
    rejection_reason: Optional[str] = Field(None, max_length=2000)
    rejection_categories: list[str] = Field(default_factory=list)
    rejection_explanation: Optional[str] = Field(None, max_length=5000)
    appealable: Optional[bool] = None

    def to_transition(self) -> TransitionRequest:
        return TransitionRequest(
            new_status=self.status,
            reason=self.reason,
            legal_acceptance=self.legal_acceptance,
            payment_amount=self.payment_amount,
            payment_purpose=self.payment_purpose,
            payment_message=self.payment_message,
            rejection_category=self.rejection_category,
            rejection_reason=self.rejection_reason,
            rejection_categories=tuple(self.rejection_categories),
            rejection_explanation=self.rejection_explanation,
            appealable=self.appealable,
        )


class PaymentRequestCreate(BaseModel):
    """Request schema for asking the applicant to pay a fee."""

    amount: str = Field(..., min_length=1, max_length=32)
    purpose: str = Field(..., min_length=1, max_length=255)
    message: Optional[str] = Field(None, max_length=2000)
    reason: Optional[str] = Field(None, max_length=2000)


class ScoreBreakdownResponse(BaseModel):
    income_score: int
    credit_score: int
    rental_history_score: int
    employment_score: int
    documents_score: int
    total_score: int
    max_score: int
    flags: list[str]

    @classmethod
    def from_breakdown(cls, breakdown: ScoreBreakdown) -> "ScoreBreakdownResponse":
        return cls(**breakdown.to_dict())


class ApplicationResponse(BaseModel):
    """Response schema for an application, already redacted for the caller."""

    id: UUID
    user_id: UUID
    property_id: UUID
    status: ApplicationStatus
    previous_status: Optional[ApplicationStatus] = None
    score: Optional[int] = None
    score_breakdown: Optional[dict[str, Any]] = None
    scored_at: Optional[datetime] = None
    status_history: list[dict[str, Any]] = Field(default_factory=list)
    personal_info: Optional[dict[str, Any]] = None
    employment: Optional[dict[str, Any]] = None
    co_applicants: list[dict[str, Any]] = Field(default_factory=list)
    rental_history: Optional[dict[str, Any]] = None
    documents: dict[str, Any] = Field(default_factory=dict)
    legal_disclosures: dict[str, Any] = Field(default_factory=dict)
    legal_acceptance: Optional[dict[str, Any]] = None
    state_disclosures: dict[str, Any] = Field(default_factory=dict)
    last_saved_step: Optional[int] = None
    snapshot: Optional[dict[str, Any]] = None
    payment_request: Optional[dict[str, Any]] = None
    rejection_category: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejection_details: Optional[dict[str, Any]] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    disclosure_pdf_url: Optional[str] = None
    lease_pdf_url: Optional[str] = None
    signed_lease_pdf_url: Optional[str] = None
    lease_signature_status: Optional[str] = None
    lease_fully_signed_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    version: int

    @classmethod
    def from_entity(cls, app: Application) -> "ApplicationResponse":
        personal_info = None
        if app.personal_info is not None:
            personal_info = app.personal_info.to_dict()
            personal_info["ssn_provided"] = bool(app.personal_info.ssn)

        return cls(
            id=app.id,
            user_id=app.user_id,
            property_id=app.property_id,
            status=app.status,
            previous_status=app.previous_status,
            score=app.score,
            score_breakdown=app.score_breakdown.to_dict() if app.score_breakdown else None,
            scored_at=app.scored_at,
            status_history=app.status_history.to_list(),
            personal_info=personal_info,
            employment=app.employment.to_dict() if app.employment else None,
            co_applicants=[co.to_dict() for co in app.co_applicants],
            rental_history=app.rental_history.to_dict() if app.rental_history else None,
            documents={name: doc.to_dict() for name, doc in app.documents.items()},
            legal_disclosures=app.legal_disclosures.to_dict(),
            legal_acceptance=app.legal_acceptance.to_dict() if app.legal_acceptance else None,
            state_disclosures={key: ack.to_dict() for key, ack in app.state_disclosures.items()},
            last_saved_step=app.last_saved_step,
            snapshot=app.snapshot.to_dict() if app.snapshot else None,
            payment_request=app.payment_request.to_dict() if app.payment_request else None,
            rejection_category=app.rejection_category.value if app.rejection_category else None,
            rejection_reason=app.rejection_reason,
            rejection_details=app.rejection_details.to_dict() if app.rejection_details else None,
            reviewed_by=app.reviewed_by,
            reviewed_at=app.reviewed_at,
            disclosure_pdf_url=app.disclosure_pdf_url,
            lease_pdf_url=app.lease_pdf_url,
            signed_lease_pdf_url=app.signed_lease_pdf_url,
            lease_signature_status=(
                app.lease_signature_status.value if app.lease_signature_status else None
            ),
            lease_fully_signed_at=app.lease_fully_signed_at,
            submitted_at=app.submitted_at,
            created_at=app.created_at,
            updated_at=app.updated_at,
            version=app.version,
        )


class NextStatusesResponse(BaseModel):
    status: ApplicationStatus
    next_statuses: list[ApplicationStatus]


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "version": "1.0.0"
                }
            ]
        }
    }
