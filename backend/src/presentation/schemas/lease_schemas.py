"""Lease signing Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from application.services import SignLeaseOutcome, SignLeaseRequest
from domain.entities import LeaseSignature


class SignLeaseRequestSchema(BaseModel):
    """Request schema for signing a lease."""

    signer_name: str = Field(..., min_length=1, max_length=255)
    signature_data: str = Field(..., min_length=1, description="Drawn or typed signature")
    state_code: Optional[str] = Field(None, max_length=8)
    state_disclosure_acknowledged: bool = False
    attestation_acknowledged: bool = False
    attestation_text: Optional[str] = None
    consent_esign: bool = True
    consent_terms: bool = True
    pet_policy_acknowledged: Optional[bool] = None
    vehicle_disclosure_acknowledged: Optional[bool] = None
    damage_disclosure_acknowledged: Optional[bool] = None

    def to_request(self) -> SignLeaseRequest:
        return SignLeaseRequest(**self.model_dump())


class LeaseSignatureResponse(BaseModel):
    id: UUID
    application_id: UUID
    signer_user_id: UUID
    signer_role: str
    signer_name: str
    state_code: str
    state_disclosure_acknowledged: bool
    attestation_text: str
    consent_esign: bool
    consent_terms: bool
    signed_at: datetime
    is_locked: bool

    @classmethod
    def from_entity(cls, signature: LeaseSignature) -> "LeaseSignatureResponse":
        return cls(
            id=signature.id,
            application_id=signature.application_id,
            signer_user_id=signature.signer_user_id,
            signer_role=signature.signer_role.value,
            signer_name=signature.signer_name,
            state_code=signature.state_code,
            state_disclosure_acknowledged=signature.state_disclosure_acknowledged,
            attestation_text=signature.attestation_text,
            consent_esign=signature.consent_esign,
            consent_terms=signature.consent_terms,
            signed_at=signature.signed_at,
            is_locked=signature.is_locked,
        )


class SignLeaseResponse(BaseModel):
    signature: LeaseSignatureResponse
    lease_signature_status: str
    signed_lease_pdf_url: Optional[str] = None
    document_generated: bool = False

    @classmethod
    def from_outcome(cls, outcome: SignLeaseOutcome) -> "SignLeaseResponse":
        return cls(
            signature=LeaseSignatureResponse.from_entity(outcome.signature),
            lease_signature_status=outcome.status.value,
            signed_lease_pdf_url=outcome.application.signed_lease_pdf_url,
            document_generated=outcome.document_generated,
        )
