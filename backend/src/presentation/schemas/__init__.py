"""Pydantic schemas for request/response validation."""

from .application_schemas import (
    ApplicationResponse,
    AutosaveRequest,
    CreateApplicationRequest,
    HealthResponse,
    NextStatusesResponse,
    PaymentRequestCreate,
    ScoreBreakdownResponse,
    StatusUpdateRequest,
)
from .lease_schemas import LeaseSignatureResponse, SignLeaseRequestSchema, SignLeaseResponse

__all__ = [
    "ApplicationResponse",
    "AutosaveRequest",
    "CreateApplicationRequest",
    "HealthResponse",
    "NextStatusesResponse",
    "PaymentRequestCreate",
    "ScoreBreakdownResponse",
    "StatusUpdateRequest",
    "LeaseSignatureResponse",
    "SignLeaseRequestSchema",
    "SignLeaseResponse",
]
