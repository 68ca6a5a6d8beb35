"""Domain Value Objects - Immutable objects without identity."""

from .actor import Actor
from .applicant_sections import (
    REDACTED,
    CoApplicant,
    DocumentStatus,
    Employment,
    LegalDisclosures,
    PersonalInfo,
    RentalHistory,
    StateDisclosure,
    StateDisclosureAck,
    parse_co_applicants,
    parse_document_status,
    parse_state_disclosures,
)
from .payment_request import PaymentRequest
from .property_snapshot import PolicySnapshot, PropertySnapshot
from .review import LegalAcceptance, RejectionDetails
from .score_breakdown import MAX_SCORE, ScoreBreakdown
from .status_history import StatusChange, StatusHistory

__all__ = [
    "Actor",
    "REDACTED",
    "CoApplicant",
    "DocumentStatus",
    "Employment",
    "LegalDisclosures",
    "PersonalInfo",
    "RentalHistory",
    "StateDisclosure",
    "StateDisclosureAck",
    "parse_co_applicants",
    "parse_document_status",
    "parse_state_disclosures",
    "PaymentRequest",
    "PolicySnapshot",
    "PropertySnapshot",
    "LegalAcceptance",
    "RejectionDetails",
    "MAX_SCORE",
    "ScoreBreakdown",
    "StatusChange",
    "StatusHistory",
]
