"""Core engine components of the application lifecycle."""

from .access_policy import AccessPolicy, require
from .lease_signature_coordinator import (
    LeaseSignatureCoordinator,
    SignLeaseOutcome,
    SignLeaseRequest,
)
from .payment_request_coordinator import PaymentRequestCoordinator
from .scoring_engine import ScoringEngine, parse_duration_years
from .transition_validator import (
    STATUS_TRANSITIONS,
    TransitionRequest,
    TransitionValidator,
    get_valid_next_statuses,
    is_valid_status_transition,
)

__all__ = [
    "AccessPolicy",
    "require",
    "LeaseSignatureCoordinator",
    "SignLeaseOutcome",
    "SignLeaseRequest",
    "PaymentRequestCoordinator",
    "ScoringEngine",
    "parse_duration_years",
    "STATUS_TRANSITIONS",
    "TransitionRequest",
    "TransitionValidator",
    "get_valid_next_statuses",
    "is_valid_status_transition",
]
