"""State machine and precondition checks for application status changes."""

from dataclasses import dataclass
from typing import Optional

from application.interfaces import IDisclosureRegistry
from domain.entities import Application, Property
from domain.enums import ApplicationStatus, Capability, RejectionCategory
from domain.errors import (
    DisclosureNotAcknowledged,
    DuplicatePaymentRequest,
    InvalidTransition,
    MissingRequiredField,
    ValidationError,
)
from .access_policy import require

STATUS_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.DRAFT: frozenset({
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.SUBMITTED: frozenset({
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.PAYMENT_REQUESTED,
    }),
    ApplicationStatus.UNDER_REVIEW: frozenset({
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.PAYMENT_REQUESTED,
    }),
    ApplicationStatus.PAYMENT_REQUESTED: frozenset({
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.WITHDRAWN,
    }),
    # Entered and left only through the payment protocol.
    ApplicationStatus.PAYMENT_COMPLETED: frozenset(),
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

REQUIRED_CAPABILITY: dict[ApplicationStatus, tuple[Capability, str]] = {
    ApplicationStatus.WITHDRAWN: (
        Capability.WITHDRAW,
        "Only the applicant can withdraw this application",
    ),
    ApplicationStatus.SUBMITTED: (
        Capability.SUBMIT,
        "Only the applicant can submit the application",
    ),
    ApplicationStatus.APPROVED: (
        Capability.REVIEW,
        "Not authorized to update application status",
    ),
    ApplicationStatus.REJECTED: (
        Capability.REVIEW,
        "Not authorized to update application status",
    ),
    ApplicationStatus.UNDER_REVIEW: (
        Capability.REVIEW,
        "Not authorized to update application status",
    ),
    ApplicationStatus.PAYMENT_REQUESTED: (
        Capability.REQUEST_PAYMENT,
        "Only landlords or authorized managers can request payment",
    ),
}

# (label, getter) pairs checked in order on submission.
REQUIRED_SUBMISSION_FIELDS = (
    ("first name", lambda app: app.personal_info.first_name),
    ("last name", lambda app: app.personal_info.last_name),
    ("email", lambda app: app.personal_info.email),
    ("phone", lambda app: app.personal_info.phone),
    ("employer name", lambda app: app.employment.employer_name),
    ("monthly income", lambda app: app.employment.monthly_income),
)


def is_valid_status_transition(current: ApplicationStatus, requested: ApplicationStatus) -> bool:
    """Check the transition table; same-to-same is never valid."""
    return requested in STATUS_TRANSITIONS.get(current, frozenset())


def get_valid_next_statuses(current: ApplicationStatus) -> list[ApplicationStatus]:
    """Statuses reachable from the current one, in declaration order."""
    allowed = STATUS_TRANSITIONS.get(current, frozenset())
    return [status for status in ApplicationStatus if status in allowed]


@dataclass(frozen=True)
class TransitionRequest:
    """
    A requested status change and the payload that comes with it.

    Attributes:
        new_status: Requested status
        reason: Free-text reason recorded in the history
        legal_acceptance: Applicant accepted the legal documents (submission)
        payment_amount: Amount of the fee (payment request)
        payment_purpose: What the fee is for (payment request)
        payment_message: Note from the landlord (payment request)
        rejection_category: Primary rejection reason
        rejection_reason: Free-text rejection reason
        rejection_categories: All categories in the structured details
        rejection_explanation: Explanation in the structured details
        appealable: Whether the rejection can be appealed
    """

    new_status: ApplicationStatus
    reason: Optional[str] = None
    legal_acceptance: Optional[bool] = None
    payment_amount: Optional[str] = None
    payment_purpose: Optional[str] = None
    payment_message: Optional[str] = None
    rejection_category: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejection_categories: tuple[str, ...] = ()
    rejection_explanation: Optional[str] = None
    appealable: Optional[bool] = None


class TransitionValidator:
    """
    Decides whether a status change may happen.

    Checks run in a fixed order so the caller always learns the first
    precondition that failed: the table, the actor's capabilities,
    then the status-specific requirements. An existing payment request is
    reported before the table so a repeated request is named as such.
    """

    def __init__(self, disclosure_registry: IDisclosureRegistry):
        self.disclosure_registry = disclosure_registry

    def validate(
        self,
        application: Application,
        request: TransitionRequest,
        capabilities: frozenset[Capability],
        property: Optional[Property] = None
    ) -> None:
        """
        Raise the first failed precondition of a status change.

        Args:
            application: Application in its current state
            request: Requested change
            capabilities: Capabilities resolved for the actor
            property: Property of the application (for state disclosures)

        Raises:
            InvalidTransition: The table does not allow the change
            RoleNotAuthorized: The actor may not request this status
            MissingRequiredField: A required section or field is absent
            DisclosureNotAcknowledged: A disclosure is not acknowledged
            DuplicatePaymentRequest: A payment request already exists
        """
        current = application.status
        requested = request.new_status

        if requested == ApplicationStatus.DRAFT and current != ApplicationStatus.DRAFT:
            raise InvalidTransition("Cannot move application back to draft after submission")

        # A payment request is made once, whatever the status has become since.
        if requested == ApplicationStatus.PAYMENT_REQUESTED and application.payment_request is not None:
            require(capabilities, *REQUIRED_CAPABILITY[requested])
            raise DuplicatePaymentRequest("A payment request already exists for this application")

        if not is_valid_status_transition(current, requested):
            raise InvalidTransition(
                f"Invalid status transition from {current.value} to {requested.value}"
            )

        gate = REQUIRED_CAPABILITY.get(requested)
        if gate is not None:
            require(capabilities, *gate)

        if requested == ApplicationStatus.SUBMITTED:
            self._check_submission(application, request, property)
        elif requested == ApplicationStatus.PAYMENT_REQUESTED:
            self._check_payment_request(request)
        elif requested == ApplicationStatus.REJECTED:
            self._check_rejection(request)

    def _check_submission(
        self,
        application: Application,
        request: TransitionRequest,
        property: Optional[Property]
    ) -> None:
        if not (application.personal_info and application.employment and application.rental_history):
            raise MissingRequiredField(
                "Personal, employment, and rental history details are required for submission"
            )

        if application.snapshot is None or not application.snapshot.is_complete():
            raise MissingRequiredField(
                "Property information snapshot is missing. Please contact support.",
                "snapshot",
            )

        if request.legal_acceptance is not True:
            raise MissingRequiredField(
                "Legal acceptance is required before submitting an application.",
                "legal_acceptance",
            )

        for label, getter in REQUIRED_SUBMISSION_FIELDS:
            if not getter(application):
                raise MissingRequiredField(f"Required field missing: {label}", label.replace(" ", "_"))

        if not application.legal_disclosures.all_acknowledged:
            raise DisclosureNotAcknowledged(
                "All legal disclosures must be acknowledged before submission"
            )

        state = property.state if property else None
        for disclosure in self.disclosure_registry.get_required_disclosures(state):
            ack = application.state_disclosures.get(disclosure.id)
            if ack is None or not ack.acknowledged:
                raise DisclosureNotAcknowledged(f"State disclosure required: {disclosure.label}")

    def _check_payment_request(self, request: TransitionRequest) -> None:
        if not (request.payment_amount or "").strip() or not (request.payment_purpose or "").strip():
            raise MissingRequiredField(
                "Payment request details (amount and purpose) are required",
                "payment_request",
            )

    def _check_rejection(self, request: TransitionRequest) -> None:
        categories = list(request.rejection_categories)
        if request.rejection_category:
            categories.append(request.rejection_category)
        known = {category.value for category in RejectionCategory}
        for category in categories:
            if category not in known:
                raise ValidationError(f"Unknown rejection category: {category}")
