"""Typed failures raised by the application lifecycle engine.

Every public workflow operation converts these into a structured failure
result; the message is the human-readable reason shown to the caller.
"""


class WorkflowError(Exception):
    """Base class for all expected workflow failures."""

    code = "workflow_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(WorkflowError):
    """A required field is missing or malformed."""

    code = "validation_error"


class MissingRequiredField(ValidationError):
    """A field required by the requested operation is absent."""

    code = "missing_required_field"

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.field_name = field_name


class DisclosureNotAcknowledged(ValidationError):
    """A legal or state disclosure has not been acknowledged."""

    code = "disclosure_not_acknowledged"


class AuthorizationError(WorkflowError):
    """The actor holds the wrong role or does not own the resource."""

    code = "authorization_error"


class RoleNotAuthorized(AuthorizationError):
    """The actor's role does not grant the capability required."""

    code = "role_not_authorized"


class InvalidTransition(WorkflowError):
    """The requested status change is not allowed by the state machine."""

    code = "invalid_transition"


class ConcurrentModification(InvalidTransition):
    """The application changed between read and write."""

    code = "concurrent_modification"


class DuplicateResource(WorkflowError):
    """A resource that may exist only once already exists."""

    code = "duplicate_resource"


class DuplicateApplication(DuplicateResource):
    code = "duplicate_application"


class DuplicatePaymentRequest(DuplicateResource):
    code = "duplicate_payment_request"


class AlreadySigned(DuplicateResource):
    code = "already_signed"


class OrderingViolation(WorkflowError):
    """Steps were attempted out of their required order."""

    code = "ordering_violation"


class SigningOutOfOrder(OrderingViolation):
    code = "signing_out_of_order"


class NotFound(WorkflowError):
    """The application, property or payment does not exist."""

    code = "not_found"
