"""Request, initiate, complete and verify steps of the application fee."""

from typing import Optional

from application.interfaces import IPaymentGateway
from domain.entities import Application, Property, utc_now
from domain.enums import ApplicationStatus, Capability, PaymentStatus
from domain.errors import (
    ConcurrentModification,
    DuplicateResource,
    InvalidTransition,
    NotFound,
    OrderingViolation,
)
from domain.repositories import IApplicationRepository
from domain.value_objects import Actor, PaymentRequest
from infrastructure.config import get_logger
from .access_policy import require
from .transition_validator import TransitionRequest, TransitionValidator


class PaymentRequestCoordinator:
    """
    Runs the payment sub-protocol nested in the application lifecycle.

    Every step is a one-way ratchet guarded by the field it sets, and is
    written with a version check so a concurrent duplicate of the same step
    loses instead of applying twice.
    """

    def __init__(
        self,
        application_repository: IApplicationRepository,
        transition_validator: TransitionValidator,
        payment_gateway: IPaymentGateway,
    ):
        self.application_repo = application_repository
        self.validator = transition_validator
        self.payment_gateway = payment_gateway
        self.logger = get_logger(self.__class__.__name__)

    async def request_payment(
        self,
        application: Application,
        property: Optional[Property],
        actor: Actor,
        capabilities: frozenset[Capability],
        amount: Optional[str],
        purpose: Optional[str],
        message: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Application:
        """
        Create the payment request and move the application to payment_requested.

        Raises:
            RoleNotAuthorized: The actor cannot request payments
            DuplicatePaymentRequest: A request already exists
            MissingRequiredField: Amount or purpose missing
            InvalidTransition: The current status does not allow it
        """
        request = TransitionRequest(
            new_status=ApplicationStatus.PAYMENT_REQUESTED,
            reason=reason,
            payment_amount=amount,
            payment_purpose=purpose,
            payment_message=message,
        )
        self.validator.validate(application, request, capabilities, property)

        now = utc_now()
        expected_version = application.version
        application.payment_request = PaymentRequest(
            amount=amount.strip(),
            purpose=purpose.strip(),
            message=message,
            requested_at=now,
            requested_by=actor.user_id,
        )
        application.transition_to(
            ApplicationStatus.PAYMENT_REQUESTED,
            actor.user_id,
            reason or f"Payment requested: {purpose.strip()}",
            at=now,
        )
        saved = await self._save(application, expected_version)
        self.logger.info(
            f"Payment of {amount} requested for application {application.id}",
            extra={"application_id": application.id, "actor_id": actor.user_id},
        )
        return saved

    async def initiate_payment(
        self,
        application: Application,
        actor: Actor,
        capabilities: frozenset[Capability],
    ) -> Application:
        """
        Assign the one-time payment intent.

        Raises:
            RoleNotAuthorized: Only the applicant pays
            InvalidTransition: Payment was not requested
            DuplicateResource: An intent is already assigned
        """
        require(capabilities, Capability.PAY, "Only the applicant can pay for this application")
        payment = self._payment_request(application)

        if payment.payment_intent_id is not None:
            raise DuplicateResource("Payment already initiated")
        if application.status != ApplicationStatus.PAYMENT_REQUESTED:
            raise InvalidTransition("Payment not requested")

        intent_id = await self.payment_gateway.create_intent(
            payment.amount, payment.purpose, str(application.id)
        )

        expected_version = application.version
        application.payment_request = payment.initiated(intent_id, actor.user_id, utc_now())
        application.touch()
        saved = await self._save(application, expected_version)
        self.logger.info(
            f"Payment intent {intent_id} created for application {application.id}",
            extra={"application_id": application.id, "actor_id": actor.user_id},
        )
        return saved

    async def complete_payment(
        self,
        application: Application,
        actor: Actor,
        capabilities: frozenset[Capability],
    ) -> Application:
        """
        Mark the pending intent completed and move to payment_completed.

        Raises:
            RoleNotAuthorized: Only the applicant pays
            DuplicateResource: The payment was already completed
            InvalidTransition: Payment was not requested or is not pending
            OrderingViolation: No intent was initiated yet
        """
        require(capabilities, Capability.PAY, "Only the applicant can pay for this application")
        payment = self._payment_request(application)

        if payment.is_completed:
            raise DuplicateResource("Payment already completed")
        if application.status != ApplicationStatus.PAYMENT_REQUESTED:
            raise InvalidTransition("Payment not requested")
        if not payment.is_initiated:
            raise OrderingViolation("No payment intent found")
        if payment.payment_status != PaymentStatus.PENDING:
            raise InvalidTransition("Invalid payment status")

        now = utc_now()
        expected_version = application.version
        application.payment_request = payment.completed(now)
        application.transition_to(
            ApplicationStatus.PAYMENT_COMPLETED, actor.user_id, "Application fee paid", at=now
        )
        saved = await self._save(application, expected_version)
        self.logger.info(
            f"Payment completed for application {application.id}",
            extra={"application_id": application.id, "actor_id": actor.user_id},
        )
        return saved

    async def verify_payment(
        self,
        application: Application,
        actor: Actor,
        capabilities: frozenset[Capability],
    ) -> Application:
        """
        Confirm the completed payment and return the application to review.

        Raises:
            RoleNotAuthorized: The actor cannot verify payments
            DuplicateResource: The payment was already verified
            InvalidTransition: The application is not payment_completed
            OrderingViolation: The intent is not completed
        """
        require(
            capabilities,
            Capability.VERIFY_PAYMENT,
            "Only the property owner or an authorized manager can verify payments",
        )
        payment = self._payment_request(application)

        if payment.verified_at is not None:
            raise DuplicateResource("Payment already verified")
        if application.status != ApplicationStatus.PAYMENT_COMPLETED:
            raise InvalidTransition("Payment not completed yet")
        if not payment.is_completed:
            raise OrderingViolation("Payment intent not completed")

        now = utc_now()
        expected_version = application.version
        application.payment_request = payment.verified(actor.user_id, now)
        application.transition_to(
            ApplicationStatus.UNDER_REVIEW, actor.user_id, "Payment verified by landlord", at=now
        )
        saved = await self._save(application, expected_version)
        self.logger.info(
            f"Payment verified for application {application.id}",
            extra={"application_id": application.id, "actor_id": actor.user_id},
        )
        return saved

    def _payment_request(self, application: Application) -> PaymentRequest:
        if application.payment_request is None:
            raise NotFound("No payment request found for this application")
        return application.payment_request

    async def _save(self, application: Application, expected_version: int) -> Application:
        saved = await self.application_repo.save(application, expected_version)
        if saved is None:
            raise ConcurrentModification("The application was modified by another request")
        return saved
