"""Application workflow - entry point of the application lifecycle engine."""

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from application.interfaces import (
    AuditEvent,
    IAuditLogger,
    IDocumentGenerator,
    INotificationDispatcher,
)
from application.results import OperationResult
from application.services import (
    AccessPolicy,
    LeaseSignatureCoordinator,
    PaymentRequestCoordinator,
    ScoringEngine,
    SignLeaseRequest,
    TransitionRequest,
    TransitionValidator,
    get_valid_next_statuses,
    require,
)
from domain.entities import Application, Property, utc_now
from domain.enums import (
    ApplicationStatus,
    Capability,
    DocumentKind,
    LeaseSignatureStatus,
    PaymentRequestStatus,
    RejectionCategory,
)
from domain.errors import (
    ConcurrentModification,
    DuplicateApplication,
    InvalidTransition,
    NotFound,
    RoleNotAuthorized,
    ValidationError,
    WorkflowError,
)
from domain.repositories import (
    IApplicationRepository,
    ILeaseSignatureRepository,
    IPropertyRepository,
)
from domain.value_objects import (
    REDACTED,
    Actor,
    Employment,
    LegalAcceptance,
    LegalDisclosures,
    PersonalInfo,
    RejectionDetails,
    RentalHistory,
    StatusChange,
    parse_co_applicants,
    parse_document_status,
    parse_state_disclosures,
)
from infrastructure.config import Settings, get_logger

# Payload keys (snake_case and camelCase) of each applicant section.
SECTION_KEYS = {
    "personal_info": ("personal_info", "personalInfo"),
    "employment": ("employment",),
    "co_applicants": ("co_applicants", "coApplicants"),
    "rental_history": ("rental_history", "rentalHistory"),
    "documents": ("documents", "document_status", "documentStatus"),
    "legal_disclosures": ("legal_disclosures", "legalDisclosures"),
    "state_disclosures": ("state_disclosures", "stateDisclosures"),
}

SCORING_SECTIONS = frozenset({"personal_info", "employment", "co_applicants", "rental_history", "documents"})


def _section(payload: dict, name: str) -> tuple[bool, Any]:
    for key in SECTION_KEYS[name]:
        if key in payload:
            return True, payload[key]
    return False, None


def _parse(name: str, parser: Callable[[Any], Any], value: Any, expected: type = dict) -> Any:
    """Run a section parser, reporting a wrongly shaped payload as a ValidationError."""
    if value is not None and not isinstance(value, expected):
        raise ValidationError(f"Malformed {name} section")
    try:
        return parser(value)
    except (TypeError, AttributeError, ValueError) as e:
        raise ValidationError(f"Malformed {name} section") from e


def apply_sections(application: Application, payload: dict) -> set[str]:
    """
    Copy the applicant sections present in a payload onto the application.

    A masked or missing credit identifier never replaces a stored one.

    Returns:
        Names of the sections that were supplied

    Raises:
        ValidationError: If a section has the wrong shape
    """
    changed: set[str] = set()

    present, value = _section(payload, "personal_info")
    if present and value is not None:
        info = _parse("personal_info", PersonalInfo.from_dict, value)
        stored = application.personal_info
        if info.ssn in (None, REDACTED) and stored is not None and stored.has_credit_identifier:
            info = replace(info, ssn=stored.ssn)
        elif info.ssn == REDACTED:
            info = replace(info, ssn=None)
        application.personal_info = info
        changed.add("personal_info")

    present, value = _section(payload, "employment")
    if present and value is not None:
        application.employment = _parse("employment", Employment.from_dict, value)
        changed.add("employment")

    present, value = _section(payload, "co_applicants")
    if present:
        application.co_applicants = _parse("co_applicants", parse_co_applicants, value, list)
        changed.add("co_applicants")

    present, value = _section(payload, "rental_history")
    if present and value is not None:
        application.rental_history = _parse("rental_history", RentalHistory.from_dict, value)
        changed.add("rental_history")

    present, value = _section(payload, "documents")
    if present:
        application.documents = _parse("documents", parse_document_status, value)
        changed.add("documents")

    present, value = _section(payload, "legal_disclosures")
    if present and value is not None:
        application.legal_disclosures = _parse("legal_disclosures", LegalDisclosures.from_dict, value)
        changed.add("legal_disclosures")

    present, value = _section(payload, "state_disclosures")
    if present:
        application.state_disclosures = _parse("state_disclosures", parse_state_disclosures, value)
        changed.add("state_disclosures")

    return changed


class ApplicationWorkflowService:
    """
    Orchestrates validation, scoring, payments, lease signing and side effects.

    Every public operation returns an ``OperationResult``; expected failures
    come back as typed failures and nothing is raised to the caller.
    Notifications and audit events run in the background and can never
    fail or roll back the state change that triggered them.
    """

    def __init__(
        self,
        application_repository: IApplicationRepository,
        signature_repository: ILeaseSignatureRepository,
        property_repository: IPropertyRepository,
        scoring_engine: ScoringEngine,
        transition_validator: TransitionValidator,
        payment_coordinator: PaymentRequestCoordinator,
        lease_coordinator: LeaseSignatureCoordinator,
        access_policy: AccessPolicy,
        document_generator: IDocumentGenerator,
        notification_dispatcher: INotificationDispatcher,
        audit_logger: IAuditLogger,
        settings: Settings,
    ):
        self.application_repo = application_repository
        self.signature_repo = signature_repository
        self.property_repo = property_repository
        self.scoring_engine = scoring_engine
        self.validator = transition_validator
        self.payments = payment_coordinator
        self.leases = lease_coordinator
        self.access_policy = access_policy
        self.documents = document_generator
        self.notifications = notification_dispatcher
        self.audit = audit_logger
        self.settings = settings
        self.logger = get_logger(self.__class__.__name__)
        self._background: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Creation and drafts
    # ------------------------------------------------------------------

    async def create_application(
        self,
        actor: Actor,
        property_id: UUID,
        payload: Optional[dict] = None
    ) -> OperationResult:
        """
        Create a draft application with a snapshot of the property terms.

        Args:
            actor: Applicant
            property_id: Property applied for
            payload: Optional initial applicant sections

        Returns:
            OperationResult with the created Application
        """
        async def operation() -> Application:
            property = await self.property_repo.get_property(property_id)
            if property is None:
                raise NotFound("Property not found")

            existing = await self.application_repo.find_by_user_and_property(actor.user_id, property_id)
            if existing is not None:
                raise DuplicateApplication(
                    "You have already applied for this property. Please check your applications."
                )

            now = utc_now()
            application = Application(
                user_id=actor.user_id,
                property_id=property_id,
                snapshot=property.snapshot(
                    self.settings.default_application_fee,
                    self.settings.default_lease_term,
                ),
                created_at=now,
                updated_at=now,
            )
            apply_sections(application, self._editable(payload))
            application.status_history.append(
                StatusChange(status=ApplicationStatus.DRAFT, changed_at=now, changed_by=actor.user_id)
            )
            application.apply_score(await self.scoring_engine.calculate(application), at=now)

            created = await self.application_repo.create(application)
            self.logger.info(
                f"✅ Application {created.id} created for property {property_id}",
                extra={"application_id": created.id, "actor_id": actor.user_id},
            )

            self._fire_and_forget(
                "Applicant confirmation email",
                self.notifications.send_applicant_confirmation(created, property),
            )
            self._fire_and_forget(
                "Owner new application notification",
                self.notifications.notify_owner_of_new_application(created, property),
            )
            self._record_audit(actor, "application_create", created, None, self._audit_state(created))
            return self._redact(created, self.access_policy.resolve(actor, created, property))

        return await self._execute("create_application", operation, actor=actor)

    async def autosave_application(
        self,
        application_id: UUID,
        actor: Actor,
        payload: dict
    ) -> OperationResult:
        """
        Partially update a draft.

        The status can never be changed here. The score is recomputed from
        scratch whenever a scoring input was supplied.
        """
        async def attempt() -> Application:
            application, property, capabilities = await self._load(application_id, actor)
            require(capabilities, Capability.EDIT_DRAFT, "Not authorized to edit this application")
            if not application.is_draft:
                raise InvalidTransition(
                    f"Application is in {application.status.value} status and cannot be edited"
                )

            expected_version = application.version
            changed = apply_sections(application, self._editable(payload))

            step = payload.get("step", payload.get("last_saved_step"))
            if step is not None:
                try:
                    application.last_saved_step = int(step)
                except (TypeError, ValueError):
                    raise ValidationError(f"Invalid step: {step}")

            rescored = bool(changed & SCORING_SECTIONS)
            if rescored:
                application.apply_score(await self.scoring_engine.calculate(application))

            application.touch()
            saved = await self._save(application, expected_version)
            self.logger.info(
                f"Autosaved application {application_id} sections={sorted(changed)}",
                extra={"application_id": application_id, "actor_id": actor.user_id},
            )

            if rescored:
                self._fire_and_forget(
                    "Owner scoring notification",
                    self.notifications.notify_owner_of_scoring_complete(saved, property),
                )
            self._record_audit(actor, "application_autosave", saved, None, {"sections": sorted(changed)})
            return self._redact(saved, capabilities)

        return await self._execute(
            "autosave_application", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def update_status(
        self,
        application_id: UUID,
        actor: Actor,
        request: TransitionRequest
    ) -> OperationResult:
        """
        Move an application to a new status.

        This is the gated transition entry point: the transition table, the
        actor's capabilities and the status-specific requirements are all
        checked before anything is written.

        Args:
            application_id: Application UUID
            actor: Caller
            request: Requested status and its payload

        Returns:
            OperationResult with the updated Application
        """
        if request.new_status == ApplicationStatus.PAYMENT_REQUESTED:
            return await self.request_payment(
                application_id,
                actor,
                request.payment_amount,
                request.payment_purpose,
                request.payment_message,
                reason=request.reason,
            )

        async def attempt() -> Application:
            application, property, capabilities = await self._load(application_id, actor)
            self.validator.validate(application, request, capabilities, property)

            now = utc_now()
            expected_version = application.version
            previous = application.status
            new_status = request.new_status

            if new_status == ApplicationStatus.SUBMITTED:
                application.legal_acceptance = LegalAcceptance(
                    accepted=True,
                    accepted_at=now,
                    documents=dict(self.settings.legal_document_versions),
                )
                application.submitted_at = now

            if new_status == ApplicationStatus.REJECTED:
                if request.rejection_category:
                    application.rejection_category = RejectionCategory(request.rejection_category)
                application.rejection_reason = request.rejection_reason or request.reason
                if request.rejection_categories or request.rejection_explanation or request.appealable is not None:
                    application.rejection_details = RejectionDetails(
                        categories=tuple(request.rejection_categories),
                        explanation=request.rejection_explanation or "",
                        appealable=bool(request.appealable),
                    )

            if new_status in (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED):
                application.reviewed_by = actor.user_id
                application.reviewed_at = now

            if new_status == ApplicationStatus.APPROVED:
                application.lease_signature_status = LeaseSignatureStatus.UNSIGNED

            application.transition_to(new_status, actor.user_id, request.reason, at=now)
            saved = await self._save(application, expected_version)
            self.logger.info(
                f"✅ Application {application_id} moved {previous.value} -> {new_status.value}",
                extra={"application_id": application_id, "actor_id": actor.user_id},
            )

            if new_status == ApplicationStatus.SUBMITTED:
                saved = await self._generate_document(saved, property, DocumentKind.DISCLOSURE)
            elif new_status == ApplicationStatus.APPROVED:
                saved = await self._generate_document(saved, property, DocumentKind.LEASE)

            self._after_status_change(actor, saved, property, previous)
            return self._redact(saved, capabilities)

        return await self._execute(
            "update_status", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    def get_valid_next_statuses(self, status: ApplicationStatus) -> list[ApplicationStatus]:
        return get_valid_next_statuses(status)

    # ------------------------------------------------------------------
    # Payment protocol
    # ------------------------------------------------------------------

    async def request_payment(
        self,
        application_id: UUID,
        actor: Actor,
        amount: Optional[str],
        purpose: Optional[str],
        message: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> OperationResult:
        """Create the payment request and move the application to payment_requested."""
        async def attempt() -> Application:
            application, property, capabilities = await self._load(application_id, actor)
            previous = application.status
            saved = await self.payments.request_payment(
                application, property, actor, capabilities, amount, purpose, message, reason
            )
            self._after_status_change(actor, saved, property, previous)
            return self._redact(saved, capabilities)

        return await self._execute(
            "request_payment", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    async def initiate_payment(self, application_id: UUID, actor: Actor) -> OperationResult:
        """Assign the one-time payment intent to the pending request."""
        async def attempt() -> Application:
            application, _, capabilities = await self._load(application_id, actor)
            previous_payment = self._payment_state(application)
            saved = await self.payments.initiate_payment(application, actor, capabilities)
            self._record_audit(
                actor, "payment_initiate", saved, previous_payment, self._payment_state(saved)
            )
            return self._redact(saved, capabilities)

        return await self._execute(
            "initiate_payment", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    async def complete_payment(self, application_id: UUID, actor: Actor) -> OperationResult:
        """Complete the pending payment and move the application to payment_completed."""
        async def attempt() -> Application:
            application, property, capabilities = await self._load(application_id, actor)
            previous = application.status
            saved = await self.payments.complete_payment(application, actor, capabilities)
            self._after_status_change(actor, saved, property, previous)
            return self._redact(saved, capabilities)

        return await self._execute(
            "complete_payment", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    async def verify_payment(self, application_id: UUID, actor: Actor) -> OperationResult:
        """Verify the completed payment and return the application to review."""
        async def attempt() -> Application:
            application, property, capabilities = await self._load(application_id, actor)
            previous = application.status
            saved = await self.payments.verify_payment(application, actor, capabilities)
            self._after_status_change(actor, saved, property, previous)
            return self._redact(saved, capabilities)

        return await self._execute(
            "verify_payment", self._with_retry(attempt), application_id=application_id, actor=actor
        )

    # ------------------------------------------------------------------
    # Lease signing
    # ------------------------------------------------------------------

    async def sign_lease(
        self,
        application_id: UUID,
        actor: Actor,
        request: SignLeaseRequest
    ) -> OperationResult:
        """
        Record the tenant or landlord signature of an approved application.

        Returns:
            OperationResult with a SignLeaseOutcome
        """
        async def operation():
            application, property, capabilities = await self._load(application_id, actor)
            outcome = await self.leases.sign(application, property, actor, capabilities, request)

            if outcome.status == LeaseSignatureStatus.SIGNED:
                self._fire_and_forget(
                    "Lease signature complete notification",
                    self.notifications.send_lease_signature_complete_notification(
                        outcome.application, property
                    ),
                )
            self._record_audit(
                actor,
                "lease_sign",
                outcome.application,
                None,
                {"role": outcome.signature.signer_role.value, "status": outcome.status.value},
            )
            return replace(outcome, application=self._redact(outcome.application, capabilities))

        return await self._execute(
            "sign_lease", operation, application_id=application_id, actor=actor
        )

    async def get_signatures(self, application_id: UUID, actor: Actor) -> OperationResult:
        """List the signatures recorded on an application's lease."""
        async def operation():
            _, _, capabilities = await self._load(application_id, actor)
            require(capabilities, Capability.VIEW, "Not authorized to view this lease")
            return await self.leases.get_signatures(application_id)

        return await self._execute(
            "get_signatures", operation, application_id=application_id, actor=actor
        )

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    async def calculate_application_score(self, application_id: UUID, actor: Actor) -> OperationResult:
        """
        Recompute and store the score of an application.

        Returns:
            OperationResult with the new ScoreBreakdown
        """
        async def attempt():
            application, property, capabilities = await self._load(application_id, actor)
            require(capabilities, Capability.VIEW, "Not authorized to score this application")

            expected_version = application.version
            previous_score = application.score
            breakdown = await self.scoring_engine.calculate(application)
            application.apply_score(breakdown)
            saved = await self._save(application, expected_version)

            self._fire_and_forget(
                "Owner scoring notification",
                self.notifications.notify_owner_of_scoring_complete(saved, property),
            )
            self._record_audit(
                actor,
                "application_score",
                saved,
                {"score": previous_score},
                {"score": breakdown.total_score, "flags": list(breakdown.flags)},
            )
            return breakdown

        return await self._execute(
            "calculate_application_score",
            self._with_retry(attempt),
            application_id=application_id,
            actor=actor,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_application(self, application_id: UUID, actor: Actor) -> OperationResult:
        """Fetch an application with sensitive data redacted for the actor."""
        async def operation() -> Application:
            application, _, capabilities = await self._load(application_id, actor)
            require(capabilities, Capability.VIEW, "Not authorized to view this application")
            return self._redact(application, capabilities)

        return await self._execute(
            "get_application", operation, application_id=application_id, actor=actor
        )

    async def list_applications_for_property(self, property_id: UUID, actor: Actor) -> OperationResult:
        """List the applications a property received (owner, admin or its manager)."""
        async def operation() -> list[Application]:
            property = await self.property_repo.get_property(property_id)
            if property is None:
                raise NotFound("Property not found")
            if not self.access_policy.can_list_for_property(actor, property):
                raise RoleNotAuthorized("Not authorized to view applications for this property")

            applications = await self.application_repo.list_by_property(property_id)
            return [
                self._redact(app, self.access_policy.resolve(actor, app, property))
                for app in applications
            ]

        return await self._execute("list_applications_for_property", operation, actor=actor)

    async def list_applications_for_user(self, user_id: UUID, actor: Actor) -> OperationResult:
        """List a user's own applications (self or admin)."""
        async def operation() -> list[Application]:
            if not self.access_policy.can_list_for_user(actor, user_id):
                raise RoleNotAuthorized("Not authorized to view these applications")

            applications = await self.application_repo.list_by_user(user_id)
            results = []
            for app in applications:
                property = await self.property_repo.get_property(app.property_id)
                results.append(self._redact(app, self.access_policy.resolve(actor, app, property)))
            return results

        return await self._execute("list_applications_for_user", operation, actor=actor)

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    async def wait_for_side_effects(self) -> None:
        """Wait until all background notifications and audit events finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _fire_and_forget(self, description: str, coroutine: Awaitable) -> None:
        task = asyncio.create_task(self._run_side_effect(description, coroutine))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _run_side_effect(self, description: str, coroutine: Awaitable) -> None:
        try:
            result = await coroutine
            if result is False:
                self.logger.warning(f"⚠️ {description} was not delivered")
        except Exception as e:
            self.logger.error(f"❌ {description} failed: {e}", exc_info=True)

    def _after_status_change(
        self,
        actor: Actor,
        application: Application,
        property: Optional[Property],
        previous: ApplicationStatus
    ) -> None:
        self._fire_and_forget(
            "Status change notification",
            self.notifications.send_status_change_notification(
                application, property, previous.value, application.status.value
            ),
        )
        self._record_audit(
            actor,
            "application_status_change",
            application,
            {"status": previous.value},
            self._audit_state(application),
        )

    def _record_audit(
        self,
        actor: Actor,
        action: str,
        application: Application,
        previous_data: Optional[dict],
        new_data: Optional[dict]
    ) -> None:
        event = AuditEvent(
            actor_id=actor.user_id,
            action=action,
            resource_type="application",
            resource_id=application.id,
            previous_data=previous_data,
            new_data=new_data,
            metadata={"ip_address": actor.ip_address, "user_agent": actor.user_agent},
        )
        self._fire_and_forget(f"Audit event {action}", self.audit.record(event))

    async def _generate_document(
        self,
        application: Application,
        property: Optional[Property],
        document: DocumentKind
    ) -> Application:
        """Render a milestone document once; a failure never undoes the transition."""
        url = self.documents.document_url(application.id, document)
        try:
            claimed = await self.application_repo.set_document_url_if_empty(application.id, document, url)
        except Exception as e:
            self.logger.error(f"❌ Could not claim {document.value} for {application.id}: {e}", exc_info=True)
            return application
        if not claimed:
            return application

        try:
            if document == DocumentKind.DISCLOSURE:
                await self.documents.generate_disclosure_pdf(application, property, url)
            else:
                await self.documents.generate_lease_pdf(application, property, url)
        except Exception as e:
            self.logger.error(
                f"❌ {document.slug} generation failed for application {application.id}: {e}",
                exc_info=True,
                extra={"application_id": application.id},
            )
            try:
                await self.application_repo.release_document_url(application.id, document, url)
            except Exception as release_error:
                self.logger.error(f"❌ Could not release {document.value}: {release_error}", exc_info=True)
            return application

        self.logger.info(f"✅ Generated {document.slug} for application {application.id}")
        return await self.application_repo.get_by_id(application.id) or application

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _execute(
        self,
        action: str,
        operation: Callable[[], Awaitable[Any]],
        application_id: Optional[UUID] = None,
        actor: Optional[Actor] = None,
    ) -> OperationResult:
        context = {
            "action": action,
            "application_id": application_id,
            "actor_id": actor.user_id if actor else None,
        }
        try:
            return OperationResult.ok(await operation())
        except WorkflowError as e:
            self.logger.warning(f"⚠️ {action} rejected: {e.message}", extra={**context, "error_code": e.code})
            return OperationResult.fail(e)
        except Exception as e:
            self.logger.error(f"❌ {action} failed: {e}", exc_info=True, extra=context)
            return OperationResult.internal_error()

    def _with_retry(self, attempt: Callable[[], Awaitable[Any]]) -> Callable[[], Awaitable[Any]]:
        """Re-run an attempt once on a lost write race, re-reading fresh state."""
        async def operation():
            try:
                return await attempt()
            except ConcurrentModification:
                self.logger.info("🔄 Concurrent write detected, retrying with fresh state")
                return await attempt()

        return operation

    async def _load(
        self,
        application_id: UUID,
        actor: Actor
    ) -> tuple[Application, Optional[Property], frozenset[Capability]]:
        application = await self.application_repo.get_by_id(application_id)
        if application is None:
            raise NotFound("Application not found")
        property = await self.property_repo.get_property(application.property_id)
        capabilities = self.access_policy.resolve(actor, application, property)
        return application, property, capabilities

    async def _save(self, application: Application, expected_version: int) -> Application:
        saved = await self.application_repo.save(application, expected_version)
        if saved is None:
            raise ConcurrentModification("The application was modified by another request")
        return saved

    @staticmethod
    def _editable(payload: Optional[dict]) -> dict:
        data = dict(payload or {})
        data.pop("status", None)
        return data

    @staticmethod
    def _redact(application: Application, capabilities: frozenset[Capability]) -> Application:
        """
        Copy of the application safe to return to the actor.

        Only administrators see the credit identifier. Applicants do not see
        a pending payment request until payment has actually been requested.
        """
        changes = {}
        if Capability.VIEW_SENSITIVE not in capabilities and application.personal_info is not None:
            changes["personal_info"] = application.personal_info.redacted()

        payment = application.payment_request
        if payment is not None and Capability.REVIEW not in capabilities:
            requested = (
                application.status == ApplicationStatus.PAYMENT_REQUESTED
                or payment.status != PaymentRequestStatus.PENDING
                or payment.is_initiated
            )
            if not requested:
                changes["payment_request"] = None

        return replace(application, **changes) if changes else application

    @staticmethod
    def _audit_state(application: Application) -> dict:
        return {
            "status": application.status.value,
            "score": application.score,
            "version": application.version,
        }

    @staticmethod
    def _payment_state(application: Application) -> Optional[dict]:
        return application.payment_request.to_dict() if application.payment_request else None
