"""Ordered, write-once lease signature collection."""

from dataclasses import dataclass
from typing import Optional

from application.interfaces import IDisclosureRegistry, IDocumentGenerator
from domain.entities import DEFAULT_ATTESTATION, Application, LeaseSignature, Property, utc_now
from domain.enums import (
    ApplicationStatus,
    Capability,
    DocumentKind,
    LeaseSignatureStatus,
    SignerRole,
)
from domain.errors import (
    AlreadySigned,
    DisclosureNotAcknowledged,
    InvalidTransition,
    MissingRequiredField,
    NotFound,
    RoleNotAuthorized,
    SigningOutOfOrder,
)
from domain.repositories import IApplicationRepository, ILeaseSignatureRepository
from domain.value_objects import Actor
from infrastructure.config import get_logger


@dataclass(frozen=True)
class SignLeaseRequest:
    """Signature payload submitted by a signer."""

    signer_name: str
    signature_data: str
    state_code: Optional[str] = None
    state_disclosure_acknowledged: bool = False
    attestation_acknowledged: bool = False
    attestation_text: Optional[str] = None
    consent_esign: bool = True
    consent_terms: bool = True
    pet_policy_acknowledged: Optional[bool] = None
    vehicle_disclosure_acknowledged: Optional[bool] = None
    damage_disclosure_acknowledged: Optional[bool] = None


@dataclass(frozen=True)
class SignLeaseOutcome:
    signature: LeaseSignature
    status: LeaseSignatureStatus
    application: Application
    document_generated: bool = False


class LeaseSignatureCoordinator:
    """
    Collects the tenant then the landlord signature of an approved lease.

    Signatures are inserted once per role and never changed. When the
    landlord signs, the fully executed lease is generated exactly once:
    its URL is claimed with a set-if-empty write before rendering.
    """

    def __init__(
        self,
        application_repository: IApplicationRepository,
        signature_repository: ILeaseSignatureRepository,
        disclosure_registry: IDisclosureRegistry,
        document_generator: IDocumentGenerator,
    ):
        self.application_repo = application_repository
        self.signature_repo = signature_repository
        self.disclosure_registry = disclosure_registry
        self.document_generator = document_generator
        self.logger = get_logger(self.__class__.__name__)

    async def sign(
        self,
        application: Application,
        property: Optional[Property],
        actor: Actor,
        capabilities: frozenset[Capability],
        request: SignLeaseRequest,
    ) -> SignLeaseOutcome:
        """
        Record a signature.

        Raises:
            DisclosureNotAcknowledged: State or attestation acknowledgment missing
            RoleNotAuthorized: The actor cannot sign, or not for this application
            InvalidTransition: The application is not approved
            AlreadySigned: The role already signed
            SigningOutOfOrder: The landlord signs before the tenant
        """
        if not (request.state_code or "").strip() or not request.state_disclosure_acknowledged:
            raise DisclosureNotAcknowledged(
                "You must acknowledge the state-specific e-signature disclosure"
            )
        if not request.attestation_acknowledged:
            raise DisclosureNotAcknowledged("You must certify that this is your legal signature")

        signer_role = actor.role.signer_role
        if signer_role is None:
            raise RoleNotAuthorized("Only tenants and landlords can sign leases")

        if application.status != ApplicationStatus.APPROVED:
            raise InvalidTransition("The lease can only be signed once the application is approved")

        if signer_role == SignerRole.TENANT and Capability.SIGN_AS_TENANT not in capabilities:
            raise RoleNotAuthorized("Only the applicant can sign the lease as tenant")
        if signer_role == SignerRole.LANDLORD and Capability.SIGN_AS_LANDLORD not in capabilities:
            raise RoleNotAuthorized("Only the property owner can sign the lease as landlord")

        if not (request.signer_name or "").strip() or not request.signature_data:
            raise MissingRequiredField("Signer name and signature are required", "signature")

        existing = await self.signature_repo.list_by_application(application.id)
        signed_roles = {signature.signer_role for signature in existing}

        if signer_role in signed_roles:
            raise AlreadySigned(f"The {signer_role.value} has already signed this lease")
        if signer_role == SignerRole.LANDLORD and SignerRole.TENANT not in signed_roles:
            raise SigningOutOfOrder("The tenant must sign the lease before the landlord")

        signature = await self.signature_repo.create(
            LeaseSignature(
                application_id=application.id,
                signer_user_id=actor.user_id,
                signer_role=signer_role,
                signer_name=request.signer_name.strip(),
                signature_data=request.signature_data,
                state_code=request.state_code.strip().upper(),
                state_disclosure_acknowledged=True,
                attestation_text=request.attestation_text or DEFAULT_ATTESTATION,
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
                consent_esign=request.consent_esign,
                consent_terms=request.consent_terms,
                pet_policy_acknowledged=request.pet_policy_acknowledged,
                vehicle_disclosure_acknowledged=request.vehicle_disclosure_acknowledged,
                damage_disclosure_acknowledged=request.damage_disclosure_acknowledged,
            )
        )

        if signer_role == SignerRole.LANDLORD:
            status = LeaseSignatureStatus.SIGNED
            fully_signed_at = utc_now()
        else:
            status = LeaseSignatureStatus.PARTIALLY_SIGNED
            fully_signed_at = None

        updated = await self.application_repo.update_lease_signature_status(
            application.id, status, fully_signed_at
        )
        if updated is None:
            raise NotFound("Application not found")

        self.logger.info(
            f"Lease for application {application.id} signed by {signer_role.value}, status {status.value}",
            extra={"application_id": application.id, "actor_id": actor.user_id},
        )

        generated = False
        if status == LeaseSignatureStatus.SIGNED:
            generated = await self._generate_signed_lease(updated, property, signature.state_code)
            if generated:
                updated = await self.application_repo.get_by_id(application.id) or updated

        return SignLeaseOutcome(
            signature=signature,
            status=status,
            application=updated,
            document_generated=generated,
        )

    async def get_signatures(self, application_id) -> list[LeaseSignature]:
        return await self.signature_repo.list_by_application(application_id)

    async def _generate_signed_lease(
        self,
        application: Application,
        property: Optional[Property],
        state_code: str
    ) -> bool:
        url = self.document_generator.document_url(application.id, DocumentKind.SIGNED_LEASE)
        claimed = await self.application_repo.set_document_url_if_empty(
            application.id, DocumentKind.SIGNED_LEASE, url
        )
        if not claimed:
            self.logger.info(f"Signed lease for application {application.id} already generated")
            return False

        signatures = await self.signature_repo.list_by_application(application.id)
        disclosure = self.disclosure_registry.get_esignature_disclosure(state_code)
        try:
            await self.document_generator.generate_signed_lease_pdf(
                application, property, signatures, disclosure, url
            )
        except Exception as e:
            self.logger.error(
                f"❌ Signed lease generation failed for application {application.id}: {e}",
                exc_info=True,
                extra={"application_id": application.id},
            )
            await self.application_repo.release_document_url(
                application.id, DocumentKind.SIGNED_LEASE, url
            )
            return False

        self.logger.info(f"✅ Signed lease generated for application {application.id}")
        return True
