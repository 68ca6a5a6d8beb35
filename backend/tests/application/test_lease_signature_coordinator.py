"""Unit tests for lease signature collection."""

import asyncio
from dataclasses import replace

import pytest
from application.services import AccessPolicy, LeaseSignatureCoordinator, SignLeaseRequest
from domain.entities import Application
from domain.enums import ApplicationStatus, DocumentKind, LeaseSignatureStatus, SignerRole
from domain.errors import (
    AlreadySigned,
    DisclosureNotAcknowledged,
    InvalidTransition,
    RoleNotAuthorized,
    SigningOutOfOrder,
)

from fakes import InMemoryLeaseSignatureRepository

SIGNATURE = SignLeaseRequest(
    signer_name="Dana Reyes",
    signature_data="data:image/png;base64,AAAA",
    state_code="tx",
    state_disclosure_acknowledged=True,
    attestation_acknowledged=True,
)


@pytest.fixture
def coordinator(applications, signatures, disclosures, documents):
    return LeaseSignatureCoordinator(applications, signatures, disclosures, documents)


@pytest.fixture
def approved(run, applications, renter, listing):
    application = Application(
        user_id=renter.user_id,
        property_id=listing.id,
        status=ApplicationStatus.APPROVED,
        lease_signature_status=LeaseSignatureStatus.UNSIGNED,
        snapshot=listing.snapshot("50.00", "12 Months"),
    )
    return run(applications.create(application))


def sign(run, coordinator, applications, application_id, actor, listing, request=SIGNATURE):
    application = run(applications.get_by_id(application_id))
    capabilities = AccessPolicy().resolve(actor, application, listing)
    return run(coordinator.sign(application, listing, actor, capabilities, request))


class TestSigningOrder:
    """Test tenant-then-landlord ordering."""

    def test_tenant_then_landlord(self, run, coordinator, applications, documents, approved, renter, owner, listing):
        tenant = sign(run, coordinator, applications, approved.id, renter, listing)
        assert tenant.status == LeaseSignatureStatus.PARTIALLY_SIGNED
        assert tenant.signature.signer_role == SignerRole.TENANT
        assert tenant.signature.state_code == "TX"
        assert tenant.signature.ip_address == renter.ip_address
        assert not tenant.document_generated

        landlord = sign(run, coordinator, applications, approved.id, owner, listing)
        assert landlord.status == LeaseSignatureStatus.SIGNED
        assert landlord.document_generated
        assert landlord.application.lease_fully_signed_at is not None
        assert landlord.application.signed_lease_pdf_url.endswith("lease-agreement-signed.pdf")
        assert documents.count(DocumentKind.SIGNED_LEASE) == 1

    def test_landlord_cannot_sign_first(self, run, coordinator, applications, approved, owner, listing):
        with pytest.raises(SigningOutOfOrder):
            sign(run, coordinator, applications, approved.id, owner, listing)

    def test_role_signs_once(self, run, coordinator, applications, approved, renter, listing):
        sign(run, coordinator, applications, approved.id, renter, listing)
        with pytest.raises(AlreadySigned, match="tenant"):
            sign(run, coordinator, applications, approved.id, renter, listing)

    def test_signatures_listed_in_order(self, run, coordinator, applications, approved, renter, owner, listing):
        sign(run, coordinator, applications, approved.id, renter, listing)
        sign(run, coordinator, applications, approved.id, owner, listing)
        rows = run(coordinator.get_signatures(approved.id))
        assert [row.signer_role for row in rows] == [SignerRole.TENANT, SignerRole.LANDLORD]


class TestSigningPreconditions:
    def test_state_disclosure_required(self, run, coordinator, applications, approved, renter, listing):
        request = replace(SIGNATURE, state_disclosure_acknowledged=False)
        with pytest.raises(DisclosureNotAcknowledged, match="e-signature"):
            sign(run, coordinator, applications, approved.id, renter, listing, request)

    def test_state_code_required(self, run, coordinator, applications, approved, renter, listing):
        request = replace(SIGNATURE, state_code="  ")
        with pytest.raises(DisclosureNotAcknowledged):
            sign(run, coordinator, applications, approved.id, renter, listing, request)

    def test_attestation_required(self, run, coordinator, applications, approved, renter, listing):
        request = replace(SIGNATURE, attestation_acknowledged=False)
        with pytest.raises(DisclosureNotAcknowledged, match="legal signature"):
            sign(run, coordinator, applications, approved.id, renter, listing, request)

    def test_manager_cannot_sign(self, run, coordinator, applications, approved, manager, listing):
        with pytest.raises(RoleNotAuthorized, match="Only tenants and landlords"):
            sign(run, coordinator, applications, approved.id, manager, listing)

    def test_stranger_cannot_sign_as_tenant(self, run, coordinator, applications, approved, stranger, listing):
        with pytest.raises(RoleNotAuthorized, match="applicant"):
            sign(run, coordinator, applications, approved.id, stranger, listing)

    def test_application_must_be_approved(self, run, coordinator, applications, renter, listing):
        application = Application(
            user_id=renter.user_id,
            property_id=listing.id,
            status=ApplicationStatus.UNDER_REVIEW,
        )
        run(applications.create(application))
        with pytest.raises(InvalidTransition, match="approved"):
            sign(run, coordinator, applications, application.id, renter, listing)


class TestSignedLeaseGeneration:
    """Test the executed lease is produced exactly once."""

    def test_concurrent_landlord_signatures(
        self, run, applications, disclosures, documents, approved, renter, owner, admin, listing
    ):
        class InterleavingSignatures(InMemoryLeaseSignatureRepository):
            async def list_by_application(self, application_id):
                await asyncio.sleep(0)
                return await super().list_by_application(application_id)

        coordinator = LeaseSignatureCoordinator(applications, InterleavingSignatures(), disclosures, documents)
        sign(run, coordinator, applications, approved.id, renter, listing)

        async def both_landlords():
            application = await applications.get_by_id(approved.id)
            policy = AccessPolicy()
            return await asyncio.gather(
                *(
                    coordinator.sign(
                        application, listing, actor, policy.resolve(actor, application, listing), SIGNATURE
                    )
                    for actor in (owner, admin)
                ),
                return_exceptions=True,
            )

        results = run(both_landlords())
        outcomes = [result for result in results if not isinstance(result, Exception)]
        errors = [result for result in results if isinstance(result, Exception)]
        assert len(outcomes) == 1
        assert [type(error) for error in errors] == [AlreadySigned]
        assert outcomes[0].document_generated
        assert documents.count(DocumentKind.SIGNED_LEASE) == 1


    def test_not_regenerated_when_url_exists(
        self, run, coordinator, applications, documents, approved, renter, owner, listing
    ):
        applications.items[approved.id].signed_lease_pdf_url = "https://docs.test/existing.pdf"
        sign(run, coordinator, applications, approved.id, renter, listing)
        outcome = sign(run, coordinator, applications, approved.id, owner, listing)

        assert outcome.status == LeaseSignatureStatus.SIGNED
        assert not outcome.document_generated
        assert documents.count(DocumentKind.SIGNED_LEASE) == 0

    def test_failed_render_releases_claim(
        self, run, coordinator, applications, documents, approved, renter, owner, listing
    ):
        documents.fail = True
        sign(run, coordinator, applications, approved.id, renter, listing)
        outcome = sign(run, coordinator, applications, approved.id, owner, listing)

        assert outcome.status == LeaseSignatureStatus.SIGNED
        assert not outcome.document_generated
        assert applications.items[approved.id].signed_lease_pdf_url is None

    def test_signed_status_never_downgrades(self, run, applications, approved):
        run(applications.update_lease_signature_status(approved.id, LeaseSignatureStatus.SIGNED))
        stored = run(applications.update_lease_signature_status(
            approved.id, LeaseSignatureStatus.PARTIALLY_SIGNED
        ))
        assert stored.lease_signature_status == LeaseSignatureStatus.SIGNED
