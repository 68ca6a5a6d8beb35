"""Tests for the application workflow service against in-memory adapters."""

import asyncio

import pytest
from application.services import STATUS_TRANSITIONS, SignLeaseRequest, TransitionRequest
from domain.enums import ApplicationStatus, DocumentKind, LeaseSignatureStatus
from domain.value_objects import REDACTED

from fakes import complete_sections

S = ApplicationStatus

SIGNATURE = SignLeaseRequest(
    signer_name="Signer",
    signature_data="data:image/png;base64,AAAA",
    state_code="TX",
    state_disclosure_acknowledged=True,
    attestation_acknowledged=True,
)


async def create_draft(service, renter, listing, sections=None):
    result = await service.create_application(renter, listing.id, sections or complete_sections())
    assert result.success, result.error
    return result.data


async def submit(service, renter, application_id):
    result = await service.update_status(
        application_id, renter, TransitionRequest(new_status=S.SUBMITTED, legal_acceptance=True)
    )
    assert result.success, result.error
    return result.data


async def approve(service, renter, owner, listing):
    draft = await create_draft(service, renter, listing)
    await submit(service, renter, draft.id)
    await service.update_status(draft.id, owner, TransitionRequest(new_status=S.UNDER_REVIEW))
    result = await service.update_status(draft.id, owner, TransitionRequest(new_status=S.APPROVED))
    assert result.success, result.error
    return result.data


class TestCreateApplication:
    """Test draft creation."""

    def test_create_snapshots_property_and_scores(self, run, service, notifier, audit, renter, listing):
        async def scenario():
            result = await service.create_application(renter, listing.id, complete_sections())
            await service.wait_for_side_effects()
            return result

        result = run(scenario())
        application = result.data
        assert result.success
        assert application.status == S.DRAFT
        assert application.snapshot.rent == "2400.00"
        assert application.snapshot.application_fee == "50.00"
        assert application.snapshot.policies.utilities_included == ("water", "trash")
        assert application.score == 100
        assert application.status_history.statuses() == [S.DRAFT]
        assert sorted(notifier.names()) == ["applicant_confirmation", "owner_new_application"]
        assert audit.actions() == ["application_create"]

    def test_returned_application_is_redacted(self, run, service, applications, renter, listing):
        result = run(service.create_application(renter, listing.id, complete_sections()))
        assert result.data.personal_info.ssn == REDACTED
        assert applications.items[result.data.id].personal_info.ssn == "123456789"

        fetched = run(service.get_application(result.data.id, renter))
        assert fetched.data.personal_info.ssn == REDACTED

    def test_status_in_payload_is_ignored(self, run, service, renter, listing):
        sections = {**complete_sections(), "status": "approved"}
        result = run(service.create_application(renter, listing.id, sections))
        assert result.data.status == S.DRAFT

    def test_second_application_is_duplicate(self, run, service, renter, listing):
        async def scenario():
            await create_draft(service, renter, listing)
            return await service.create_application(renter, listing.id)

        result = run(scenario())
        assert not result.success
        assert result.error_code == "duplicate_application"

    def test_unknown_property(self, run, service, renter):
        from uuid import uuid4

        result = run(service.create_application(renter, uuid4()))
        assert result.error_code == "not_found"

    def test_later_property_edits_do_not_reach_snapshot(self, run, service, properties, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            properties.properties[listing.id].price = "9999.00"
            return await service.get_application(draft.id, renter)

        assert run(scenario()).data.snapshot.rent == "2400.00"


class TestAutosave:
    """Test partial draft updates."""

    def test_autosave_rescores_and_keeps_ssn(self, run, service, applications, notifier, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            result = await service.autosave_application(draft.id, renter, {
                "personal_info": {"first_name": "Dana", "ssn": "***-**-6789"},
                "employment": {"employer_name": "Acme", "monthly_income": 2100, "duration": "3 years"},
                "step": 3,
                "status": "approved",
            })
            await service.wait_for_side_effects()
            return result

        result = run(scenario())
        assert result.success, result.error
        saved = result.data
        assert saved.status == S.DRAFT
        assert saved.last_saved_step == 3
        assert saved.personal_info.ssn == REDACTED
        assert applications.items[saved.id].personal_info.ssn == "123456789"
        assert saved.score_breakdown.income_score == 12
        assert saved.score == 87
        assert "scoring_complete" in notifier.names()

    def test_autosave_without_scoring_sections_keeps_score(self, run, service, credit_bureau, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            calls = len(credit_bureau.identifiers)
            result = await service.autosave_application(draft.id, renter, {"step": 2})
            return result, calls

        result, calls = run(scenario())
        assert result.success
        assert result.data.score == 100
        assert len(credit_bureau.identifiers) == calls

    def test_autosave_after_submission_is_refused(self, run, service, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            return await service.autosave_application(draft.id, renter, {"step": 4})

        result = run(scenario())
        assert result.error_code == "invalid_transition"

    def test_only_applicant_edits(self, run, service, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.autosave_application(draft.id, owner, {"step": 1})

        assert run(scenario()).error_code == "role_not_authorized"

    def test_invalid_step(self, run, service, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.autosave_application(draft.id, renter, {"step": "three"})

        assert run(scenario()).error_code == "validation_error"

    @pytest.mark.parametrize("payload,section", [
        ({"personal_info": "oops"}, "personal_info"),
        ({"employment": ["Acme"]}, "employment"),
        ({"co_applicants": {"name": "Sam"}}, "co_applicants"),
        ({"co_applicants": ["Sam"]}, "co_applicants"),
        ({"documents": {"id": "yes"}}, "documents"),
        ({"legal_disclosures": {"acknowledgedAt": "not a date"}}, "legal_disclosures"),
    ])
    def test_malformed_section_is_a_validation_error(
        self, run, service, applications, renter, listing, payload, section
    ):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return draft, await service.autosave_application(draft.id, renter, payload)

        draft, result = run(scenario())
        assert not result.success
        assert result.error_code == "validation_error"
        assert result.error == f"Malformed {section} section"
        assert applications.items[draft.id].version == draft.version

    def test_numeric_employment_status_is_scored(self, run, service, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.autosave_application(draft.id, renter, {"employment": {"status": 3}})

        result = run(scenario())
        assert result.success, result.error
        assert result.data.employment.status == "3"

    def test_malformed_section_on_create(self, run, service, renter, listing):
        result = run(service.create_application(renter, listing.id, {"rental_history": "five years"}))
        assert result.error_code == "validation_error"

    def test_lost_race_is_retried(self, run, service, applications, renter, listing):
        """Test a concurrent write between read and save is absorbed by one retry."""
        async def scenario():
            draft = await create_draft(service, renter, listing)

            def competing_write(stored):
                stored.last_saved_step = 9
                stored.version += 1

            applications.before_next_save = competing_write
            return await service.autosave_application(draft.id, renter, {"step": 2})

        result = run(scenario())
        assert result.success, result.error
        assert result.data.last_saved_step == 2
        assert result.data.version == 3
        assert applications.save_calls == 2


class TestStatusChanges:
    """Test the gated transition entry point."""

    def test_submit_generates_disclosure_once(self, run, service, documents, audit, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            submitted = await submit(service, renter, draft.id)
            await service.wait_for_side_effects()
            return submitted

        submitted = run(scenario())
        assert submitted.status == S.SUBMITTED
        assert submitted.submitted_at is not None
        assert submitted.legal_acceptance.accepted
        assert submitted.legal_acceptance.documents["terms_of_service"] == "1.0"
        assert submitted.disclosure_pdf_url.endswith("application-disclosures.pdf")
        assert documents.count(DocumentKind.DISCLOSURE) == 1
        assert "application_status_change" in audit.actions()

    def test_submit_without_legal_acceptance(self, run, service, renter, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.update_status(draft.id, renter, TransitionRequest(new_status=S.SUBMITTED))

        result = run(scenario())
        assert result.error_code == "missing_required_field"
        assert "Legal acceptance" in result.error

    def test_document_failure_does_not_undo_submission(self, run, service, applications, documents, renter, listing):
        documents.fail = True

        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await submit(service, renter, draft.id)

        submitted = run(scenario())
        assert submitted.status == S.SUBMITTED
        assert applications.items[submitted.id].disclosure_pdf_url is None

    def test_approval_generates_lease(self, run, service, documents, renter, owner, listing):
        approved = run(approve(service, renter, owner, listing))
        assert approved.status == S.APPROVED
        assert approved.reviewed_by == owner.user_id
        assert approved.lease_signature_status == LeaseSignatureStatus.UNSIGNED
        assert documents.count(DocumentKind.LEASE) == 1

    def test_rejection_records_details(self, run, service, notifier, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            await service.update_status(draft.id, owner, TransitionRequest(new_status=S.UNDER_REVIEW))
            result = await service.update_status(draft.id, owner, TransitionRequest(
                new_status=S.REJECTED,
                rejection_category="income_insufficient",
                rejection_reason="Income below 3x rent",
                rejection_categories=("income_insufficient", "credit_issues"),
                rejection_explanation="Combined income does not cover rent.",
                appealable=True,
            ))
            await service.wait_for_side_effects()
            return result

        result = run(scenario())
        rejected = result.data
        assert rejected.status == S.REJECTED
        assert rejected.rejection_category.value == "income_insufficient"
        assert rejected.rejection_details.appealable
        assert rejected.rejection_details.categories == ("income_insufficient", "credit_issues")
        assert ("status_change", rejected.id, "under_review", "rejected") in notifier.sent

    def test_manager_can_review(self, run, service, renter, manager, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            return await service.update_status(draft.id, manager, TransitionRequest(new_status=S.UNDER_REVIEW))

        assert run(scenario()).data.status == S.UNDER_REVIEW

    def test_history_only_grows(self, run, service, renter, owner, listing):
        approved = run(approve(service, renter, owner, listing))
        assert approved.status_history.statuses() == [S.DRAFT, S.SUBMITTED, S.UNDER_REVIEW, S.APPROVED]

    def test_terminal_status_cannot_change(self, run, service, renter, owner, listing):
        async def scenario():
            approved = await approve(service, renter, owner, listing)
            return await service.update_status(approved.id, owner, TransitionRequest(new_status=S.REJECTED))

        assert run(scenario()).error_code == "invalid_transition"

    @pytest.mark.parametrize("current,requested", [
        (current, requested)
        for current in (S.DRAFT, S.SUBMITTED)
        for requested in S
        if requested not in STATUS_TRANSITIONS[current]
    ])
    def test_statuses_outside_the_table_are_refused(
        self, run, service, applications, renter, admin, listing, current, requested
    ):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            if current == S.SUBMITTED:
                await submit(service, renter, draft.id)
            result = await service.update_status(draft.id, admin, TransitionRequest(
                new_status=requested,
                payment_amount="50.00",
                payment_purpose="Application fee",
            ))
            return draft, result

        draft, result = run(scenario())
        assert result.error_code == "invalid_transition"
        assert applications.items[draft.id].status == current


class TestSideEffectIsolation:
    """Test notification and audit failures never fail the operation."""

    def test_raising_notifier(self, run, service, notifier, renter, listing):
        notifier.error = RuntimeError("smtp down")

        async def scenario():
            draft = await create_draft(service, renter, listing)
            submitted = await submit(service, renter, draft.id)
            await service.wait_for_side_effects()
            return submitted

        assert run(scenario()).status == S.SUBMITTED

    def test_undelivered_notification(self, run, service, notifier, renter, listing):
        notifier.delivered = False

        async def scenario():
            result = await service.create_application(renter, listing.id, complete_sections())
            await service.wait_for_side_effects()
            return result

        assert run(scenario()).success

    def test_raising_audit_logger(self, run, service, audit, renter, listing):
        audit.error = RuntimeError("audit table locked")

        async def scenario():
            result = await service.create_application(renter, listing.id, complete_sections())
            await service.wait_for_side_effects()
            return result

        assert run(scenario()).success


class TestPaymentFlow:
    """Test the payment protocol through the service."""

    def test_full_payment_cycle(self, run, service, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            requested = await service.update_status(draft.id, owner, TransitionRequest(
                new_status=S.PAYMENT_REQUESTED, payment_amount="50.00", payment_purpose="Application fee",
            ))
            assert requested.success, requested.error
            assert (await service.initiate_payment(draft.id, renter)).success
            assert (await service.complete_payment(draft.id, renter)).success
            return await service.verify_payment(draft.id, owner)

        verified = run(scenario()).data
        assert verified.status == S.UNDER_REVIEW
        assert verified.payment_request.verified_at is not None

    def test_repeated_request_is_duplicate(self, run, service, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            await service.request_payment(draft.id, owner, "50.00", "Application fee")
            return await service.request_payment(draft.id, owner, "50.00", "Application fee")

        assert run(scenario()).error_code == "duplicate_payment_request"

    def test_concurrent_request_loser_sees_duplicate(self, run, service, applications, renter, owner, listing):
        """Test the request that loses the write race reports the existing request."""
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            winner = await service.request_payment(draft.id, owner, "50.00", "Application fee")
            assert winner.success

            stored = applications.items[draft.id]
            stored_payment = stored.payment_request
            stored.payment_request = None
            stored.status = S.SUBMITTED

            def winner_lands(row):
                row.payment_request = stored_payment
                row.status = S.PAYMENT_REQUESTED
                row.version += 1

            applications.before_next_save = winner_lands
            return await service.request_payment(draft.id, owner, "75.00", "Application fee")

        result = run(scenario())
        assert result.error_code == "duplicate_payment_request"

    def test_payment_hidden_from_applicant_until_requested(self, run, service, applications, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            await submit(service, renter, draft.id)
            await service.request_payment(draft.id, owner, "50.00", "Application fee")
            applications.items[draft.id].status = S.UNDER_REVIEW
            applicant_view = await service.get_application(draft.id, renter)
            owner_view = await service.get_application(draft.id, owner)
            return applicant_view.data, owner_view.data

        applicant_view, owner_view = run(scenario())
        assert applicant_view.payment_request is None
        assert owner_view.payment_request is not None


class TestLeaseFlow:
    def test_sign_lease_notifies_when_complete(self, run, service, notifier, audit, renter, owner, listing):
        async def scenario():
            approved = await approve(service, renter, owner, listing)
            tenant = await service.sign_lease(approved.id, renter, SIGNATURE)
            landlord = await service.sign_lease(approved.id, owner, SIGNATURE)
            signatures = await service.get_signatures(approved.id, owner)
            await service.wait_for_side_effects()
            return tenant, landlord, signatures

        tenant, landlord, signatures = run(scenario())
        assert tenant.data.status == LeaseSignatureStatus.PARTIALLY_SIGNED
        assert landlord.data.status == LeaseSignatureStatus.SIGNED
        assert landlord.data.application.signed_lease_pdf_url is not None
        assert len(signatures.data) == 2
        assert notifier.names().count("lease_signed") == 1
        assert audit.actions().count("lease_sign") == 2

    def test_landlord_first_is_refused(self, run, service, renter, owner, listing):
        async def scenario():
            approved = await approve(service, renter, owner, listing)
            return await service.sign_lease(approved.id, owner, SIGNATURE)

        assert run(scenario()).error_code == "signing_out_of_order"

    def test_simultaneous_landlord_signatures_render_once(
        self, run, service, documents, notifier, renter, owner, admin, listing
    ):
        async def scenario():
            approved = await approve(service, renter, owner, listing)
            await service.sign_lease(approved.id, renter, SIGNATURE)
            results = await asyncio.gather(
                service.sign_lease(approved.id, owner, SIGNATURE),
                service.sign_lease(approved.id, admin, SIGNATURE),
            )
            await service.wait_for_side_effects()
            return results

        results = run(scenario())
        assert sorted(result.success for result in results) == [False, True]
        (failed,) = [result for result in results if not result.success]
        assert failed.error_code == "already_signed"
        assert documents.count(DocumentKind.SIGNED_LEASE) == 1
        assert notifier.names().count("lease_signed") == 1


class TestReads:
    """Test authorization and redaction of reads."""

    def test_stranger_cannot_view(self, run, service, renter, stranger, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.get_application(draft.id, stranger)

        assert run(scenario()).error_code == "role_not_authorized"

    def test_admin_sees_identifier(self, run, service, renter, admin, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            return await service.get_application(draft.id, admin)

        assert run(scenario()).data.personal_info.ssn == "123456789"

    def test_owner_lists_property_applications_redacted(self, run, service, renter, owner, listing):
        async def scenario():
            await create_draft(service, renter, listing)
            return await service.list_applications_for_property(listing.id, owner)

        result = run(scenario())
        assert len(result.data) == 1
        assert result.data[0].personal_info.ssn == REDACTED

    def test_renter_cannot_list_property(self, run, service, renter, listing):
        assert run(service.list_applications_for_property(listing.id, renter)).error_code == "role_not_authorized"

    def test_list_for_user(self, run, service, renter, stranger, listing):
        async def scenario():
            await create_draft(service, renter, listing)
            own = await service.list_applications_for_user(renter.user_id, renter)
            other = await service.list_applications_for_user(renter.user_id, stranger)
            return own, other

        own, other = run(scenario())
        assert len(own.data) == 1
        assert other.error_code == "role_not_authorized"

    def test_score_recalculation(self, run, service, audit, renter, owner, listing):
        async def scenario():
            draft = await create_draft(service, renter, listing)
            result = await service.calculate_application_score(draft.id, owner)
            await service.wait_for_side_effects()
            return result

        result = run(scenario())
        assert result.data.total_score == 100
        assert "application_score" in audit.actions()

    def test_unexpected_error_becomes_internal_error(self, run, service, applications, renter):
        from uuid import uuid4

        async def broken(_):
            raise RuntimeError("connection reset")

        applications.get_by_id = broken
        result = run(service.get_application(uuid4(), renter))
        assert result.error_code == "internal_error"
        assert "connection reset" not in result.error
