"""Unit tests for the status transition validator."""

from uuid import uuid4

import pytest
from application.services import (
    STATUS_TRANSITIONS,
    AccessPolicy,
    TransitionRequest,
    get_valid_next_statuses,
    is_valid_status_transition,
)
from application.use_cases import apply_sections
from domain.entities import Application
from domain.enums import ApplicationStatus, Capability
from domain.errors import (
    DisclosureNotAcknowledged,
    DuplicatePaymentRequest,
    InvalidTransition,
    MissingRequiredField,
    RoleNotAuthorized,
    ValidationError,
)
from domain.value_objects import PaymentRequest

from fakes import complete_sections

S = ApplicationStatus


@pytest.fixture
def draft(renter, listing):
    application = Application(
        user_id=renter.user_id,
        property_id=listing.id,
        snapshot=listing.snapshot("50.00", "12 Months"),
    )
    apply_sections(application, complete_sections())
    return application


@pytest.fixture
def applicant_caps(renter, draft, listing):
    return AccessPolicy().resolve(renter, draft, listing)


@pytest.fixture
def owner_caps(owner, draft, listing):
    return AccessPolicy().resolve(owner, draft, listing)


def _submit(**overrides):
    return TransitionRequest(new_status=S.SUBMITTED, legal_acceptance=True, **overrides)


class TestTransitionTable:
    """Test the state machine table."""

    @pytest.mark.parametrize("current,requested", [
        (S.DRAFT, S.SUBMITTED),
        (S.DRAFT, S.WITHDRAWN),
        (S.SUBMITTED, S.UNDER_REVIEW),
        (S.SUBMITTED, S.PAYMENT_REQUESTED),
        (S.UNDER_REVIEW, S.APPROVED),
        (S.UNDER_REVIEW, S.REJECTED),
        (S.PAYMENT_REQUESTED, S.UNDER_REVIEW),
        (S.PAYMENT_REQUESTED, S.SUBMITTED),
    ])
    def test_allowed_transitions(self, current, requested):
        assert is_valid_status_transition(current, requested)

    @pytest.mark.parametrize("current,requested", [
        (current, requested)
        for current in S
        for requested in S
        if requested not in STATUS_TRANSITIONS[current]
    ])
    def test_forbidden_transitions(self, current, requested):
        assert not is_valid_status_transition(current, requested)

    def test_terminal_statuses_have_no_successors(self):
        for status in (S.APPROVED, S.REJECTED, S.WITHDRAWN):
            assert status.is_terminal
            assert get_valid_next_statuses(status) == []

    def test_next_statuses_in_declaration_order(self):
        assert get_valid_next_statuses(S.UNDER_REVIEW) == [
            S.PAYMENT_REQUESTED,
            S.APPROVED,
            S.REJECTED,
            S.WITHDRAWN,
        ]


class TestTransitionGuards:
    """Test ordering of the checks."""

    def test_back_to_draft_is_refused(self, validator, draft, applicant_caps):
        draft.status = S.SUBMITTED
        with pytest.raises(InvalidTransition, match="back to draft"):
            validator.validate(draft, TransitionRequest(new_status=S.DRAFT), applicant_caps)

    def test_table_checked_before_role(self, validator, draft, stranger, listing):
        caps = AccessPolicy().resolve(stranger, draft, listing)
        with pytest.raises(InvalidTransition):
            validator.validate(draft, TransitionRequest(new_status=S.APPROVED), caps)

    def test_only_applicant_submits(self, validator, draft, owner_caps, listing):
        with pytest.raises(RoleNotAuthorized, match="Only the applicant can submit"):
            validator.validate(draft, _submit(), owner_caps, listing)

    def test_only_applicant_withdraws(self, validator, draft, owner_caps):
        with pytest.raises(RoleNotAuthorized, match="withdraw"):
            validator.validate(draft, TransitionRequest(new_status=S.WITHDRAWN), owner_caps)

    def test_applicant_cannot_review(self, validator, draft, applicant_caps):
        draft.status = S.SUBMITTED
        with pytest.raises(RoleNotAuthorized):
            validator.validate(draft, TransitionRequest(new_status=S.UNDER_REVIEW), applicant_caps)


class TestSubmissionRequirements:
    """Test what a draft needs before it can be submitted."""

    def test_complete_draft_passes(self, validator, draft, applicant_caps, listing):
        validator.validate(draft, _submit(), applicant_caps, listing)

    def test_missing_sections(self, validator, draft, applicant_caps, listing):
        draft.rental_history = None
        with pytest.raises(MissingRequiredField, match="rental history"):
            validator.validate(draft, _submit(), applicant_caps, listing)

    def test_missing_snapshot(self, validator, renter, listing, applicant_caps):
        application = Application(user_id=renter.user_id, property_id=listing.id)
        apply_sections(application, complete_sections())
        with pytest.raises(MissingRequiredField, match="snapshot"):
            validator.validate(application, _submit(), applicant_caps, listing)

    @pytest.mark.parametrize("acceptance", [None, False])
    def test_legal_acceptance_required(self, validator, draft, applicant_caps, listing, acceptance):
        request = TransitionRequest(new_status=S.SUBMITTED, legal_acceptance=acceptance)
        with pytest.raises(MissingRequiredField, match="Legal acceptance"):
            validator.validate(draft, request, applicant_caps, listing)

    def test_first_missing_field_is_named(self, validator, draft, applicant_caps, listing):
        sections = complete_sections()
        sections["personal_info"]["email"] = ""
        sections["employment"]["monthly_income"] = None
        apply_sections(draft, sections)
        with pytest.raises(MissingRequiredField, match="email") as excinfo:
            validator.validate(draft, _submit(), applicant_caps, listing)
        assert excinfo.value.field_name == "email"

    def test_all_legal_disclosures_required(self, validator, draft, applicant_caps, listing):
        sections = complete_sections()
        sections["legal_disclosures"]["fee_acknowledged"] = False
        apply_sections(draft, sections)
        with pytest.raises(DisclosureNotAcknowledged, match="legal disclosures"):
            validator.validate(draft, _submit(), applicant_caps, listing)

    def test_state_disclosure_required(self, validator, draft, applicant_caps, listing):
        apply_sections(draft, {"state_disclosures": {}})
        with pytest.raises(DisclosureNotAcknowledged, match="No Rent Control Notice"):
            validator.validate(draft, _submit(), applicant_caps, listing)

    def test_each_california_disclosure_required(self, validator, draft, applicant_caps, listing):
        listing.state = "ca"
        apply_sections(draft, {"state_disclosures": {"rent_control": {"acknowledged": True}}})
        with pytest.raises(DisclosureNotAcknowledged, match="Megan's Law"):
            validator.validate(draft, _submit(), applicant_caps, listing)

    def test_state_without_rules_needs_no_disclosures(self, validator, draft, applicant_caps, listing):
        listing.state = "WA"
        apply_sections(draft, {"state_disclosures": {}})
        validator.validate(draft, _submit(), applicant_caps, listing)


class TestPaymentAndRejectionRequirements:
    def test_payment_amount_and_purpose_required(self, validator, draft, owner_caps):
        draft.status = S.UNDER_REVIEW
        request = TransitionRequest(new_status=S.PAYMENT_REQUESTED, payment_amount="50.00")
        with pytest.raises(MissingRequiredField, match="amount and purpose"):
            validator.validate(draft, request, owner_caps)

    def test_existing_payment_request_is_reported_first(self, validator, draft, owner_caps):
        """Test a repeated request is named even when the status moved on."""
        draft.status = S.PAYMENT_REQUESTED
        draft.payment_request = PaymentRequest(amount="50.00", purpose="Fee")
        request = TransitionRequest(new_status=S.PAYMENT_REQUESTED, payment_amount="50", payment_purpose="Fee")
        with pytest.raises(DuplicatePaymentRequest):
            validator.validate(draft, request, owner_caps)

    def test_applicant_cannot_request_payment(self, validator, draft, applicant_caps):
        draft.status = S.UNDER_REVIEW
        draft.payment_request = PaymentRequest(amount="50.00", purpose="Fee")
        request = TransitionRequest(new_status=S.PAYMENT_REQUESTED, payment_amount="50", payment_purpose="Fee")
        with pytest.raises(RoleNotAuthorized):
            validator.validate(draft, request, applicant_caps)

    def test_unknown_rejection_category(self, validator, draft, owner_caps):
        draft.status = S.UNDER_REVIEW
        request = TransitionRequest(new_status=S.REJECTED, rejection_category="bad_vibes")
        with pytest.raises(ValidationError, match="bad_vibes"):
            validator.validate(draft, request, owner_caps)

    def test_known_rejection_categories(self, validator, draft, owner_caps):
        draft.status = S.UNDER_REVIEW
        request = TransitionRequest(
            new_status=S.REJECTED,
            rejection_category="credit_issues",
            rejection_categories=("income_insufficient",),
        )
        validator.validate(draft, request, owner_caps)


class TestCapabilityFixtures:
    def test_owner_holds_reviewer_capabilities(self, owner_caps):
        assert Capability.REVIEW in owner_caps
        assert Capability.SUBMIT not in owner_caps
