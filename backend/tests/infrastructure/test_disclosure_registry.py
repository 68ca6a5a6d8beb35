"""Tests for the static state disclosure registry."""

import pytest
from infrastructure.disclosures import (
    STANDARD_ESIGNATURE_DISCLOSURE,
    StaticDisclosureRegistry,
    normalize_state,
)


@pytest.fixture
def registry():
    return StaticDisclosureRegistry()


class TestRequiredDisclosures:
    """Test which disclosures each state requires."""

    def test_california(self, registry):
        ids = [d.id for d in registry.get_required_disclosures("CA")]
        assert ids == ["rent_control", "megans_law"]

    def test_lowercase_and_padded_codes(self, registry):
        assert [d.id for d in registry.get_required_disclosures(" ny ")] == ["fee_cap"]

    def test_texas_label(self, registry):
        (notice,) = registry.get_required_disclosures("TX")
        assert notice.label == "No Rent Control Notice"

    def test_other_states_have_none(self, registry):
        assert registry.get_required_disclosures("OR") == []
        assert registry.get_required_disclosures(None) == []


class TestEsignatureDisclosure:
    def test_state_specific_text(self, registry):
        assert registry.get_esignature_disclosure("ca").startswith("California E-Signature")

    def test_standard_fallback(self, registry):
        assert registry.get_esignature_disclosure("WA") == STANDARD_ESIGNATURE_DISCLOSURE
        assert registry.get_esignature_disclosure("") == STANDARD_ESIGNATURE_DISCLOSURE


def test_normalize_state():
    assert normalize_state(" tx") == "TX"
    assert normalize_state("   ") is None
    assert normalize_state(None) is None
