"""Unit tests for LeaseSignature entity."""

from uuid import uuid4

import pytest
from domain.entities import DEFAULT_ATTESTATION, LeaseSignature
from domain.enums import SignerRole


def _signature(**overrides):
    values = dict(
        application_id=uuid4(),
        signer_user_id=uuid4(),
        signer_role=SignerRole.TENANT,
        signer_name="Dana Reyes",
        signature_data="data:image/png;base64,AAAA",
        state_code="TX",
        state_disclosure_acknowledged=True,
    )
    values.update(overrides)
    return LeaseSignature(**values)


class TestLeaseSignature:
    """Test signature validation and immutability."""

    def test_signature_is_locked(self):
        signature = _signature()
        assert signature.is_locked
        assert signature.attestation_text == DEFAULT_ATTESTATION
        assert signature.signed_at.tzinfo is not None

    def test_unlocked_signature_raises_error(self):
        with pytest.raises(ValueError, match="locked"):
            _signature(is_locked=False)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_signer_name_raises_error(self, name):
        with pytest.raises(ValueError, match="Signer name"):
            _signature(signer_name=name)

    def test_empty_signature_data_raises_error(self):
        with pytest.raises(ValueError, match="Signature data"):
            _signature(signature_data="")

    def test_immutability(self):
        signature = _signature()
        with pytest.raises(Exception):  # FrozenInstanceError
            signature.signer_name = "Someone else"
