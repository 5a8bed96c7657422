"""Tests for the login data model."""

import pytest
from eth_account import Account
from pydantic import ValidationError

from walletauth.client.models import (
    FederatedAssertion,
    SessionRecord,
    VerificationResult,
    WalletAssertion,
    is_valid_address,
    normalize_address,
)

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestAddressNormalization:
    """Tests for wallet address normalization."""

    @pytest.mark.parametrize(
        "value",
        [
            CHECKSUMMED,
            CHECKSUMMED.lower(),
            "0x" + CHECKSUMMED[2:].upper(),
            f"  {CHECKSUMMED.lower()} ",
        ],
    )
    def test_representations_normalize_identically(self, value):
        """Test that any casing of an address normalizes to one form."""
        assert normalize_address(value) == CHECKSUMMED

    def test_normalization_is_idempotent(self):
        """Test normalize(normalize(a)) == normalize(a)."""
        for _ in range(5):
            address = Account.create().address.lower()
            once = normalize_address(address)
            assert normalize_address(once) == once

    @pytest.mark.parametrize("value", ["invalid", "0x123", "", "0x" + "g" * 40])
    def test_invalid_addresses_rejected(self, value):
        """Test that malformed addresses raise ValueError."""
        with pytest.raises(ValueError):
            normalize_address(value)

    def test_non_string_rejected(self):
        """Test that non-string values raise ValueError."""
        with pytest.raises(ValueError):
            normalize_address(None)

    def test_is_valid_address(self):
        """Test address validation helper."""
        assert is_valid_address(CHECKSUMMED) is True
        assert is_valid_address("0x" + "1" * 40) is True
        assert is_valid_address("0x123") is False


class TestAssertions:
    """Tests for identity assertions."""

    def test_wallet_assertion_checksums_address(self):
        """Test wallet assertion stores the checksummed address."""
        assertion = WalletAssertion(address=CHECKSUMMED.lower(), verified=True)

        assert assertion.address == CHECKSUMMED
        assert assertion.token is None

    def test_wallet_assertion_rejects_invalid_address(self):
        """Test wallet assertion validation."""
        with pytest.raises(ValidationError):
            WalletAssertion(address="nope", verified=True)

    def test_federated_assertion_optional_profile(self):
        """Test federated assertion without name and avatar."""
        assertion = FederatedAssertion(access_token="token")

        assert assertion.display_name is None
        assert assertion.avatar_url is None

    def test_verification_result_defaults(self):
        """Test verification result parsing of a minimal body."""
        result = VerificationResult.model_validate({"success": False})

        assert result.success is False
        assert result.token is None


class TestSessionRecord:
    """Tests for the session record."""

    def test_session_record_is_frozen(self):
        """Test that session fields cannot be changed in place."""
        record = SessionRecord(display_name="User", avatar_url="https://a/b.png")

        with pytest.raises(ValidationError):
            record.wallet_address = CHECKSUMMED
