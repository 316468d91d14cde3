"""Unit tests for ZIP code and state validation."""

import pytest

from voter_guide.lib.location import (
    SUPPORTED_STATES,
    InvalidStateError,
    InvalidZipCodeError,
    UnsupportedStateError,
    is_supported_state,
    validate_state,
    validate_zipcode,
)


class TestValidateZipcode:
    """Tests for validate_zipcode()."""

    def test_valid_zip_returned_unchanged(self) -> None:
        assert validate_zipcode("10001") == "10001"

    def test_leading_zeros_allowed(self) -> None:
        assert validate_zipcode("01234") == "01234"

    @pytest.mark.parametrize("value", ["1234", "123456", "1000a", "10001-1234", " 10001", ""])
    def test_invalid_formats_rejected(self, value: str) -> None:
        with pytest.raises(InvalidZipCodeError, match="Must be 5 digits"):
            validate_zipcode(value)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidZipCodeError):
            validate_zipcode(10001)  # type: ignore[arg-type]

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_zipcode("abc")


class TestValidateState:
    """Tests for validate_state()."""

    @pytest.mark.parametrize("state", SUPPORTED_STATES)
    def test_pilot_states_accepted(self, state: str) -> None:
        assert validate_state(state) == state

    @pytest.mark.parametrize("value", ["ny", "N", "NYC", "N1", ""])
    def test_malformed_codes_rejected(self, value: str) -> None:
        with pytest.raises(InvalidStateError):
            validate_state(value)

    def test_unsupported_state_rejected(self) -> None:
        with pytest.raises(UnsupportedStateError) as exc_info:
            validate_state("CA")
        assert exc_info.value.state == "CA"
        assert str(exc_info.value) == "CA is not in our pilot program"

    def test_unsupported_allowed_when_not_required(self) -> None:
        assert validate_state("CA", require_supported=False) == "CA"

    def test_malformed_checked_before_support(self) -> None:
        with pytest.raises(InvalidStateError):
            validate_state("ca", require_supported=False)


class TestIsSupportedState:
    def test_membership(self) -> None:
        assert is_supported_state("TX") is True
        assert is_supported_state("CA") is False
        assert is_supported_state("tx") is False

    def test_pilot_list(self) -> None:
        assert SUPPORTED_STATES == ("NY", "NJ", "PA", "CT", "TX")
