"""ZIP code and state validation against the pilot allow-list.

All checks run before any storage access so malformed input never reaches
the database.
"""

import re

ZIPCODE_PATTERN = re.compile(r"^\d{5}$")
STATE_PATTERN = re.compile(r"^[A-Z]{2}$")

SUPPORTED_STATES: tuple[str, ...] = ("NY", "NJ", "PA", "CT", "TX")


class InvalidZipCodeError(ValueError):
    """Raised when a ZIP code is not exactly five digits."""

    def __init__(self, zipcode: str) -> None:
        self.zipcode = zipcode
        super().__init__("Invalid ZIP code format. Must be 5 digits.")


class InvalidStateError(ValueError):
    """Raised when a state code is not two uppercase letters."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__("Invalid state code. Must be a 2-letter uppercase abbreviation.")


class UnsupportedStateError(ValueError):
    """Raised for a well-formed state that is outside the pilot program."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"{state} is not in our pilot program")


def is_supported_state(state: str) -> bool:
    """Return True if the state code is in the pilot allow-list."""
    return state in SUPPORTED_STATES


def validate_zipcode(zipcode: str) -> str:
    """Validate a ZIP code string.

    Args:
        zipcode: Candidate ZIP code.

    Returns:
        The ZIP code unchanged.

    Raises:
        InvalidZipCodeError: If the value does not match ``^\\d{5}$``.
    """
    if not isinstance(zipcode, str) or not ZIPCODE_PATTERN.match(zipcode):
        raise InvalidZipCodeError(str(zipcode))
    return zipcode


def validate_state(state: str, *, require_supported: bool = True) -> str:
    """Validate a two-letter state code.

    Args:
        state: Candidate state code.
        require_supported: Also require the state to be in the pilot allow-list.

    Returns:
        The state code unchanged.

    Raises:
        InvalidStateError: If the value is not two uppercase letters.
        UnsupportedStateError: If the state is outside the pilot program.
    """
    if not isinstance(state, str) or not STATE_PATTERN.match(state):
        raise InvalidStateError(str(state))
    if require_supported and not is_supported_state(state):
        raise UnsupportedStateError(state)
    return state
