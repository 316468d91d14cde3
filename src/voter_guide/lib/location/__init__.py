"""Location library — ZIP and state validation for the pilot program.

Public API:
    - validate_zipcode / validate_state: Strict format and allow-list checks
    - is_supported_state: Allow-list membership test
    - SUPPORTED_STATES: The pilot state allow-list
    - InvalidZipCodeError, InvalidStateError, UnsupportedStateError
"""

from voter_guide.lib.location.validators import (
    STATE_PATTERN,
    SUPPORTED_STATES,
    ZIPCODE_PATTERN,
    InvalidStateError,
    InvalidZipCodeError,
    UnsupportedStateError,
    is_supported_state,
    validate_state,
    validate_zipcode,
)

__all__ = [
    "STATE_PATTERN",
    "SUPPORTED_STATES",
    "ZIPCODE_PATTERN",
    "InvalidStateError",
    "InvalidZipCodeError",
    "UnsupportedStateError",
    "is_supported_state",
    "validate_state",
    "validate_zipcode",
]
