"""Closed taxonomy of validation error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every ValidationError.

    The set is closed; codes arriving from elsewhere (e.g. a deserialized
    payload from a newer service) map to ``OTHER`` through ``coerce`` instead
    of failing. Members compare equal to their string value.
    """

    # Structural
    REQUIRED_FIELD = "REQUIRED_FIELD"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TYPE = "INVALID_TYPE"
    TOO_SHORT = "TOO_SHORT"
    MAX_LENGTH_EXCEEDED = "MAX_LENGTH_EXCEEDED"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    INVALID_NUMBER = "INVALID_NUMBER"
    NUMBER_TOO_SMALL = "NUMBER_TOO_SMALL"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    AMOUNT_TOO_SMALL = "AMOUNT_TOO_SMALL"
    AMOUNT_TOO_LARGE = "AMOUNT_TOO_LARGE"
    TOO_MANY_DECIMAL_PLACES = "TOO_MANY_DECIMAL_PLACES"
    INVALID_GUID = "INVALID_GUID"
    INVALID_ID = "INVALID_ID"
    EMPTY_ARRAY = "EMPTY_ARRAY"

    # Dates
    INVALID_DATE = "INVALID_DATE"
    DATE_REQUIRED = "DATE_REQUIRED"
    DATE_EMPTY = "DATE_EMPTY"
    DATE_WRONG_TYPE = "DATE_WRONG_TYPE"
    DATE_FORMAT_INVALID = "DATE_FORMAT_INVALID"
    DATE_NOT_PARSEABLE = "DATE_NOT_PARSEABLE"
    DATE_TOO_OLD = "DATE_TOO_OLD"
    DATE_TOO_FUTURE = "DATE_TOO_FUTURE"
    DATE_BEFORE_MIN = "DATE_BEFORE_MIN"
    DATE_AFTER_MAX = "DATE_AFTER_MAX"
    DATE_RANGE_INVALID = "DATE_RANGE_INVALID"
    DATE_IN_FUTURE = "DATE_IN_FUTURE"

    # Business rules
    SAME_ACCOUNT_ERROR = "SAME_ACCOUNT_ERROR"
    SUSPICIOUS_AMOUNT = "SUSPICIOUS_AMOUNT"
    UNUSUAL_DATE = "UNUSUAL_DATE"
    POTENTIAL_DUPLICATE = "POTENTIAL_DUPLICATE"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Informational
    OPTIMIZATION_SUGGESTION = "OPTIMIZATION_SUGGESTION"
    TIP = "TIP"

    OTHER = "OTHER"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: "str | ErrorCode") -> "ErrorCode":
        """Map a string to its member, falling back to ``OTHER``.

        Example:
            >>> ErrorCode.coerce("SAME_ACCOUNT_ERROR")
            <ErrorCode.SAME_ACCOUNT_ERROR: 'SAME_ACCOUNT_ERROR'>
            >>> ErrorCode.coerce("SOMETHING_NEW")
            <ErrorCode.OTHER: 'OTHER'>
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER
