"""Validation guards for insert, update, and delete call sites.

HookValidator turns a ValidationResult into either the validated data or a
raised HookValidationError, so data-access code can validate in one line
and let the error propagate to the form layer. The standalone guards
(``validate_guid``, ``validate_numeric_id``, ...) raise the same error type.
"""

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime
from typing import Any, NoReturn

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from finval.core.codes import ErrorCode
from finval.core.result import ValidationError
from finval.validation.exceptions import HookValidationError
from finval.validation.formatting import DEFAULT_FAILURE_MESSAGE
from finval.validation.protocols import EntityValidator, RateLimiter

logger = logging.getLogger(__name__)

GUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
INTEGER_PREFIX = re.compile(r"^\s*[+-]?\d+")
MAX_ACCOUNT_NAME_LENGTH = 100
RATE_LIMIT_MESSAGE = "Too many requests. Please wait before trying again."


def _raise(message: str, field: str, detail: str, code: ErrorCode) -> NoReturn:
    raise HookValidationError(message, [ValidationError(field, detail, code)])


class HookValidator:
    """Validate payloads at mutation boundaries and raise on failure.

    Attributes:
        rate_limiter: Optional throttle consulted before each insert/update
        identifier: Who is acting; combined with the operation name into the
                    rate-limit key

    Example:
        >>> from finval.validation.validator import DataValidator
        >>> hooks = HookValidator()
        >>> hooks.validate_insert(
        ...     {"categoryName": "Dining Out"},
        ...     DataValidator().validate_category,
        ...     "insertCategory",
        ... )
        {'categoryName': 'Dining Out', 'activeStatus': True}
    """

    def __init__(self, rate_limiter: RateLimiter | None = None, identifier: str = "user") -> None:
        self.rate_limiter = rate_limiter
        self.identifier = identifier

    def _check_rate_limit(self, operation_name: str) -> None:
        if self.rate_limiter is None:
            return
        key = f"{self.identifier}:{operation_name}"
        if not self.rate_limiter.check_and_increment(key):
            logger.warning("Rate limit exceeded for %s", key)
            _raise(
                f"{operation_name}: {RATE_LIMIT_MESSAGE}",
                "rateLimit",
                RATE_LIMIT_MESSAGE,
                ErrorCode.RATE_LIMIT_EXCEEDED,
            )

    def _validate(self, data: Any, validator: EntityValidator, operation_name: str) -> Any:
        self._check_rate_limit(operation_name)
        result = validator(data)
        if result.success:
            return result.data

        joined = ", ".join(error.message for error in result.errors) or DEFAULT_FAILURE_MESSAGE
        raise HookValidationError(f"{operation_name} validation failed: {joined}", result.errors)

    def validate_insert(self, data: Any, validator: EntityValidator, operation_name: str) -> Any:
        """Validate data before an insert.

        Args:
            data: Raw payload
            validator: Any ``DataValidator.validate_*`` method
            operation_name: Prefix for error messages and the rate-limit key

        Returns:
            The sanitized, validated payload

        Raises:
            HookValidationError: If validation fails or the caller is rate limited
        """
        return self._validate(data, validator, operation_name)

    def validate_update(
        self,
        new_data: Any,
        old_data: Any,
        validator: EntityValidator,
        operation_name: str,
    ) -> Any:
        """Validate the replacement payload of an update.

        ``old_data`` is accepted so call sites read naturally; only
        ``new_data`` is validated.
        """
        return self._validate(new_data, validator, operation_name)

    @staticmethod
    def validate_delete(
        data: Mapping[str, Any], identifier_key: str, operation_name: str
    ) -> Mapping[str, Any]:
        """Ensure ``data`` carries a usable identifier before a delete.

        Raises:
            HookValidationError: If the identifier is missing, falsy, or blank
        """
        identifier = data.get(identifier_key) if isinstance(data, Mapping) else None
        if not identifier or (isinstance(identifier, str) and not identifier.strip()):
            _raise(
                f"{operation_name}: Invalid {identifier_key} provided",
                identifier_key,
                f"{identifier_key} is required",
                ErrorCode.REQUIRED_FIELD,
            )
        return data

    @staticmethod
    def validate_guid(guid: Any, operation_name: str) -> str:
        if not isinstance(guid, str) or not GUID_PATTERN.match(guid):
            _raise(
                f"{operation_name}: Invalid GUID format",
                "guid",
                "GUID must be a valid UUID v4 format",
                ErrorCode.INVALID_GUID,
            )
        return guid

    @staticmethod
    def validate_account_name(account_name: Any, operation_name: str) -> str:
        """Return the trimmed account name.

        Raises:
            HookValidationError: REQUIRED_FIELD when missing or blank,
                MAX_LENGTH_EXCEEDED above 100 characters
        """
        if not isinstance(account_name, str) or not account_name.strip():
            _raise(
                f"{operation_name}: Account name is required",
                "accountName",
                "Account name is required",
                ErrorCode.REQUIRED_FIELD,
            )
        if len(account_name) > MAX_ACCOUNT_NAME_LENGTH:
            _raise(
                f"{operation_name}: Account name too long",
                "accountName",
                f"Account name must be {MAX_ACCOUNT_NAME_LENGTH} characters or less",
                ErrorCode.MAX_LENGTH_EXCEEDED,
            )
        return account_name.strip()

    @staticmethod
    def validate_numeric_id(id_value: Any, field_name: str = "ID", operation_name: str = "") -> int:
        """Return ``id_value`` as a non-negative int.

        Strings are read from their leading integer digits, so ``"42abc"``
        gives 42. Floats must be integral.
        """
        number: int | None = None
        if isinstance(id_value, bool):
            number = None
        elif isinstance(id_value, int):
            number = id_value
        elif isinstance(id_value, float) and id_value.is_integer():
            number = int(id_value)
        elif isinstance(id_value, str):
            match = INTEGER_PREFIX.match(id_value)
            number = int(match.group()) if match else None

        if number is None or number < 0:
            _raise(
                f"{operation_name}: Invalid {field_name}",
                field_name,
                f"{field_name} must be a positive integer",
                ErrorCode.INVALID_ID,
            )
        return number

    @staticmethod
    def validate_non_empty_array(items: Any, operation_name: str) -> Sequence[Any]:
        if not isinstance(items, (list, tuple)) or not items:
            _raise(
                f"{operation_name}: Array cannot be empty",
                "array",
                "At least one item is required",
                ErrorCode.EMPTY_ARRAY,
            )
        return items

    @staticmethod
    def validate_date_range(
        value: Any,
        operation_name: str,
        past_years: int = 1,
        future_years: int = 1,
        today: date | None = None,
    ) -> date:
        """Check that a date lies within ``past_years``/``future_years`` of today.

        Args:
            value: date, datetime, or a string dateutil can parse
            operation_name: Prefix for error messages
            past_years: Years allowed before today
            future_years: Years allowed after today
            today: Reference day (defaults to ``date.today()``)

        Returns:
            The value as a date

        Raises:
            HookValidationError: INVALID_DATE, DATE_TOO_OLD, or DATE_TOO_FUTURE
        """
        day: date | None = None
        if isinstance(value, datetime):
            day = value.date()
        elif isinstance(value, date):
            day = value
        elif isinstance(value, str) and value.strip():
            try:
                day = date_parser.parse(value.strip()).date()
            except (ValueError, OverflowError):
                day = None

        if day is None:
            _raise(
                f"{operation_name}: Invalid date",
                "date",
                "Date must be a valid date",
                ErrorCode.INVALID_DATE,
            )

        reference = today or date.today()
        if day < reference - relativedelta(years=past_years):
            _raise(
                f"{operation_name}: Date too far in the past",
                "date",
                f"Date cannot be more than {past_years} year(s) in the past",
                ErrorCode.DATE_TOO_OLD,
            )
        if day > reference + relativedelta(years=future_years):
            _raise(
                f"{operation_name}: Date too far in the future",
                "date",
                f"Date cannot be more than {future_years} year(s) in the future",
                ErrorCode.DATE_TOO_FUTURE,
            )
        return day


def with_validation(
    validator: EntityValidator,
    operation_name: str,
    hooks: HookValidator | None = None,
) -> Callable[[Any], Any]:
    """Wrap a validator into a one-argument insert guard.

    Example:
        >>> from finval.validation.validator import DataValidator
        >>> guard = with_validation(DataValidator().validate_category, "insertCategory")
        >>> guard({"categoryName": "travel"})["categoryName"]
        'travel'
    """
    runner = hooks or HookValidator()

    def guarded(data: Any) -> Any:
        return runner.validate_insert(data, validator, operation_name)

    return guarded


def is_validation_error(error: Any) -> bool:
    return isinstance(error, HookValidationError)
