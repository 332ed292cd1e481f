"""Date format detection, parsing, and boundary checks.

Two string representations are distinguished throughout finval:

- ``YYYY-MM-DD``: a calendar date with no time component. Parsed from its
  year/month/day components into a ``datetime.date`` so that no timezone
  conversion can shift it to the previous or next day.
- ``ISO``: an ISO 8601 timestamp (``2025-01-15T10:30:00Z``), parsed into a
  ``datetime``.

Every failure message echoes what the user typed and shows an example of
the expected format.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from finval.core.codes import ErrorCode
from finval.core.result import ValidationError

YYYY_MM_DD_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?$")

DATE_EXAMPLE = "2025-01-15"
ISO_EXAMPLE = "2025-01-15T10:30:00Z"


class DateFormat(str, Enum):
    """Date representations understood by the validators."""

    YYYY_MM_DD = "YYYY-MM-DD"
    ISO = "ISO"
    DATE_OBJECT = "DATE_OBJECT"


@dataclass(frozen=True)
class DateValidationResult:
    """Outcome of a single date check.

    Attributes:
        is_valid: True when the value passed every requested check
        error: The violation when ``is_valid`` is False
        parsed_date: The parsed value (also set when only a boundary failed)
    """

    is_valid: bool
    error: ValidationError | None = None
    parsed_date: date | None = None


@dataclass(frozen=True)
class DateBoundaryOptions:
    """How far from today a date may be.

    Each bound is independent; ``None`` disables it. ``DateBoundaryOptions()``
    disables every bound, ``DateBoundaryOptions.default()`` allows one year
    either side of today.
    """

    past_years: int | None = None
    future_years: int | None = None
    min_date: date | None = None
    max_date: date | None = None

    @classmethod
    def default(cls) -> "DateBoundaryOptions":
        return cls(past_years=1, future_years=1)


@dataclass(frozen=True)
class DateSpec:
    """One entry for ``validate_dates``."""

    value: Any
    field: str
    format: DateFormat | str = DateFormat.YYYY_MM_DD
    boundaries: DateBoundaryOptions | None = None


def is_valid_yyyy_mm_dd_format(value: str) -> bool:
    return bool(YYYY_MM_DD_PATTERN.match(value))


def is_valid_iso_format(value: str) -> bool:
    return bool(ISO_PATTERN.match(value))


def is_parseable(value: Any) -> bool:
    """Return True for date objects and any string dateutil can parse."""
    if isinstance(value, date):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def to_day(value: date) -> date:
    """Drop the time-of-day part of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _format_mismatch_hint(value: str) -> str:
    if "T" in value or ":" in value:
        return " (remove time component)"
    if "/" in value:
        return " (use hyphens, not slashes)"
    if len(value.split("-")) != 3:
        return " (format should be YYYY-MM-DD)"
    return ""


def parse_date_string(value: str, fmt: DateFormat) -> date | None:
    try:
        if fmt is DateFormat.YYYY_MM_DD:
            year, month, day = (int(part) for part in value.split("-"))
            return date(year, month, day)
        if fmt is DateFormat.ISO:
            return date_parser.isoparse(value)
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def validate_date_format(
    value: Any,
    field: str,
    expected_format: DateFormat | str = DateFormat.YYYY_MM_DD,
) -> DateValidationResult:
    """Check that a value is a date in the expected representation.

    Args:
        value: Candidate value (string, date, datetime, or anything else)
        field: Field name reported in the error
        expected_format: "YYYY-MM-DD", "ISO", or "DATE_OBJECT" (any parseable
                         string or date object)

    Returns:
        DateValidationResult whose ``parsed_date`` is a ``date`` for
        YYYY-MM-DD strings and a ``datetime`` for other strings.

    Example:
        >>> result = validate_date_format("2025-01-15T10:30:00", "transactionDate")
        >>> result.error.message
        'Date must be in YYYY-MM-DD format without time (remove time component). Example: 2025-01-15. You entered: 2025-01-15T10:30:00'
        >>> validate_date_format("2025-01-15", "transactionDate").parsed_date
        datetime.date(2025, 1, 15)
    """
    fmt = DateFormat(expected_format)

    if value is None:
        return DateValidationResult(
            False, ValidationError(field, "Date is required", ErrorCode.DATE_REQUIRED)
        )

    if isinstance(value, str) and not value.strip():
        return DateValidationResult(
            False, ValidationError(field, "Date cannot be empty", ErrorCode.DATE_EMPTY)
        )

    if isinstance(value, date):
        return DateValidationResult(True, parsed_date=value)

    if not isinstance(value, str):
        return DateValidationResult(
            False,
            ValidationError(
                field, "Date must be a string or Date object", ErrorCode.DATE_WRONG_TYPE
            ),
        )

    text = value.strip()

    if fmt is DateFormat.YYYY_MM_DD and not is_valid_yyyy_mm_dd_format(text):
        message = (
            f"Date must be in YYYY-MM-DD format without time{_format_mismatch_hint(text)}. "
            f"Example: {DATE_EXAMPLE}. You entered: {text}"
        )
        return DateValidationResult(
            False, ValidationError(field, message, ErrorCode.DATE_FORMAT_INVALID)
        )

    if fmt is DateFormat.ISO and not is_valid_iso_format(text):
        message = (
            f"Date must be in ISO 8601 format. Example: {ISO_EXAMPLE}. You entered: {text}"
        )
        return DateValidationResult(
            False, ValidationError(field, message, ErrorCode.DATE_FORMAT_INVALID)
        )

    parsed = parse_date_string(text, fmt)
    if parsed is None:
        message = f"Date is not valid. Example: {DATE_EXAMPLE}. You entered: {text}"
        return DateValidationResult(
            False, ValidationError(field, message, ErrorCode.DATE_NOT_PARSEABLE)
        )

    return DateValidationResult(True, parsed_date=parsed)


def _plural_years(count: int) -> str:
    return f"{count} year{'' if count == 1 else 's'}"


def validate_date_boundaries(
    value: date,
    field: str,
    options: DateBoundaryOptions | None = None,
    today: date | None = None,
) -> ValidationError | None:
    """Check a parsed date against relative and absolute bounds.

    Both sides are compared as calendar days, so the time of day never
    causes a false positive. Bounds are checked in order past years, future
    years, minimum date, maximum date; the first violation is returned.

    Args:
        value: Parsed date or datetime
        field: Field name reported in the error
        options: Bounds to apply; ``None`` means one year either side of today
        today: Reference day (defaults to the current local date)

    Returns:
        The first violation found, or None.
    """
    if options is None:
        options = DateBoundaryOptions.default()
    today = to_day(today or date.today())
    day = to_day(value)

    if options.past_years is not None:
        earliest = today - relativedelta(years=options.past_years)
        if day < earliest:
            return ValidationError(
                field,
                f"Date cannot be more than {_plural_years(options.past_years)} in the past. "
                f"Earliest allowed: {earliest.isoformat()}",
                ErrorCode.DATE_TOO_OLD,
            )

    if options.future_years is not None:
        latest = today + relativedelta(years=options.future_years)
        if day > latest:
            return ValidationError(
                field,
                f"Date cannot be more than {_plural_years(options.future_years)} in the future. "
                f"Latest allowed: {latest.isoformat()}",
                ErrorCode.DATE_TOO_FUTURE,
            )

    if options.min_date is not None:
        min_day = to_day(options.min_date)
        if day < min_day:
            return ValidationError(
                field, f"Date must be on or after {min_day.isoformat()}", ErrorCode.DATE_BEFORE_MIN
            )

    if options.max_date is not None:
        max_day = to_day(options.max_date)
        if day > max_day:
            return ValidationError(
                field, f"Date must be on or before {max_day.isoformat()}", ErrorCode.DATE_AFTER_MAX
            )

    return None


def validate_date(
    value: Any,
    field: str,
    expected_format: DateFormat | str = DateFormat.YYYY_MM_DD,
    boundaries: DateBoundaryOptions | None = None,
    today: date | None = None,
) -> DateValidationResult:
    """Format check followed by a boundary check when ``boundaries`` is given."""
    result = validate_date_format(value, field, expected_format)
    if not result.is_valid or result.parsed_date is None or boundaries is None:
        return result

    error = validate_date_boundaries(result.parsed_date, field, boundaries, today)
    if error is not None:
        return DateValidationResult(False, error, result.parsed_date)
    return result


def validate_dates(specs: Iterable[DateSpec], today: date | None = None) -> list[ValidationError]:
    """Validate several dates, collecting every error."""
    errors: list[ValidationError] = []
    for spec in specs:
        result = validate_date(spec.value, spec.field, spec.format, spec.boundaries, today)
        if not result.is_valid and result.error is not None:
            errors.append(result.error)
    return errors


def _is_after(first: date, second: date) -> bool:
    if (
        isinstance(first, datetime)
        and isinstance(second, datetime)
        and (first.tzinfo is None) == (second.tzinfo is None)
    ):
        return first > second
    return to_day(first) > to_day(second)


def validate_date_range(
    start: Any,
    end: Any,
    start_field: str = "startDate",
    end_field: str = "endDate",
    expected_format: DateFormat | str = DateFormat.YYYY_MM_DD,
) -> list[ValidationError]:
    """Validate both ends of a range, then their order.

    Malformed ends are both reported. The order check only runs when both
    ends parsed, and reports DATE_RANGE_INVALID on the start field.

    Example:
        >>> [e.code.value for e in validate_date_range("2025-02-01", "2025-01-01")]
        ['DATE_RANGE_INVALID']
        >>> [e.field for e in validate_date_range("bad", "")]
        ['startDate', 'endDate']
    """
    errors: list[ValidationError] = []
    start_result = validate_date_format(start, start_field, expected_format)
    end_result = validate_date_format(end, end_field, expected_format)

    if not start_result.is_valid and start_result.error is not None:
        errors.append(start_result.error)
    if not end_result.is_valid and end_result.error is not None:
        errors.append(end_result.error)

    if (
        start_result.parsed_date is not None
        and end_result.parsed_date is not None
        and _is_after(start_result.parsed_date, end_result.parsed_date)
    ):
        errors.append(
            ValidationError(
                start_field, "Start date must be before end date", ErrorCode.DATE_RANGE_INVALID
            )
        )
    return errors


def validate_date_not_future(
    value: Any,
    field: str,
    expected_format: DateFormat | str = DateFormat.YYYY_MM_DD,
    today: date | None = None,
) -> DateValidationResult:
    """Reject dates after today (for historical records)."""
    result = validate_date_format(value, field, expected_format)
    if not result.is_valid or result.parsed_date is None:
        return result

    if to_day(result.parsed_date) > to_day(today or date.today()):
        return DateValidationResult(
            False,
            ValidationError(field, "Date cannot be in the future", ErrorCode.DATE_IN_FUTURE),
            result.parsed_date,
        )
    return result


def _format_iso(value: datetime) -> str:
    suffix = ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
        suffix = "Z"
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{value.microsecond // 1000:03d}{suffix}"


def normalize_date(value: Any, target_format: DateFormat | str) -> str | None:
    """Convert a date value to a standard string form.

    ``YYYY-MM-DD`` strings are read from their components, so normalizing a
    date-only value back to ``YYYY-MM-DD`` returns the same calendar day.
    Unparseable input and the ``DATE_OBJECT`` target yield None.

    Example:
        >>> normalize_date("2024-02-29", "YYYY-MM-DD")
        '2024-02-29'
        >>> normalize_date(datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc), "ISO")
        '2025-01-15T10:30:00.000Z'
    """
    fmt = DateFormat(target_format)
    if not value:
        return None

    parsed: date | None
    if isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if is_valid_yyyy_mm_dd_format(text):
            parsed = parse_date_string(text, DateFormat.YYYY_MM_DD)
        else:
            parsed = parse_date_string(text, DateFormat.DATE_OBJECT)
    else:
        return None

    if parsed is None:
        return None

    if fmt is DateFormat.YYYY_MM_DD:
        return to_day(parsed).isoformat()
    if fmt is DateFormat.ISO:
        if not isinstance(parsed, datetime):
            parsed = datetime(parsed.year, parsed.month, parsed.day)
        return _format_iso(parsed)
    return None


def get_date_format_hint(fmt: DateFormat | str) -> str:
    try:
        fmt = DateFormat(fmt)
    except ValueError:
        return "Use a valid date format"
    hints = {
        DateFormat.YYYY_MM_DD: f"Use format YYYY-MM-DD (e.g., {DATE_EXAMPLE})",
        DateFormat.ISO: f"Use ISO 8601 format (e.g., {ISO_EXAMPLE})",
        DateFormat.DATE_OBJECT: "Must be a valid Date object",
    }
    return hints[fmt]


def detect_date_format(value: str) -> DateFormat | None:
    """Return the strict format a string matches, if any."""
    text = value.strip()
    if is_valid_yyyy_mm_dd_format(text):
        return DateFormat.YYYY_MM_DD
    if is_valid_iso_format(text):
        return DateFormat.ISO
    return None
