"""Human-readable rendering of validation errors.

Pure functions over lists of ValidationError. The strings produced here
are displayed verbatim by form lists, toasts, and log lines, so their
layout is part of the public contract:

- one error: ``Label: message``
- several errors: one ``• Label: message`` bullet per field, or
  ``• Label:`` followed by ``  - message`` sub-bullets when a field has
  more than one error
"""

import logging
import re
from collections.abc import Iterable
from enum import Enum
from typing import Any

from finval.core.codes import ErrorCode
from finval.core.result import ValidationError

logger = logging.getLogger(__name__)

FIELD_LABELS: dict[str, str] = {
    # Transaction
    "transactionDate": "Transaction Date",
    "accountNameOwner": "Account Name",
    "accountType": "Account Type",
    "transactionState": "Transaction State",
    "transactionType": "Transaction Type",
    "reoccurringType": "Reoccurring Type",
    "cleared": "Cleared Status",
    "notes": "Notes",
    "dueDate": "Due Date",
    # Payment / transfer
    "sourceAccount": "Source Account",
    "destinationAccount": "Destination Account",
    "accounts": "Accounts",
    "guidSource": "Source ID",
    "guidDestination": "Destination ID",
    "transactionId": "Transaction ID",
    "paymentId": "Payment ID",
    "transferId": "Transfer ID",
    # Account
    "accountName": "Account Name",
    "activeStatus": "Active Status",
    "moniker": "Moniker",
    "outstanding": "Outstanding",
    "future": "Future",
    "dateClosed": "Date Closed",
    "dateUpdated": "Date Updated",
    "dateAdded": "Date Added",
    "validationDate": "Validation Date",
    # User
    "username": "Username",
    "password": "Password",
    "firstName": "First Name",
    "lastName": "Last Name",
    # Category / description
    "categoryName": "Category",
    "descriptionName": "Description",
    # Common
    "guid": "ID",
    "amount": "Amount",
    "description": "Description",
    "category": "Category",
    "rateLimit": "Rate Limit",
    "validation": "Validation",
}

WARNING_CODES = frozenset(
    {ErrorCode.SUSPICIOUS_AMOUNT, ErrorCode.UNUSUAL_DATE, ErrorCode.POTENTIAL_DUPLICATE}
)
INFO_CODES = frozenset({ErrorCode.OPTIMIZATION_SUGGESTION, ErrorCode.TIP})

DEFAULT_FAILURE_MESSAGE = "Validation failed"
DEFAULT_ERROR_MESSAGE = "An error occurred"


class Severity(str, Enum):
    """Display severity of an error. Drives presentation only, never filtering."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def format_field_name(field: str) -> str:
    """Return the display label for a field.

    Example:
        >>> format_field_name("accountNameOwner")
        'Account Name'
        >>> format_field_name("billedAmount")
        'Billed Amount'
    """
    if field in FIELD_LABELS:
        return FIELD_LABELS[field]
    spaced = re.sub(r"([A-Z])", r" \1", field)
    return (spaced[:1].upper() + spaced[1:]).strip()


def group_errors_by_field(errors: Iterable[ValidationError]) -> dict[str, list[ValidationError]]:
    """Group errors by field, keeping first-seen field order."""
    grouped: dict[str, list[ValidationError]] = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error)
    return grouped


def get_field_error(errors: Iterable[ValidationError], field: str) -> str | None:
    """First message reported for ``field``, if any."""
    return next((e.message for e in errors if e.field == field), None)


def get_field_errors(errors: Iterable[ValidationError], field: str) -> list[ValidationError]:
    return [e for e in errors if e.field == field]


def has_field_error(errors: Iterable[ValidationError], field: str) -> bool:
    return any(e.field == field for e in errors)


def create_field_error_map(errors: Iterable[ValidationError]) -> dict[str, str]:
    """Map each field to its first error message, for wiring into form fields."""
    error_map: dict[str, str] = {}
    for error in errors:
        error_map.setdefault(error.field, error.message)
    return error_map


def format_single_error(error: ValidationError) -> str:
    return f"{format_field_name(error.field)}: {error.message}"


def format_validation_errors(errors: list[ValidationError]) -> str:
    """Format errors as a single line or a grouped bullet list.

    Example:
        >>> errs = [
        ...     ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ...     ValidationError("amount", "Amount must be a valid number", "INVALID_AMOUNT"),
        ...     ValidationError("category", "Category is required", "TOO_SHORT"),
        ... ]
        >>> print(format_validation_errors(errs))
        • Amount:
          - Amount is required
          - Amount must be a valid number
        • Category: Category is required
    """
    if not errors:
        return DEFAULT_FAILURE_MESSAGE
    if len(errors) == 1:
        return format_single_error(errors[0])

    lines: list[str] = []
    for field, field_errors in group_errors_by_field(errors).items():
        label = format_field_name(field)
        if len(field_errors) == 1:
            lines.append(f"• {label}: {field_errors[0].message}")
        else:
            lines.append(f"• {label}:")
            lines.extend(f"  - {error.message}" for error in field_errors)
    return "\n".join(lines)


def get_error_summary(errors: list[ValidationError], max_errors: int = 3) -> str:
    """Flat, truncated summary suitable for a toast notification.

    Example:
        >>> errs = [ValidationError(f"field{i}", "bad", "OTHER") for i in range(5)]
        >>> print(get_error_summary(errs))
        Field0: bad
        Field1: bad
        Field2: bad
        ...and 2 more error(s)
    """
    if not errors:
        return DEFAULT_FAILURE_MESSAGE
    if len(errors) == 1:
        return format_single_error(errors[0])

    lines = [format_single_error(error) for error in errors[:max_errors]]
    if len(errors) > max_errors:
        lines.append(f"...and {len(errors) - max_errors} more error(s)")
    return "\n".join(lines)


def get_user_friendly_error_message(error: Any) -> str:
    """Best display message for any error-like value.

    Handles lists of ValidationError, exceptions carrying
    ``validation_errors``, and plain exceptions. Never returns an empty string.
    """
    if not error:
        return DEFAULT_ERROR_MESSAGE

    validation_errors = getattr(error, "validation_errors", None)
    if validation_errors:
        return format_validation_errors(list(validation_errors))

    if isinstance(error, (list, tuple)) and all(isinstance(e, ValidationError) for e in error):
        return format_validation_errors(list(error))

    message = getattr(error, "message", None) or (
        str(error) if isinstance(error, BaseException) else None
    )
    return message or DEFAULT_ERROR_MESSAGE


def get_error_severity(error: ValidationError) -> Severity:
    if error.code in WARNING_CODES:
        return Severity.WARNING
    if error.code in INFO_CODES:
        return Severity.INFO
    return Severity.ERROR


def are_all_errors_warnings(errors: Iterable[ValidationError]) -> bool:
    return all(get_error_severity(error) is Severity.WARNING for error in errors)


def separate_errors_by_severity(
    errors: Iterable[ValidationError],
) -> dict[str, list[ValidationError]]:
    """Split errors into ``errors``, ``warnings``, and ``info`` buckets."""
    buckets: dict[str, list[ValidationError]] = {"errors": [], "warnings": [], "info": []}
    bucket_names = {
        Severity.ERROR: "errors",
        Severity.WARNING: "warnings",
        Severity.INFO: "info",
    }
    for error in errors:
        buckets[bucket_names[get_error_severity(error)]].append(error)
    return buckets


def format_errors_for_console(errors: Iterable[ValidationError]) -> str:
    """One ``Field: f | Message: m | Code: c`` line per error, for developers."""
    return "\n".join(
        f"Field: {e.field} | Message: {e.message} | Code: {e.code.value}" for e in errors
    )


def log_validation_errors(
    errors: list[ValidationError],
    context: str = "validation",
    log: logging.Logger | None = None,
) -> None:
    """Log errors at a level matching their most severe entry."""
    if not errors:
        return
    target = log or logger
    buckets = separate_errors_by_severity(errors)
    if buckets["errors"]:
        level = logging.ERROR
    elif buckets["warnings"]:
        level = logging.WARNING
    else:
        level = logging.INFO
    target.log(
        level,
        "%s reported %d issue(s):\n%s",
        context,
        len(errors),
        format_errors_for_console(errors),
    )
