"""Turn raised errors into form-field state and toast messages.

These helpers accept any exception. HookValidationError is read through
its accessors; other objects exposing a ``validation_errors`` sequence are
read the same way; anything else yields no field errors and falls back to
its message.
"""

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from finval.core.result import ValidationError
from finval.validation.exceptions import HookValidationError
from finval.validation.formatting import DEFAULT_ERROR_MESSAGE, create_field_error_map

logger = logging.getLogger(__name__)


def _foreign_validation_errors(error: Any) -> list[ValidationError]:
    raw = getattr(error, "validation_errors", None)
    if isinstance(raw, (list, tuple)):
        return [e for e in raw if isinstance(e, ValidationError)]
    return []


def extract_form_field_errors(error: Any) -> dict[str, str]:
    """Map each field to its first error message.

    Example:
        >>> err = HookValidationError("failed", [
        ...     ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ... ])
        >>> extract_form_field_errors(err)
        {'amount': 'Amount is required'}
        >>> extract_form_field_errors(RuntimeError("network down"))
        {}
    """
    if isinstance(error, HookValidationError):
        return error.get_field_errors_object()
    return create_field_error_map(_foreign_validation_errors(error))


def get_form_error_message(error: Any, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Concise message for a snackbar or toast.

    Validation errors use the truncated summary; other errors use their own
    message; ``fallback`` covers everything else.
    """
    if isinstance(error, HookValidationError):
        return error.get_user_message("summary")
    message = getattr(error, "message", None)
    if not message and isinstance(error, BaseException):
        message = str(error)
    return message or fallback


def has_field_validation_errors(error: Any) -> bool:
    if isinstance(error, HookValidationError):
        return error.get_error_count() > 0
    return bool(_foreign_validation_errors(error))


def get_validation_errors_array(error: Any) -> list[ValidationError]:
    if isinstance(error, HookValidationError):
        return error.get_validation_errors()
    return _foreign_validation_errors(error)


def _title_case_field(field: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", field)
    return (spaced[:1].upper() + spaced[1:]).strip()


def format_field_errors_for_display(field_errors: Mapping[str, str]) -> list[str]:
    """Render ``{field: message}`` as ``"Field Name: message"`` lines.

    Example:
        >>> format_field_errors_for_display({"transactionDate": "Date is required"})
        ['Transaction Date: Date is required']
    """
    return [f"{_title_case_field(field)}: {message}" for field, message in field_errors.items()]


def combine_field_errors(
    validation_errors: Mapping[str, str], custom_errors: Mapping[str, str]
) -> dict[str, str]:
    """Merge two field-error maps; ``custom_errors`` wins on conflicts."""
    return {**validation_errors, **custom_errors}


class FormErrorHandler:
    """Field-error state for one form.

    Attributes:
        field_errors: Current ``{field: message}`` state
        on_error: Optional callback receiving the toast message

    Example:
        >>> messages = []
        >>> handler = FormErrorHandler(on_error=messages.append)
        >>> shown = handler.handle_form_error(HookValidationError("failed", [
        ...     ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ... ]))
        >>> handler.field_errors, messages
        ({'amount': 'Amount is required'}, ['Amount: Amount is required'])
    """

    def __init__(self, on_error: Callable[[str], None] | None = None) -> None:
        self.field_errors: dict[str, str] = {}
        self.on_error = on_error

    def handle_form_error(self, error: Any, fallback: str | None = None) -> str:
        """Record field errors from ``error`` and report its toast message.

        Field state is only replaced when the error carries field errors, so a
        network failure leaves earlier field errors visible.

        Returns:
            The message passed to ``on_error``
        """
        errors = extract_form_field_errors(error)
        if errors:
            self.field_errors = errors

        message = get_form_error_message(error, fallback or DEFAULT_ERROR_MESSAGE)
        logger.debug("Form error: %s", message)
        if self.on_error is not None:
            self.on_error(message)
        return message

    def set_field_errors(self, field_errors: Mapping[str, str]) -> None:
        self.field_errors = dict(field_errors)

    def clear_field_error(self, field: str) -> None:
        self.field_errors.pop(field, None)

    def clear_all_field_errors(self) -> None:
        self.field_errors = {}
