"""Structured validation error raised at insert/update/delete call sites.

HookValidationError is the only exception the validation engine raises for
bad user input. It carries every field error and exposes accessor methods;
forms and logging code should go through these accessors rather than
reading ``validation_errors`` directly.
"""

from typing import Any

from finval.core.exceptions import RequestError
from finval.core.result import ValidationError
from finval.validation.formatting import (
    DEFAULT_FAILURE_MESSAGE,
    create_field_error_map,
    format_validation_errors,
    get_error_summary,
    group_errors_by_field,
)

BAD_REQUEST_STATUS = 400
BAD_REQUEST_TEXT = "Bad Request"


class HookValidationError(RequestError):
    """Validation failure surfaced as an HTTP-style 400 error.

    Attributes:
        validation_errors: Every field error, in reporting order
        status: Always 400
        status_text: Always "Bad Request"
        body: ``{"errors": [...]}`` transport form of the field errors

    Example:
        >>> err = HookValidationError(
        ...     "insertPayment validation failed: Amount is required, Date is required",
        ...     [
        ...         ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ...         ValidationError("transactionDate", "Date is required", "DATE_REQUIRED"),
        ...     ],
        ... )
        >>> err.get_field_errors_object()
        {'amount': 'Amount is required', 'transactionDate': 'Date is required'}
        >>> err.status, err.status_text
        (400, 'Bad Request')
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[ValidationError] | tuple[ValidationError, ...] | None = None,
        **extra_context: Any,
    ) -> None:
        self.validation_errors: tuple[ValidationError, ...] = tuple(validation_errors or ())
        super().__init__(
            message,
            BAD_REQUEST_STATUS,
            BAD_REQUEST_TEXT,
            body={"errors": [e.to_dict() for e in self.validation_errors]},
            **extra_context,
        )

    def get_validation_errors(self) -> list[ValidationError]:
        return list(self.validation_errors)

    def get_field_errors(self) -> dict[str, list[str]]:
        """Messages grouped by field, in first-seen field order."""
        return {
            field: [e.message for e in errors]
            for field, errors in group_errors_by_field(self.validation_errors).items()
        }

    def get_field_errors_object(self) -> dict[str, str]:
        """First message per field, ready to bind to form inputs."""
        return create_field_error_map(self.validation_errors)

    def get_field_error_message(self, field: str) -> str | None:
        return self.get_field_errors_object().get(field)

    def has_field_error(self, field: str) -> bool:
        return any(e.field == field for e in self.validation_errors)

    def get_field_validation_errors(self, field: str) -> list[ValidationError]:
        return [e for e in self.validation_errors if e.field == field]

    def get_error_count(self) -> int:
        return len(self.validation_errors)

    def get_error_fields(self) -> list[str]:
        return list(group_errors_by_field(self.validation_errors))

    def get_user_message(self, style: str = "full") -> str:
        """Display message for end users.

        Args:
            style: "full" for the grouped bullet list, "summary" for the
                   truncated toast form

        Raises:
            ValueError: If style is not "full" or "summary"
        """
        if style not in ("full", "summary"):
            raise ValueError(f"Unknown message style '{style}'. Available: full, summary")
        if not self.validation_errors:
            return self.message or DEFAULT_FAILURE_MESSAGE
        errors = list(self.validation_errors)
        if style == "summary":
            return get_error_summary(errors)
        return format_validation_errors(errors)

    def to_json(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "status": self.status,
            "statusText": self.status_text,
            "validationErrors": [e.to_dict() for e in self.validation_errors],
            "fieldErrors": self.get_field_errors(),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "HookValidationError":
        """Rebuild the error on the far side of a transport boundary.

        Accepts both ``to_json`` output and a bare response body
        (``{"errors": [...]}``).
        """
        raw_errors = payload.get("validationErrors")
        if raw_errors is None:
            raw_errors = payload.get("errors", [])
        errors = [ValidationError.from_dict(item) for item in raw_errors]
        message = payload.get("message") or DEFAULT_FAILURE_MESSAGE
        return cls(str(message), errors)
