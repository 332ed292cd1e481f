"""Structured error reports for debug panels and structured logging."""

from dataclasses import dataclass, field
from typing import Any

from finval.core.result import ValidationError
from finval.validation.formatting import (
    format_field_name,
    get_error_summary,
    group_errors_by_field,
    separate_errors_by_severity,
)


@dataclass
class ErrorReport:
    """Bundle of a summary string, counts, fields, and the raw errors.

    Attributes:
        summary: Truncated summary (see ``get_error_summary``)
        field_count: Number of distinct fields with errors
        error_count: Total number of errors
        fields: Distinct fields in first-seen order
        errors: The raw errors

    Example:
        >>> report = create_error_report([
        ...     ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ...     ValidationError("amount", "Amount must be a valid number", "INVALID_AMOUNT"),
        ... ])
        >>> report.field_count, report.error_count, report.fields
        (1, 2, ['amount'])
    """

    summary: str
    field_count: int
    error_count: int
    fields: list[str] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    def is_valid(self) -> bool:
        return self.error_count == 0

    def to_json(self) -> dict[str, Any]:
        """Export the report as a JSON-serializable dictionary.

        Keys use the camelCase names expected by the frontend.
        """
        buckets = separate_errors_by_severity(self.errors)
        return {
            "summary": self.summary,
            "fieldCount": self.field_count,
            "errorCount": self.error_count,
            "fields": list(self.fields),
            "errors": [e.to_dict() for e in self.errors],
            "severity": {name: len(items) for name, items in buckets.items()},
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "ErrorReport":
        """Rebuild a report from ``to_json`` output; counts are recomputed."""
        return create_error_report(
            [ValidationError.from_dict(item) for item in payload.get("errors", [])]
        )

    def format(self) -> str:
        """Format the report as human-readable text."""
        lines = [
            "Error Report",
            "=" * 40,
            f"{self.error_count} error(s) across {self.field_count} field(s)",
        ]
        for field_name, field_errors in group_errors_by_field(self.errors).items():
            lines.append("")
            lines.append(f"{format_field_name(field_name)} ({field_name}):")
            for error in field_errors:
                lines.append(f"  - [{error.code.value}] {error.message}")
        return "\n".join(lines)


def create_error_report(errors: list[ValidationError], max_errors: int = 3) -> ErrorReport:
    grouped = group_errors_by_field(errors)
    return ErrorReport(
        summary=get_error_summary(errors, max_errors),
        field_count=len(grouped),
        error_count=len(errors),
        fields=list(grouped),
        errors=list(errors),
    )
