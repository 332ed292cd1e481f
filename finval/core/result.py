"""ValidationError and ValidationResult data structures.

This module defines the value objects returned by every non-throwing
validation entry point:

- ValidationError: one ``{field, message, code}`` violation
- ValidationResult: success/data-or-errors envelope
- FinancialArrayResult: per-index outcome of validating a collection
"""

from dataclasses import dataclass, field
from typing import Any

from finval.core.codes import ErrorCode


@dataclass(frozen=True)
class ValidationError:
    """A single field-level violation.

    The message must be readable on its own; the code is for programmatic
    handling (severity, form wiring) only. String codes are coerced to
    ErrorCode, with unknown codes becoming ``ErrorCode.OTHER``.

    Attributes:
        field: Name of the offending field (camelCase wire name)
        message: Ready-to-display description of the problem
        code: Taxonomy tag

    Example:
        >>> err = ValidationError("amount", "Amount is required", "REQUIRED_FIELD")
        >>> err.code is ErrorCode.REQUIRED_FIELD
        True
    """

    field: str
    message: str
    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __post_init__(self) -> None:
        if not isinstance(self.code, ErrorCode):
            object.__setattr__(self, "code", ErrorCode.coerce(self.code))

    def to_dict(self) -> dict[str, str]:
        """Return the transport form of the error."""
        return {"field": self.field, "message": self.message, "code": self.code.value}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ValidationError":
        """Rebuild an error from its transport form.

        Missing keys fall back to empty strings and ``OTHER`` so that a
        partially formed payload still produces a displayable error.
        """
        return cls(
            field=str(payload.get("field", "")),
            message=str(payload.get("message", "")),
            code=ErrorCode.coerce(str(payload.get("code", ErrorCode.OTHER.value))),
        )


@dataclass
class ValidationResult:
    """Outcome of a validation call.

    Exactly one of ``data`` (on success) or ``errors`` (on failure, non-empty)
    is populated. Construction with any other combination raises ValueError.

    Attributes:
        success: True when the input was accepted
        data: Validated, sanitized record (success only)
        errors: Every violation found (failure only)

    Example:
        >>> ValidationResult.ok({"amount": 1.5}).success
        True
        >>> result = ValidationResult.fail(
        ...     [ValidationError("amount", "Amount is required", "REQUIRED_FIELD")]
        ... )
        >>> print(result.format())
        Validation failed
        Errors:
          - amount: Amount is required (REQUIRED_FIELD)
    """

    success: bool
    data: Any = None
    errors: list[ValidationError] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.errors = list(self.errors)
        if self.success:
            if self.errors:
                raise ValueError("A successful ValidationResult cannot carry errors")
            if self.data is None:
                raise ValueError("A successful ValidationResult must carry data")
        else:
            if not self.errors:
                raise ValueError("A failed ValidationResult must carry at least one error")
            if self.data is not None:
                raise ValueError("A failed ValidationResult cannot carry data")

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, errors: list[ValidationError]) -> "ValidationResult":
        return cls(success=False, errors=list(errors))

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def format(self) -> str:
        """Format result as a human-readable string for console output."""
        if self.success:
            return "Validation passed"

        lines = ["Validation failed", "Errors:"]
        for error in self.errors:
            lines.append(f"  - {error.field}: {error.message} ({error.code.value})")
        return "\n".join(lines)

    def to_json(self) -> dict[str, Any]:
        """Export the result as a JSON-serializable dictionary."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "errors": [e.to_dict() for e in self.errors]}


@dataclass(frozen=True)
class IndexedErrors:
    """Errors for one item of a validated collection."""

    index: int
    errors: tuple[ValidationError, ...]


@dataclass
class FinancialArrayResult:
    """Partition of a collection into valid items and per-index failures.

    Attributes:
        success: True when no item failed
        valid_items: Validated data of the items that passed, in input order
        errors: One IndexedErrors entry per failed item, in input order
    """

    success: bool
    valid_items: list[Any] = field(default_factory=list)
    errors: list[IndexedErrors] = field(default_factory=list)

    def error_count(self) -> int:
        """Total number of violations across all failed items."""
        return sum(len(entry.errors) for entry in self.errors)
