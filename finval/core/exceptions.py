"""Custom exception classes for finval error handling.

This module defines the exception hierarchy shared by the whole package:
- FinvalError: Base class carrying a message and a context dictionary
- RequestError: HTTP-style error with a status code and response body
- ConfigError: Settings file loading or validation failures
- InputError: Record files the CLI cannot read

Validation failures of user data are NOT exceptions; they are returned as
ValidationResult values. Only the hook layer raises (see
finval.validation.exceptions.HookValidationError).
"""

from typing import Any


class FinvalError(Exception):
    """Base exception for all finval errors.

    Provides a common base class for all custom exceptions in finval,
    enabling catch-all error handling when needed.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (field names,
                    file paths, values, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class RequestError(FinvalError):
    """HTTP-style error shared by network failures and validation failures.

    Callers handling responses from an API and errors raised at the hook
    boundary can treat both uniformly through ``status`` and ``status_text``.

    Attributes:
        status: HTTP status code (e.g. 400)
        status_text: HTTP reason phrase (e.g. "Bad Request")
        body: Decoded response body, if any
    """

    def __init__(
        self,
        message: str,
        status: int,
        status_text: str,
        body: Any = None,
        **extra_context: Any,
    ) -> None:
        """Initialize request error with status details.

        Args:
            message: Human-readable error description
            status: HTTP status code
            status_text: HTTP reason phrase
            body: Optional decoded response body
            **extra_context: Additional context information
        """
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(message, dict(extra_context))


class ConfigError(FinvalError):
    """Configuration file error.

    Raised when settings files cannot be loaded, parsed, or validated.

    Context typically includes:
        - file_path: Path to the configuration file
        - errors: List of validation problems found
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        errors: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if file_path is not None:
            context["file_path"] = file_path
        if errors is not None:
            context["errors"] = errors
        context.update(extra_context)

        super().__init__(message, context)


class InputError(FinvalError):
    """Exception raised when an input file of records cannot be read.

    Context typically includes:
        - file_path: Path to the input file that failed to load
        - format: Expected file format (e.g., "JSON", "CSV")
        - reason: Specific reason for the failure
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        format: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if file_path is not None:
            context["file_path"] = file_path
        if format is not None:
            context["format"] = format
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
