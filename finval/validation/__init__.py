"""Validation engine for personal-finance records.

This package layers sanitization, business rules, and schema validation for
each domain entity, and renders the resulting field errors for forms, toasts,
and logs. Bad input never raises from ``DataValidator``; the hook layer
converts failures into ``HookValidationError`` for mutation call sites.
"""

# Batch validation
from finval.validation.batch import FrameValidationResult, validate_frame

# Business rules
from finval.validation.business import (
    DistinctAccountsRule,
    FinancialBoundaryRule,
    SuspiciousAmountRule,
    is_suspicious_amount,
    setup_new_account,
)

# Date handling
from finval.validation.dates import (
    DateBoundaryOptions,
    DateFormat,
    DateSpec,
    DateValidationResult,
    detect_date_format,
    get_date_format_hint,
    normalize_date,
    validate_date,
    validate_date_boundaries,
    validate_date_format,
    validate_date_not_future,
    validate_date_range,
    validate_dates,
)

# Structured errors
from finval.validation.exceptions import HookValidationError

# Formatting
from finval.validation.formatting import (
    Severity,
    are_all_errors_warnings,
    create_field_error_map,
    format_errors_for_console,
    format_field_name,
    format_single_error,
    format_validation_errors,
    get_error_severity,
    get_error_summary,
    get_field_error,
    get_field_errors,
    get_user_friendly_error_message,
    group_errors_by_field,
    has_field_error,
    log_validation_errors,
    separate_errors_by_severity,
)

# Form helpers
from finval.validation.forms import (
    FormErrorHandler,
    combine_field_errors,
    extract_form_field_errors,
    format_field_errors_for_display,
    get_form_error_message,
    get_validation_errors_array,
    has_field_validation_errors,
)

# Hook guards
from finval.validation.hooks import HookValidator, is_validation_error, with_validation

# Core protocols
from finval.validation.protocols import BusinessRule, EntityValidator, RateLimiter, RateLimitStore

# Rate limiting
from finval.validation.rate_limit import FixedWindowRateLimiter, InMemoryRateLimitStore

# Reporting
from finval.validation.report import ErrorReport, create_error_report

# Sanitization
from finval.validation.sanitization import InputSanitizer, SecurityLogger, sanitize

# Entity schemas
from finval.validation.schemas import ENTITY_SCHEMAS

# Top-level validator
from finval.validation.validator import DataValidator

__all__ = [
    # Top-level validator
    "DataValidator",
    "ENTITY_SCHEMAS",
    # Sanitization
    "InputSanitizer",
    "SecurityLogger",
    "sanitize",
    # Business rules
    "BusinessRule",
    "DistinctAccountsRule",
    "FinancialBoundaryRule",
    "SuspiciousAmountRule",
    "is_suspicious_amount",
    "setup_new_account",
    # Date handling
    "DateBoundaryOptions",
    "DateFormat",
    "DateSpec",
    "DateValidationResult",
    "detect_date_format",
    "get_date_format_hint",
    "normalize_date",
    "validate_date",
    "validate_date_boundaries",
    "validate_date_format",
    "validate_date_not_future",
    "validate_date_range",
    "validate_dates",
    # Hook guards and structured errors
    "EntityValidator",
    "HookValidationError",
    "HookValidator",
    "is_validation_error",
    "with_validation",
    # Formatting and reporting
    "ErrorReport",
    "Severity",
    "are_all_errors_warnings",
    "create_error_report",
    "create_field_error_map",
    "format_errors_for_console",
    "format_field_name",
    "format_single_error",
    "format_validation_errors",
    "get_error_severity",
    "get_error_summary",
    "get_field_error",
    "get_field_errors",
    "get_user_friendly_error_message",
    "group_errors_by_field",
    "has_field_error",
    "log_validation_errors",
    "separate_errors_by_severity",
    # Form helpers
    "FormErrorHandler",
    "combine_field_errors",
    "extract_form_field_errors",
    "format_field_errors_for_display",
    "get_form_error_message",
    "get_validation_errors_array",
    "has_field_validation_errors",
    # Rate limiting
    "FixedWindowRateLimiter",
    "InMemoryRateLimitStore",
    "RateLimitStore",
    "RateLimiter",
    # Batch validation
    "FrameValidationResult",
    "validate_frame",
]
