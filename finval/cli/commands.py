"""CLI command implementations.

This module implements the CLI commands for the finval tool:
- validate: Validate a JSON or CSV file of entity records
- check_date: Check a single date string against a format and date window
- list_entities: List entities the validator understands
- check_config: Validate a settings file

Each command is implemented as a function that returns an exit code,
enabling both direct invocation and subprocess-based testing.
"""

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any

import polars as pl
from cyclopts import Parameter

from finval.cli.config import (
    ConfigError,
    ValidatorSettings,
    build_rate_limiter,
    load_config,
    merge_config,
    settings_from_config,
    validate_config,
)
from finval.cli.exit_codes import ExitCode
from finval.cli.output import configure_logging, handle_error
from finval.cli.registry import get_entity_validator
from finval.cli.registry import list_entities as registry_list_entities
from finval.core.exceptions import InputError
from finval.core.result import IndexedErrors, ValidationError, ValidationResult
from finval.validation.batch import validate_frame
from finval.validation.dates import DateBoundaryOptions, DateFormat, normalize_date, validate_date
from finval.validation.exceptions import HookValidationError
from finval.validation.formatting import (
    format_errors_for_console,
    format_validation_errors,
    get_error_summary,
    log_validation_errors,
)
from finval.validation.hooks import HookValidator
from finval.validation.protocols import EntityValidator
from finval.validation.report import create_error_report
from finval.validation.validator import DataValidator

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("full", "summary", "console", "json")
CLI_IDENTIFIER = "cli"


def _load_settings(config: Path | None, **overrides: Any) -> ValidatorSettings:
    cfg: dict[str, Any] = load_config(config) if config else {}
    return settings_from_config(merge_config(cfg, **overrides))


def load_json_records(path: Path) -> list[Any]:
    """Load records from a JSON file holding one object or an array of them.

    Raises:
        InputError: If the file is unreadable, not JSON, or not an object/array
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputError(
            f"Invalid JSON in {path}", file_path=str(path), format="JSON", reason=str(e)
        ) from e
    except OSError as e:
        raise InputError(f"Cannot read {path}", file_path=str(path), reason=str(e)) from e

    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return payload
    raise InputError(
        f"Expected a JSON object or array in {path}",
        file_path=str(path),
        format="JSON",
        reason=f"top-level value is {type(payload).__name__}",
    )


def load_csv_frame(path: Path) -> pl.DataFrame:
    """Read a CSV file with every column as a string.

    Values are left as text so the sanitizers see what the user typed.

    Raises:
        InputError: If polars cannot read the file
    """
    try:
        return pl.read_csv(path, infer_schema_length=0)
    except (pl.exceptions.PolarsError, OSError) as e:
        raise InputError(
            f"Cannot read CSV file {path}", file_path=str(path), format="CSV", reason=str(e)
        ) from e


def _hook_checked(
    hooks: HookValidator, validate: EntityValidator, operation_name: str
) -> Callable[[Any], ValidationResult]:
    """Run one record through the hook guard, reporting failures as a result."""

    def run(data: Any) -> ValidationResult:
        try:
            return ValidationResult.ok(hooks.validate_insert(data, validate, operation_name))
        except HookValidationError as e:
            return ValidationResult.fail(e.get_validation_errors())

    return run


def _validate_records(
    input_path: Path, validate: Callable[[Any], ValidationResult], validator: DataValidator
) -> tuple[int, list[IndexedErrors]]:
    if input_path.suffix.lower() == ".csv":
        frame = load_csv_frame(input_path)
        outcome = validate_frame(frame, validate, validator)
        grouped: dict[int, list[ValidationError]] = {}
        for row in outcome.errors.iter_rows(named=True):
            grouped.setdefault(row["row_index"], []).append(
                ValidationError(row["field"], row["message"], row["code"])
            )
        return outcome.total_rows, [IndexedErrors(i, tuple(errs)) for i, errs in grouped.items()]

    records = load_json_records(input_path)
    array_result = validator.validate_financial_array(records, validate)
    return len(records), array_result.errors


def _render(
    failures: list[IndexedErrors], total: int, output_format: str, max_errors: int
) -> str:
    if output_format == "json":
        payload = {
            "total": total,
            "valid": total - len(failures),
            "invalid": len(failures),
            "records": [
                {"index": f.index, **create_error_report(list(f.errors), max_errors).to_json()}
                for f in failures
            ],
        }
        return json.dumps(payload, indent=2)

    blocks = []
    for failure in failures:
        errors = list(failure.errors)
        if output_format == "summary":
            body = get_error_summary(errors, max_errors)
        elif output_format == "console":
            body = format_errors_for_console(errors)
        else:
            body = format_validation_errors(errors)
        indented = "\n".join(f"  {line}" for line in body.splitlines())
        blocks.append(f"Record {failure.index}:\n{indented}")
    return "\n".join(blocks)


def validate(
    entity: Annotated[str, Parameter(help="Entity type (see list-entities)")],
    input_path: Annotated[Path, Parameter(help="JSON or CSV file of records")],
    output_format: Annotated[str, Parameter(help="Report format (full, summary, console, json)")] = "full",
    config: Annotated[Path | None, Parameter(help="Settings file path")] = None,
    quiet: Annotated[bool, Parameter(help="Only report failures")] = False,
    verbose: Annotated[bool, Parameter(help="Show detailed error information")] = False,
    log_level: Annotated[str | None, Parameter(help="Log level (debug, info, warning, error)")] = None,
    log_file: Annotated[Path | None, Parameter(help="Log file path")] = None,
) -> int:
    """Validate every record of an entity file.

    Each record goes through the same insert guard an application would use:
    sanitization, business pre-checks, and schema validation. Failures are
    reported per record in the chosen format.

    Args:
        entity: Entity type name (account, payment, transaction, ...)
        input_path: JSON object/array or CSV file of records
        output_format: full, summary, console, or json
        config: Optional settings file (JSON or YAML)
        quiet: Suppress the success line
        verbose: Show stack traces for unexpected errors
        log_level: Overrides the settings file log level
        log_file: Also write log records to this file

    Returns:
        Exit code (0 all valid, 2 validation failures, 3 input error, 4 config error)

    Example:
        >>> exit_code = validate("payment", Path("payments.json"), output_format="summary")
    """
    try:
        if output_format not in OUTPUT_FORMATS:
            print(
                f"Error: Unknown output format '{output_format}'. "
                f"Available: {', '.join(OUTPUT_FORMATS)}",
                file=sys.stderr,
            )
            return ExitCode.CONFIG_ERROR

        settings = _load_settings(config, log_level=log_level)
        configure_logging(settings.log_level, log_file)

        validator = DataValidator()
        try:
            validate_entity = get_entity_validator(entity, validator)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        if not input_path.exists():
            print(f"Error: Input file not found: {input_path}", file=sys.stderr)
            return ExitCode.INPUT_ERROR

        hooks = HookValidator(build_rate_limiter(settings), identifier=CLI_IDENTIFIER)
        operation = f"validate{entity.strip().capitalize()}"
        total, failures = _validate_records(
            input_path, _hook_checked(hooks, validate_entity, operation), validator
        )

        for failure in failures:
            log_validation_errors(list(failure.errors), f"{operation} record {failure.index}")

        if output_format == "json":
            print(_render(failures, total, output_format, settings.max_summary_errors))
        elif failures:
            print(_render(failures, total, output_format, settings.max_summary_errors))
            print(f"✗ {len(failures)} of {total} record(s) failed validation", file=sys.stderr)
        elif not quiet:
            print(f"✓ Validation successful: {total} record(s)")

        return ExitCode.VALIDATION_ERROR if failures else ExitCode.SUCCESS

    except ConfigError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.CONFIG_ERROR
    except InputError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.INPUT_ERROR
    except Exception as e:
        logger.exception("validate failed unexpectedly")
        handle_error(e, verbose=verbose)
        return ExitCode.UNEXPECTED_ERROR


def check_date(
    value: Annotated[str, Parameter(help="Date string to check")],
    date_format: Annotated[str, Parameter(help="Expected format (YYYY-MM-DD or ISO)")] = "YYYY-MM-DD",
    past_years: Annotated[int | None, Parameter(help="Years allowed before today")] = None,
    future_years: Annotated[int | None, Parameter(help="Years allowed after today")] = None,
    config: Annotated[Path | None, Parameter(help="Settings file path")] = None,
) -> int:
    """Check one date string and print its normalized form or the problem.

    Returns:
        Exit code (0 valid, 2 invalid, 4 config error)

    Example:
        >>> exit_code = check_date("2025-01-15", past_years=5)
    """
    try:
        fmt = DateFormat(date_format)
        if fmt is DateFormat.DATE_OBJECT:
            raise ValueError("DATE_OBJECT cannot be checked from the command line")
    except ValueError:
        print(
            f"Error: Unknown date format '{date_format}'. Available: YYYY-MM-DD, ISO",
            file=sys.stderr,
        )
        return ExitCode.CONFIG_ERROR

    try:
        settings = _load_settings(config, past_years=past_years, future_years=future_years)
    except ConfigError as e:
        handle_error(e)
        return ExitCode.CONFIG_ERROR

    boundaries = DateBoundaryOptions(
        past_years=settings.past_years, future_years=settings.future_years
    )
    result = validate_date(value, "date", fmt, boundaries)
    if not result.is_valid and result.error is not None:
        print(f"✗ {result.error.message}", file=sys.stderr)
        return ExitCode.VALIDATION_ERROR

    print(f"✓ Valid date: {normalize_date(value, fmt)}")
    return ExitCode.SUCCESS


def list_entities() -> int:
    """List entity types accepted by ``validate``.

    Returns:
        Exit code (always 0 for success)
    """
    print("Available entities:")
    for name, description in registry_list_entities().items():
        print(f"  {name:15} {description}")
    return ExitCode.SUCCESS


def check_config(
    config_path: Annotated[Path, Parameter(help="Settings file path")],
) -> int:
    """Validate a settings file.

    Loads the file, checks every setting name and value, and prints the
    resolved settings when valid.

    Returns:
        Exit code (0 for valid settings, 4 for invalid settings)

    Example:
        >>> exit_code = check_config(config_path=Path("finval.yaml"))
    """
    try:
        config = load_config(config_path)
        errors = validate_config(config)

        if errors:
            print("✗ Configuration validation failed:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        print("✓ Configuration is valid")
        for key, value in settings_from_config(config).to_dict().items():
            print(f"  {key}: {value}")
        return ExitCode.SUCCESS

    except ConfigError as e:
        print("✗ Configuration error:", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return ExitCode.CONFIG_ERROR
    except Exception as e:
        handle_error(e, verbose=False)
        return ExitCode.UNEXPECTED_ERROR
