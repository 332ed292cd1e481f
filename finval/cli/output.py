"""Logging setup and error display for CLI operations.

This module provides:
- configure_logging: Route package loggers to stderr and an optional file
- handle_error: Formatted error messages with context and optional stack traces
"""

import logging
import sys
import traceback
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(level: str = "warning", log_file: Path | None = None) -> logging.Logger:
    """Configure the ``finval`` logger hierarchy for a CLI run.

    Handlers are attached to the ``finval`` logger (not the root logger), so
    library users embedding finval keep control of their own logging.
    Calling this again replaces the handlers from the previous call.

    Args:
        level: Log level name (debug, info, warning, error)
        log_file: Optional path receiving the same records as stderr

    Returns:
        The configured ``finval`` logger

    Raises:
        ValueError: If level is not a known level name
    """
    if level.lower() not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level '{level}'. Available: {', '.join(LOG_LEVELS)}"
        )

    package_logger = logging.getLogger("finval")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(level.upper())
    package_logger.propagate = False
    return package_logger


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Format and display error message with context.

    Displays error messages to stderr with optional context fields from
    FinvalError exceptions. When verbose mode is enabled, also displays
    the full stack trace.

    Args:
        error: Exception to display
        verbose: Whether to show stack trace (default False)

    Example:
        try:
            # ... operation ...
        except FinvalError as e:
            handle_error(e, verbose=True)
    """
    print(f"Error: {error}", file=sys.stderr)

    if hasattr(error, "context") and error.context:
        print("Context:", file=sys.stderr)
        for key, value in error.context.items():
            print(f"  {key}: {value}", file=sys.stderr)

    if verbose:
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
