"""Tests for CLI logging setup and error display.

This module tests:
- Log level configuration of the finval logger hierarchy
- Log file output
- Error display with context and optional stack traces
"""

import logging
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from finval.cli.output import configure_logging, handle_error
from finval.core.exceptions import InputError


@given(log_level=st.sampled_from(["debug", "info", "warning", "error", "INFO", "Warning"]))
@settings(max_examples=20)
def test_log_level_configuration(log_level: str) -> None:
    """Property: Log Level Configuration

    Any known level name, in any case, sets the finval logger to that
    level and attaches exactly one stderr handler.
    """
    logger = configure_logging(log_level)

    assert logger.name == "finval"
    assert logger.level == getattr(logging, log_level.upper())
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_repeated_setup_replaces_handlers(tmp_path: Path) -> None:
    configure_logging("info", tmp_path / "first.log")
    logger = configure_logging("info")
    assert len(logger.handlers) == 1


def test_log_file_receives_child_logger_records(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "finval.log"
    configure_logging("info", log_file)

    logging.getLogger("finval.validation.batch").info("Validated 3 row(s)")
    logging.getLogger("finval.validation.batch").debug("hidden detail")

    content = log_file.read_text(encoding="utf-8")
    assert "INFO finval.validation.batch: Validated 3 row(s)" in content
    assert "hidden detail" not in content


def test_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level 'verbose'"):
        configure_logging("verbose")


class TestHandleError:
    def test_prints_message_and_context(self, capsys: pytest.CaptureFixture) -> None:
        handle_error(InputError("Cannot read CSV file data.csv", file_path="data.csv", format="CSV"))
        err = capsys.readouterr().err.splitlines()
        assert err[0].startswith("Error: Cannot read CSV file data.csv")
        assert err[1:] == ["Context:", "  file_path: data.csv", "  format: CSV"]

    def test_plain_exception(self, capsys: pytest.CaptureFixture) -> None:
        handle_error(RuntimeError("boom"))
        assert capsys.readouterr().err == "Error: boom\n"

    def test_verbose_prints_stack_trace(self, capsys: pytest.CaptureFixture) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_error(e, verbose=True)
        err = capsys.readouterr().err
        assert "Stack trace:" in err
        assert "Traceback (most recent call last)" in err
