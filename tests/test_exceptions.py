"""Unit tests for custom exception classes."""

import pytest

from finval.core.exceptions import (
    ConfigError,
    FinvalError,
    InputError,
    RequestError,
)


class TestFinvalError:
    """Test the base FinvalError exception."""

    def test_basic_message(self) -> None:
        error = FinvalError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.context == {}

    def test_with_context(self) -> None:
        error = FinvalError("Operation failed", context={"operation": "insert", "entity": "payment"})
        assert error.context == {"operation": "insert", "entity": "payment"}
        assert "operation='insert'" in str(error)
        assert "entity='payment'" in str(error)


class TestRequestError:
    """Test the HTTP-style RequestError."""

    def test_status_details(self) -> None:
        error = RequestError("Not found", 404, "Not Found", body={"detail": "missing"})
        assert error.status == 404
        assert error.status_text == "Not Found"
        assert error.body == {"detail": "missing"}
        assert str(error) == "Not found"

    def test_extra_context(self) -> None:
        error = RequestError("Server error", 500, "Internal Server Error", url="/api/payment")
        assert error.context == {"url": "/api/payment"}
        assert "url='/api/payment'" in str(error)


class TestConfigError:
    def test_file_path_and_errors(self) -> None:
        error = ConfigError("Invalid configuration", file_path="finval.yaml", errors=["x"])
        assert error.context == {"file_path": "finval.yaml", "errors": ["x"]}
        assert "file_path='finval.yaml'" in str(error)


class TestInputError:
    def test_context(self) -> None:
        error = InputError("Cannot read", file_path="data.csv", format="CSV", reason="empty")
        assert error.context == {"file_path": "data.csv", "format": "CSV", "reason": "empty"}


class TestExceptionHierarchy:
    """Every package exception can be caught as FinvalError."""

    @pytest.mark.parametrize(
        "error",
        [
            RequestError("x", 400, "Bad Request"),
            ConfigError("x"),
            InputError("x"),
        ],
    )
    def test_subclasses_finval_error(self, error: FinvalError) -> None:
        assert isinstance(error, FinvalError)
        with pytest.raises(FinvalError):
            raise error
