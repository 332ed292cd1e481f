"""Tests for HookValidator guards and HookValidationError accessors."""

from datetime import date, datetime

import pytest

from finval.core.codes import ErrorCode
from finval.core.exceptions import RequestError
from finval.core.result import ValidationError, ValidationResult
from finval.validation.exceptions import HookValidationError
from finval.validation.hooks import (
    RATE_LIMIT_MESSAGE,
    HookValidator,
    is_validation_error,
    with_validation,
)
from finval.validation.rate_limit import FixedWindowRateLimiter
from finval.validation.validator import DataValidator

TODAY = date(2026, 10, 19)
GUID = "123e4567-e89b-42d3-a456-426614174000"


@pytest.fixture
def data_validator() -> DataValidator:
    return DataValidator()


def _single_error(excinfo: pytest.ExceptionInfo) -> ValidationError:
    errors = excinfo.value.get_validation_errors()
    assert len(errors) == 1
    return errors[0]


class TestValidateInsert:
    def test_returns_validated_data(self, data_validator: DataValidator, valid_payment: dict) -> None:
        data = HookValidator().validate_insert(
            valid_payment, data_validator.validate_payment, "insertPayment"
        )
        assert data["activeStatus"] is True

    def test_failure_raises_with_every_error(self, data_validator: DataValidator) -> None:
        with pytest.raises(HookValidationError) as excinfo:
            HookValidator().validate_insert(
                {"sourceAccount": "a", "destinationAccount": "b"},
                data_validator.validate_payment,
                "insertPayment",
            )
        assert str(excinfo.value) == (
            "insertPayment validation failed: Date is required, Amount is required"
        )
        assert excinfo.value.get_error_fields() == ["transactionDate", "amount"]

    def test_update_validates_new_data(self, data_validator: DataValidator) -> None:
        data = HookValidator().validate_update(
            {"categoryName": "travel"},
            {"categoryName": "<invalid>"},
            data_validator.validate_category,
            "updateCategory",
        )
        assert data["categoryName"] == "travel"


class TestRateLimiting:
    def test_blocks_after_limit(self, data_validator: DataValidator) -> None:
        hooks = HookValidator(FixedWindowRateLimiter(max_attempts=1), identifier="alice")
        hooks.validate_insert({"categoryName": "food"}, data_validator.validate_category, "insertCategory")

        with pytest.raises(HookValidationError) as excinfo:
            hooks.validate_insert(
                {"categoryName": "food"}, data_validator.validate_category, "insertCategory"
            )
        assert excinfo.value.message == f"insertCategory: {RATE_LIMIT_MESSAGE}"
        error = _single_error(excinfo)
        assert (error.field, error.code) == ("rateLimit", ErrorCode.RATE_LIMIT_EXCEEDED)

    def test_limit_is_per_operation(self, data_validator: DataValidator) -> None:
        hooks = HookValidator(FixedWindowRateLimiter(max_attempts=1))
        hooks.validate_insert({"categoryName": "a"}, data_validator.validate_category, "insertCategory")
        hooks.validate_update(
            {"categoryName": "b"}, None, data_validator.validate_category, "updateCategory"
        )

    def test_rejected_attempt_is_counted_before_validation(self) -> None:
        calls = []

        def validator(data):
            calls.append(data)
            return ValidationResult.ok(data)

        hooks = HookValidator(FixedWindowRateLimiter(max_attempts=1))
        hooks.validate_insert({"x": 1}, validator, "op")
        with pytest.raises(HookValidationError):
            hooks.validate_insert({"x": 2}, validator, "op")
        assert calls == [{"x": 1}]


class TestStandaloneGuards:
    def test_delete(self) -> None:
        assert HookValidator.validate_delete({"paymentId": 5}, "paymentId", "deletePayment") == {
            "paymentId": 5
        }

    @pytest.mark.parametrize("data", [{}, {"paymentId": ""}, {"paymentId": "   "}, {"paymentId": 0}, None])
    def test_delete_without_identifier(self, data) -> None:
        with pytest.raises(HookValidationError) as excinfo:
            HookValidator.validate_delete(data, "paymentId", "deletePayment")
        assert excinfo.value.message == "deletePayment: Invalid paymentId provided"
        assert _single_error(excinfo).code is ErrorCode.REQUIRED_FIELD

    def test_guid(self) -> None:
        assert HookValidator.validate_guid(GUID.upper(), "op") == GUID.upper()
        with pytest.raises(HookValidationError) as excinfo:
            HookValidator.validate_guid("123e4567-e89b-62d3-a456-426614174000", "op")
        error = _single_error(excinfo)
        assert (error.message, error.code) == (
            "GUID must be a valid UUID v4 format",
            ErrorCode.INVALID_GUID,
        )

    def test_account_name(self) -> None:
        assert HookValidator.validate_account_name("  Checking  ", "op") == "Checking"
        with pytest.raises(HookValidationError) as blank:
            HookValidator.validate_account_name("   ", "op")
        assert _single_error(blank).code is ErrorCode.REQUIRED_FIELD
        with pytest.raises(HookValidationError) as long:
            HookValidator.validate_account_name("a" * 101, "op")
        assert _single_error(long).message == "Account name must be 100 characters or less"

    @pytest.mark.parametrize(("value", "expected"), [(42, 42), ("42abc", 42), (7.0, 7), (0, 0), (" 9", 9)])
    def test_numeric_id(self, value, expected: int) -> None:
        assert HookValidator.validate_numeric_id(value, "accountId", "op") == expected

    @pytest.mark.parametrize("value", [-1, True, 7.5, "abc", None, "-3"])
    def test_numeric_id_rejections(self, value) -> None:
        with pytest.raises(HookValidationError) as excinfo:
            HookValidator.validate_numeric_id(value, "accountId", "op")
        error = _single_error(excinfo)
        assert (error.field, error.message, error.code) == (
            "accountId",
            "accountId must be a positive integer",
            ErrorCode.INVALID_ID,
        )

    def test_non_empty_array(self) -> None:
        assert HookValidator.validate_non_empty_array([1], "op") == [1]
        for items in ([], (), "abc", None):
            with pytest.raises(HookValidationError) as excinfo:
                HookValidator.validate_non_empty_array(items, "op")
            assert _single_error(excinfo).code is ErrorCode.EMPTY_ARRAY

    def test_date_range(self) -> None:
        assert HookValidator.validate_date_range("2026-01-01", "op", today=TODAY) == date(2026, 1, 1)
        assert HookValidator.validate_date_range(
            datetime(2027, 1, 1, 9), "op", today=TODAY
        ) == date(2027, 1, 1)

    @pytest.mark.parametrize(
        ("value", "code"),
        [
            ("2024-01-01", ErrorCode.DATE_TOO_OLD),
            ("2028-01-01", ErrorCode.DATE_TOO_FUTURE),
            ("garbage", ErrorCode.INVALID_DATE),
            (None, ErrorCode.INVALID_DATE),
        ],
    )
    def test_date_range_rejections(self, value, code: ErrorCode) -> None:
        with pytest.raises(HookValidationError) as excinfo:
            HookValidator.validate_date_range(value, "op", today=TODAY)
        assert _single_error(excinfo).code is code

    def test_date_range_custom_window(self) -> None:
        assert HookValidator.validate_date_range("2022-01-01", "op", past_years=5, today=TODAY)


class TestHelpers:
    def test_with_validation(self, data_validator: DataValidator) -> None:
        guard = with_validation(data_validator.validate_category, "insertCategory")
        assert guard({"categoryName": "travel"})["categoryName"] == "travel"
        with pytest.raises(HookValidationError):
            guard({})

    def test_is_validation_error(self) -> None:
        assert is_validation_error(HookValidationError("x"))
        assert not is_validation_error(RuntimeError("x"))
        assert not is_validation_error(None)


class TestHookValidationError:
    ERRORS = [
        ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
        ValidationError("transactionDate", "Date is required", "DATE_REQUIRED"),
        ValidationError("amount", "Amount must be a valid number", "INVALID_AMOUNT"),
    ]

    @pytest.fixture
    def error(self) -> HookValidationError:
        return HookValidationError("insertPayment validation failed", self.ERRORS)

    def test_is_bad_request(self, error: HookValidationError) -> None:
        assert isinstance(error, RequestError)
        assert (error.status, error.status_text) == (400, "Bad Request")
        assert error.body["errors"][1] == {
            "field": "transactionDate",
            "message": "Date is required",
            "code": "DATE_REQUIRED",
        }

    def test_field_accessors(self, error: HookValidationError) -> None:
        assert error.get_field_errors() == {
            "amount": ["Amount is required", "Amount must be a valid number"],
            "transactionDate": ["Date is required"],
        }
        assert error.get_field_error_message("amount") == "Amount is required"
        assert error.get_field_error_message("notes") is None
        assert error.has_field_error("transactionDate")
        assert len(error.get_field_validation_errors("amount")) == 2
        assert error.get_error_fields() == ["amount", "transactionDate"]

    def test_accessor_returns_copy(self, error: HookValidationError) -> None:
        error.get_validation_errors().clear()
        assert error.get_error_count() == 3

    def test_user_messages(self, error: HookValidationError) -> None:
        assert error.get_user_message().startswith("• Amount:\n  - Amount is required")
        assert error.get_user_message("summary").splitlines()[0] == "Amount: Amount is required"
        with pytest.raises(ValueError):
            error.get_user_message("verbose")

    def test_user_message_without_errors(self) -> None:
        assert HookValidationError("Server rejected payment").get_user_message() == (
            "Server rejected payment"
        )
        assert HookValidationError("").get_user_message("summary") == "Validation failed"

    def test_to_json(self, error: HookValidationError) -> None:
        payload = error.to_json()
        assert payload["name"] == "HookValidationError"
        assert payload["status"] == 400
        assert payload["statusText"] == "Bad Request"
        assert len(payload["validationErrors"]) == 3
        assert payload["fieldErrors"]["transactionDate"] == ["Date is required"]

    def test_from_response_body(self) -> None:
        rebuilt = HookValidationError.from_json(
            {"errors": [{"field": "amount", "message": "Too big", "code": "NEW_SERVER_CODE"}]}
        )
        assert rebuilt.message == "Validation failed"
        assert rebuilt.get_validation_errors()[0].code is ErrorCode.OTHER
