"""Tests for the financial boundary and suspicious-amount rules."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from finval.core.codes import ErrorCode
from finval.validation.business.amounts import (
    FinancialBoundaryRule,
    SuspiciousAmountRule,
    is_suspicious_amount,
    parse_transaction_date,
)

TODAY = date(2026, 10, 19)


@pytest.fixture
def rule() -> FinancialBoundaryRule:
    return FinancialBoundaryRule(today=lambda: TODAY)


class TestFinancialBoundaryRule:
    def test_within_limits(self, rule: FinancialBoundaryRule) -> None:
        assert rule.check({"amount": 999_999_999.99, "transactionDate": "2025-10-19"}) == []

    def test_amount_cap_is_absolute(self, rule: FinancialBoundaryRule) -> None:
        errors = rule.check({"amount": -1_000_000_000})
        assert [(e.field, e.code) for e in errors] == [("amount", ErrorCode.AMOUNT_TOO_LARGE)]
        assert errors[0].message == "Amount exceeds maximum allowed limit of 999999999.99"

    def test_old_date(self, rule: FinancialBoundaryRule) -> None:
        errors = rule.check({"transactionDate": "2025-10-18"})
        assert [(e.code, e.message) for e in errors] == [
            (ErrorCode.DATE_TOO_OLD, "Transaction date cannot be more than one year in the past")
        ]

    def test_future_date(self, rule: FinancialBoundaryRule) -> None:
        errors = rule.check({"transactionDate": date(2027, 10, 20)})
        assert [e.code for e in errors] == [ErrorCode.DATE_TOO_FUTURE]

    def test_datetime_uses_calendar_day(self, rule: FinancialBoundaryRule) -> None:
        assert rule.check({"transactionDate": datetime(2027, 10, 19, 23, 59)}) == []

    def test_unreadable_values_are_left_to_schema(self, rule: FinancialBoundaryRule) -> None:
        assert rule.check({"amount": "lots", "transactionDate": "someday"}) == []
        assert rule.check({}) == []

    def test_custom_field_names(self) -> None:
        rule = FinancialBoundaryRule("total", "postedOn", today=lambda: TODAY)
        errors = rule.check({"total": 2e9, "postedOn": "2020-01-01"})
        assert [e.field for e in errors] == ["total", "postedOn"]


class TestParseTransactionDate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2025-01-15", date(2025, 1, 15)),
            (" 2025-01-15T10:30:00Z ", date(2025, 1, 15)),
            (datetime(2025, 1, 15, 8), date(2025, 1, 15)),
            ("2025-02-30", None),
            ("", None),
            (20250115, None),
        ],
    )
    def test_parsing(self, value, expected) -> None:
        assert parse_transaction_date(value) == expected


class TestSuspiciousAmounts:
    @pytest.mark.parametrize(
        "amount",
        [100000, 250000, -1_000_000, 10000, 9999, 10000.99, 9998.5, Decimal("150000.125")],
    )
    def test_flagged(self, amount) -> None:
        assert is_suspicious_amount(amount)

    @pytest.mark.parametrize(
        "amount", [123.45, 105000, 99999.999, 10001.01, "100000", True, None, float("nan")]
    )
    def test_not_flagged(self, amount) -> None:
        assert not is_suspicious_amount(amount)

    @given(st.integers(min_value=10, max_value=10_000))
    def test_large_round_multiples_are_flagged(self, multiple: int) -> None:
        assert is_suspicious_amount(multiple * 10_000)

    def test_rule_produces_warning(self) -> None:
        errors = SuspiciousAmountRule().check({"amount": 500000})
        assert [(e.field, e.code) for e in errors] == [("amount", ErrorCode.SUSPICIOUS_AMOUNT)]
        assert SuspiciousAmountRule().check({"amount": 42}) == []
