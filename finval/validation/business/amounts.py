"""Financial boundary and suspicious-amount rules.

This module provides the amount-related business rules run on sanitized,
pre-schema records:

- FinancialBoundaryRule: absolute amount cap and a fixed one-year date window
- SuspiciousAmountRule: opt-in fraud heuristic producing warnings
"""

from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from finval.core.codes import ErrorCode
from finval.core.limits import FINANCIAL_LIMITS
from finval.core.result import ValidationError
from finval.core.schema import count_decimal_places
from finval.validation.dates import (
    DateFormat,
    is_valid_yyyy_mm_dd_format,
    parse_date_string,
    to_day,
)

SUSPICIOUS_ROUND_FLOOR = Decimal("100000")
SUSPICIOUS_ROUND_STEP = Decimal("10000")
WATCHED_THRESHOLDS = (Decimal("10000"), Decimal("9999"))


def _as_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def parse_transaction_date(value: Any) -> date | None:
    """Read a transaction date from a date object or string, or return None."""
    if isinstance(value, date):
        return to_day(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if is_valid_yyyy_mm_dd_format(text):
        parsed = parse_date_string(text, DateFormat.YYYY_MM_DD)
        return to_day(parsed) if parsed is not None else None
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        return None


def is_suspicious_amount(amount: Any) -> bool:
    """Heuristic fraud flag.

    An amount is suspicious when its absolute value is:
    - at least 100,000 and a multiple of 10,000
    - within one unit of a watched reporting threshold (10,000 or 9,999)
    - above 100,000 with more than 2 decimal digits

    Example:
        >>> is_suspicious_amount(250000)
        True
        >>> is_suspicious_amount(9999.5)
        True
        >>> is_suspicious_amount(123.45)
        False
    """
    value = _as_decimal(amount)
    if value is None:
        return False
    magnitude = abs(value)

    if magnitude >= SUSPICIOUS_ROUND_FLOOR and magnitude % SUSPICIOUS_ROUND_STEP == 0:
        return True

    if any(abs(magnitude - threshold) <= 1 for threshold in WATCHED_THRESHOLDS):
        return True

    return magnitude > SUSPICIOUS_ROUND_FLOOR and count_decimal_places(magnitude) > 2


class FinancialBoundaryRule:
    """Rejects oversized amounts and transaction dates far from today.

    The date window is fixed at one year either side of today, independent
    of any schema-level date bound. Values that cannot be read as a number
    or a date are skipped here and left to the schema.

    Attributes:
        amount_field: Record key holding the amount
        date_field: Record key holding the transaction date
        today: Callable returning the reference day

    Example:
        >>> rule = FinancialBoundaryRule(today=lambda: date(2025, 6, 1))
        >>> [e.code.value for e in rule.check({"amount": 5e9, "transactionDate": "2020-01-01"})]
        ['AMOUNT_TOO_LARGE', 'DATE_TOO_OLD']
    """

    def __init__(
        self,
        amount_field: str = "amount",
        date_field: str = "transactionDate",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.amount_field = amount_field
        self.date_field = date_field
        self.today = today

    def check_values(self, amount: Any, transaction_date: Any) -> list[ValidationError]:
        errors: list[ValidationError] = []

        value = _as_decimal(amount)
        if value is not None and abs(value) > Decimal(str(FINANCIAL_LIMITS.max_amount)):
            errors.append(
                ValidationError(
                    self.amount_field,
                    f"Amount exceeds maximum allowed limit of {FINANCIAL_LIMITS.max_amount}",
                    ErrorCode.AMOUNT_TOO_LARGE,
                )
            )

        day = parse_transaction_date(transaction_date)
        if day is not None:
            today = to_day(self.today())
            if day < today - relativedelta(years=1):
                errors.append(
                    ValidationError(
                        self.date_field,
                        "Transaction date cannot be more than one year in the past",
                        ErrorCode.DATE_TOO_OLD,
                    )
                )
            elif day > today + relativedelta(years=1):
                errors.append(
                    ValidationError(
                        self.date_field,
                        "Transaction date cannot be more than one year in the future",
                        ErrorCode.DATE_TOO_FUTURE,
                    )
                )
        return errors

    def check(self, record: Mapping[str, Any]) -> list[ValidationError]:
        return self.check_values(record.get(self.amount_field), record.get(self.date_field))


class SuspiciousAmountRule:
    """Opt-in fraud screening. Produces SUSPICIOUS_AMOUNT warnings."""

    def __init__(self, amount_field: str = "amount") -> None:
        self.amount_field = amount_field

    def check(self, record: Mapping[str, Any]) -> list[ValidationError]:
        amount = record.get(self.amount_field)
        if not is_suspicious_amount(amount):
            return []
        return [
            ValidationError(
                self.amount_field,
                "Amount flagged for review due to suspicious pattern",
                ErrorCode.SUSPICIOUS_AMOUNT,
            )
        ]
