"""Financial limits shared by sanitizers and schemas."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FinancialLimits:
    """Read-only numeric and length limits for financial records.

    Attributes:
        max_amount: Largest accepted amount
        min_amount: Smallest accepted amount
        max_decimal_places: Maximum digits after the decimal point
        max_string_length: Cap for short text fields (names, categories)
        max_description_length: Cap for descriptions
        max_notes_length: Cap for free-text notes
    """

    max_amount: float = 999_999_999.99
    min_amount: float = -999_999_999.99
    max_decimal_places: int = 2
    max_string_length: int = 255
    max_description_length: int = 1000
    max_notes_length: int = 2000


FINANCIAL_LIMITS = FinancialLimits()
