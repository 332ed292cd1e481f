"""Business rules applied to sanitized records before schema validation."""

from finval.validation.business.accounts import DistinctAccountsRule, setup_new_account
from finval.validation.business.amounts import (
    FinancialBoundaryRule,
    SuspiciousAmountRule,
    is_suspicious_amount,
)

__all__ = [
    "DistinctAccountsRule",
    "FinancialBoundaryRule",
    "SuspiciousAmountRule",
    "is_suspicious_amount",
    "setup_new_account",
]
