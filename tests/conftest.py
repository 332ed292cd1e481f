"""Shared test fixtures and Hypothesis strategies for finval tests."""

import logging
from datetime import date, timedelta

import pytest
from hypothesis import settings
from hypothesis import strategies as st

from finval.core.result import ValidationError

# Configure Hypothesis for validation tests
settings.register_profile("validation", max_examples=100, deadline=None)
settings.load_profile("validation")


ACCOUNT_NAME_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789_-"
ERROR_CODES = [
    "REQUIRED_FIELD",
    "INVALID_AMOUNT",
    "DATE_FORMAT_INVALID",
    "SAME_ACCOUNT_ERROR",
    "SUSPICIOUS_AMOUNT",
    "TIP",
]
FIELD_NAMES = [
    "amount",
    "transactionDate",
    "sourceAccount",
    "destinationAccount",
    "accounts",
    "notes",
]


def days_from_today(days: int) -> date:
    return date.today() + timedelta(days=days)


# Hypothesis strategies for generating test data

account_names = st.text(alphabet=ACCOUNT_NAME_ALPHABET, min_size=1, max_size=30)

# Whole cents within the financial limits, as floats with at most 2 decimals
cent_amounts = st.integers(min_value=-99_999_999_999, max_value=99_999_999_999).map(
    lambda cents: cents / 100
)

recent_dates = st.integers(min_value=-300, max_value=300).map(days_from_today)

validation_errors = st.builds(
    ValidationError,
    field=st.sampled_from(FIELD_NAMES),
    message=st.text(
        alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd", "Zs")),
        min_size=1,
        max_size=40,
    ),
    code=st.sampled_from(ERROR_CODES),
)


@st.composite
def valid_payments(draw):
    """Generate payment payloads that pass validation.

    Source and destination are distinct sanitized account names, the date
    is a YYYY-MM-DD string within ten months of today, and the amount is a
    whole number of cents.
    """
    source = draw(account_names)
    destination = draw(account_names.filter(lambda name: name != source))
    return {
        "sourceAccount": source,
        "destinationAccount": destination,
        "transactionDate": draw(recent_dates).isoformat(),
        "amount": draw(cent_amounts),
    }


# Pytest fixtures


@pytest.fixture
def valid_payment() -> dict:
    return {
        "sourceAccount": "checking_primary",
        "destinationAccount": "visa_rewards",
        "transactionDate": days_from_today(-3).isoformat(),
        "amount": 150.25,
    }


@pytest.fixture
def valid_transaction() -> dict:
    return {
        "accountNameOwner": "checking_primary",
        "accountType": "debit",
        "transactionDate": days_from_today(-1).isoformat(),
        "description": "Grocery store",
        "category": "groceries",
        "amount": 42.17,
    }


@pytest.fixture(autouse=True)
def reset_finval_logging():
    """Undo handler and propagation changes made by CLI logging setup."""
    yield
    package_logger = logging.getLogger("finval")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
