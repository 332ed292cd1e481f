"""Tests for field and entity sanitizers."""

import logging
from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from finval.validation.sanitization import InputSanitizer, SecurityLogger, sanitize
from finval.core.result import ValidationError

ascii_text = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=126), max_size=80
)


class TestSanitizeAmount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("$123.456", 123.46),
            ("1,234.50", 1234.5),
            ("-12.345", -12.35),
            (1.005, 1.01),
            (Decimal("2.675"), 2.68),
            (42, 42.0),
            ("abc", 0.0),
            ("", 0.0),
            (None, 0.0),
            (True, 0.0),
            (float("nan"), 0.0),
            (float("inf"), 0.0),
        ],
    )
    def test_coerces_to_cents(self, value, expected: float) -> None:
        assert InputSanitizer.sanitize_amount(value) == expected


class TestTextSanitizers:
    def test_account_name_keeps_safe_charset_and_lowercases(self) -> None:
        assert InputSanitizer.sanitize_account_name("Test@Account#Name!") == "testaccountname"
        assert InputSanitizer.sanitize_account_name("  Chase_Brian-1 ") == "chase_brian-1"

    def test_account_name_is_capped(self) -> None:
        assert len(InputSanitizer.sanitize_account_name("a" * 300)) == 255

    def test_html_strips_tags_and_keeps_text(self) -> None:
        cleaned = InputSanitizer.sanitize_html("<script>alert('x')</script><b>Hello</b>")
        assert "<" not in cleaned
        assert "Hello" in cleaned

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("&lt;script&gt;alert(1)&lt;/script&gt;", "alert(1)"),
            ("&lt;img src=x onerror=alert(1)&gt;", ""),
            ("&#60;b&#62;bold&#60;/b&#62;", "bold"),
        ],
    )
    def test_html_strips_entity_encoded_tags(self, value: str, expected: str) -> None:
        assert InputSanitizer.sanitize_html(value) == expected

    def test_html_escapes_leftover_brackets(self) -> None:
        cleaned = InputSanitizer.sanitize_html("<<b>img src=x onerror=alert(1)>")
        assert "<" not in cleaned
        assert "&lt;img" in cleaned

    def test_html_keeps_plain_ampersands_escaped(self) -> None:
        assert InputSanitizer.sanitize_html("Tom &amp; Jerry") == "Tom &amp; Jerry"

    @given(
        st.lists(
            st.sampled_from(
                ["<", ">", "&lt;", "&gt;", "&#60;", "script", "img", " onerror=x", "/", "b", "hi"]
            ),
            max_size=12,
        ).map("".join)
    )
    def test_html_output_never_contains_brackets(self, value: str) -> None:
        cleaned = InputSanitizer.sanitize_html(value)
        assert "<" not in cleaned
        assert ">" not in cleaned

    def test_html_logs_encoded_script_attempts(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="finval.security"):
            InputSanitizer.sanitize_html("&lt;script&gt;steal()&lt;/script&gt;", "notes")
        assert any("notes" in record.getMessage() for record in caplog.records)

    def test_html_logs_script_attempts(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="finval.security"):
            InputSanitizer.sanitize_html("<script>steal()</script>", "notes")
        assert any("notes" in record.getMessage() for record in caplog.records)

    def test_description_removes_markup_and_unsafe_characters(self) -> None:
        cleaned = InputSanitizer.sanitize_description("<b>Lunch</b> & drinks @ cafe")
        assert cleaned == "Lunch  drinks  cafe"

    def test_description_is_capped(self) -> None:
        assert len(InputSanitizer.sanitize_description("word " * 400)) <= 1000

    def test_category_collapses_whitespace(self) -> None:
        assert InputSanitizer.sanitize_category("Food & Dining!") == "Food Dining"

    def test_notes_keep_text_without_angle_brackets(self) -> None:
        assert InputSanitizer.sanitize_notes("<i>note</i> <3") == "note 3"

    def test_username(self) -> None:
        assert InputSanitizer.sanitize_username("John.Doe_99") == "johndoe_99"
        assert len(InputSanitizer.sanitize_username("x" * 80)) == 50

    def test_text_removes_control_characters(self) -> None:
        assert InputSanitizer.sanitize_text("  a\x00b \t\n c ") == "ab c"

    def test_password_only_loses_control_characters(self) -> None:
        assert InputSanitizer.sanitize_password(" Pa$$w0rd!\x07") == " Pa$$w0rd!"

    @given(ascii_text)
    def test_text_sanitizers_are_idempotent(self, value: str) -> None:
        for sanitizer in (
            InputSanitizer.sanitize_text,
            InputSanitizer.sanitize_account_name,
            InputSanitizer.sanitize_category,
            InputSanitizer.sanitize_username,
            InputSanitizer.sanitize_description,
        ):
            once = sanitizer(value)
            assert sanitizer(once) == once

    @given(st.integers(min_value=-10**12, max_value=10**12))
    def test_amount_is_idempotent(self, cents: int) -> None:
        once = InputSanitizer.sanitize_amount(cents / 100)
        assert InputSanitizer.sanitize_amount(once) == once


class TestStructuredSanitizers:
    def test_date(self) -> None:
        assert InputSanitizer.sanitize_date(date(2025, 1, 15)) == "2025-01-15"
        assert InputSanitizer.sanitize_date(" 2025-01-15 ") == "2025-01-15"
        assert InputSanitizer.sanitize_date(20250115) is None

    def test_guid(self) -> None:
        raw = "{123E4567-E89B-12D3-A456-426614174000}"
        assert InputSanitizer.sanitize_guid(raw) == "123e4567-e89b-12d3-a456-426614174000"
        assert (
            InputSanitizer.sanitize_guid("urn:uuid:123E4567-E89B-12D3-A456-426614174000")
            == "123e4567-e89b-12d3-a456-426614174000"
        )
        assert InputSanitizer.sanitize_guid("   ") is None
        assert InputSanitizer.sanitize_guid(42) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("42abc", 42), (" 7 ", 7), (7.9, 7), (12, 12), ("0", None), (0, None), ("abc", None), (True, None), ("", None)],
    )
    def test_numeric_id(self, value, expected) -> None:
        assert InputSanitizer.sanitize_numeric_id(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, True), ("Yes", True), (" on ", True), ("off", False), ("0", False), (0, False), (1, True), ("maybe", None)],
    )
    def test_boolean(self, value, expected) -> None:
        assert InputSanitizer.sanitize_boolean(value) is expected


class TestEntitySanitizers:
    def test_non_mapping_becomes_empty_record(self) -> None:
        assert sanitize.user("not a dict") == {}
        assert sanitize.account(None) == {}

    def test_transaction_defaults_type(self) -> None:
        assert sanitize.transaction({}) == {"transactionType": "undefined"}

    def test_transaction_keeps_given_type(self) -> None:
        assert sanitize.transaction({"transactionType": " expense "})["transactionType"] == "expense"

    def test_absent_and_none_values_are_dropped(self) -> None:
        result = sanitize.payment({"amount": None, "sourceAccount": "Checking", "extra": "x"})
        assert result == {"sourceAccount": "checking"}

    def test_payment_fields(self) -> None:
        result = sanitize.payment(
            {
                "sourceAccount": "Checking Primary",
                "destinationAccount": "visa@rewards",
                "transactionDate": " 2025-01-15 ",
                "amount": "$1,000.005",
                "activeStatus": "true",
                "guidSource": "{123E4567-E89B-12D3-A456-426614174000}",
            }
        )
        assert result == {
            "sourceAccount": "checkingprimary",
            "destinationAccount": "visarewards",
            "transactionDate": "2025-01-15",
            "amount": 1000.01,
            "activeStatus": True,
            "guidSource": "123e4567-e89b-12d3-a456-426614174000",
        }

    def test_category_accepts_alias(self) -> None:
        assert sanitize.category({"category": "Food & Dining"}) == {"categoryName": "Food Dining"}

    def test_description_accepts_alias(self) -> None:
        assert sanitize.description({"description": "Amazon!"}) == {"descriptionName": "Amazon"}

    def test_user_drops_blank_names(self) -> None:
        result = sanitize.user({"username": "Alice", "password": "Secret1!", "firstName": "   "})
        assert result == {"username": "alice", "password": "Secret1!"}


class TestSecurityLogger:
    def test_validation_failure_omits_payload(self, caplog: pytest.LogCaptureFixture) -> None:
        log = SecurityLogger()
        with caplog.at_level(logging.WARNING, logger="finval.security"):
            log.log_validation_failure(
                [ValidationError("amount", "bad", "INVALID_AMOUNT")], {"password": "hunter2"}
            )
        message = caplog.records[-1].getMessage()
        assert "amount=INVALID_AMOUNT" in message
        assert "hunter2" not in message

    def test_long_values_are_truncated(self, caplog: pytest.LogCaptureFixture) -> None:
        log = SecurityLogger()
        with caplog.at_level(logging.WARNING, logger="finval.security"):
            log.log_sanitization_attempt("notes", "x" * 500, "")
        assert "x" * 101 not in caplog.records[-1].getMessage()
