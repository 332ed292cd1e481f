"""Tests for structured error reports."""

import json

from hypothesis import given
from hypothesis import strategies as st

from finval.core.result import ValidationError
from finval.validation.report import ErrorReport, create_error_report

from tests.conftest import validation_errors

ERRORS = [
    ValidationError("amount", "Amount is required", "REQUIRED_FIELD"),
    ValidationError("transactionDate", "Date is required", "DATE_REQUIRED"),
    ValidationError("amount", "Amount flagged for review", "SUSPICIOUS_AMOUNT"),
]


class TestCreateErrorReport:
    def test_counts_and_fields(self) -> None:
        report = create_error_report(ERRORS)
        assert (report.error_count, report.field_count) == (3, 2)
        assert report.fields == ["amount", "transactionDate"]
        assert not report.is_valid()

    def test_summary_uses_max_errors(self) -> None:
        report = create_error_report(ERRORS, max_errors=1)
        assert report.summary == "Amount: Amount is required\n...and 2 more error(s)"

    def test_empty_report(self) -> None:
        report = create_error_report([])
        assert report.is_valid()
        assert report.summary == "Validation failed"


class TestErrorReportSerialization:
    def test_to_json(self) -> None:
        payload = create_error_report(ERRORS).to_json()
        assert payload["fieldCount"] == 2
        assert payload["errorCount"] == 3
        assert payload["severity"] == {"errors": 2, "warnings": 1, "info": 0}
        assert payload["errors"][0] == {
            "field": "amount",
            "message": "Amount is required",
            "code": "REQUIRED_FIELD",
        }
        json.dumps(payload)

    @given(st.lists(validation_errors, max_size=10))
    def test_from_json_recomputes_counts(self, errors: list[ValidationError]) -> None:
        original = create_error_report(errors)
        rebuilt = ErrorReport.from_json(original.to_json())
        assert rebuilt == original

    def test_format(self) -> None:
        text = create_error_report(ERRORS).format()
        assert text.splitlines()[:3] == [
            "Error Report",
            "=" * 40,
            "3 error(s) across 2 field(s)",
        ]
        assert "Amount (amount):" in text
        assert "  - [SUSPICIOUS_AMOUNT] Amount flagged for review" in text
