"""Batch validation of imported records held in a polars DataFrame.

Each row is validated independently through a single-entity validator
(typically a ``DataValidator.validate_*`` method). Rows that pass are
collected into a frame of sanitized records; failures are flattened into an
error frame with one row per field error.
"""

import logging
from dataclasses import dataclass
from typing import Any

import polars as pl

from finval.validation.protocols import EntityValidator
from finval.validation.validator import DataValidator

logger = logging.getLogger(__name__)

ERROR_FRAME_SCHEMA = {
    "row_index": pl.Int64,
    "field": pl.Utf8,
    "message": pl.Utf8,
    "code": pl.Utf8,
}


@dataclass
class FrameValidationResult:
    """Outcome of validating every row of a DataFrame.

    Attributes:
        valid: Sanitized records of the rows that passed
        errors: One row per field error (row_index, field, message, code)
        total_rows: Number of rows in the input frame
    """

    valid: pl.DataFrame
    errors: pl.DataFrame
    total_rows: int = 0

    def is_valid(self) -> bool:
        return self.errors.height == 0

    def invalid_row_count(self) -> int:
        if self.errors.height == 0:
            return 0
        return self.errors["row_index"].n_unique()

    def summary(self) -> str:
        """One-line summary of the batch.

        Example:
            >>> result.summary()
            'Batch validation: 8/10 rows valid, 3 error(s)'
        """
        return (
            f"Batch validation: {self.valid.height}/{self.total_rows} rows valid, "
            f"{self.errors.height} error(s)"
        )


def _record(row: dict[str, Any]) -> dict[str, Any]:
    # Empty CSV cells arrive as null; treat them as absent fields.
    return {key: value for key, value in row.items() if value is not None}


def validate_frame(
    df: pl.DataFrame,
    validator: EntityValidator,
    data_validator: DataValidator | None = None,
) -> FrameValidationResult:
    """Validate each row of ``df`` with ``validator``.

    The input frame is not modified. A validator that raises on a row only
    fails that row.

    Args:
        df: Frame whose columns are entity fields (camelCase names)
        validator: Entity validator applied to each row as a dict
        data_validator: DataValidator providing the array runner (a default
                        instance is used when omitted)

    Returns:
        FrameValidationResult with the valid records and the flattened errors

    Example:
        >>> v = DataValidator()
        >>> df = pl.DataFrame({"categoryName": ["groceries", "<>"]})
        >>> result = validate_frame(df, v.validate_category, v)
        >>> result.valid["categoryName"].to_list()
        ['groceries']
        >>> result.errors["row_index"].to_list()
        [1]
    """
    runner = data_validator or DataValidator()
    records = [_record(row) for row in df.iter_rows(named=True)]
    outcome = runner.validate_financial_array(records, validator)

    error_rows = [
        {
            "row_index": failure.index,
            "field": error.field,
            "message": error.message,
            "code": error.code.value,
        }
        for failure in outcome.errors
        for error in failure.errors
    ]

    if outcome.valid_items:
        valid = pl.from_dicts(outcome.valid_items, infer_schema_length=None)
    else:
        valid = pl.DataFrame()
    errors = pl.DataFrame(error_rows, schema=ERROR_FRAME_SCHEMA)

    logger.info(
        "Validated %d row(s): %d valid, %d with errors",
        df.height,
        len(outcome.valid_items),
        len(outcome.errors),
    )
    return FrameValidationResult(valid=valid, errors=errors, total_rows=df.height)
