"""Record models and the exhaustive schema validator.

Entity shapes are pydantic models built on ``RecordModel``. ``validate_schema``
runs a model over a sanitized record and turns every pydantic error into a
finval ValidationError, so callers can display every problem at once.

Conventions shared by every record model:
    - Attributes are snake_case; wire names are their camelCase aliases.
    - ``None`` and absent keys are treated the same. A field with a default
      receives the default, an optional field is omitted from the output, a
      required field yields REQUIRED_FIELD.
    - Keys not declared on the model are dropped from the output.
    - A field's ``title`` is its label in messages. ``error_hints`` replaces
      the message for a code, or the code reported for a missing value.

Shared field types:
    - whole_number: before-validator for integer fields that accepts
      integral floats and rejects bools
    - DateValue: permissive date (date objects or any parseable string)
    - Guid: RFC 4122 textual UUID
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal, get_args, get_origin

from dateutil import parser as date_parser
from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo
from pydantic_core import ErrorDetails, PydanticCustomError

from finval.core.codes import ErrorCode
from finval.core.limits import FINANCIAL_LIMITS
from finval.core.result import ValidationError, ValidationResult

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

AMOUNT_FIELDS = ("amount", "outstanding", "future", "cleared")

# pydantic error types and the finval code each one reports
PYDANTIC_CODES = {
    "missing": ErrorCode.REQUIRED_FIELD,
    "string_type": ErrorCode.INVALID_TYPE,
    "string_too_short": ErrorCode.TOO_SHORT,
    "string_too_long": ErrorCode.MAX_LENGTH_EXCEEDED,
    "string_pattern_mismatch": ErrorCode.INVALID_FORMAT,
    "literal_error": ErrorCode.INVALID_ENUM_VALUE,
    "bool_type": ErrorCode.INVALID_TYPE,
    "int_type": ErrorCode.INVALID_NUMBER,
    "int_parsing": ErrorCode.INVALID_NUMBER,
    "int_from_float": ErrorCode.INVALID_NUMBER,
    "greater_than": ErrorCode.NUMBER_TOO_SMALL,
    "greater_than_equal": ErrorCode.NUMBER_TOO_SMALL,
    "float_type": ErrorCode.INVALID_AMOUNT,
    "float_parsing": ErrorCode.INVALID_AMOUNT,
    "finite_number": ErrorCode.INVALID_AMOUNT,
}

MESSAGE_TEMPLATES = {
    "missing": "{label} is required",
    "string_type": "{label} must be a string",
    "string_too_short": "{label} must be at least {min_length} characters",
    "string_too_long": "{label} cannot exceed {max_length} characters",
    "string_pattern_mismatch": "{label} contains invalid characters",
    "literal_error": "{label} must be one of: {expected}",
    "bool_type": "{label} must be true or false",
    "greater_than": "{label} must be a positive integer",
    "greater_than_equal": "{label} must be at least {ge}",
    ErrorCode.INVALID_NUMBER.value: "{label} must be an integer",
    ErrorCode.INVALID_AMOUNT.value: "{label} must be a valid number",
    ErrorCode.AMOUNT_TOO_SMALL.value: "{label} cannot be less than {limit}",
    ErrorCode.AMOUNT_TOO_LARGE.value: "{label} cannot exceed {limit}",
    ErrorCode.TOO_MANY_DECIMAL_PLACES.value: "{label} cannot have more than {places} decimal places",
    ErrorCode.INVALID_DATE.value: "{label} must be a valid date",
    ErrorCode.INVALID_GUID.value: "Invalid GUID format",
}
DEFAULT_TEMPLATE = "{label} is invalid"


def count_decimal_places(value: int | float | Decimal) -> int:
    """Count the digits after the decimal point of a number's decimal string.

    The count is taken from the shortest decimal representation of the value
    (``str`` for floats), never from floating-point arithmetic, so ``0.1 + 0.2``
    style artifacts only count when they are actually present in the value.

    Example:
        >>> count_decimal_places(123.45)
        2
        >>> count_decimal_places(123.456)
        3
        >>> count_decimal_places(100.0)
        0
    """
    if isinstance(value, int):
        return 0
    exponent = Decimal(str(value)).normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)


def error_hints(missing_code: ErrorCode | None = None, **messages: str) -> dict[str, Any]:
    """Per-field message overrides, passed as a field's ``json_schema_extra``.

    Example:
        >>> Field(min_length=1, json_schema_extra=error_hints(TOO_SHORT="Moniker is required"))
    """
    hints: dict[str, Any] = {"messages": messages}
    if missing_code is not None:
        hints["missing_code"] = missing_code.value
    return hints


def whole_number(value: Any) -> Any:
    """Before-validator for integers: integral floats pass, bools do not."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PydanticCustomError(ErrorCode.INVALID_NUMBER.value, "Value must be an integer")
    return value


def _permissive_date(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            date_parser.parse(value)
        except (ValueError, OverflowError):
            pass
        else:
            return value
    raise PydanticCustomError(ErrorCode.INVALID_DATE.value, "Value must be a valid date")


def _guid(value: Any) -> Any:
    if isinstance(value, str) and UUID_PATTERN.match(value):
        return value
    raise PydanticCustomError(ErrorCode.INVALID_GUID.value, "Invalid GUID format")


DateValue = Annotated[Any, AfterValidator(_permissive_date)]
Guid = Annotated[Any, AfterValidator(_guid)]


class RecordModel(BaseModel):
    """Base for entity models.

    Monetary fields (``amount``, ``outstanding``, ``future``, ``cleared``)
    are checked here for every subclass declaring them: they must be finite
    numbers within the financial limits with at most two decimal places.

    Example:
        >>> class Fee(RecordModel):
        ...     amount: float = Field(title="Amount")
        >>> validate_schema(Fee, {"amount": 1.234}).errors[0].code.value
        'TOO_MANY_DECIMAL_PLACES'
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        regex_engine="python-re",
    )

    @field_validator(*AMOUNT_FIELDS, mode="before", check_fields=False)
    @classmethod
    def require_number(cls, value: Any) -> Any:
        numeric = isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
        if not numeric or not math.isfinite(value):
            raise PydanticCustomError(ErrorCode.INVALID_AMOUNT.value, "Value must be a valid number")
        return value

    @field_validator(*AMOUNT_FIELDS, check_fields=False)
    @classmethod
    def within_financial_limits(cls, value: float) -> float:
        if value < FINANCIAL_LIMITS.min_amount:
            raise PydanticCustomError(
                ErrorCode.AMOUNT_TOO_SMALL.value,
                "Value cannot be less than {limit}",
                {"limit": FINANCIAL_LIMITS.min_amount},
            )
        if value > FINANCIAL_LIMITS.max_amount:
            raise PydanticCustomError(
                ErrorCode.AMOUNT_TOO_LARGE.value,
                "Value cannot exceed {limit}",
                {"limit": FINANCIAL_LIMITS.max_amount},
            )
        if count_decimal_places(value) > FINANCIAL_LIMITS.max_decimal_places:
            raise PydanticCustomError(
                ErrorCode.TOO_MANY_DECIMAL_PLACES.value,
                "Value cannot have more than {places} decimal places",
                {"places": FINANCIAL_LIMITS.max_decimal_places},
            )
        return value


def _fields_by_wire_name(schema: type[RecordModel]) -> dict[str, FieldInfo]:
    return {info.alias or name: info for name, info in schema.model_fields.items()}


def _enum_choices(info: FieldInfo | None) -> str | None:
    if info is None or get_origin(info.annotation) is not Literal:
        return None
    return ", ".join(str(choice) for choice in get_args(info.annotation))


def _translate(error: ErrorDetails, fields: Mapping[str, FieldInfo]) -> ValidationError:
    loc = error["loc"]
    name = str(loc[0]) if loc else "validation"
    info = fields.get(name)
    hints = info.json_schema_extra if info is not None else None
    hints = hints if isinstance(hints, dict) else {}

    kind = error["type"]
    code = PYDANTIC_CODES.get(kind) or ErrorCode.coerce(kind)
    if kind == "missing" and "missing_code" in hints:
        code = ErrorCode.coerce(hints["missing_code"])

    message = hints.get("messages", {}).get(code.value)
    if message is None:
        ctx = dict(error.get("ctx") or {})
        if "detail" in ctx:
            message = ctx["detail"]
        else:
            choices = _enum_choices(info)
            if choices is not None:
                ctx["expected"] = choices
            label = (info.title if info is not None else None) or name
            template = MESSAGE_TEMPLATES.get(kind, DEFAULT_TEMPLATE)
            message = template.format(label=label, **ctx)
    return ValidationError(name, message, code)


def validate_schema(schema: type[RecordModel], data: Any) -> ValidationResult:
    """Validate a record against a model, collecting every violation.

    Args:
        schema: RecordModel subclass describing the record
        data: Candidate record (any value; non-mappings fail)

    Returns:
        ValidationResult with the cleaned record (wire names, declared keys
        only, defaults applied) or the full list of violations. Never raises.

    Example:
        >>> class Widget(RecordModel):
        ...     moniker: str = Field(max_length=20, title="Moniker")
        >>> result = validate_schema(Widget, {})
        >>> [(e.field, e.code.value, e.message) for e in result.errors]
        [('moniker', 'REQUIRED_FIELD', 'Moniker is required')]
    """
    entity = schema.model_config.get("title") or schema.__name__
    try:
        if not isinstance(data, Mapping):
            return ValidationResult.fail(
                [
                    ValidationError(
                        "validation",
                        f"{entity} data must be an object",
                        ErrorCode.INVALID_TYPE,
                    )
                ]
            )

        present = {key: value for key, value in data.items() if value is not None}
        try:
            record = schema.model_validate(present)
        except PydanticValidationError as e:
            fields = _fields_by_wire_name(schema)
            return ValidationResult.fail([_translate(error, fields) for error in e.errors()])
        return ValidationResult.ok(record.model_dump(by_alias=True, exclude_none=True))
    except Exception:
        logger.exception("Unexpected failure validating %s schema", entity)
        return ValidationResult.fail(
            [
                ValidationError(
                    "validation", "Schema validation failed", ErrorCode.VALIDATION_ERROR
                )
            ]
        )
