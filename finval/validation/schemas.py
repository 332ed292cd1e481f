"""Entity models for the personal-finance domain.

Wire names are camelCase, matching the JSON records exchanged with the
backend. ``transactionDate`` on payments and transfers is a backend
date-only column, so those models reject any time component; other dates
are permissive ``DateValue`` fields.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, get_args

from pydantic import (
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StringConstraints,
    field_validator,
)
from pydantic_core import PydanticCustomError

from finval.core.codes import ErrorCode
from finval.core.limits import FINANCIAL_LIMITS
from finval.core.schema import DateValue, Guid, RecordModel, error_hints, whole_number
from finval.validation.dates import DateFormat, validate_date_format

AccountType = Literal["credit", "debit"]
TransactionState = Literal["cleared", "outstanding", "future"]
TransactionType = Literal["expense", "income", "transfer", "undefined"]
ReoccurringType = Literal[
    "onetime",
    "weekly",
    "fortnightly",
    "monthly",
    "quarterly",
    "bi_annually",
    "annually",
    "undefined",
]

REOCCURRING_TYPES = get_args(ReoccurringType)

ACCOUNT_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"
PERSON_NAME_PATTERN = r"^[a-zA-Z\s'-]+$"
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]"
LOOKUP_NAME_PATTERN = r"^[a-zA-Z0-9 _-]+$"

PositiveId = Annotated[int, Field(gt=0), BeforeValidator(whole_number)]
Count = Annotated[int, Field(ge=0), BeforeValidator(whole_number)]

ACCOUNT_TYPE_HINTS = error_hints(
    INVALID_ENUM_VALUE="Account type must be either credit or debit"
)


def check_local_date(value: Any) -> str:
    """Normalize a date-only value to ``YYYY-MM-DD``.

    ``date`` objects are formatted directly. Strings and ``datetime``
    objects go through the strict format check, so a time component is
    always rejected with a hint to remove it.

    Raises:
        PydanticCustomError: With the date error's code as its type and
            the ready-made message in ``detail``.
    """
    if isinstance(value, datetime):
        value = value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()

    result = validate_date_format(value, "transactionDate", DateFormat.YYYY_MM_DD)
    if not result.is_valid and result.error is not None:
        raise PydanticCustomError(
            result.error.code.value, "{detail}", {"detail": result.error.message}
        )
    return value.strip()


def _account_name(label: str = "Account name") -> Any:
    return Field(
        min_length=1,
        max_length=FINANCIAL_LIMITS.max_string_length,
        pattern=ACCOUNT_NAME_PATTERN,
        title=label,
        json_schema_extra=error_hints(
            TOO_SHORT=f"{label} is required",
            MAX_LENGTH_EXCEEDED=f"{label} too long",
        ),
    )


def _lookup_name(label: str) -> Any:
    return Field(
        min_length=1,
        max_length=FINANCIAL_LIMITS.max_string_length,
        pattern=LOOKUP_NAME_PATTERN,
        title=label,
        json_schema_extra=error_hints(
            TOO_SHORT=f"{label} is required",
            MAX_LENGTH_EXCEEDED=f"{label} too long",
        ),
    )


class UserSchema(RecordModel):
    model_config = ConfigDict(title="User")

    user_id: PositiveId | None = Field(None, title="User ID")
    username: str = Field(
        min_length=3,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_]+$",
        title="Username",
        json_schema_extra=error_hints(
            INVALID_FORMAT="Username can only contain letters, numbers, and underscores"
        ),
    )
    password: str = Field(
        min_length=8,
        max_length=128,
        pattern=PASSWORD_PATTERN,
        title="Password",
        json_schema_extra=error_hints(
            INVALID_FORMAT=(
                "Password must contain at least one lowercase letter, uppercase letter, "
                "number, and special character"
            )
        ),
    )
    first_name: str | None = Field(
        None, max_length=50, pattern=PERSON_NAME_PATTERN, title="First name"
    )
    last_name: str | None = Field(
        None, max_length=50, pattern=PERSON_NAME_PATTERN, title="Last name"
    )


class AccountSchema(RecordModel):
    model_config = ConfigDict(title="Account")

    account_id: PositiveId | None = Field(None, title="Account ID")
    account_name_owner: str = _account_name()
    account_type: AccountType = Field(title="Account type", json_schema_extra=ACCOUNT_TYPE_HINTS)
    active_status: StrictBool = Field(True, title="Active status")
    moniker: str = Field(
        min_length=1,
        max_length=20,
        pattern=r"^[a-zA-Z0-9]+$",
        title="Moniker",
        json_schema_extra=error_hints(
            TOO_SHORT="Moniker is required",
            INVALID_FORMAT="Moniker can only contain letters and numbers",
        ),
    )
    outstanding: float = Field(0.0, title="Amount")
    future: float = Field(0.0, title="Amount")
    cleared: float = Field(0.0, title="Amount")
    date_closed: DateValue | None = Field(None, title="Date closed")
    validation_date: DateValue | None = Field(None, title="Validation date")
    date_added: DateValue | None = Field(None, title="Date added")
    date_updated: DateValue | None = Field(None, title="Date updated")


class TransactionSchema(RecordModel):
    model_config = ConfigDict(title="Transaction")

    transaction_id: PositiveId | None = Field(None, title="Transaction ID")
    guid: Guid | None = None
    account_id: PositiveId | None = Field(None, title="Account ID")
    account_type: AccountType = Field(title="Account type", json_schema_extra=ACCOUNT_TYPE_HINTS)
    account_name_owner: str = _account_name()
    transaction_date: DateValue = Field(title="Transaction date")
    description: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=1,
            max_length=FINANCIAL_LIMITS.max_description_length,
        ),
    ] = Field(
        title="Description",
        json_schema_extra=error_hints(
            TOO_SHORT="Description is required", MAX_LENGTH_EXCEEDED="Description too long"
        ),
    )
    category: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=1,
            max_length=FINANCIAL_LIMITS.max_string_length,
        ),
    ] = Field(
        title="Category",
        json_schema_extra=error_hints(
            TOO_SHORT="Category is required", MAX_LENGTH_EXCEEDED="Category name too long"
        ),
    )
    amount: float = Field(title="Amount")
    transaction_state: TransactionState = Field(
        "outstanding",
        title="Transaction state",
        json_schema_extra=error_hints(
            INVALID_ENUM_VALUE="Transaction state must be cleared, outstanding, or future"
        ),
    )
    transaction_type: TransactionType = Field(
        "undefined",
        title="Transaction type",
        json_schema_extra=error_hints(
            INVALID_ENUM_VALUE="Transaction type must be expense, income, transfer, or undefined"
        ),
    )
    active_status: StrictBool = Field(True, title="Active status")
    reoccurring_type: ReoccurringType = Field(
        "onetime",
        title="Reoccurring type",
        json_schema_extra=error_hints(
            INVALID_ENUM_VALUE=f"Reoccurring type must be one of: {', '.join(REOCCURRING_TYPES)}"
        ),
    )
    notes: str = Field(
        "",
        max_length=FINANCIAL_LIMITS.max_notes_length,
        title="Notes",
        json_schema_extra=error_hints(MAX_LENGTH_EXCEEDED="Notes too long"),
    )
    due_date: DateValue | None = Field(None, title="Due date")
    date_added: DateValue | None = Field(None, title="Date added")
    date_updated: DateValue | None = Field(None, title="Date updated")


class _AccountMovement(RecordModel):
    """Fields shared by payments and transfers between two accounts."""

    source_account: str = _account_name("Source account")
    destination_account: str = _account_name("Destination account")
    transaction_date: str = Field(
        title="Transaction date",
        json_schema_extra=error_hints(
            missing_code=ErrorCode.DATE_REQUIRED, DATE_REQUIRED="Date is required"
        ),
    )
    amount: float = Field(title="Amount")
    guid_source: Guid | None = None
    guid_destination: Guid | None = None
    active_status: StrictBool = Field(True, title="Active status")
    date_added: DateValue | None = Field(None, title="Date added")
    date_updated: DateValue | None = Field(None, title="Date updated")

    @field_validator("transaction_date", mode="before")
    @classmethod
    def date_only(cls, value: Any) -> str:
        return check_local_date(value)


class PaymentSchema(_AccountMovement):
    model_config = ConfigDict(title="Payment")

    payment_id: PositiveId | None = Field(None, title="Payment ID")
    account_name_owner: str | None = Field(
        None,
        max_length=FINANCIAL_LIMITS.max_string_length,
        pattern=r"^[a-zA-Z0-9_-]*$",
        title="Account name",
    )


class TransferSchema(_AccountMovement):
    model_config = ConfigDict(title="Transfer")

    transfer_id: PositiveId | None = Field(None, title="Transfer ID")


class CategorySchema(RecordModel):
    model_config = ConfigDict(title="Category")

    category_id: PositiveId | None = Field(None, title="Category ID")
    category_name: str = _lookup_name("Category name")
    active_status: StrictBool = Field(True, title="Active status")
    category_count: Count | None = Field(None, title="Category count")
    date_added: DateValue | None = Field(None, title="Date added")
    date_updated: DateValue | None = Field(None, title="Date updated")


class DescriptionSchema(RecordModel):
    model_config = ConfigDict(title="Description")

    description_id: PositiveId | None = Field(None, title="Description ID")
    description_name: str = _lookup_name("Description name")
    active_status: StrictBool = Field(True, title="Active status")
    description_count: Count | None = Field(None, title="Description count")
    date_added: DateValue | None = Field(None, title="Date added")
    date_updated: DateValue | None = Field(None, title="Date updated")


ENTITY_SCHEMAS: dict[str, type[RecordModel]] = {
    "user": UserSchema,
    "account": AccountSchema,
    "transaction": TransactionSchema,
    "payment": PaymentSchema,
    "transfer": TransferSchema,
    "category": CategorySchema,
    "description": DescriptionSchema,
}
