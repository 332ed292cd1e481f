"""Input sanitizers for untrusted record data.

Sanitizers never raise: malformed values are coerced to a safe form or
dropped, and structural acceptance is left to the schemas. Every text
sanitizer is idempotent, so sanitizing already-clean data is a no-op.

The ``sanitize`` namespace exposes one function per entity
(``sanitize.user``, ``sanitize.account``, ``sanitize.transaction``,
``sanitize.payment``, ``sanitize.transfer``, ``sanitize.category``,
``sanitize.description``). Each accepts any value, treats non-mappings as an
empty record, and returns a new dict containing only the keys that had a
value, so schema defaults apply to absent fields.
"""

import html
import logging
import math
import re
from collections.abc import Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from types import SimpleNamespace
from typing import Any

import bleach

from finval.core.limits import FINANCIAL_LIMITS
from finval.core.result import ValidationError

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
WHITESPACE = re.compile(r"\s+")
SCRIPT_TAG = re.compile(r"<\s*script", re.IGNORECASE)
AMOUNT_PREFIX = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")
INTEGER_PREFIX = re.compile(r"^[+-]?\d+")

MAX_USERNAME_LENGTH = 50
MAX_LOGGED_VALUE_LENGTH = 100

TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "n", "off"})


def _truncate(value: Any) -> Any:
    if isinstance(value, str):
        return value[:MAX_LOGGED_VALUE_LENGTH]
    return value


class SecurityLogger:
    """Sink for sanitization and validation security events.

    Events go to the ``finval.security`` logger. Raw payloads are never
    logged in full: strings are truncated and validation failures only
    record the type of the rejected input.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("finval.security")

    def log_sanitization_attempt(self, field: str, original: Any, sanitized: Any) -> None:
        self.logger.warning(
            "Sanitization applied to field %r: original=%r sanitized=%r",
            field,
            _truncate(original),
            _truncate(sanitized),
        )

    def log_validation_failure(self, errors: list[ValidationError], raw_data: Any) -> None:
        self.logger.warning(
            "Validation failed for %s input with %d error(s): %s",
            type(raw_data).__name__,
            len(errors),
            ", ".join(f"{e.field}={e.code.value}" for e in errors),
        )


default_security_logger = SecurityLogger()


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return ""


def _round_cents(value: int | float | Decimal | str) -> float:
    decimal_value = Decimal(str(value))
    try:
        return float(decimal_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Too many digits to quantize; such values carry no cents anyway.
        return float(decimal_value)


def _visible_text(value: Any, field: str) -> str:
    # Callers strip angle brackets afterwards, so decoding cannot revive a tag.
    return html.unescape(InputSanitizer.sanitize_html(value, field))


class InputSanitizer:
    """Field-level sanitizers.

    Example:
        >>> InputSanitizer.sanitize_amount("$123.456")
        123.46
        >>> InputSanitizer.sanitize_amount("abc")
        0.0
        >>> InputSanitizer.sanitize_account_name("test@account#name!")
        'testaccountname'
        >>> InputSanitizer.sanitize_html("<script>alert('x')</script>Hello")
        "alert('x')Hello"
    """

    @staticmethod
    def sanitize_html(value: Any, field: str = "html") -> str:
        """Strip all tag markup, returning HTML-safe text.

        Entities are decoded before bleach runs, so encoded tags are stripped
        like literal ones. Any `<`, `>` or `&` left in the text comes back
        escaped, never as live markup.
        """
        text = html.unescape(_as_text(value))
        if not text:
            return ""
        cleaned = bleach.clean(
            text,
            tags=frozenset(),
            attributes={},
            strip=True,
            strip_comments=True,
        ).strip()
        if SCRIPT_TAG.search(text):
            default_security_logger.log_sanitization_attempt(field, text, cleaned)
        return cleaned

    @staticmethod
    def sanitize_text(value: Any) -> str:
        text = CONTROL_CHARS.sub("", _as_text(value))
        return WHITESPACE.sub(" ", text).strip()

    @staticmethod
    def sanitize_amount(value: Any) -> float:
        """Coerce to a float rounded half-up to cents; unusable input becomes 0."""
        if isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float, Decimal)):
            try:
                finite = math.isfinite(value)
            except (OverflowError, InvalidOperation, ValueError):
                finite = False
            return _round_cents(value) if finite else 0.0
        if isinstance(value, str):
            match = AMOUNT_PREFIX.match(re.sub(r"[^-0-9.]", "", value))
            if match is None:
                return 0.0
            return _round_cents(match.group(0))
        return 0.0

    @staticmethod
    def sanitize_account_name(value: Any) -> str:
        text = re.sub(r"[^a-zA-Z0-9_-]", "", _as_text(value).strip())
        return text.lower()[: FINANCIAL_LIMITS.max_string_length]

    @staticmethod
    def sanitize_description(value: Any) -> str:
        text = _visible_text(value, "description")
        text = re.sub(r"[<>\"'&]", "", text)
        text = re.sub(r"[^\w\s\-.,!?()\[\]{}:;]", "", text)
        return text.strip()[: FINANCIAL_LIMITS.max_description_length].strip()

    @staticmethod
    def sanitize_category(value: Any) -> str:
        text = re.sub(r"[^a-zA-Z0-9\s_-]", "", _as_text(value).strip())
        text = WHITESPACE.sub(" ", text)
        return text[: FINANCIAL_LIMITS.max_string_length].strip()

    @staticmethod
    def sanitize_notes(value: Any) -> str:
        text = _visible_text(value, "notes")
        text = re.sub(r"[<>]", "", text)
        return text.strip()[: FINANCIAL_LIMITS.max_notes_length].strip()

    @staticmethod
    def sanitize_username(value: Any) -> str:
        text = re.sub(r"[^a-zA-Z0-9_]", "", _as_text(value).strip())
        return text.lower()[:MAX_USERNAME_LENGTH]

    @staticmethod
    def sanitize_password(value: Any) -> str:
        return CONTROL_CHARS.sub("", _as_text(value))

    @staticmethod
    def sanitize_date(value: Any) -> str | None:
        """Serialize date objects; trim strings. Never validates."""
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            return CONTROL_CHARS.sub("", value).strip()
        return None

    @staticmethod
    def sanitize_guid(value: Any) -> str | None:
        """Remove braces, a ``urn:uuid:`` prefix, and surrounding whitespace."""
        if not isinstance(value, str):
            return None
        text = value.strip().strip("{}").strip()
        if text.lower().startswith("urn:uuid:"):
            text = text[len("urn:uuid:"):]
        return text.strip("{}").strip().lower() or None

    @staticmethod
    def sanitize_numeric_id(value: Any) -> int | None:
        """Parse an identifier; empty, zero, or unparseable input becomes None."""
        if isinstance(value, bool) or not value:
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, (float, Decimal)):
            try:
                return int(value) or None
            except (OverflowError, ValueError, InvalidOperation):
                return None
        if isinstance(value, str):
            match = INTEGER_PREFIX.match(value.strip())
            if match is None:
                return None
            return int(match.group(0)) or None
        return None

    @staticmethod
    def sanitize_boolean(value: Any) -> bool | None:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
        return None


def _as_mapping(data: Any) -> Mapping[str, Any]:
    return data if isinstance(data, Mapping) else {}


def _collect(source: Mapping[str, Any], rules: dict[str, Any]) -> dict[str, Any]:
    """Apply per-key sanitizers, dropping absent keys and absent results."""
    out: dict[str, Any] = {}
    for key, sanitizer in rules.items():
        raw = source.get(key)
        if raw is None:
            continue
        value = sanitizer(raw)
        if value is not None:
            out[key] = value
    return out


_S = InputSanitizer

_DATE_FIELDS = {"dateAdded": _S.sanitize_date, "dateUpdated": _S.sanitize_date}


def sanitize_user(data: Any) -> dict[str, Any]:
    return _collect(
        _as_mapping(data),
        {
            "userId": _S.sanitize_numeric_id,
            "username": _S.sanitize_username,
            "password": _S.sanitize_password,
            "firstName": lambda v: _S.sanitize_text(v) or None,
            "lastName": lambda v: _S.sanitize_text(v) or None,
        },
    )


def sanitize_account(data: Any) -> dict[str, Any]:
    return _collect(
        _as_mapping(data),
        {
            "accountId": _S.sanitize_numeric_id,
            "accountNameOwner": _S.sanitize_account_name,
            "accountType": _S.sanitize_text,
            "activeStatus": _S.sanitize_boolean,
            "moniker": _S.sanitize_text,
            "outstanding": _S.sanitize_amount,
            "future": _S.sanitize_amount,
            "cleared": _S.sanitize_amount,
            "dateClosed": _S.sanitize_date,
            "validationDate": _S.sanitize_date,
            **_DATE_FIELDS,
        },
    )


def sanitize_transaction(data: Any) -> dict[str, Any]:
    source = _as_mapping(data)
    out = _collect(
        source,
        {
            "transactionId": _S.sanitize_numeric_id,
            "guid": _S.sanitize_guid,
            "accountId": _S.sanitize_numeric_id,
            "accountType": _S.sanitize_text,
            "accountNameOwner": _S.sanitize_account_name,
            "transactionDate": _S.sanitize_date,
            "description": _S.sanitize_description,
            "category": _S.sanitize_category,
            "amount": _S.sanitize_amount,
            "transactionState": _S.sanitize_text,
            "transactionType": _S.sanitize_text,
            "activeStatus": _S.sanitize_boolean,
            "reoccurringType": _S.sanitize_text,
            "notes": _S.sanitize_notes,
            "dueDate": _S.sanitize_date,
            **_DATE_FIELDS,
        },
    )
    out.setdefault("transactionType", "undefined")
    return out


def sanitize_payment(data: Any) -> dict[str, Any]:
    return _collect(
        _as_mapping(data),
        {
            "paymentId": _S.sanitize_numeric_id,
            "accountNameOwner": _S.sanitize_account_name,
            "sourceAccount": _S.sanitize_account_name,
            "destinationAccount": _S.sanitize_account_name,
            "transactionDate": _S.sanitize_date,
            "amount": _S.sanitize_amount,
            "guidSource": _S.sanitize_guid,
            "guidDestination": _S.sanitize_guid,
            "activeStatus": _S.sanitize_boolean,
            **_DATE_FIELDS,
        },
    )


def sanitize_transfer(data: Any) -> dict[str, Any]:
    return _collect(
        _as_mapping(data),
        {
            "transferId": _S.sanitize_numeric_id,
            "sourceAccount": _S.sanitize_account_name,
            "destinationAccount": _S.sanitize_account_name,
            "transactionDate": _S.sanitize_date,
            "amount": _S.sanitize_amount,
            "guidSource": _S.sanitize_guid,
            "guidDestination": _S.sanitize_guid,
            "activeStatus": _S.sanitize_boolean,
            **_DATE_FIELDS,
        },
    )


def sanitize_category(data: Any) -> dict[str, Any]:
    source = dict(_as_mapping(data))
    if source.get("categoryName") is None:
        source["categoryName"] = source.get("category")
    return _collect(
        source,
        {
            "categoryId": _S.sanitize_numeric_id,
            "categoryName": _S.sanitize_category,
            "activeStatus": _S.sanitize_boolean,
            "categoryCount": _S.sanitize_numeric_id,
            **_DATE_FIELDS,
        },
    )


def sanitize_description(data: Any) -> dict[str, Any]:
    source = dict(_as_mapping(data))
    if source.get("descriptionName") is None:
        source["descriptionName"] = source.get("description")
    return _collect(
        source,
        {
            "descriptionId": _S.sanitize_numeric_id,
            "descriptionName": _S.sanitize_category,
            "activeStatus": _S.sanitize_boolean,
            "descriptionCount": _S.sanitize_numeric_id,
            **_DATE_FIELDS,
        },
    )


sanitize = SimpleNamespace(
    user=sanitize_user,
    account=sanitize_account,
    transaction=sanitize_transaction,
    payment=sanitize_payment,
    transfer=sanitize_transfer,
    category=sanitize_category,
    description=sanitize_description,
)
