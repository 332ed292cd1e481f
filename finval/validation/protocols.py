"""Protocol definitions for pluggable validation collaborators.

Protocols:
    - BusinessRule: Contextual check run on a sanitized record before the schema
    - EntityValidator: Callable turning raw input into a ValidationResult
    - RateLimiter: Fixed-window throttle keyed by ``identifier:action``
    - RateLimitStore: Backing storage for rate-limit windows
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from finval.core.result import ValidationError, ValidationResult
    from finval.validation.rate_limit import WindowState


class BusinessRule(Protocol):
    """A cross-field or contextual acceptance check.

    Rules receive the sanitized record and return their violations. An
    empty list means the record passes. Rules must not mutate the record.

    Example:
        >>> class PositiveAmountRule:
        ...     def check(self, record):
        ...         if record.get("amount", 0) <= 0:
        ...             return [ValidationError("amount", "Amount must be positive", "INVALID_AMOUNT")]
        ...         return []
    """

    def check(self, record: Mapping[str, Any]) -> "list[ValidationError]":
        ...


class EntityValidator(Protocol):
    """Any ``DataValidator.validate_*`` method, or a function shaped like one."""

    def __call__(self, data: Any) -> "ValidationResult":
        ...


class RateLimitStore(Protocol):
    """Key-value storage for rate-limit windows.

    An in-memory implementation is provided by InMemoryRateLimitStore; a
    multi-process deployment would back this with a shared cache.
    """

    def get(self, key: str) -> "WindowState | None":
        ...

    def set(self, key: str, state: "WindowState") -> None:
        ...

    def discard_expired(self, opened_at_or_before: float) -> int:
        ...


class RateLimiter(Protocol):
    """Throttle deciding whether another attempt is allowed.

    ``check_and_increment`` records the attempt and returns True when it is
    within the limit, False when the caller should be told to wait.
    """

    def check_and_increment(self, key: str) -> bool:
        ...
