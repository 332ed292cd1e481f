"""Account-pair rule and new-account defaults."""

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from finval.core.codes import ErrorCode
from finval.core.result import ValidationError

EPOCH_ISO = "1970-01-01T00:00:00.000Z"


class DistinctAccountsRule:
    """Rejects payments and transfers whose source and destination match.

    Only non-empty account names are compared, so a missing account is
    reported by the schema as missing rather than as a same-account error.

    Example:
        >>> rule = DistinctAccountsRule()
        >>> [e.code.value for e in rule.check({"sourceAccount": "a", "destinationAccount": "a"})]
        ['SAME_ACCOUNT_ERROR']
    """

    def __init__(
        self,
        source_field: str = "sourceAccount",
        destination_field: str = "destinationAccount",
    ) -> None:
        self.source_field = source_field
        self.destination_field = destination_field

    def check(self, record: Mapping[str, Any]) -> list[ValidationError]:
        source = record.get(self.source_field)
        destination = record.get(self.destination_field)
        if source and source == destination:
            return [
                ValidationError(
                    "accounts",
                    "Source and destination accounts must be different",
                    ErrorCode.SAME_ACCOUNT_ERROR,
                )
            ]
        return []


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def setup_new_account(
    payload: Mapping[str, Any], now: Callable[[], datetime] = _utc_now
) -> dict[str, Any]:
    """Apply the defaults every newly inserted account starts with.

    Balances are zeroed, the account is active, it has never been closed,
    and both audit timestamps are set to now. These values override
    whatever the caller supplied.

    Args:
        payload: Account fields entered by the user
        now: Clock returning the insert time

    Returns:
        A new dict ready for ``DataValidator.validate_account``.

    Example:
        >>> account = setup_new_account({"accountNameOwner": "chase_brian", "activeStatus": False})
        >>> account["activeStatus"], account["cleared"]
        (True, 0.0)
    """
    timestamp = now().isoformat()
    account = dict(payload)
    account.update(
        {
            "cleared": 0.0,
            "future": 0.0,
            "outstanding": 0.0,
            "activeStatus": True,
            "dateClosed": EPOCH_ISO,
            "dateAdded": timestamp,
            "dateUpdated": timestamp,
        }
    )
    return account
