"""Top-level entity validation.

DataValidator runs every entity through the same three stages:

1. Sanitize: never fails; coerces or drops malformed values.
2. Business pre-checks: contextual rules on the sanitized record. The first
   rule that reports violations ends validation and its errors are returned
   without running the schema.
3. Schema: exhaustive structural validation collecting every violation.

None of the ``validate_*`` methods raise for bad input. Unexpected internal
failures are logged with their traceback and reported to the caller as a
single generic ``validation`` error, so no exception text reaches users.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any

from finval.core.codes import ErrorCode
from finval.core.result import (
    FinancialArrayResult,
    IndexedErrors,
    ValidationError,
    ValidationResult,
)
from finval.core.schema import RecordModel, validate_schema
from finval.validation.business.accounts import DistinctAccountsRule
from finval.validation.business.amounts import (
    FinancialBoundaryRule,
    SuspiciousAmountRule,
    is_suspicious_amount,
)
from finval.validation.protocols import BusinessRule, EntityValidator, RateLimiter
from finval.validation.sanitization import SecurityLogger, default_security_logger, sanitize
from finval.validation.schemas import (
    AccountSchema,
    CategorySchema,
    DescriptionSchema,
    PaymentSchema,
    TransactionSchema,
    TransferSchema,
    UserSchema,
)

logger = logging.getLogger(__name__)


def _generic_failure(entity: str) -> ValidationResult:
    return ValidationResult.fail(
        [
            ValidationError(
                "validation", f"{entity} validation failed", ErrorCode.VALIDATION_ERROR
            )
        ]
    )


class DataValidator:
    """Sanitize, check business rules, and validate each domain entity.

    Attributes:
        rate_limiter: Optional throttle used by ``validate_rate_limit``
        security_logger: Sink for validation failures
        today: Callable returning the reference day for date windows

    Example:
        >>> validator = DataValidator()
        >>> result = validator.validate_category({"categoryName": " groceries "})
        >>> result.success, result.data["categoryName"]
        (True, 'groceries')
    """

    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        security_logger: SecurityLogger | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.security_logger = security_logger or default_security_logger
        self.today = today
        self.boundary_rule = FinancialBoundaryRule(today=lambda: self.today())
        self.distinct_accounts_rule = DistinctAccountsRule()
        self.suspicious_amount_rule = SuspiciousAmountRule()

    def _run(
        self,
        entity: str,
        data: Any,
        sanitizer: Callable[[Any], dict[str, Any]],
        schema: type[RecordModel],
        rules: Sequence[BusinessRule] = (),
    ) -> ValidationResult:
        try:
            sanitized = sanitizer(data)

            for rule in rules:
                errors = rule.check(sanitized)
                if errors:
                    self.security_logger.log_validation_failure(errors, data)
                    return ValidationResult.fail(errors)

            result = validate_schema(schema, sanitized)
            if not result.success:
                self.security_logger.log_validation_failure(result.errors, data)
            return result
        except Exception:
            logger.exception("%s validation raised unexpectedly", entity)
            return _generic_failure(entity)

    def validate_user(self, data: Any) -> ValidationResult:
        return self._run("User", data, sanitize.user, UserSchema)

    def validate_account(self, data: Any) -> ValidationResult:
        return self._run("Account", data, sanitize.account, AccountSchema)

    def validate_transaction(self, data: Any) -> ValidationResult:
        return self._run(
            "Transaction",
            data,
            sanitize.transaction,
            TransactionSchema,
            rules=(self.boundary_rule,),
        )

    def validate_payment(self, data: Any) -> ValidationResult:
        return self._run(
            "Payment",
            data,
            sanitize.payment,
            PaymentSchema,
            rules=(self.boundary_rule, self.distinct_accounts_rule),
        )

    def validate_transfer(self, data: Any) -> ValidationResult:
        return self._run(
            "Transfer",
            data,
            sanitize.transfer,
            TransferSchema,
            rules=(self.boundary_rule, self.distinct_accounts_rule),
        )

    def validate_category(self, data: Any) -> ValidationResult:
        return self._run("Category", data, sanitize.category, CategorySchema)

    def validate_description(self, data: Any) -> ValidationResult:
        return self._run("Description", data, sanitize.description, DescriptionSchema)

    def validate_financial_boundaries(self, amount: Any, transaction_date: Any) -> ValidationResult:
        """Check the amount cap and the fixed one-year date window.

        Returns:
            Success carrying the checked values, or every boundary violation.
        """
        errors = self.boundary_rule.check_values(amount, transaction_date)
        if errors:
            return ValidationResult.fail(errors)
        return ValidationResult.ok({"amount": amount, "transactionDate": transaction_date})

    @staticmethod
    def is_suspicious_amount(amount: Any) -> bool:
        return is_suspicious_amount(amount)

    def screen_suspicious_amount(self, amount: Any) -> ValidationError | None:
        """Return a SUSPICIOUS_AMOUNT warning for callers opting into fraud screening."""
        errors = self.suspicious_amount_rule.check({"amount": amount})
        return errors[0] if errors else None

    def validate_financial_array(
        self, items: Iterable[Any], validator: EntityValidator
    ) -> FinancialArrayResult:
        """Validate each item, isolating failures to their index.

        A validator that raises only fails its own item; the exception is
        logged and the item is reported with a generic VALIDATION_ERROR.

        Example:
            >>> v = DataValidator()
            >>> outcome = v.validate_financial_array(
            ...     [{"categoryName": "food"}, {"categoryName": ""}], v.validate_category
            ... )
            >>> len(outcome.valid_items), [e.index for e in outcome.errors]
            (1, [1])
        """
        valid_items: list[Any] = []
        failures: list[IndexedErrors] = []

        for index, item in enumerate(items):
            try:
                result = validator(item)
            except Exception:
                logger.exception("Validator raised on item %d", index)
                failures.append(
                    IndexedErrors(
                        index,
                        (
                            ValidationError(
                                "validation", "Item validation failed", ErrorCode.VALIDATION_ERROR
                            ),
                        ),
                    )
                )
                continue

            if result.success:
                valid_items.append(result.data)
            else:
                failures.append(IndexedErrors(index, tuple(result.errors)))

        return FinancialArrayResult(
            success=not failures, valid_items=valid_items, errors=failures
        )

    def validate_rate_limit(self, identifier: str, action: str) -> bool:
        """Return False when ``identifier`` has exceeded its attempts for ``action``.

        Without a configured rate limiter every attempt is allowed.
        """
        if self.rate_limiter is None:
            return True
        return self.rate_limiter.check_and_increment(f"{identifier}:{action}")
