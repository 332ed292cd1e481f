"""Entity registry for the CLI.

Maps the entity names accepted on the command line to the DataValidator
method that validates them, so commands can look validators up by name.
"""

from dataclasses import dataclass

from finval.validation.protocols import EntityValidator
from finval.validation.validator import DataValidator


@dataclass(frozen=True)
class EntityEntry:
    """How to validate one entity type from the command line."""

    method: str
    description: str


ENTITIES: dict[str, EntityEntry] = {
    "account": EntityEntry("validate_account", "Bank or credit account"),
    "category": EntityEntry("validate_category", "Transaction category"),
    "description": EntityEntry("validate_description", "Payee or transaction description"),
    "payment": EntityEntry("validate_payment", "Payment between two accounts"),
    "transaction": EntityEntry("validate_transaction", "Single account transaction"),
    "transfer": EntityEntry("validate_transfer", "Transfer between two accounts"),
    "user": EntityEntry("validate_user", "Application user"),
}


def get_entity_validator(name: str, validator: DataValidator) -> EntityValidator:
    """Get the bound validate method for an entity.

    Args:
        name: Entity name (case-insensitive)
        validator: DataValidator to bind the method to

    Raises:
        KeyError: If the entity is unknown, with message listing available entities

    Example:
        >>> validate = get_entity_validator("payment", DataValidator())
        >>> validate.__name__
        'validate_payment'
    """
    key = name.strip().lower()
    if key not in ENTITIES:
        available = ", ".join(sorted(ENTITIES))
        raise KeyError(f"Unknown entity '{name}'. Available: {available}")
    return getattr(validator, ENTITIES[key].method)


def list_entities() -> dict[str, str]:
    return {name: entry.description for name, entry in sorted(ENTITIES.items())}
