"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Payload violates entity field constraints."""


class ConflictError(ValidationError):
    """Payload collides with a uniqueness constraint."""


class UpstreamUnavailable(DomainError):
    """The exchange rate source failed or timed out."""


class UnknownCurrency(DomainError):
    """Currency code is missing from the latest rate snapshot."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown currency code '{code}'")


def invalid_field(kind: str, operation: str, detail: str) -> str:
    """Return message for a payload that failed validation."""
    return f"{kind}.{operation}: {detail}"


def entity_not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing user-scoped entity."""
    return f"{kind.capitalize()} {entity_id} not found"


def duplicate_username(username: str) -> str:
    """Return message for a username that is already taken."""
    return f"User '{username}' already exists"


def duplicate_budget(category: str, month: int, year: int) -> str:
    """Return message for a second budget in the same category and period."""
    return f"Budget for '{category}' in {year}-{month:02d} already exists"
