"""Payload validation shared by every ledger store backend.

Backends call these before touching storage so that the in-memory and the
SQLAlchemy store accept and reject exactly the same payloads.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from finledger.domain.entities import TipType
from finledger.domain.errors import ValidationError, invalid_field
from finledger.utils.amount_parser import quantize_amount
from finledger.utils.date_parser import to_date

STORE_ASSIGNED_FIELDS = frozenset({"id", "user_id", "created_at"})


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected text, got {type(value).__name__}")
    if not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


def _amount(value: Any) -> Decimal:
    return quantize_amount(value)


def _date(value: Any) -> date:
    return to_date(value)


def _integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"expected an integer, got {value!r}")


def _month(value: Any) -> int:
    month = _integer(value)
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return month


def _year(value: Any) -> int:
    year = _integer(value)
    if not 1 <= year <= 9999:
        raise ValueError(f"year out of range: {year}")
    return year


def _tip_type(value: Any) -> TipType:
    try:
        return TipType(value)
    except ValueError:
        choices = ", ".join(t.value for t in TipType)
        raise ValueError(f"must be one of {choices}, got {value!r}")


def _breakdown(value: Any) -> dict[str, Decimal]:
    if not isinstance(value, Mapping):
        raise ValueError(f"expected a mapping of label to amount, got {type(value).__name__}")
    result = {}
    for label, amount in value.items():
        if not isinstance(label, str) or not label.strip():
            raise ValueError(f"breakdown labels must be non-empty text, got {label!r}")
        result[label] = quantize_amount(amount)
    return result


@dataclass(frozen=True)
class _Field:
    coerce: Callable[[Any], Any]
    default: Optional[Callable[[], Any]] = None

    @property
    def required(self) -> bool:
        return self.default is None


ENTITY_FIELDS: dict[str, dict[str, _Field]] = {
    "category": {
        "name": _Field(_text),
    },
    "invoice": {
        "customer_name": _Field(_text),
        "description": _Field(_text),
        "amount": _Field(_amount),
        "due_date": _Field(_date),
        "status": _Field(_text),
    },
    "expense": {
        "description": _Field(_text),
        "amount": _Field(_amount),
        "category": _Field(_text),
        "date": _Field(_date),
    },
    "budget": {
        "category": _Field(_text),
        "amount": _Field(_amount),
        "month": _Field(_month),
        "year": _Field(_year),
    },
    "goal": {
        "name": _Field(_text),
        "target_amount": _Field(_amount),
        "current_amount": _Field(_amount, default=lambda: Decimal("0.00")),
        "deadline": _Field(_date),
        "breakdown": _Field(_breakdown, default=dict),
    },
    "tip": {
        "type": _Field(_tip_type),
        "message": _Field(_text),
    },
}


def _fields_for(kind: str) -> dict[str, _Field]:
    try:
        return ENTITY_FIELDS[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind '{kind}'")


def _check_keys(kind: str, operation: str, payload: Mapping[str, Any]) -> dict[str, _Field]:
    if not isinstance(payload, Mapping):
        raise ValidationError(
            invalid_field(kind, operation, f"payload must be a mapping, got {type(payload).__name__}")
        )
    fields = _fields_for(kind)
    assigned = sorted(STORE_ASSIGNED_FIELDS.intersection(payload))
    if assigned:
        raise ValidationError(
            invalid_field(kind, operation, f"{', '.join(assigned)} cannot be set by the caller")
        )
    unknown = sorted(set(payload) - set(fields))
    if unknown:
        raise ValidationError(invalid_field(kind, operation, f"unknown field(s) {', '.join(unknown)}"))
    return fields


def _coerce(kind: str, operation: str, name: str, field: _Field, value: Any) -> Any:
    if value is None:
        raise ValidationError(invalid_field(kind, operation, f"{name} is required"))
    try:
        return field.coerce(value)
    except ValueError as e:
        raise ValidationError(invalid_field(kind, operation, f"{name} {e}")) from e


def validate_payload(kind: str, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a create payload and return the normalized field values.

    Args:
        kind: Entity kind ("category", "invoice", "expense", "budget", "goal", "tip")
        payload: Caller-supplied fields, excluding store-assigned ones

    Returns:
        Dict with every field of the kind, coerced and defaulted

    Raises:
        ValidationError: If a field is missing, unknown, store-assigned or malformed
    """
    fields = _check_keys(kind, "create", payload)
    values = {}
    for name, field in fields.items():
        if name not in payload and not field.required:
            values[name] = field.default()
            continue
        values[name] = _coerce(kind, "create", name, field, payload.get(name))
    return values


def validate_changes(kind: str, changes: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial update; only the supplied fields are returned."""
    fields = _check_keys(kind, "update", changes)
    return {
        name: _coerce(kind, "update", name, fields[name], value)
        for name, value in changes.items()
    }


def validate_user(username: Any, password: Any) -> tuple[str, str]:
    """Validate the fields of a new user. The password hash is kept verbatim."""
    username = _coerce("user", "create", "username", _Field(_text), username)
    if not isinstance(password, str) or not password:
        raise ValidationError(invalid_field("user", "create", "password is required"))
    return username, password


def validate_tip_type(value: Any) -> TipType:
    """Validate a tip type used as a query filter."""
    return _coerce("tip", "list", "type", _Field(_tip_type), value)
