"""
Comparator set - the fixed vocabulary of filter operators.

Each comparator declares the scalar kinds it accepts. ``in`` takes a
sequence of the field's base value type; every other comparator takes a
single value.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .errors import InvalidComparator, InvalidFilterValue


TEXT_KINDS = frozenset({"text"})
ORDERED_KINDS = frozenset({"integer", "decimal", "float", "date", "time", "datetime"})
EQUALITY_KINDS = frozenset({
    "text", "integer", "decimal", "float", "date", "time", "datetime", "boolean", "enum",
})
# Declaration order is the order comparators appear in filter shapes
COMPARATORS: dict[str, frozenset[str]] = {
    "eq": EQUALITY_KINDS,
    "ne": EQUALITY_KINDS,
    "contains": TEXT_KINDS,
    "gt": ORDERED_KINDS,
    "lt": ORDERED_KINDS,
    "gte": ORDERED_KINDS,
    "lte": ORDERED_KINDS,
    "in": EQUALITY_KINDS,
    "startswith": TEXT_KINDS,
    "endswith": TEXT_KINDS,
}

# Python value types per scalar kind, used to coerce filter values
_KIND_TYPES: dict[str, Any] = {
    "text": str,
    "enum": str,
    "integer": int,
    "decimal": Decimal,
    "float": float,
    "date": date,
    "time": time,
    "datetime": datetime,
    "boolean": bool,
}

_ADAPTERS: dict[str, TypeAdapter] = {kind: TypeAdapter(tp) for kind, tp in _KIND_TYPES.items()}
_LIST_ADAPTERS: dict[str, TypeAdapter] = {
    kind: TypeAdapter(list[tp]) for kind, tp in _KIND_TYPES.items()
}


def comparators_for(kind: str) -> tuple[str, ...]:
    """Return the comparators applicable to a scalar kind, in declaration order."""
    return tuple(name for name, kinds in COMPARATORS.items() if kind in kinds)


def check_comparator(comparator: str, kind: str, path: str | None = None):
    """Raise InvalidComparator if ``comparator`` does not apply to ``kind``."""
    if comparator not in COMPARATORS:
        raise InvalidComparator(f"unknown comparator '{comparator}'", path=path)
    if kind not in COMPARATORS[comparator]:
        raise InvalidComparator(
            f"comparator '{comparator}' cannot be applied to a {kind} field "
            f"(allowed: {list(comparators_for(kind))})",
            path=path,
        )


def coerce_value(comparator: str, kind: str, value: Any, path: str | None = None) -> Any:
    """
    Validate and coerce a filter value for ``comparator`` on a ``kind`` field.

    ISO strings are accepted for date/time/datetime. ``in`` requires a list.
    """
    if comparator == "in":
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise InvalidFilterValue(
                f"comparator 'in' expects a list of {kind} values, got {type(value).__name__}",
                path=path,
            )
        adapter = _LIST_ADAPTERS[kind]
        value = list(value)
    else:
        if value is None or isinstance(value, (list, tuple, dict)):
            raise InvalidFilterValue(
                f"comparator '{comparator}' expects a single {kind} value", path=path
            )
        adapter = _ADAPTERS[kind]

    if kind in ("integer", "decimal", "float") and _contains_bool(value):
        raise InvalidFilterValue(f"expected a {kind} value, got a boolean", path=path)

    try:
        return adapter.validate_python(value)
    except PydanticValidationError as e:
        raise InvalidFilterValue(
            f"invalid {kind} value {value!r}: {e.errors()[0]['msg']}", path=path
        ) from None


def _contains_bool(value: Any) -> bool:
    if isinstance(value, list):
        return any(isinstance(item, bool) for item in value)
    return isinstance(value, bool)
