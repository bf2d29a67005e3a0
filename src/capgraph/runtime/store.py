"""
Data store interface and the in-memory implementation.

A data store executes a compiled ReadQuery. It exposes two operations:
- count(query): number of rows matching the predicate (window ignored)
- fetch(query): matching rows, sorted, within the query's window
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

from ..core.query_types import Predicate, ReadQuery, SortKey

logger = logging.getLogger(__name__)


@runtime_checkable
class DataStore(Protocol):
    async def count(self, query: ReadQuery) -> int: ...

    async def fetch(self, query: ReadQuery) -> list[dict[str, Any]]: ...


def _contains(value: Any, operand: Any) -> bool:
    return isinstance(value, str) and operand in value


def _startswith(value: Any, operand: Any) -> bool:
    return isinstance(value, str) and value.startswith(operand)


def _endswith(value: Any, operand: Any) -> bool:
    return isinstance(value, str) and value.endswith(operand)


def _in(value: Any, operand: Any) -> bool:
    return value in operand


COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "lt": operator.lt,
    "gte": operator.ge,
    "lte": operator.le,
    "in": _in,
    "contains": _contains,
    "startswith": _startswith,
    "endswith": _endswith,
}


class MemoryDataStore:
    """
    Data store over plain dict rows.

    Rows of each entity are dicts; a to-one relation is a nested dict (or
    None), a to-many relation a list of dicts. A missing or None value never
    satisfies a comparison, matching SQL NULL semantics. Clauses added by
    resolvers are ``row -> bool`` callables.

    Usage:
        store = MemoryDataStore({"Order": [{"id": 1, "customer": {"name": "Ann"}}]})
        rows = await store.fetch(query)
    """

    def __init__(self, tables: Optional[dict[str, Iterable[dict[str, Any]]]] = None):
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: list(rows) for name, rows in (tables or {}).items()
        }

    async def count(self, query: ReadQuery) -> int:
        return len(self._matching(query))

    async def fetch(self, query: ReadQuery) -> list[dict[str, Any]]:
        rows = self._sorted(self._matching(query), query.sort)
        end = None if query.limit is None else query.offset + query.limit
        return [dict(row) for row in rows[query.offset:end]]

    def _matching(self, query: ReadQuery) -> list[dict[str, Any]]:
        return [
            row for row in self.tables.get(query.entity, [])
            if self.matches(row, query.predicate) and all(clause(row) for clause in query.clauses)
        ]

    @classmethod
    def matches(cls, row: Optional[dict[str, Any]], predicate: Predicate) -> bool:
        """Evaluate ``predicate`` against ``row``."""
        if row is None:
            return False
        for condition in predicate.conditions:
            value = row.get(condition.field)
            if value is None:
                return False
            if not COMPARISONS[condition.comparator](value, condition.value):
                return False
        for nested in predicate.relations:
            related = row.get(nested.relation)
            if nested.cardinality == "one":
                if not cls.matches(related, nested.predicate):
                    return False
            elif not any(cls.matches(item, nested.predicate) for item in related or []):
                return False
        return True

    @staticmethod
    def _sorted(rows: list[dict[str, Any]], keys: list[SortKey]) -> list[dict[str, Any]]:
        # stable sorts applied from the least significant key; NULLs first ascending
        rows = list(rows)
        for key in reversed(keys):
            def sort_value(row, path=key.path):
                value: Any = row
                for name in path:
                    value = value.get(name) if isinstance(value, dict) else None
                return (value is not None, value if value is not None else 0)

            rows.sort(key=sort_value, reverse=key.direction == "DESC")
        return rows
