"""
SQLAlchemy data store.

Compiles a ReadQuery into SQLAlchemy statements:
- leaf conditions become column comparisons
- to-one relation predicates become ``relationship.has(...)``
- to-many relation predicates become ``relationship.any(...)``
- sort paths through to-one relations use aliased outer joins

Usage:
    async with session_maker() as session:
        store = SQLAlchemyDataStore(session, {"Order": Order, "Customer": Customer})
        total = await store.count(query)
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import and_, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, aliased

from ..core.errors import UnknownEntity
from ..core.query_types import Predicate, ReadQuery

logger = logging.getLogger(__name__)


def _compare(column, comparator: str, value: Any):
    """Build a single comparison clause."""
    if comparator == "eq":
        return column == value
    elif comparator == "ne":
        return column != value
    elif comparator == "gt":
        return column > value
    elif comparator == "lt":
        return column < value
    elif comparator == "gte":
        return column >= value
    elif comparator == "lte":
        return column <= value
    elif comparator == "in":
        return column.in_(value)
    elif comparator == "contains":
        return column.contains(value, autoescape=True)
    elif comparator == "startswith":
        return column.startswith(value, autoescape=True)
    elif comparator == "endswith":
        return column.endswith(value, autoescape=True)
    raise ValueError(f"Unsupported comparator '{comparator}'")


class SQLAlchemyDataStore:
    """
    Data store backed by an AsyncSession.

    ``models`` maps entity names to declarative model classes. Relation names
    in predicates and sort paths must match relationship attribute names.
    Clauses added by resolvers may be SQLAlchemy expressions, or callables
    taking the model class and returning one.
    """

    def __init__(self, session: AsyncSession, models: dict[str, type[DeclarativeBase]]):
        self.session = session
        self.models = models

    def _model(self, entity: str) -> type[DeclarativeBase]:
        model = self.models.get(entity)
        if model is None:
            raise UnknownEntity(entity)
        return model

    # -------------------------------------------------------------------------
    # Statement building
    # -------------------------------------------------------------------------

    def _clauses(self, model, predicate: Predicate) -> list:
        clauses = []
        for condition in predicate.conditions:
            column = getattr(model, condition.field)
            clauses.append(_compare(column, condition.comparator, condition.value))
        for nested in predicate.relations:
            attr = getattr(model, nested.relation)
            target = attr.property.mapper.class_
            inner = and_(*self._clauses(target, nested.predicate))
            if nested.cardinality == "one":
                clauses.append(attr.has(inner))
            else:
                clauses.append(attr.any(inner))
        return clauses

    def _filtered(self, query: ReadQuery):
        model = self._model(query.entity)
        stmt = select(model)
        for clause in self._clauses(model, query.predicate):
            stmt = stmt.where(clause)
        for clause in query.clauses:
            stmt = stmt.where(clause(model) if callable(clause) else clause)
        return model, stmt

    def _ordered(self, model, stmt, query: ReadQuery):
        joins: dict[tuple[str, ...], Any] = {}
        for key in query.sort:
            current = model
            prefix: tuple[str, ...] = ()
            for relation in key.path[:-1]:
                prefix = (*prefix, relation)
                if prefix not in joins:
                    attr = getattr(current, relation)
                    alias = aliased(attr.property.mapper.class_)
                    stmt = stmt.outerjoin(alias, attr.of_type(alias))
                    joins[prefix] = alias
                current = joins[prefix]

            # NULLs sort first ascending and last descending, as in MemoryDataStore
            column = getattr(current, key.path[-1])
            if key.direction == "DESC":
                stmt = stmt.order_by(column.desc().nulls_last())
            else:
                stmt = stmt.order_by(column.asc().nulls_first())

        # Primary key as the final tiebreaker keeps windows stable
        for pk in inspect(model).primary_key:
            stmt = stmt.order_by(pk.asc())
        return stmt

    # -------------------------------------------------------------------------
    # DataStore interface
    # -------------------------------------------------------------------------

    async def count(self, query: ReadQuery) -> int:
        _, stmt = self._filtered(query)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        result = await self.session.execute(count_stmt)
        return result.scalar() or 0

    async def fetch(self, query: ReadQuery) -> list[dict[str, Any]]:
        model, stmt = self._filtered(query)
        stmt = self._ordered(model, stmt, query)
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        result = await self.session.execute(stmt)
        rows = result.scalars().all()
        logger.debug(f"Fetched {len(rows)} {query.entity} rows")
        return [self._model_to_dict(row) for row in rows]

    def _model_to_dict(self, instance) -> dict[str, Any]:
        """Convert model instance to dict of its column attributes."""
        mapper = inspect(type(instance))
        return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}
