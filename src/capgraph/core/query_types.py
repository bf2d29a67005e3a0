"""
Pydantic models for compiled read requests and their results.

These define the logical request handed to the data store (predicate tree,
sort keys, row window) and the connection-shaped result returned to callers.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Predicate tree ---

class FilterCondition(BaseModel):
    """
    Leaf condition.

    Input: {"customer": {"name": {"startswith": "A"}}}
    Leaf:  FilterCondition(path=("customer", "name"), comparator="startswith", value="A")

    ``path`` is qualified from the root entity; the leaf applies to the
    last element within the scope of its enclosing relation predicate.
    """
    path: tuple[str, ...]
    comparator: str
    value: Any

    @property
    def field(self) -> str:
        return self.path[-1]


class Predicate(BaseModel):
    """AND of leaf conditions and relation sub-predicates. There is no OR."""
    conditions: list[FilterCondition] = Field(default_factory=list)
    relations: list[RelationPredicate] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.conditions and not self.relations

    def and_(self, other: "Predicate") -> "Predicate":
        """Conjunction of two predicates at the same scope."""
        return Predicate(
            conditions=[*self.conditions, *other.conditions],
            relations=[*self.relations, *other.relations],
        )


class RelationPredicate(BaseModel):
    """
    Sub-predicate scoped to a relation target.

    To-one: the related row must satisfy ``predicate``.
    To-many: at least one related row must satisfy ``predicate``.
    """
    relation: str
    cardinality: Literal["one", "many"]
    predicate: Predicate


# --- Sort ---

class SortKey(BaseModel):
    """
    Normalized sort key.

    Input: {"customer": {"name": "DESC"}}
    Normalized: SortKey(path=("customer", "name"), direction="DESC")
    """
    path: tuple[str, ...]
    direction: Literal["ASC", "DESC"] = "ASC"


# --- Pagination ---

class PageRequest(BaseModel):
    """Effective row window after defaults are applied."""
    limit: Optional[int] = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


# --- Data store request ---

class ReadQuery(BaseModel):
    """
    The compiled request the data store executes.

    ``clauses`` holds store-native criteria appended by custom resolution
    hooks (SQLAlchemy expressions, or ``row -> bool`` callables for the
    in-memory store). They AND-combine with ``predicate``.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    entity: str
    predicate: Predicate = Field(default_factory=Predicate)
    sort: list[SortKey] = Field(default_factory=list)
    limit: Optional[int] = None
    offset: int = 0
    clauses: list[Any] = Field(default_factory=list)

    def where(self, clause: Any) -> "ReadQuery":
        """Return a copy with an extra store-native clause."""
        return self.model_copy(update={"clauses": [*self.clauses, clause]})

    def filter(self, predicate: Predicate) -> "ReadQuery":
        """Return a copy with ``predicate`` AND-combined into the current one."""
        return self.model_copy(update={"predicate": self.predicate.and_(predicate)})

    def window(self, limit: Optional[int], offset: int = 0) -> "ReadQuery":
        return self.model_copy(update={"limit": limit, "offset": offset})


# --- Connection result ---

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageInfo(_CamelModel):
    """Pagination metadata in response."""
    has_next_page: bool
    has_previous_page: bool
    total_count: int


class Edge(_CamelModel):
    node: dict[str, Any]


class Connection(_CamelModel):
    """
    Paginated result envelope.

    ``nodes`` and ``edges[*].node`` are the same rows in the same order;
    ``total_count`` counts filtered rows before the window is applied.
    """
    nodes: list[dict[str, Any]]
    edges: list[Edge]
    page_info: PageInfo

    @classmethod
    def build(cls, nodes: list[dict[str, Any]], offset: int, total_count: int) -> "Connection":
        return cls(
            nodes=nodes,
            edges=[Edge(node=node) for node in nodes],
            page_info=PageInfo(
                has_next_page=offset + len(nodes) < total_count,
                has_previous_page=offset > 0,
                total_count=total_count,
            ),
        )


Predicate.model_rebuild()
RelationPredicate.model_rebuild()
