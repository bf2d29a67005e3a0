"""
Core dataclass definitions for the Capgraph system.

These define the read-only entity graph: entities, their scalar fields
(with formatting capability) and their relations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional


# Scalar kinds understood by the comparator set
SCALAR_KINDS = frozenset({
    "text",
    "integer",
    "decimal",
    "float",
    "date",
    "time",
    "datetime",
    "boolean",
    "enum",
})

Cardinality = Literal["one", "many"]

Formatter = Callable[[Any, dict[str, Any]], Any]


@dataclass(frozen=True)
class FormatArgument:
    """Sub-argument attached alongside a field's ``format`` argument."""
    name: str  # e.g. "limit", "customFormat"
    kind: str  # scalar kind of the argument value
    required: bool = False


@dataclass(frozen=True)
class FormatOption:
    """
    A single formatting option supported by a field.

    The option name becomes one value of the field's format enumeration.
    ``arguments`` lists sub-arguments the option reads (e.g. TRUNCATE needs
    an integer ``limit``).
    """
    name: str
    arguments: tuple[FormatArgument, ...] = ()
    formatter: Optional[Formatter] = field(default=None, compare=False)


@dataclass(frozen=True)
class FieldDef:
    """Definition of a scalar entity field."""
    name: str
    kind: str  # one of SCALAR_KINDS
    formats: tuple[FormatOption, ...] = ()

    @property
    def formattable(self) -> bool:
        return bool(self.formats)

    def format_option(self, name: str) -> Optional[FormatOption]:
        return next((opt for opt in self.formats if opt.name == name), None)


@dataclass(frozen=True)
class RelationDef:
    """
    Definition of a relation between entities.

    ``target`` is the target entity name, not the entity itself, so cyclic
    graphs are representable without ownership cycles.
    """
    name: str
    target: str
    cardinality: Cardinality

    @property
    def to_many(self) -> bool:
        return self.cardinality == "many"


@dataclass(frozen=True)
class EntityDef:
    """Complete definition of an entity."""
    name: str
    fields: dict[str, FieldDef]
    relations: dict[str, RelationDef] = field(default_factory=dict)

    def has_member(self, name: str) -> bool:
        return name in self.fields or name in self.relations
