"""
Filter engine - nested predicate filtering for read operations.

Builds the filter argument shape for an entity, validates filter input
against it and compiles it into a predicate tree for the data store.

Filter input mirrors the shape:

    {
        "status": {"eq": "paid"},
        "total": {"gt": 10, "lte": 100},
        "customer": {"company": {"name": {"startswith": "Acme"}}},
        "isOverdue": {"ne": True},          # custom field, handled by its resolver
    }

All conditions AND-combine; there is no OR.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..core.comparators import check_comparator, coerce_value, comparators_for
from ..core.defs import EntityDef
from ..core.errors import InvalidComparator, InvalidFilterValue, MissingResolver, UnknownFilterField
from ..core.query_types import FilterCondition, Predicate, ReadQuery, RelationPredicate
from ..core.utils import dotted
from .base import CapabilityEngine
from .config import CustomFieldDef, Resolver

logger = logging.getLogger(__name__)


# =============================================================================
# Shape
# =============================================================================


@dataclass(frozen=True)
class ScalarFilterShape:
    """Leaf: a field with its applicable comparators."""
    name: str
    kind: str
    comparators: tuple[str, ...]
    resolver: Optional[Resolver] = field(default=None, compare=False)

    variant = "scalar"

    @property
    def custom(self) -> bool:
        return self.resolver is not None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "comparators": list(self.comparators), "custom": self.custom}


@dataclass(frozen=True)
class RelationFilterShape:
    """Branch: a relation whose target has its own filter shape."""
    name: str
    target: str
    cardinality: str
    shape: "EntityFilterShape"

    variant = "relation"

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "cardinality": self.cardinality,
            "fields": self.shape.to_dict(),
        }


FilterMember = Union[ScalarFilterShape, RelationFilterShape]


@dataclass(frozen=True)
class EntityFilterShape:
    entity: str
    members: dict[str, FilterMember]

    def to_dict(self) -> dict[str, Any]:
        return {name: member.to_dict() for name, member in self.members.items()}


@dataclass
class FilterCompilation:
    """Native predicate plus the custom-field conditions left to resolvers."""
    predicate: Predicate
    custom: list[tuple[ScalarFilterShape, str, Any]] = field(default_factory=list)


# =============================================================================
# Engine
# =============================================================================


class FilterEngine(CapabilityEngine):
    """
    Filter capability for one entity operation.

    The shape is built once at construction; construction fails with
    MissingResolver if a custom field has no resolver.

    Usage:
        engine = FilterEngine(graph, config, "Order")
        query = engine.apply(ReadQuery(entity="Order"), {"filter": {...}})
    """

    plugin = "filter"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.shape = self._build_shape(self.entity, (self.entity.name,), root=True)

    # -------------------------------------------------------------------------
    # Shape construction
    # -------------------------------------------------------------------------

    def _build_shape(
        self, entity: EntityDef, visited: tuple[str, ...], root: bool = False
    ) -> EntityFilterShape:
        plugin = self.plugin_config(entity.name)
        members: dict[str, FilterMember] = {}

        for name, field_def in entity.fields.items():
            if plugin.allows(name):
                members[name] = ScalarFilterShape(
                    name=name,
                    kind=field_def.kind,
                    comparators=comparators_for(field_def.kind),
                )

        for name, relation in entity.relations.items():
            if not plugin.allows(name) or not self.can_descend(entity, relation, visited):
                continue
            target = self.graph.entity(relation.target)
            members[name] = RelationFilterShape(
                name=name,
                target=target.name,
                cardinality=relation.cardinality,
                shape=self._build_shape(target, (*visited, target.name)),
            )

        if root:
            for name, custom in plugin.custom_fields.items():
                members[name] = self._custom_member(entity, custom)

        return EntityFilterShape(entity=entity.name, members=members)

    def _custom_member(self, entity: EntityDef, custom: CustomFieldDef) -> ScalarFilterShape:
        if custom.resolver is None and custom.name not in entity.fields:
            raise MissingResolver(entity.name, custom.name)
        comparators = comparators_for(custom.kind)
        if not comparators:
            raise InvalidComparator(
                f"custom field kind '{custom.kind}' supports no comparators",
                path=f"{entity.name}.{custom.name}",
            )
        return ScalarFilterShape(
            name=custom.name,
            kind=custom.kind,
            comparators=comparators,
            resolver=custom.resolver,
        )

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------

    def compile(self, node: Optional[dict[str, Any]]) -> FilterCompilation:
        """
        Validate ``node`` against the shape and compile it.

        Raises UnknownFilterField, InvalidComparator or InvalidFilterValue.
        """
        compilation = FilterCompilation(predicate=Predicate())
        if node:
            compilation.predicate = self._compile_node(node, self.shape, (), compilation)
        logger.debug(f"Compiled filter for {self.entity.name}: {compilation.predicate}")
        return compilation

    def _compile_node(
        self,
        node: Any,
        shape: EntityFilterShape,
        path: tuple[str, ...],
        compilation: FilterCompilation,
    ) -> Predicate:
        if not isinstance(node, dict):
            raise InvalidFilterValue(
                f"expected an object of fields, got {type(node).__name__}",
                path=dotted(path) or None,
            )

        predicate = Predicate()
        for name, value in node.items():
            member_path = (*path, name)
            member = shape.members.get(name)
            if member is None:
                raise UnknownFilterField(
                    f"'{name}' is not a filterable field of {shape.entity}",
                    path=dotted(member_path),
                )

            if member.variant == "relation":
                nested = self._compile_node(value, member.shape, member_path, compilation)
                if not nested.is_empty:
                    predicate.relations.append(RelationPredicate(
                        relation=name,
                        cardinality=member.cardinality,
                        predicate=nested,
                    ))
                continue

            for comparator, operand in self._comparisons(member, value, member_path):
                if member.custom:
                    compilation.custom.append((member, comparator, operand))
                else:
                    predicate.conditions.append(FilterCondition(
                        path=member_path, comparator=comparator, value=operand,
                    ))

        return predicate

    def _comparisons(
        self, member: ScalarFilterShape, value: Any, path: tuple[str, ...]
    ) -> list[tuple[str, Any]]:
        location = dotted(path)
        if not isinstance(value, dict):
            raise InvalidFilterValue(
                f"expected an object of comparators, got {type(value).__name__}",
                path=location,
            )

        result = []
        for comparator, operand in value.items():
            check_comparator(comparator, member.kind, path=location)
            if comparator not in member.comparators:
                raise InvalidComparator(
                    f"comparator '{comparator}' is not available for '{member.name}'",
                    path=location,
                )
            result.append((comparator, coerce_value(comparator, member.kind, operand, path=location)))
        return result

    # -------------------------------------------------------------------------
    # Execution-time contribution
    # -------------------------------------------------------------------------

    def apply(self, query: ReadQuery, arguments: dict[str, Any]) -> ReadQuery:
        """
        Add the compiled filter to ``query``, then run custom resolvers.

        Each resolver receives the query built so far, the full arguments and
        ``{"comparator": ..., "value": ...}``.
        """
        compilation = self.compile(arguments.get("filter"))
        query = query.filter(compilation.predicate)
        for member, comparator, operand in compilation.custom:
            logger.debug(f"Resolving custom filter {self.entity.name}.{member.name} {comparator}")
            query = member.resolver(query, arguments, {"comparator": comparator, "value": operand})
        return query
