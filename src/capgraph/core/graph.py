"""
Entity graph - read-only index of entities by name.

Relations store their target as a name, so self-referential and mutually
referential entities are plain data. Components that traverse the graph
are responsible for bounding their own recursion.

Usage:
    graph = EntityGraph.from_dict({
        "entities": {
            "Order": {
                "fields": {"id": {"kind": "integer"}, "status": {"kind": "text", "formats": True}},
                "relations": {"customer": {"target": "Customer", "cardinality": "one"}},
            },
            "Customer": {...},
        }
    })
    graph.target("Order", "customer")  # -> EntityDef for Customer
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator

from .defs import (
    SCALAR_KINDS,
    EntityDef,
    FieldDef,
    FormatArgument,
    FormatOption,
    RelationDef,
)
from .errors import GraphConfigError, UnknownEntity
from .formats import default_formats


class EntityGraph:
    """
    Immutable index of entity definitions.

    Build it with ``EntityGraph(entities)`` or ``EntityGraph.from_dict(...)``;
    both validate that every relation points at a known entity.
    """

    def __init__(self, entities: Iterable[EntityDef]):
        index: dict[str, EntityDef] = {}
        for entity in entities:
            index[entity.name] = EntityDef(
                name=entity.name,
                fields=MappingProxyType(dict(entity.fields)),
                relations=MappingProxyType(dict(entity.relations)),
            )
        self._entities = MappingProxyType(index)
        self._validate()

    def _validate(self):
        errors: list[str] = []
        for entity in self._entities.values():
            for field in entity.fields.values():
                if field.kind not in SCALAR_KINDS:
                    errors.append(
                        f"{entity.name}.{field.name}: invalid kind '{field.kind}', "
                        f"must be one of {sorted(SCALAR_KINDS)}"
                    )
            for relation in entity.relations.values():
                if relation.name in entity.fields:
                    errors.append(
                        f"{entity.name}.{relation.name}: relation shadows a field of the same name"
                    )
                if relation.cardinality not in ("one", "many"):
                    errors.append(
                        f"{entity.name}.{relation.name}: invalid cardinality "
                        f"'{relation.cardinality}', must be 'one' or 'many'"
                    )
                if relation.target not in self._entities:
                    errors.append(
                        f"{entity.name}.{relation.name}: unknown target entity '{relation.target}'"
                    )
        if errors:
            raise GraphConfigError(errors)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[EntityDef]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    @property
    def names(self) -> list[str]:
        return list(self._entities)

    def entity(self, name: str) -> EntityDef:
        """Get entity definition by name."""
        try:
            return self._entities[name]
        except KeyError:
            raise UnknownEntity(name) from None

    def fields(self, name: str) -> MappingProxyType:
        return self.entity(name).fields

    def relations(self, name: str) -> MappingProxyType:
        return self.entity(name).relations

    def target(self, entity_name: str, relation_name: str) -> EntityDef:
        """Get the target entity of a relation."""
        relation = self.entity(entity_name).relations[relation_name]
        return self.entity(relation.target)

    # -------------------------------------------------------------------------
    # Construction from metadata dicts
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EntityGraph":
        """
        Build the graph from entity metadata.

        Field ``formats`` may be ``True`` (built-in options for the kind), or a
        list of option names / ``{"name", "arguments"}`` dicts.
        """
        errors: list[str] = []
        entities: list[EntityDef] = []

        for entity_name, entity_data in data.get("entities", {}).items():
            fields: dict[str, FieldDef] = {}
            for field_name, field_data in entity_data.get("fields", {}).items():
                kind = field_data.get("kind")
                if not kind:
                    errors.append(f"{entity_name}.{field_name}: missing kind")
                    continue
                fields[field_name] = FieldDef(
                    name=field_name,
                    kind=kind,
                    formats=_parse_formats(kind, field_data.get("formats")),
                )

            relations: dict[str, RelationDef] = {}
            for rel_name, rel_data in entity_data.get("relations", {}).items():
                target = rel_data.get("target")
                if not target:
                    errors.append(f"{entity_name}.{rel_name}: missing target")
                    continue
                relations[rel_name] = RelationDef(
                    name=rel_name,
                    target=target,
                    cardinality=rel_data.get("cardinality", "one"),
                )

            entities.append(EntityDef(name=entity_name, fields=fields, relations=relations))

        if errors:
            raise GraphConfigError(errors)

        return cls(entities)


def _parse_formats(kind: str, raw: Any) -> tuple[FormatOption, ...]:
    """Parse a field's ``formats`` declaration."""
    if not raw:
        return ()
    if raw is True:
        return default_formats(kind)

    builtin = {opt.name: opt for opt in default_formats(kind)}
    options: list[FormatOption] = []
    for item in raw:
        if isinstance(item, FormatOption):
            options.append(item)
        elif isinstance(item, str):
            options.append(builtin.get(item, FormatOption(item)))
        else:
            options.append(FormatOption(
                name=item["name"],
                arguments=tuple(
                    FormatArgument(
                        name=arg["name"],
                        kind=arg.get("kind", "text"),
                        required=arg.get("required", False),
                    )
                    for arg in item.get("arguments", [])
                ),
                formatter=item.get("formatter"),
            ))
    return tuple(options)
