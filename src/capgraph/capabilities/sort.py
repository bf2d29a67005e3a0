"""
Sort engine - multi-key sorting for read operations.

Sort input is an ordered list; earlier entries are primary keys. Each entry
is a nested mapping ending in a direction, a ``SortKey``, or a root field
name with an optional ``-`` prefix for descending order:

    [{"customer": {"name": "ASC"}}, {"total": "DESC"}, "-createdAt"]

Only to-one relations can be traversed: ordering by a to-many path has no
single value per row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..core.defs import EntityDef
from ..core.errors import InvalidSortDirection, InvalidSortPath
from ..core.query_types import ReadQuery, SortKey
from ..core.utils import dotted
from .base import CapabilityEngine

logger = logging.getLogger(__name__)

DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class SortFieldShape:
    name: str
    kind: str

    variant = "scalar"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "directions": list(DIRECTIONS)}


@dataclass(frozen=True)
class SortRelationShape:
    name: str
    target: str
    shape: "EntitySortShape"

    variant = "relation"

    def to_dict(self) -> dict[str, Any]:
        return {"target": self.target, "fields": self.shape.to_dict()}


SortMember = Union[SortFieldShape, SortRelationShape]


@dataclass(frozen=True)
class EntitySortShape:
    entity: str
    members: dict[str, SortMember]

    def to_dict(self) -> dict[str, Any]:
        return {name: member.to_dict() for name, member in self.members.items()}


class SortEngine(CapabilityEngine):
    """
    Sort capability for one entity operation.

    Usage:
        engine = SortEngine(graph, config, "Order")
        keys = engine.compile([{"customer": {"name": "DESC"}}])
    """

    plugin = "sort"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.shape = self._build_shape(self.entity, (self.entity.name,))

    def _build_shape(self, entity: EntityDef, visited: tuple[str, ...]) -> EntitySortShape:
        plugin = self.plugin_config(entity.name)
        members: dict[str, SortMember] = {}

        for name, field_def in entity.fields.items():
            if plugin.allows(name):
                members[name] = SortFieldShape(name=name, kind=field_def.kind)

        for name, relation in entity.relations.items():
            if relation.to_many or not plugin.allows(name):
                continue
            if not self.can_descend(entity, relation, visited):
                continue
            target = self.graph.entity(relation.target)
            members[name] = SortRelationShape(
                name=name,
                target=target.name,
                shape=self._build_shape(target, (*visited, target.name)),
            )

        return EntitySortShape(entity=entity.name, members=members)

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------

    def compile(self, spec: Optional[list[Any]]) -> list[SortKey]:
        """Validate and normalize sort input into ordered sort keys."""
        if isinstance(spec, (dict, str, SortKey)):
            spec = [spec]
        keys: list[SortKey] = []
        for entry in spec or []:
            for path, direction in self._flatten(entry):
                self._check_path(path)
                keys.append(SortKey(path=path, direction=self._direction(direction, path)))
        logger.debug(f"Compiled sort for {self.entity.name}: {keys}")
        return keys

    def _flatten(self, entry: Any, prefix: tuple[str, ...] = ()) -> list[tuple[tuple[str, ...], Any]]:
        if isinstance(entry, SortKey):
            return [(entry.path, entry.direction)]
        if isinstance(entry, str) and not prefix:
            if entry.startswith("-"):
                return [((entry[1:],), "DESC")]
            return [((entry,), "ASC")]
        if isinstance(entry, dict) and entry:
            result = []
            for name, value in entry.items():
                path = (*prefix, name)
                if isinstance(value, dict):
                    result.extend(self._flatten(value, path))
                else:
                    result.append((path, value))
            return result
        raise InvalidSortPath(
            f"invalid sort entry {entry!r}", path=dotted(prefix) or None
        )

    def _check_path(self, path: tuple[str, ...]):
        shape = self.shape
        entity = self.entity
        for index, name in enumerate(path):
            location = dotted(path[: index + 1])
            terminal = index == len(path) - 1
            member = shape.members.get(name)

            if member is None:
                relation = entity.relations.get(name)
                if relation is not None and relation.to_many:
                    raise InvalidSortPath(
                        f"cannot sort through to-many relation '{name}'", path=location
                    )
                raise InvalidSortPath(
                    f"'{name}' is not a sortable field of {entity.name}", path=location
                )

            if member.variant == "scalar":
                if not terminal:
                    raise InvalidSortPath(f"'{name}' is a field, not a relation", path=location)
                return

            if terminal:
                raise InvalidSortPath(
                    f"'{name}' is a relation; sort by one of its fields", path=location
                )
            shape = member.shape
            entity = self.graph.entity(member.target)

    def _direction(self, value: Any, path: tuple[str, ...]) -> str:
        direction = value.upper() if isinstance(value, str) else value
        if direction not in DIRECTIONS:
            raise InvalidSortDirection(
                f"direction must be one of {list(DIRECTIONS)}, got {value!r}",
                path=dotted(path),
            )
        return direction

    def apply(self, query: ReadQuery, arguments: dict[str, Any]) -> ReadQuery:
        keys = self.compile(arguments.get("sort"))
        return query.model_copy(update={"sort": [*query.sort, *keys]})
