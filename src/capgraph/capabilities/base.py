"""
Shared traversal for capability engines.

Filter and sort shapes are built by walking the entity graph from the
operation's root entity. The walk stops descending into a relation when its
target is already on the current path, or when the configured depth cap is
reached.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.defs import EntityDef, RelationDef
from ..core.graph import EntityGraph
from .config import DEFAULT_OPERATION, CapabilityConfig, PluginConfig

logger = logging.getLogger(__name__)


class CapabilityEngine:
    """
    Base class for engines bound to one entity operation.

    Subclasses set ``plugin`` to the name of their config section.
    """

    plugin: str = ""

    def __init__(
        self,
        graph: EntityGraph,
        config: CapabilityConfig,
        entity: str,
        operation: str = DEFAULT_OPERATION,
    ):
        self.graph = graph
        self.config = config
        self.entity = graph.entity(entity)
        self.operation = operation

    @property
    def root_config(self):
        return self.plugin_config(self.entity.name)

    @property
    def enabled(self) -> bool:
        return self.root_config.enabled

    def plugin_config(self, entity_name: str) -> PluginConfig:
        """Plugin settings for ``entity_name`` under this engine's operation."""
        return getattr(self.config.operation(entity_name, self.operation), self.plugin)

    def can_descend(
        self,
        entity: EntityDef,
        relation: RelationDef,
        visited: tuple[str, ...],
    ) -> bool:
        """
        Decide whether the shape walk follows ``relation``.

        ``visited`` holds the entity names on the current path, root first.
        """
        max_depth: Optional[int] = self.config.max_depth
        if max_depth is not None and len(visited) > max_depth:
            logger.debug(
                f"{self.plugin}: {entity.name}.{relation.name} omitted, depth cap {max_depth} reached"
            )
            return False
        if relation.target in visited:
            logger.debug(
                f"{self.plugin}: {entity.name}.{relation.name} omitted, "
                f"{relation.target} already on path {' -> '.join(visited)}"
            )
            return False
        return True
