"""
Enumeration registry - format-option enumerations with structural dedup.

Naming, for field ``status`` on entity ``Order``:
1. explicit override from config, if any (no fallback);
2. ``StatusEnum`` - registered if free, reused if it holds the same values;
3. ``OrderStatusEnum`` - registered if free, reused if it holds the same values;
4. otherwise EnumNameCollision.

The registry is populated during the build phase and frozen before queries
run. Pass one instance per build; ``ensure`` serializes its
read-then-write sequence with a lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, Optional

from ..core.defs import FieldDef
from ..core.errors import EnumNameCollision, RegistryFrozenError
from ..core.utils import to_pascal_case

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnumerationType:
    name: str
    values: tuple[str, ...]


class EnumerationRegistry:
    """
    Mapping of enumeration name -> EnumerationType.

    Usage:
        registry = EnumerationRegistry()
        enum = registry.ensure("Order", order_status_field)
        registry.freeze()
    """

    def __init__(self):
        self._types: dict[str, EnumerationType] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[EnumerationType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def get(self, name: str) -> Optional[EnumerationType]:
        return self._types.get(name)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """End the build phase; further registrations raise."""
        self._frozen = True
        logger.info(f"Enumeration registry frozen with {len(self._types)} types")

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(enum.values) for name, enum in self._types.items()}

    # -------------------------------------------------------------------------
    # Build phase
    # -------------------------------------------------------------------------

    def ensure(
        self, entity_name: str, field: FieldDef, override: Optional[str] = None
    ) -> EnumerationType:
        """Return the enumeration for ``field``'s format options, creating it if needed."""
        values = tuple(option.name for option in field.formats)

        with self._lock:
            if override:
                return self._register_or_reuse(override, values)

            generic = f"{to_pascal_case(field.name)}Enum"
            existing = self._types.get(generic)
            if existing is None:
                return self._register(generic, values)
            if existing.values == values:
                logger.debug(f"Reusing enumeration {generic} for {entity_name}.{field.name}")
                return existing

            qualified = f"{entity_name}{to_pascal_case(field.name)}Enum"
            return self._register_or_reuse(qualified, values)

    def _register_or_reuse(self, name: str, values: tuple[str, ...]) -> EnumerationType:
        existing = self._types.get(name)
        if existing is None:
            return self._register(name, values)
        if existing.values != values:
            raise EnumNameCollision(name, existing.values, values)
        logger.debug(f"Reusing enumeration {name}")
        return existing

    def _register(self, name: str, values: tuple[str, ...]) -> EnumerationType:
        if self._frozen:
            raise RegistryFrozenError(name)
        enum = EnumerationType(name=name, values=values)
        self._types[name] = enum
        logger.info(f"Registered enumeration {name}: {list(values)}")
        return enum
