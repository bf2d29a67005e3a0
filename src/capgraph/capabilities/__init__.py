"""
Capabilities module - configuration and the filter, sort, pagination and
format engines.
"""

from __future__ import annotations

from .base import CapabilityEngine
from .config import (
    DEFAULT_OPERATION,
    CapabilityConfig,
    CustomFieldDef,
    FormatConfig,
    OperationConfig,
    PaginationConfig,
    PluginConfig,
    Resolver,
)
from .enums import EnumerationRegistry, EnumerationType
from .filter import (
    EntityFilterShape,
    FilterCompilation,
    FilterEngine,
    RelationFilterShape,
    ScalarFilterShape,
)
from .format import FieldFormat, FormatEngine
from .pagination import PaginationEngine
from .sort import EntitySortShape, SortEngine, SortFieldShape, SortRelationShape

__all__ = [
    # Config
    "DEFAULT_OPERATION",
    "CapabilityConfig",
    "OperationConfig",
    "PluginConfig",
    "PaginationConfig",
    "FormatConfig",
    "CustomFieldDef",
    "Resolver",
    # Engines
    "CapabilityEngine",
    "FilterEngine",
    "FilterCompilation",
    "EntityFilterShape",
    "ScalarFilterShape",
    "RelationFilterShape",
    "SortEngine",
    "EntitySortShape",
    "SortFieldShape",
    "SortRelationShape",
    "PaginationEngine",
    "FormatEngine",
    "FieldFormat",
    # Enumerations
    "EnumerationRegistry",
    "EnumerationType",
]
