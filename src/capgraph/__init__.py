"""
Capgraph - filtering, sorting, pagination and format enumerations for
entity read operations.

Each read over an entity is augmented with:
- nested predicate filtering (AND-combined conditions across relations)
- multi-key sorting through to-one relations
- offset/limit pagination with connection-shaped results
- per-field format arguments backed by deduplicated enumerations

Usage:
    from capgraph import EntityGraph, CapabilityConfig, EnumerationRegistry, build_operations

    graph = EntityGraph.from_dict(metadata)
    registry = EnumerationRegistry()
    operations = build_operations(graph, CapabilityConfig.from_dict(settings), registry)

    connection = await operations["Order"]["list"].execute(store, {"limit": 10})
"""

from __future__ import annotations

from .api import create_read_router
from .capabilities import (
    DEFAULT_OPERATION,
    CapabilityConfig,
    CustomFieldDef,
    EnumerationRegistry,
    EnumerationType,
    FilterEngine,
    FormatConfig,
    FormatEngine,
    OperationConfig,
    PaginationConfig,
    PaginationEngine,
    PluginConfig,
    SortEngine,
)
from .core import (
    CapgraphError,
    ConfigurationError,
    Connection,
    Edge,
    EntityDef,
    EntityGraph,
    EnumNameCollision,
    FieldDef,
    FilterCondition,
    FormatArgument,
    FormatOption,
    GraphConfigError,
    InvalidComparator,
    InvalidFilterValue,
    InvalidFormatArgument,
    InvalidPageRequest,
    InvalidSortDirection,
    InvalidSortPath,
    LimitExceeded,
    MissingResolver,
    PageInfo,
    PageRequest,
    Predicate,
    QueryError,
    ReadQuery,
    RegistryFrozenError,
    RelationDef,
    RelationPredicate,
    SortKey,
    UnknownArgument,
    UnknownEntity,
    UnknownFilterField,
)
from .runtime import (
    DataStore,
    MemoryDataStore,
    ReadOperation,
    ReadOperationBuilder,
    build_operations,
)
from .service import Base, Database, SQLAlchemyDataStore, introspect_models

__version__ = "0.1.0"

__all__ = [
    # Entity graph
    "EntityGraph",
    "EntityDef",
    "FieldDef",
    "RelationDef",
    "FormatOption",
    "FormatArgument",
    # Configuration
    "DEFAULT_OPERATION",
    "CapabilityConfig",
    "OperationConfig",
    "PluginConfig",
    "PaginationConfig",
    "FormatConfig",
    "CustomFieldDef",
    # Engines
    "FilterEngine",
    "SortEngine",
    "PaginationEngine",
    "FormatEngine",
    "EnumerationRegistry",
    "EnumerationType",
    # Operations
    "ReadOperation",
    "ReadOperationBuilder",
    "build_operations",
    # Request/response types
    "FilterCondition",
    "Predicate",
    "RelationPredicate",
    "SortKey",
    "PageRequest",
    "ReadQuery",
    "Connection",
    "Edge",
    "PageInfo",
    # Data stores
    "DataStore",
    "MemoryDataStore",
    "SQLAlchemyDataStore",
    "Database",
    "Base",
    "introspect_models",
    # API
    "create_read_router",
    # Errors
    "CapgraphError",
    "ConfigurationError",
    "GraphConfigError",
    "UnknownEntity",
    "MissingResolver",
    "EnumNameCollision",
    "RegistryFrozenError",
    "QueryError",
    "UnknownArgument",
    "UnknownFilterField",
    "InvalidComparator",
    "InvalidFilterValue",
    "InvalidSortPath",
    "InvalidSortDirection",
    "InvalidPageRequest",
    "LimitExceeded",
    "InvalidFormatArgument",
]
