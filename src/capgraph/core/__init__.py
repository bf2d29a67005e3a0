"""
Core module - entity graph, comparators, errors and request types.
"""

from __future__ import annotations

from .comparators import COMPARATORS, check_comparator, coerce_value, comparators_for
from .defs import (
    SCALAR_KINDS,
    EntityDef,
    FieldDef,
    FormatArgument,
    FormatOption,
    RelationDef,
)
from .errors import (
    CapgraphError,
    ConfigurationError,
    EnumNameCollision,
    GraphConfigError,
    InvalidComparator,
    InvalidFilterValue,
    InvalidFormatArgument,
    InvalidPageRequest,
    InvalidSortDirection,
    InvalidSortPath,
    LimitExceeded,
    MissingResolver,
    QueryError,
    RegistryFrozenError,
    UnknownArgument,
    UnknownEntity,
    UnknownFilterField,
)
from .formats import DEFAULT_FORMATS_BY_KIND, default_formats
from .graph import EntityGraph
from .query_types import (
    Connection,
    Edge,
    FilterCondition,
    PageInfo,
    PageRequest,
    Predicate,
    ReadQuery,
    RelationPredicate,
    SortKey,
)
from .utils import convert_keys_to_snake, to_camel_case, to_pascal_case, to_snake_case

__all__ = [
    # Definitions
    "SCALAR_KINDS",
    "EntityDef",
    "FieldDef",
    "FormatArgument",
    "FormatOption",
    "RelationDef",
    "EntityGraph",
    "DEFAULT_FORMATS_BY_KIND",
    "default_formats",
    # Comparators
    "COMPARATORS",
    "check_comparator",
    "coerce_value",
    "comparators_for",
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
    # Query types
    "FilterCondition",
    "Predicate",
    "RelationPredicate",
    "SortKey",
    "PageRequest",
    "ReadQuery",
    "PageInfo",
    "Edge",
    "Connection",
    # Utils
    "to_snake_case",
    "to_camel_case",
    "to_pascal_case",
    "convert_keys_to_snake",
]
