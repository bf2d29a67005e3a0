"""
Custom exceptions for the Capgraph system.

Two families:
- ConfigurationError: raised while building capabilities (fatal, fail fast).
- QueryError: raised while compiling a request (surfaced to the caller as a
  structured rejection; nothing reaches the data store).
"""

from __future__ import annotations

from typing import Any, Optional


class CapgraphError(Exception):
    """Base exception for all capgraph errors."""

    code = "capgraph_error"

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)

    def to_dict(self) -> dict[str, Any]:
        """Structured form used by the HTTP layer."""
        return {"code": self.code, "message": self.message, "path": self.path}


# =============================================================================
# Build-time errors
# =============================================================================


class ConfigurationError(CapgraphError):
    """Raised when capability or entity configuration is invalid."""

    code = "configuration_error"


class GraphConfigError(ConfigurationError):
    """Raised when entity metadata is invalid."""

    code = "graph_config_error"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Entity graph is invalid: {errors}")


class UnknownEntity(ConfigurationError):
    """Raised when an entity name is not part of the graph."""

    code = "unknown_entity"

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"Entity '{entity}' not found")


class MissingResolver(ConfigurationError):
    """Raised when a custom field is declared without a resolution hook."""

    code = "missing_resolver"

    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(
            f"custom field '{field}' is not a field of {entity} and declares no resolver",
            path=f"{entity}.{field}",
        )


class EnumNameCollision(ConfigurationError):
    """Raised when an enumeration name is taken by a different value set."""

    code = "enum_name_collision"

    def __init__(self, name: str, existing: tuple[str, ...], candidate: tuple[str, ...]):
        self.name = name
        self.existing = existing
        self.candidate = candidate
        super().__init__(
            f"enumeration '{name}' already registered with values {list(existing)}, "
            f"cannot register {list(candidate)}"
        )


class RegistryFrozenError(ConfigurationError):
    """Raised when the enumeration registry is mutated after the build phase."""

    code = "registry_frozen"

    def __init__(self, name: str):
        super().__init__(f"cannot register enumeration '{name}': registry is frozen")


# =============================================================================
# Request-time errors
# =============================================================================


class QueryError(CapgraphError):
    """Raised when read arguments are rejected."""

    code = "query_error"


class UnknownArgument(QueryError):
    code = "unknown_argument"


class UnknownFilterField(QueryError):
    code = "unknown_filter_field"


class InvalidComparator(QueryError):
    code = "invalid_comparator"


class InvalidFilterValue(QueryError):
    code = "invalid_filter_value"


class InvalidSortPath(QueryError):
    code = "invalid_sort_path"


class InvalidSortDirection(QueryError):
    code = "invalid_sort_direction"


class InvalidPageRequest(QueryError):
    code = "invalid_page_request"


class LimitExceeded(QueryError):
    """Raised when the requested page size is over the configured maximum."""

    code = "limit_exceeded"

    def __init__(self, limit: int, maximum: int):
        self.limit = limit
        self.maximum = maximum
        super().__init__(
            f"limit {limit} exceeds maximum of {maximum}", path="limit"
        )


class InvalidFormatArgument(QueryError):
    code = "invalid_format_argument"
