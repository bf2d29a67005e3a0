"""
Capability configuration - per entity x operation x plugin settings.

Example:
    config = CapabilityConfig.from_dict({
        "maxDepth": 3,
        "entities": {
            "Order": {
                "list": {
                    "filter": {
                        "fields": {"*": True, "internalNote": False},
                        "customFields": {
                            "isOverdue": {"kind": "boolean", "resolver": "order_is_overdue"},
                        },
                    },
                    "sort": True,
                    "pagination": {"maximumLimit": 100},
                    "format": {"overrides": {"status": "OrderStatusFormat"}, "ignore": ["note"]},
                },
            },
        },
    }, resolvers={"order_is_overdue": order_is_overdue})

Process-wide defaults are read from the environment:
    CAPGRAPH_DEFAULT_LIMIT  - default page size (50)
    CAPGRAPH_MAX_LIMIT      - default maximumLimit (unset)
    CAPGRAPH_MAX_DEPTH      - cap on filter/sort shape recursion (unset)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from ..core.errors import ConfigurationError, MissingResolver
from ..core.query_types import ReadQuery
from ..core.utils import convert_keys_to_snake

# (base query, containing arguments, {"comparator", "value"}) -> transformed query
Resolver = Callable[[ReadQuery, dict[str, Any], dict[str, Any]], ReadQuery]

DEFAULT_OPERATION = "list"

PLUGINS = ("filter", "sort", "pagination", "format")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name, "")
    return int(value) if value.strip() else default


def default_limit_from_env() -> Optional[int]:
    return _env_int("CAPGRAPH_DEFAULT_LIMIT", 50)


def maximum_limit_from_env() -> Optional[int]:
    return _env_int("CAPGRAPH_MAX_LIMIT", None)


def max_depth_from_env() -> Optional[int]:
    return _env_int("CAPGRAPH_MAX_DEPTH", None)


# =============================================================================
# Plugin configuration
# =============================================================================


@dataclass
class CustomFieldDef:
    """
    A filter field that does not exist natively on the entity.

    ``resolver`` may be omitted only when ``name`` is a native field, in which
    case the declaration just overrides its value kind.
    """
    name: str
    kind: str
    resolver: Optional[Resolver] = None


@dataclass
class PluginConfig:
    """Filter/sort plugin settings."""
    enabled: bool = True
    fields: Optional[dict[str, bool]] = None  # None = all fields
    custom_fields: dict[str, CustomFieldDef] = field(default_factory=dict)

    def allows(self, name: str) -> bool:
        """Check the allow-list; ``'*'`` sets the default for unlisted names."""
        if self.fields is None:
            return True
        if name in self.fields:
            return bool(self.fields[name])
        return bool(self.fields.get("*", False))


@dataclass
class PaginationConfig:
    enabled: bool = True
    default_limit: Optional[int] = field(default_factory=default_limit_from_env)
    maximum_limit: Optional[int] = field(default_factory=maximum_limit_from_env)


@dataclass
class FormatConfig:
    enabled: bool = True
    overrides: dict[str, str] = field(default_factory=dict)  # field -> enum name
    ignore: set[str] = field(default_factory=set)


@dataclass
class OperationConfig:
    """All plugin settings for one entity operation."""
    filter: PluginConfig = field(default_factory=PluginConfig)
    sort: PluginConfig = field(default_factory=PluginConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    format: FormatConfig = field(default_factory=FormatConfig)


# =============================================================================
# Root configuration
# =============================================================================


@dataclass
class CapabilityConfig:
    """Capability settings for every configured entity operation."""
    entities: dict[str, dict[str, OperationConfig]] = field(default_factory=dict)
    max_depth: Optional[int] = field(default_factory=max_depth_from_env)

    def operation(self, entity: str, operation: str = DEFAULT_OPERATION) -> OperationConfig:
        """Get operation config; unconfigured operations get all defaults."""
        return self.entities.get(entity, {}).get(operation) or OperationConfig()

    def operations_for(self, entity: str) -> list[str]:
        return list(self.entities.get(entity, {})) or [DEFAULT_OPERATION]

    def has_operation(self, entity: str, operation: str) -> bool:
        return operation in self.entities.get(entity, {})

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        resolvers: Optional[dict[str, Resolver]] = None,
    ) -> "CapabilityConfig":
        """
        Create config from a dict.

        Option keys may be camelCase or snake_case. Resolvers may be given
        inline as callables or by name, looked up in ``resolvers``.
        """
        resolvers = resolvers or {}
        max_depth = data.get("maxDepth", data.get("max_depth"))

        entities: dict[str, dict[str, OperationConfig]] = {}
        for entity_name, operations in data.get("entities", {}).items():
            entities[entity_name] = {
                op_name: _parse_operation(entity_name, op_data or {}, resolvers)
                for op_name, op_data in operations.items()
            }

        config = cls(entities=entities)
        if max_depth is not None:
            config.max_depth = int(max_depth)
        return config


def _plugin_options(raw: Union[bool, dict, None]) -> dict[str, Any]:
    """Normalise ``True``/``False``/dict plugin declarations."""
    if raw is None or raw is True:
        return {}
    if raw is False:
        return {"enabled": False}
    return convert_keys_to_snake(raw, preserve=frozenset({"fields", "custom_fields", "overrides"}))


def _parse_operation(
    entity: str, data: dict[str, Any], resolvers: dict[str, Resolver]
) -> OperationConfig:
    filter_opts = _plugin_options(data.get("filter"))
    sort_opts = _plugin_options(data.get("sort"))
    page_opts = _plugin_options(data.get("pagination"))
    format_opts = _plugin_options(data.get("format"))

    if sort_opts.get("custom_fields"):
        raise ConfigurationError(
            "custom fields are only supported by the filter plugin",
            path=f"{entity}.sort.customFields",
        )

    pagination = PaginationConfig(enabled=page_opts.get("enabled", True))
    if "default_limit" in page_opts:
        pagination.default_limit = page_opts["default_limit"]
    if "maximum_limit" in page_opts:
        pagination.maximum_limit = page_opts["maximum_limit"]

    return OperationConfig(
        filter=_parse_plugin(entity, filter_opts, resolvers),
        sort=_parse_plugin(entity, sort_opts, resolvers),
        pagination=pagination,
        format=FormatConfig(
            enabled=format_opts.get("enabled", True),
            overrides=dict(format_opts.get("overrides", {})),
            ignore=set(format_opts.get("ignore", [])),
        ),
    )


def _parse_plugin(
    entity: str, options: dict[str, Any], resolvers: dict[str, Resolver]
) -> PluginConfig:
    custom_fields = {}
    for name, spec in options.get("custom_fields", {}).items():
        resolver = spec.get("resolver")
        if isinstance(resolver, str):
            if resolver not in resolvers:
                raise MissingResolver(entity, name)
            resolver = resolvers[resolver]
        custom_fields[name] = CustomFieldDef(
            name=name,
            kind=spec.get("kind", "text"),
            resolver=resolver,
        )

    return PluginConfig(
        enabled=options.get("enabled", True),
        fields=options.get("fields"),
        custom_fields=custom_fields,
    )
