"""
Utility functions for Capgraph.

Includes:
- Case conversion (camelCase <-> snake_case, PascalCase for type names)
- Deep key conversion for configuration dicts
"""

from __future__ import annotations

import re
from typing import Any


# =============================================================================
# Case conversion utilities
# =============================================================================

_CAMEL_TO_SNAKE_PATTERN = re.compile(r'(?<!^)(?=[A-Z])')
_SNAKE_TO_CAMEL_PATTERN = re.compile(r'_([a-z0-9])')


def to_snake_case(name: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        maximumLimit -> maximum_limit
        customFields -> custom_fields
        HTTPResponse -> http_response
    """
    # Handle consecutive uppercase (HTTP -> http)
    result = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    result = _CAMEL_TO_SNAKE_PATTERN.sub('_', result)
    return result.lower()


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        has_next_page -> hasNextPage
        created_at -> createdAt
    """
    def replace_underscore(match):
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)


def to_pascal_case(name: str) -> str:
    """
    Convert snake_case or camelCase to PascalCase.

    Examples:
        status -> Status
        created_at -> CreatedAt
        createdAt -> CreatedAt
    """
    camel = to_camel_case(name)
    return camel[0].upper() + camel[1:] if camel else camel


# =============================================================================
# Deep conversion utilities
# =============================================================================


def convert_keys_to_snake(data: Any, *, preserve: frozenset[str] = frozenset()) -> Any:
    """
    Recursively convert all dict keys from camelCase to snake_case.

    Values stored under a key listed in ``preserve`` are copied as-is: their
    keys are user-chosen names (entity, field or operation names) and must
    not be rewritten.

    Example:
        {"maximumLimit": 10, "customFields": {"isOverdue": {...}}}
        with preserve={"custom_fields"}
        ->
        {"maximum_limit": 10, "custom_fields": {"isOverdue": {...}}}
    """
    if isinstance(data, dict):
        result = {}
        for key, value in data.items():
            snake = to_snake_case(key) if isinstance(key, str) else key
            if snake in preserve:
                result[snake] = value
            else:
                result[snake] = convert_keys_to_snake(value, preserve=preserve)
        return result
    elif isinstance(data, list):
        return [convert_keys_to_snake(item, preserve=preserve) for item in data]
    else:
        return data


def dotted(path: tuple[str, ...] | list[str]) -> str:
    """Render a field path as ``a.b.c`` for error messages and logs."""
    return ".".join(path)
