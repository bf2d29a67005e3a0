"""
Built-in format options per scalar kind.

Metadata sources attach these to fields that declare formatting capability
without spelling out their own options.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from .defs import FormatArgument, FormatOption


def _upper(value: Any, args: dict[str, Any]) -> Any:
    return value.upper() if isinstance(value, str) else value


def _lower(value: Any, args: dict[str, Any]) -> Any:
    return value.lower() if isinstance(value, str) else value


def _truncate(value: Any, args: dict[str, Any]) -> Any:
    if not isinstance(value, str):
        return value
    return value[: args["limit"]]


def _iso(value: Any, args: dict[str, Any]) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _date_only(value: Any, args: dict[str, Any]) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _custom(value: Any, args: dict[str, Any]) -> Any:
    if isinstance(value, (date, datetime)):
        return value.strftime(args["customFormat"])
    return value


def _fixed(value: Any, args: dict[str, Any]) -> Any:
    if not isinstance(value, (int, float, Decimal)) or isinstance(value, bool):
        return value
    digits = args.get("digits")
    return f"{value:.{2 if digits is None else digits}f}"


TEXT_FORMATS = (
    FormatOption("UPPERCASE", formatter=_upper),
    FormatOption("LOWERCASE", formatter=_lower),
    FormatOption(
        "TRUNCATE",
        arguments=(FormatArgument("limit", "integer", required=True),),
        formatter=_truncate,
    ),
)

DATE_FORMATS = (
    FormatOption("ISO", formatter=_iso),
    FormatOption("DATE_ONLY", formatter=_date_only),
    FormatOption(
        "CUSTOM",
        arguments=(FormatArgument("customFormat", "text", required=True),),
        formatter=_custom,
    ),
)

NUMBER_FORMATS = (
    FormatOption(
        "FIXED",
        arguments=(FormatArgument("digits", "integer"),),
        formatter=_fixed,
    ),
)

DEFAULT_FORMATS_BY_KIND: dict[str, tuple[FormatOption, ...]] = {
    "text": TEXT_FORMATS,
    "date": DATE_FORMATS,
    "datetime": DATE_FORMATS,
    "decimal": NUMBER_FORMATS,
    "float": NUMBER_FORMATS,
}


def default_formats(kind: str) -> tuple[FormatOption, ...]:
    """Return the built-in format options for a scalar kind (may be empty)."""
    return DEFAULT_FORMATS_BY_KIND.get(kind, ())
