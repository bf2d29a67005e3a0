"""
Entity metadata from SQLAlchemy declarative models.

Columns become fields, relationships become relations. Entity names are
model class names, so relationship targets resolve within the same set of
models.

Usage:
    graph = introspect_models([Order, Customer, Company], formats={"Order": {"note": False}})
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase

from ..core.defs import EntityDef, FieldDef, FormatOption, RelationDef
from ..core.formats import default_formats
from ..core.graph import EntityGraph


def get_column_kind(column) -> str:
    """Map a SQLAlchemy column type to a scalar kind."""
    type_name = column.type.__class__.__name__.lower()

    if type_name in ("integer", "biginteger", "smallinteger"):
        return "integer"
    elif type_name in ("string", "text", "varchar", "unicode", "unicodetext", "uuid"):
        return "text"
    elif type_name in ("boolean",):
        return "boolean"
    elif type_name in ("numeric", "decimal"):
        return "decimal"
    elif type_name in ("float", "double", "real"):
        return "float"
    elif type_name in ("datetime", "timestamp"):
        return "datetime"
    elif type_name in ("date",):
        return "date"
    elif type_name in ("time",):
        return "time"
    elif type_name == "enum":
        return "enum"
    else:
        return "text"


def introspect_model(
    model: type[DeclarativeBase],
    formats: Optional[dict[str, object]] = None,
) -> EntityDef:
    """
    Build an EntityDef from a model.

    ``formats`` maps field names to ``False`` (no formatting) or a tuple of
    FormatOption; unlisted fields get the built-in options for their kind.
    """
    formats = formats or {}
    mapper = inspect(model)

    fields: dict[str, FieldDef] = {}
    for attr in mapper.column_attrs:
        kind = get_column_kind(attr.columns[0])
        declared = formats.get(attr.key, True)
        if declared is True:
            options: tuple[FormatOption, ...] = default_formats(kind)
        elif declared is False:
            options = ()
        else:
            options = tuple(declared)
        fields[attr.key] = FieldDef(name=attr.key, kind=kind, formats=options)

    relations: dict[str, RelationDef] = {}
    for rel in mapper.relationships:
        relations[rel.key] = RelationDef(
            name=rel.key,
            target=rel.mapper.class_.__name__,
            cardinality="many" if rel.uselist else "one",
        )

    return EntityDef(name=model.__name__, fields=fields, relations=relations)


def introspect_models(
    models: Iterable[type[DeclarativeBase]],
    formats: Optional[dict[str, dict[str, object]]] = None,
) -> EntityGraph:
    """Build an EntityGraph from a set of models; ``formats`` is keyed by entity name."""
    formats = formats or {}
    return EntityGraph(
        introspect_model(model, formats.get(model.__name__)) for model in models
    )
