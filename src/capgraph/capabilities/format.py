"""
Format engine - per-field ``format`` arguments backed by generated enumerations.

Format input, keyed by field:

    {"title": {"format": "TRUNCATE", "limit": 20}, "createdAt": {"format": "DATE_ONLY"}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.comparators import coerce_value
from ..core.defs import FieldDef, FormatArgument, FormatOption
from ..core.errors import InvalidFilterValue, InvalidFormatArgument
from .base import CapabilityEngine
from .enums import EnumerationRegistry, EnumerationType


@dataclass
class FieldFormat:
    """A formattable field with its enumeration and sub-arguments."""
    field: FieldDef
    enum: EnumerationType
    arguments: dict[str, FormatArgument] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        shape: dict[str, Any] = {"format": {"enum": self.enum.name}}
        for name, argument in self.arguments.items():
            shape[name] = {
                "kind": argument.kind,
                "requiredBy": [
                    option.name for option in self.field.formats
                    if any(a.name == name and a.required for a in option.arguments)
                ],
            }
        return shape


class FormatEngine(CapabilityEngine):
    """
    Format capability for one entity operation.

    Generates (or reuses) one enumeration per formattable, non-ignored field
    while the registry is still in its build phase.
    """

    plugin = "format"

    def __init__(self, graph, config, entity, operation, registry: EnumerationRegistry):
        super().__init__(graph, config, entity, operation)
        settings = self.root_config
        self.fields: dict[str, FieldFormat] = {}

        for name, field_def in self.entity.fields.items():
            if not field_def.formattable or name in settings.ignore:
                continue
            enum = registry.ensure(self.entity.name, field_def, override=settings.overrides.get(name))
            arguments: dict[str, FormatArgument] = {}
            for option in field_def.formats:
                for argument in option.arguments:
                    arguments.setdefault(argument.name, argument)
            self.fields[name] = FieldFormat(field=field_def, enum=enum, arguments=arguments)

    def arguments(self) -> dict[str, Any]:
        return {name: fmt.to_dict() for name, fmt in self.fields.items()}

    def compile(self, spec: Any) -> dict[str, tuple[FormatOption, dict[str, Any]]]:
        """Validate format input; return field -> (option, sub-arguments)."""
        if not spec:
            return {}
        if not isinstance(spec, dict):
            raise InvalidFormatArgument("expected an object keyed by field", path="format")

        compiled = {}
        for name, value in spec.items():
            location = f"format.{name}"
            fmt = self.fields.get(name)
            if fmt is None:
                raise InvalidFormatArgument(f"'{name}' has no format options", path=location)
            if not isinstance(value, dict) or "format" not in value:
                raise InvalidFormatArgument("expected an object with a 'format' value", path=location)

            option_name = value["format"]
            if option_name not in fmt.enum.values:
                raise InvalidFormatArgument(
                    f"'{option_name}' is not a value of {fmt.enum.name} {list(fmt.enum.values)}",
                    path=location,
                )
            option = fmt.field.format_option(option_name)
            declared = {argument.name: argument for argument in option.arguments}

            args: dict[str, Any] = {}
            for arg_name, arg_value in value.items():
                if arg_name == "format":
                    continue
                argument = declared.get(arg_name)
                if argument is None:
                    if arg_name in fmt.arguments:
                        message = f"format {option_name} does not take '{arg_name}'"
                    else:
                        message = f"unknown format argument '{arg_name}'"
                    raise InvalidFormatArgument(message, path=f"{location}.{arg_name}")
                try:
                    args[arg_name] = coerce_value("eq", argument.kind, arg_value)
                except InvalidFilterValue as e:
                    raise InvalidFormatArgument(e.message, path=f"{location}.{arg_name}") from None

            for argument in option.arguments:
                if argument.required and argument.name not in args:
                    raise InvalidFormatArgument(
                        f"format {option_name} requires '{argument.name}'",
                        path=f"{location}.{argument.name}",
                    )
            compiled[name] = (option, args)
        return compiled

    def apply(
        self,
        nodes: list[dict[str, Any]],
        compiled: dict[str, tuple[FormatOption, dict[str, Any]]],
    ) -> list[dict[str, Any]]:
        """Return copies of ``nodes`` with the chosen formatters applied."""
        if not compiled:
            return nodes
        result = []
        for node in nodes:
            node = dict(node)
            for name, (option, args) in compiled.items():
                if option.formatter is not None and name in node and node[name] is not None:
                    node[name] = option.formatter(node[name], args)
            result.append(node)
        return result
