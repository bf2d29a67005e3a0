"""Tests for EnumerationRegistry naming and deduplication."""

from __future__ import annotations

import pytest

from capgraph import (
    EnumerationRegistry,
    EnumNameCollision,
    FieldDef,
    FormatOption,
    RegistryFrozenError,
)


def _field(name, *values):
    return FieldDef(name=name, kind="text", formats=tuple(FormatOption(v) for v in values))


class TestNaming:
    def test_generic_name_first(self):
        registry = EnumerationRegistry()
        enum = registry.ensure("Order", _field("status", "OPEN", "CLOSED"))
        assert enum.name == "StatusEnum"
        assert enum.values == ("OPEN", "CLOSED")

    def test_qualified_name_on_different_values(self):
        registry = EnumerationRegistry()
        registry.ensure("Ticket", _field("status", "OPEN", "CLOSED"))
        enum = registry.ensure("Order", _field("status", "PENDING", "PAID"))
        assert enum.name == "OrderStatusEnum"
        assert len(registry) == 2

    def test_identical_values_reuse_existing(self):
        registry = EnumerationRegistry()
        first = registry.ensure("Ticket", _field("status", "OPEN", "CLOSED"))
        registry.ensure("Order", _field("status", "PENDING", "PAID"))
        third = registry.ensure("Issue", _field("status", "OPEN", "CLOSED"))
        assert third is first
        assert len(registry) == 2

    def test_value_order_matters(self):
        registry = EnumerationRegistry()
        registry.ensure("Ticket", _field("status", "OPEN", "CLOSED"))
        enum = registry.ensure("Order", _field("status", "CLOSED", "OPEN"))
        assert enum.name == "OrderStatusEnum"

    def test_qualified_name_reused_when_identical(self):
        registry = EnumerationRegistry()
        registry.ensure("Ticket", _field("status", "OPEN"))
        first = registry.ensure("Order", _field("status", "PAID"))
        again = registry.ensure("Order", _field("status", "PAID"))
        assert again is first

    def test_second_collision_is_an_error(self):
        registry = EnumerationRegistry()
        registry.ensure("Ticket", _field("status", "OPEN"))
        registry.ensure("Order", _field("status", "PAID"))
        with pytest.raises(EnumNameCollision) as exc:
            registry.ensure("Order", _field("status", "REFUNDED"))
        assert exc.value.name == "OrderStatusEnum"
        assert exc.value.existing == ("PAID",)

    def test_snake_case_field_names(self):
        registry = EnumerationRegistry()
        assert registry.ensure("Order", _field("placed_on", "ISO")).name == "PlacedOnEnum"
        assert registry.ensure("Order", _field("createdAt", "ISO")).name == "CreatedAtEnum"


class TestOverrides:
    def test_override_is_used_unconditionally(self):
        registry = EnumerationRegistry()
        enum = registry.ensure("Order", _field("status", "PAID"), override="OrderState")
        assert enum.name == "OrderState"
        assert "StatusEnum" not in registry

    def test_override_never_overwrites(self):
        registry = EnumerationRegistry()
        registry.ensure("Order", _field("status", "PAID"), override="OrderState")
        with pytest.raises(EnumNameCollision):
            registry.ensure("Invoice", _field("state", "DRAFT"), override="OrderState")


class TestLifecycle:
    def test_frozen_registry_rejects_new_types(self):
        registry = EnumerationRegistry()
        registry.ensure("Order", _field("status", "PAID"))
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.ensure("Order", _field("note", "UPPERCASE"))

    def test_frozen_registry_still_reuses(self):
        registry = EnumerationRegistry()
        enum = registry.ensure("Order", _field("status", "PAID"))
        registry.freeze()
        assert registry.ensure("Invoice", _field("status", "PAID")) is enum

    def test_instances_are_isolated(self):
        one, two = EnumerationRegistry(), EnumerationRegistry()
        one.ensure("Order", _field("status", "PAID"))
        assert "StatusEnum" in one
        assert "StatusEnum" not in two

    def test_to_dict(self):
        registry = EnumerationRegistry()
        registry.ensure("Order", _field("status", "PAID", "PENDING"))
        assert registry.to_dict() == {"StatusEnum": ["PAID", "PENDING"]}
        assert registry.get("StatusEnum").values == ("PAID", "PENDING")
