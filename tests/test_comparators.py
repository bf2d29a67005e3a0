"""Tests for the comparator set and value coercion."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from capgraph import InvalidComparator, InvalidFilterValue
from capgraph.core.comparators import check_comparator, coerce_value, comparators_for


class TestComparatorsFor:
    def test_text(self):
        assert comparators_for("text") == ("eq", "ne", "contains", "in", "startswith", "endswith")

    @pytest.mark.parametrize("kind", ["integer", "decimal", "float", "date", "time", "datetime"])
    def test_ordered_kinds(self, kind):
        assert comparators_for(kind) == ("eq", "ne", "gt", "lt", "gte", "lte", "in")

    def test_boolean(self):
        assert comparators_for("boolean") == ("eq", "ne", "in")

    def test_enum(self):
        assert comparators_for("enum") == ("eq", "ne", "in")


class TestCheckComparator:
    def test_text_comparator_on_number(self):
        with pytest.raises(InvalidComparator) as exc:
            check_comparator("contains", "integer", path="total")
        assert exc.value.path == "total"

    def test_ordering_on_text(self):
        with pytest.raises(InvalidComparator):
            check_comparator("gt", "text")

    def test_unknown_comparator(self):
        with pytest.raises(InvalidComparator, match="unknown comparator 'like'"):
            check_comparator("like", "text")

    def test_valid(self):
        check_comparator("lte", "date")


class TestCoerceValue:
    def test_iso_date_string(self):
        assert coerce_value("gte", "date", "2024-02-01") == date(2024, 2, 1)

    def test_time(self):
        assert coerce_value("lt", "time", "12:30:00") == time(12, 30)

    def test_decimal_from_string(self):
        assert coerce_value("gt", "decimal", "10.5") == Decimal("10.5")

    def test_in_requires_list(self):
        with pytest.raises(InvalidFilterValue):
            coerce_value("in", "integer", 5)

    def test_in_coerces_items(self):
        assert coerce_value("in", "integer", (1, "2")) == [1, 2]

    def test_in_on_boolean(self):
        check_comparator("in", "boolean", path="paid")
        assert coerce_value("in", "boolean", [True, False]) == [True, False]

    def test_text_does_not_accept_numbers(self):
        with pytest.raises(InvalidFilterValue):
            coerce_value("eq", "text", 5)

    def test_number_does_not_accept_booleans(self):
        with pytest.raises(InvalidFilterValue):
            coerce_value("eq", "integer", True)

    def test_single_value_rejects_list(self):
        with pytest.raises(InvalidFilterValue):
            coerce_value("eq", "integer", [1, 2])

    def test_none_is_rejected(self):
        with pytest.raises(InvalidFilterValue):
            coerce_value("eq", "text", None)
