"""Shared fixtures: a small commerce graph and matching in-memory rows."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from capgraph import EntityGraph, MemoryDataStore

GRAPH = {
    "entities": {
        "Company": {
            "fields": {
                "id": {"kind": "integer"},
                "name": {"kind": "text"},
            },
            "relations": {
                "customers": {"target": "Customer", "cardinality": "many"},
            },
        },
        "Customer": {
            "fields": {
                "id": {"kind": "integer"},
                "name": {"kind": "text", "formats": True},
                "email": {"kind": "text"},
            },
            "relations": {
                "company": {"target": "Company", "cardinality": "one"},
                "orders": {"target": "Order", "cardinality": "many"},
            },
        },
        "Order": {
            "fields": {
                "id": {"kind": "integer"},
                "status": {"kind": "text", "formats": ["PENDING", "PAID", "SHIPPED"]},
                "total": {"kind": "decimal"},
                "placedOn": {"kind": "date", "formats": True},
                "paid": {"kind": "boolean"},
                "note": {"kind": "text", "formats": True},
            },
            "relations": {
                "customer": {"target": "Customer", "cardinality": "one"},
                "items": {"target": "LineItem", "cardinality": "many"},
            },
        },
        "LineItem": {
            "fields": {
                "id": {"kind": "integer"},
                "sku": {"kind": "text"},
                "quantity": {"kind": "integer"},
            },
            "relations": {
                "order": {"target": "Order", "cardinality": "one"},
            },
        },
        "Employee": {
            "fields": {
                "id": {"kind": "integer"},
                "name": {"kind": "text"},
            },
            "relations": {
                "manager": {"target": "Employee", "cardinality": "one"},
            },
        },
    }
}


@pytest.fixture
def graph() -> EntityGraph:
    return EntityGraph.from_dict(GRAPH)


ACME = {"id": 1, "name": "Acme Corp"}
GLOBEX = {"id": 2, "name": "Globex"}

ANN = {"id": 1, "name": "Ann", "email": "ann@acme.test", "company": ACME}
BOB = {"id": 2, "name": "Bob", "email": "bob@globex.test", "company": GLOBEX}
CARL = {"id": 3, "name": "Carl", "email": "carl@example.test", "company": None}


def _order(id, status, total, placed_on, paid, customer, items=(), note=None):
    return {
        "id": id,
        "status": status,
        "total": Decimal(total),
        "placedOn": placed_on,
        "paid": paid,
        "note": note,
        "customer": customer,
        "items": list(items),
    }


ORDERS = [
    _order(1, "PAID", "10.00", date(2024, 1, 5), True, ANN,
           [{"id": 1, "sku": "BOLT", "quantity": 10}], note="first order"),
    _order(2, "PENDING", "25.50", date(2024, 2, 1), False, BOB,
           [{"id": 2, "sku": "NUT", "quantity": 3}]),
    _order(3, "PAID", "99.99", date(2024, 2, 14), True, ANN,
           [{"id": 3, "sku": "BOLT", "quantity": 1}, {"id": 4, "sku": "GEAR", "quantity": 2}]),
    _order(4, "SHIPPED", "100.00", date(2024, 3, 3), True, CARL),
    _order(5, "PAID", "150.00", date(2024, 3, 20), True, BOB,
           [{"id": 5, "sku": "GEAR", "quantity": 7}]),
]


@pytest.fixture
def orders() -> list[dict]:
    return [dict(order) for order in ORDERS]


@pytest.fixture
def store(orders) -> MemoryDataStore:
    return MemoryDataStore({
        "Order": orders,
        "Customer": [ANN, BOB, CARL],
        "Company": [ACME, GLOBEX],
    })


class RecordingStore(MemoryDataStore):
    """Memory store that records every call it receives."""

    def __init__(self, tables=None):
        super().__init__(tables)
        self.calls: list[tuple[str, object]] = []

    async def count(self, query):
        self.calls.append(("count", query))
        return await super().count(query)

    async def fetch(self, query):
        self.calls.append(("fetch", query))
        return await super().fetch(query)


@pytest.fixture
def recording_store(orders) -> RecordingStore:
    return RecordingStore({"Order": orders})
