"""Tests for the SQLAlchemy data store and model introspection."""

from __future__ import annotations

from datetime import date
from typing import Optional

import pytest
from sqlalchemy import Column, Date, Float, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from capgraph import CapabilityConfig, Database, SQLAlchemyDataStore, build_operations, introspect_models
from capgraph.service import get_column_kind


class Model(DeclarativeBase):
    pass


class Company(Model):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    customers: Mapped[list["Customer"]] = relationship(back_populates="company")


class Customer(Model):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("companies.id"), nullable=True)

    company: Mapped[Optional[Company]] = relationship(back_populates="customers")
    orders: Mapped[list["Order"]] = relationship(back_populates="customer")


class Order(Model):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[str] = mapped_column(String(20))
    total: Mapped[float] = mapped_column(Float)
    placed_on: Mapped[date] = mapped_column(Date)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"))

    customer: Mapped[Customer] = relationship(back_populates="orders")
    items: Mapped[list["LineItem"]] = relationship(back_populates="order")


class LineItem(Model):
    __tablename__ = "line_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(20))
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"))

    order: Mapped[Order] = relationship(back_populates="items")


MODELS = {"Company": Company, "Customer": Customer, "Order": Order, "LineItem": LineItem}


def large_orders(query, arguments, condition):
    if condition["value"]:
        return query.where(lambda model: model.total >= 100)
    return query.where(lambda model: model.total < 100)


@pytest.fixture
async def db(tmp_path):
    database = Database(MODELS, url=f"sqlite+aiosqlite:///{tmp_path}/capgraph.db")
    await database.create_all(base=Model)

    async with database.session_maker() as session:
        acme = Company(id=1, name="Acme Corp")
        globex = Company(id=2, name="Globex")
        ann = Customer(id=1, name="Ann", company=acme)
        bob = Customer(id=2, name="Bob", company=globex)
        carl = Customer(id=3, name="Carl")
        session.add_all([
            acme, globex, ann, bob, carl,
            Order(id=1, status="PAID", total=10.0, placed_on=date(2024, 1, 5), customer=ann,
                  items=[LineItem(id=1, sku="BOLT")]),
            Order(id=2, status="PENDING", total=25.5, placed_on=date(2024, 2, 1), customer=bob,
                  items=[LineItem(id=2, sku="NUT")]),
            Order(id=3, status="PAID", total=99.99, placed_on=date(2024, 2, 14), customer=ann,
                  items=[LineItem(id=3, sku="BOLT"), LineItem(id=4, sku="GEAR")]),
            Order(id=4, status="SHIPPED", total=100.0, placed_on=date(2024, 3, 3), customer=carl),
            Order(id=5, status="PAID", total=150.0, placed_on=date(2024, 3, 20), customer=bob,
                  items=[LineItem(id=5, sku="GEAR")]),
        ])
        await session.commit()

    yield database
    await database.close()


@pytest.fixture
def operations():
    graph = introspect_models(MODELS.values())
    config = CapabilityConfig.from_dict(
        {
            "entities": {
                "Order": {
                    "list": {
                        "filter": {"customFields": {"large": {"kind": "boolean", "resolver": "large"}}},
                        "pagination": {"defaultLimit": 10, "maximumLimit": 10},
                    },
                },
            },
        },
        resolvers={"large": large_orders},
    )
    return build_operations(graph, config)


async def _read(db, operations, arguments, entity="Order"):
    async with db.session_maker() as session:
        store = SQLAlchemyDataStore(session, MODELS)
        return await operations[entity]["list"].execute(store, arguments)


class TestIntrospection:
    def test_fields_and_relations(self):
        graph = introspect_models(MODELS.values())
        order = graph.entity("Order")
        assert order.fields["placed_on"].kind == "date"
        assert order.fields["total"].kind == "float"
        assert order.relations["customer"].cardinality == "one"
        assert order.relations["items"].cardinality == "many"
        assert graph.target("Order", "customer").name == "Customer"

    def test_default_formats_by_kind(self):
        graph = introspect_models(MODELS.values(), formats={"Order": {"status": False}})
        order = graph.entity("Order")
        assert not order.fields["status"].formattable
        assert [o.name for o in order.fields["placed_on"].formats] == ["ISO", "DATE_ONLY", "CUSTOM"]
        assert not order.fields["id"].formattable

    def test_column_kinds(self):
        assert get_column_kind(Column(Numeric(10, 2))) == "decimal"
        assert get_column_kind(Column(Integer)) == "integer"
        assert get_column_kind(Column(String(5))) == "text"


class TestFilter:
    async def test_scalar_conditions(self, db, operations):
        result = await _read(db, operations, {
            "filter": {"status": {"eq": "PAID"}, "total": {"gt": 50}},
        })
        assert [node["id"] for node in result.nodes] == [3, 5]
        assert result.page_info.total_count == 2

    async def test_to_one_chain(self, db, operations):
        result = await _read(db, operations, {
            "filter": {"customer": {"company": {"name": {"startswith": "Acme"}}}},
        })
        assert [node["id"] for node in result.nodes] == [1, 3]

    async def test_to_many_any(self, db, operations):
        result = await _read(db, operations, {"filter": {"items": {"sku": {"eq": "GEAR"}}}})
        assert [node["id"] for node in result.nodes] == [3, 5]

    async def test_in_and_contains(self, db, operations):
        result = await _read(db, operations, {
            "filter": {"status": {"in": ["PENDING", "SHIPPED"]}},
        })
        assert [node["id"] for node in result.nodes] == [2, 4]

        result = await _read(db, operations, {"filter": {"status": {"contains": "_"}}})
        assert result.nodes == []

    async def test_custom_field_clause(self, db, operations):
        result = await _read(db, operations, {"filter": {"large": {"eq": True}}})
        assert [node["id"] for node in result.nodes] == [4, 5]
        result = await _read(db, operations, {"filter": {"large": {"eq": False}}})
        assert [node["id"] for node in result.nodes] == [1, 2, 3]


class TestSortAndPage:
    async def test_sort_through_relation(self, db, operations):
        result = await _read(db, operations, {
            "sort": [{"customer": {"name": "DESC"}}, {"total": "ASC"}],
        })
        assert [node["id"] for node in result.nodes] == [4, 2, 5, 1, 3]

    async def test_sort_through_two_relations(self, db, operations):
        result = await _read(db, operations, {
            "filter": {"customer": {"company": {"id": {"gte": 1}}}},
            "sort": [{"customer": {"company": {"name": "DESC"}}}, "-id"],
        })
        assert [node["id"] for node in result.nodes] == [5, 2, 3, 1]

    async def test_window(self, db, operations):
        result = await _read(db, operations, {"sort": ["placed_on"], "limit": 2, "offset": 2})
        assert [node["id"] for node in result.nodes] == [3, 4]
        info = result.page_info
        assert (info.has_next_page, info.has_previous_page, info.total_count) == (True, True, 5)

    async def test_nodes_hold_columns_only(self, db, operations):
        result = await _read(db, operations, {"filter": {"id": {"eq": 1}}})
        assert result.nodes[0] == {
            "id": 1,
            "status": "PAID",
            "total": 10.0,
            "placed_on": date(2024, 1, 5),
            "customer_id": 1,
        }


class TestNullOrdering:
    @pytest.mark.parametrize(
        "direction, expected",
        [("ASC", [4, 1, 3, 2, 5]), ("DESC", [2, 5, 1, 3, 4])],
    )
    async def test_matches_memory_store(self, db, operations, graph, store, direction, expected):
        arguments = {"sort": [{"customer": {"company": {"name": direction}}}, "id"]}

        result = await _read(db, operations, arguments)
        assert [node["id"] for node in result.nodes] == expected

        memory = await build_operations(graph)["Order"]["list"].execute(store, arguments)
        assert [node["id"] for node in memory.nodes] == expected
