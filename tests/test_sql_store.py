"""SQLDocumentStore against an in-memory SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foodiehub.database import init_db
from foodiehub.schemas import OrderStatus
from foodiehub.services.orders import OrderLifecycleManager
from foodiehub.services.seed import seed_sample_data
from foodiehub.services.store import Collection, UnknownCollectionError
from foodiehub.services.store.sql import SQLDocumentStore
from tests.conftest import find_payment_methods, find_user, place_order


@pytest.fixture
async def sql_store():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(bind=engine)
    yield SQLDocumentStore(async_sessionmaker(bind=engine, expire_on_commit=False))
    await engine.dispose()


async def test_add_and_get(sql_store):
    created = await sql_store.add(Collection.RESTAURANTS, {"name": "Test Kitchen", "country": "India"})

    assert created["id"]
    fetched = await sql_store.get(Collection.RESTAURANTS, created["id"])
    assert fetched["name"] == "Test Kitchen"
    assert fetched["cuisine"] is None
    assert await sql_store.get(Collection.RESTAURANTS, "missing") is None


async def test_query_filters_and_orders(sql_store):
    now = datetime.now(timezone.utc)
    for offset, country in enumerate(["India", "America", "India"]):
        await sql_store.add(Collection.PAYMENT_METHODS, {
            "type": "PayPal",
            "holder_name": f"Holder {offset}",
            "country": country,
            "created_at": now + timedelta(seconds=offset),
            "updated_at": now,
        })

    ascending = await sql_store.query(Collection.PAYMENT_METHODS, {"country": "India"}, order_by="created_at")
    descending = await sql_store.query(
        Collection.PAYMENT_METHODS, {"country": "India"}, order_by="created_at", descending=True
    )

    assert [m["holder_name"] for m in ascending] == ["Holder 0", "Holder 2"]
    assert [m["holder_name"] for m in descending] == ["Holder 2", "Holder 0"]
    assert ascending[0]["created_at"].tzinfo is not None


async def test_conditional_update(sql_store):
    now = datetime.now(timezone.utc)
    order = await sql_store.add(Collection.ORDERS, {
        "user_id": "u1",
        "restaurant_id": "r1",
        "items": [{"id": "a", "name": "A", "price": 1.0, "quantity": 1}],
        "total_amount": 1.0,
        "status": "pending",
        "country": "India",
        "created_at": now,
        "updated_at": now,
    })

    first = await sql_store.update(
        Collection.ORDERS, order["id"], {"status": "paid"}, expected={"status": "pending"}
    )
    second = await sql_store.update(
        Collection.ORDERS, order["id"], {"status": "cancelled"}, expected={"status": "pending"}
    )

    assert first["status"] == "paid"
    assert first["items"][0]["id"] == "a"
    assert second is None
    assert (await sql_store.get(Collection.ORDERS, order["id"]))["status"] == "paid"
    assert await sql_store.update(Collection.ORDERS, "missing", {"status": "paid"}) is None


async def test_delete_and_count(sql_store):
    restaurant = await sql_store.add(Collection.RESTAURANTS, {"name": "Gone", "country": "India"})
    assert await sql_store.count(Collection.RESTAURANTS) == 1

    assert await sql_store.delete(Collection.RESTAURANTS, restaurant["id"])
    assert not await sql_store.delete(Collection.RESTAURANTS, restaurant["id"])
    assert await sql_store.count(Collection.RESTAURANTS) == 0


async def test_unknown_collection(sql_store):
    with pytest.raises(UnknownCollectionError):
        await sql_store.get("dishes", "x")


async def test_health_check(sql_store):
    assert await sql_store.health_check()
    assert sql_store.provider_name == "sql"


async def test_order_lifecycle_on_sql(sql_store):
    assert await seed_sample_data(sql_store)
    assert not await seed_sample_data(sql_store)

    member = await find_user(sql_store, "travis@shield.com")
    manager_user = await find_user(sql_store, "captain.america@shield.com")
    order = await place_order(sql_store, member, quantity=2)
    method = (await find_payment_methods(sql_store, "America"))[0]

    manager = OrderLifecycleManager(sql_store)
    paid = await manager.checkout(manager_user, order.id, method["id"])

    assert paid.status is OrderStatus.PAID
    assert paid.payment_method_id == method["id"]
    assert [o.id for o in await manager.list_orders(member)] == [order.id]
