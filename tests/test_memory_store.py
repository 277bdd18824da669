import pytest

from foodiehub.services.store import (
    Collection,
    MemoryDocumentStore,
    UnknownCollectionError,
    get_document_store,
    reset_document_store,
)


@pytest.fixture
def memory_store():
    return MemoryDocumentStore()


async def test_returned_documents_are_copies(memory_store):
    created = await memory_store.add(Collection.ORDERS, {"status": "pending", "items": [{"id": "a"}]})
    created["status"] = "paid"
    created["items"].append({"id": "b"})

    stored = await memory_store.get(Collection.ORDERS, created["id"])
    assert stored["status"] == "pending"
    assert stored["items"] == [{"id": "a"}]


async def test_conditional_update(memory_store):
    order = await memory_store.add(Collection.ORDERS, {"status": "pending"})

    assert await memory_store.update(
        Collection.ORDERS, order["id"], {"status": "paid"}, expected={"status": "pending"}
    )
    assert await memory_store.update(
        Collection.ORDERS, order["id"], {"status": "cancelled"}, expected={"status": "pending"}
    ) is None
    assert (await memory_store.get(Collection.ORDERS, order["id"]))["status"] == "paid"


async def test_query_with_filters(memory_store):
    await memory_store.add(Collection.RESTAURANTS, {"name": "B", "country": "India"})
    await memory_store.add(Collection.RESTAURANTS, {"name": "A", "country": "India"})
    await memory_store.add(Collection.RESTAURANTS, {"name": "C", "country": "America"})

    india = await memory_store.query(Collection.RESTAURANTS, {"country": "India"}, order_by="name")

    assert [r["name"] for r in india] == ["A", "B"]
    assert len(await memory_store.query(Collection.RESTAURANTS)) == 3


async def test_delete(memory_store):
    doc = await memory_store.add(Collection.USERS, {"email": "x@y.z"})

    assert await memory_store.delete(Collection.USERS, doc["id"])
    assert not await memory_store.delete(Collection.USERS, doc["id"])
    assert await memory_store.count(Collection.USERS) == 0


async def test_unknown_collection(memory_store):
    with pytest.raises(UnknownCollectionError):
        await memory_store.query("dishes")


def test_factory_uses_memory_store_in_development():
    reset_document_store()
    try:
        store = get_document_store()
        assert store.provider_name == "memory"
        assert get_document_store() is store
    finally:
        reset_document_store()
