"""
Shared fixtures.

Every test gets a fresh in-memory store loaded with the sample dataset.
Settings are read from the environment once per process, so the test
environment is fixed here before anything from foodiehub is imported.
"""

import os

os.environ["ENV_MODE"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["DEBUG"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from foodiehub.dependencies import get_store
from foodiehub.main import app
from foodiehub.schemas import OrderItem, User
from foodiehub.services.auth import AuthService
from foodiehub.services.orders import OrderLifecycleManager
from foodiehub.services.seed import seed_sample_data
from foodiehub.services.store import Collection, MemoryDocumentStore


async def find_user(store, email: str) -> User:
    (record,) = await store.query(Collection.USERS, {"email": email})
    return User.model_validate(record)


async def find_restaurant(store, country: str) -> dict:
    return (await store.query(Collection.RESTAURANTS, {"country": country}, order_by="name"))[0]


async def find_menu(store, restaurant_id: str) -> list[dict]:
    return await store.query(Collection.MENU_ITEMS, {"restaurant_id": restaurant_id}, order_by="name")


async def find_payment_methods(store, country: str) -> list[dict]:
    return await store.query(Collection.PAYMENT_METHODS, {"country": country}, order_by="holder_name")


async def place_order(store, user: User, quantity: int = 1):
    """Place a pending order for the first menu item of a restaurant in the user's country."""
    restaurant = await find_restaurant(store, user.country)
    menu_item = (await find_menu(store, restaurant["id"]))[0]
    item = OrderItem(
        id=menu_item["id"],
        name=menu_item["name"],
        price=menu_item["price"],
        quantity=quantity,
    )
    manager = OrderLifecycleManager(store)
    return await manager.create(user, restaurant["id"], [item], round(menu_item["price"] * quantity, 2))


@pytest.fixture
async def store():
    store = MemoryDocumentStore()
    await seed_sample_data(store)
    return store


@pytest.fixture
async def admin(store):
    """Nick Fury, admin in America."""
    return await find_user(store, "nick.fury@shield.com")


@pytest.fixture
async def manager_india(store):
    return await find_user(store, "captain.marvel@shield.com")


@pytest.fixture
async def manager_america(store):
    return await find_user(store, "captain.america@shield.com")


@pytest.fixture
async def member_india(store):
    """Thor, member in India."""
    return await find_user(store, "thor@shield.com")


@pytest.fixture
async def other_member_india(store):
    """Thanos, member in India."""
    return await find_user(store, "thanos@shield.com")


@pytest.fixture
async def member_america(store):
    return await find_user(store, "travis@shield.com")


@pytest.fixture
def headers_for(store):
    """Build an Authorization header for a user without going through login."""
    auth = AuthService(store)

    def build(user: User) -> dict[str, str]:
        token, _ = auth.create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
