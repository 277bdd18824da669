import pytest

from foodiehub.core.exceptions import Forbidden, NotFound
from foodiehub.services.restaurants import RestaurantService
from tests.conftest import find_restaurant


@pytest.fixture
def service(store):
    return RestaurantService(store)


async def test_list_restaurants_for_country(service, member_india, admin):
    india = await service.list_restaurants(member_india)
    america = await service.list_restaurants(admin)

    assert {r.name for r in india} == {"Spice Garden", "Mumbai Express"}
    assert {r.name for r in america} == {"American Diner", "Burger Palace"}


async def test_menu_belongs_to_restaurant(service, store, member_america):
    restaurant = await find_restaurant(store, "America")

    menu = await service.get_menu(member_america, restaurant["id"])

    assert menu
    assert all(m.restaurant_id == restaurant["id"] for m in menu)


async def test_menu_of_other_country_is_forbidden(service, store, member_india):
    restaurant = await find_restaurant(store, "America")

    with pytest.raises(Forbidden):
        await service.get_menu(member_india, restaurant["id"])


async def test_unknown_restaurant(service, member_india):
    with pytest.raises(NotFound):
        await service.get_restaurant(member_india, "missing")
    with pytest.raises(NotFound):
        await service.get_menu(member_india, "missing")
