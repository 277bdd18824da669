"""
Restaurant Catalog Service

Read-only access to restaurants and their menus, limited to the caller's
country. Menu items carry no country of their own; they are scoped through
their restaurant.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging

from foodiehub.core.exceptions import NotFound
from foodiehub.schemas import MenuItem, Restaurant, User
from foodiehub.services.guard import require_country
from foodiehub.services.store import BaseDocumentStore, Collection

logger = logging.getLogger(__name__)


class RestaurantService:

    def __init__(self, store: BaseDocumentStore):
        self.store = store

    async def list_restaurants(self, user: User) -> list[Restaurant]:
        records = await self.store.query(Collection.RESTAURANTS, {"country": user.country})
        return [Restaurant.model_validate(record) for record in records]

    async def get_restaurant(self, user: User, restaurant_id: str) -> Restaurant:
        """Raises NotFound for unknown ids and Forbidden across countries."""
        record = await self.store.get(Collection.RESTAURANTS, restaurant_id)
        if record is None:
            raise NotFound("Restaurant not found")

        restaurant = Restaurant.model_validate(record)
        require_country(user, restaurant.country)
        return restaurant

    async def get_menu(self, user: User, restaurant_id: str) -> list[MenuItem]:
        restaurant = await self.get_restaurant(user, restaurant_id)

        records = await self.store.query(Collection.MENU_ITEMS, {"restaurant_id": restaurant.id})
        logger.debug(f"Menu for restaurant {restaurant.id}: {len(records)} items")
        return [MenuItem.model_validate(record) for record in records]
