"""
Sample Data Seeder

Populates an empty store with the demo dataset: six users across two
countries and all three roles, four restaurants, their menus and three
payment methods. Runs at startup in development and from scripts/seed.py.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone

from foodiehub.schemas import Role
from foodiehub.services.auth import hash_password
from foodiehub.services.store import BaseDocumentStore, Collection

logger = logging.getLogger(__name__)


SAMPLE_USERS = [
    {"name": "Nick Fury", "email": "nick.fury@shield.com", "password": "admin123",
     "role": Role.ADMIN, "country": "America"},
    {"name": "Captain Marvel", "email": "captain.marvel@shield.com", "password": "manager123",
     "role": Role.MANAGER, "country": "India"},
    {"name": "Captain America", "email": "captain.america@shield.com", "password": "manager123",
     "role": Role.MANAGER, "country": "America"},
    {"name": "Thanos", "email": "thanos@shield.com", "password": "member123",
     "role": Role.MEMBER, "country": "India"},
    {"name": "Thor", "email": "thor@shield.com", "password": "member123",
     "role": Role.MEMBER, "country": "India"},
    {"name": "Travis", "email": "travis@shield.com", "password": "member123",
     "role": Role.MEMBER, "country": "America"},
]

SAMPLE_RESTAURANTS = [
    {
        "name": "Spice Garden",
        "cuisine": "Indian",
        "country": "India",
        "rating": 4.5,
        "delivery_time": "30-45 min",
        "image": "https://images.unsplash.com/photo-1585937421612-70a008356fbe?w=400",
        "menu": [
            ("Butter Chicken", "Creamy tomato-based curry with tender chicken", 12.99, "Main Course"),
            ("Biryani", "Fragrant basmati rice with spices and meat", 14.99, "Main Course"),
            ("Naan Bread", "Fresh baked Indian bread", 3.99, "Sides"),
        ],
    },
    {
        "name": "Mumbai Express",
        "cuisine": "Indian",
        "country": "India",
        "rating": 4.2,
        "delivery_time": "25-40 min",
        "image": "https://images.unsplash.com/photo-1565557623262-b51c2513a641?w=400",
        "menu": [
            ("Tandoori Chicken", "Marinated chicken cooked in tandoor oven", 13.99, "Main Course"),
            ("Dal Makhani", "Rich and creamy black lentil curry", 9.99, "Main Course"),
        ],
    },
    {
        "name": "American Diner",
        "cuisine": "American",
        "country": "America",
        "rating": 4.3,
        "delivery_time": "20-35 min",
        "image": "https://images.unsplash.com/photo-1571091718767-18b5b1457add?w=400",
        "menu": [
            ("Classic Cheeseburger", "Beef patty with cheese, lettuce, tomato", 11.99, "Main Course"),
            ("Caesar Salad", "Fresh romaine lettuce with caesar dressing", 8.99, "Salads"),
            ("French Fries", "Crispy golden french fries", 4.99, "Sides"),
        ],
    },
    {
        "name": "Burger Palace",
        "cuisine": "Fast Food",
        "country": "America",
        "rating": 4.1,
        "delivery_time": "15-25 min",
        "image": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=400",
        "menu": [
            ("Double Bacon Burger", "Two beef patties with bacon and cheese", 15.99, "Main Course"),
            ("Chicken Wings", "Spicy buffalo chicken wings", 9.99, "Appetizers"),
        ],
    },
]

SAMPLE_PAYMENT_METHODS = [
    {"type": "Credit Card", "card_number": "**** **** **** 1234", "expiry_date": "12/25",
     "holder_name": "Nick Fury", "country": "America"},
    {"type": "Debit Card", "card_number": "**** **** **** 5678", "expiry_date": "06/26",
     "holder_name": "SHIELD Organization", "country": "America"},
    {"type": "Credit Card", "card_number": "**** **** **** 9012", "expiry_date": "03/27",
     "holder_name": "Captain Marvel", "country": "India"},
]


async def seed_sample_data(store: BaseDocumentStore) -> bool:
    """
    Insert the demo dataset unless users already exist.

    Returns:
        bool: True if data was inserted
    """
    if await store.count(Collection.USERS) > 0:
        logger.info("Seed skipped: users already present")
        return False

    for user in SAMPLE_USERS:
        await store.add(Collection.USERS, {
            "name": user["name"],
            "email": user["email"],
            "password_hash": hash_password(user["password"]),
            "role": user["role"].value,
            "country": user["country"],
        })
    logger.info(f"Seeded {len(SAMPLE_USERS)} users")

    menu_count = 0
    for sample in SAMPLE_RESTAURANTS:
        fields = {key: value for key, value in sample.items() if key != "menu"}
        restaurant = await store.add(Collection.RESTAURANTS, fields)

        for name, description, price, category in sample["menu"]:
            await store.add(Collection.MENU_ITEMS, {
                "restaurant_id": restaurant["id"],
                "name": name,
                "description": description,
                "price": price,
                "category": category,
            })
            menu_count += 1
    logger.info(f"Seeded {len(SAMPLE_RESTAURANTS)} restaurants and {menu_count} menu items")

    now = datetime.now(timezone.utc)
    for method in SAMPLE_PAYMENT_METHODS:
        await store.add(Collection.PAYMENT_METHODS, {**method, "created_at": now, "updated_at": now})
    logger.info(f"Seeded {len(SAMPLE_PAYMENT_METHODS)} payment methods")

    return True
