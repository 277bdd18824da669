"""
                        Services Module

Contains all business logic. Services receive the document store in their
constructor; the store itself has a memory (development) and a SQL
(staging/production) implementation.

Services:
    - store: Document store abstraction and factory
    - auth: Password verification and bearer tokens
    - guard: Role and country authorization
    - orders: Order lifecycle (create, cancel, checkout)
    - restaurants: Restaurant catalog and menus
    - payment_methods: Admin payment method management
    - seed: Sample dataset
"""

from foodiehub.services.auth import AuthService
from foodiehub.services.orders import OrderLifecycleManager
from foodiehub.services.payment_methods import PaymentMethodService
from foodiehub.services.restaurants import RestaurantService

__all__ = [
    "AuthService",
    "OrderLifecycleManager",
    "PaymentMethodService",
    "RestaurantService",
]
