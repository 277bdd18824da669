"""
FastAPI Dependencies

Wires services to the configured document store and turns the
Authorization header into the current user. Role checks run here, as
route dependencies, so they happen before the request body is validated.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from foodiehub.core.exceptions import MissingToken
from foodiehub.schemas import Role, User
from foodiehub.services.auth import AuthService
from foodiehub.services.guard import require_role
from foodiehub.services.orders import OrderLifecycleManager
from foodiehub.services.payment_methods import PaymentMethodService
from foodiehub.services.restaurants import RestaurantService
from foodiehub.services.store import BaseDocumentStore, get_document_store

bearer_scheme = HTTPBearer(auto_error=False)


def get_store() -> BaseDocumentStore:
    return get_document_store()


def get_auth_service(store: BaseDocumentStore = Depends(get_store)) -> AuthService:
    return AuthService(store)


def get_order_manager(store: BaseDocumentStore = Depends(get_store)) -> OrderLifecycleManager:
    return OrderLifecycleManager(store)


def get_restaurant_service(store: BaseDocumentStore = Depends(get_store)) -> RestaurantService:
    return RestaurantService(store)


def get_payment_method_service(store: BaseDocumentStore = Depends(get_store)) -> PaymentMethodService:
    return PaymentMethodService(store)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the bearer token to a user.

    Missing header -> 401; invalid or expired token -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    return await auth.resolve(credentials.credentials)


def require_roles(*roles: Role):
    """Dependency factory: the current user, provided their role is allowed."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        require_role(user, roles)
        return user

    return dependency
