"""
Authorization Guard

Role and country checks shared by every route and service. Country is the
only tenancy boundary: a user may touch a resource only when both carry the
same country value. There is no hierarchy and no admin exception.

Checks compose as role first, then country; the first failure stops the
request with Forbidden.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from typing import Iterable

from foodiehub.core.exceptions import Forbidden
from foodiehub.schemas import Role, User

logger = logging.getLogger(__name__)

ORDERING_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.MEMBER})
ORDER_MANAGEMENT_ROLES = frozenset({Role.ADMIN, Role.MANAGER})
PAYMENT_ADMIN_ROLES = frozenset({Role.ADMIN})

ROLE_DENIED_MESSAGE = "Insufficient permissions"
COUNTRY_DENIED_MESSAGE = "Access restricted to your assigned country"


def authorize_role(user: User, allowed_roles: Iterable[Role]) -> bool:
    """Allow iff the user's role is one of allowed_roles."""
    return user.role in set(allowed_roles)


def authorize_country(user: User, resource_country: str) -> bool:
    """Allow iff the resource belongs to the user's country."""
    return resource_country == user.country


def require_role(user: User, allowed_roles: Iterable[Role]) -> None:
    """Raise Forbidden unless authorize_role allows."""
    allowed_roles = set(allowed_roles)
    if not authorize_role(user, allowed_roles):
        logger.warning(
            f"Role denied: user={user.id} role={user.role.value} "
            f"allowed={sorted(r.value for r in allowed_roles)}"
        )
        raise Forbidden(ROLE_DENIED_MESSAGE)


def require_country(user: User, resource_country: str) -> None:
    """Raise Forbidden unless authorize_country allows."""
    if not authorize_country(user, resource_country):
        logger.warning(
            f"Country denied: user={user.id} country={user.country} "
            f"resource_country={resource_country}"
        )
        raise Forbidden(COUNTRY_DENIED_MESSAGE)
