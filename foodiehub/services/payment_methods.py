"""
Payment Method Service

Admin-only management of stored payment methods, scoped to the admin's
country. No payment provider is involved: a payment method is only a
record that checkout points at.

Card numbers are masked before they are written. Masking keeps the last
four characters and replaces every earlier digit with the mask character;
separators stay where they were. The full number cannot be recovered
through any read path. Updates either keep the stored masked value or
mask a newly supplied number.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from foodiehub.core.config import get_settings
from foodiehub.core.exceptions import NotFound, ValidationError
from foodiehub.schemas import (
    PaymentMethod,
    PaymentMethodCreate,
    PaymentMethodUpdate,
    PaymentType,
    User,
    parse_payload,
    payload_field,
)
from foodiehub.services.guard import PAYMENT_ADMIN_ROLES, require_country, require_role
from foodiehub.services.store import BaseDocumentStore, Collection

logger = logging.getLogger(__name__)


def mask_card_number(card_number: str, mask_char: Optional[str] = None) -> str:
    """
    Replace every digit except those in the last four characters.

    >>> mask_card_number("4111 1111 1111 1234")
    '**** **** **** 1234'
    >>> mask_card_number("1234")
    '1234'
    """
    mask_char = mask_char or get_settings().card_mask_char
    head, tail = card_number[:-4], card_number[-4:]
    return "".join(mask_char if c.isdigit() else c for c in head) + tail


class PaymentMethodService:
    """
    CRUD for payment methods. Every operation requires the admin role and
    a country match with the stored record.
    """

    def __init__(self, store: BaseDocumentStore):
        self.store = store

    async def list_methods(self, user: User) -> list[PaymentMethod]:
        require_role(user, PAYMENT_ADMIN_ROLES)
        records = await self.store.query(
            Collection.PAYMENT_METHODS,
            {"country": user.country},
            order_by="created_at",
        )
        return [PaymentMethod.model_validate(record) for record in records]

    async def get_method(self, user: User, method_id: str) -> PaymentMethod:
        require_role(user, PAYMENT_ADMIN_ROLES)
        return await self._load(user, method_id)

    async def create(self, user: User, data: PaymentMethodCreate) -> PaymentMethod:
        """
        Store a new payment method in the admin's country.

        A country in the payload must match the admin's own.
        """
        require_role(user, PAYMENT_ADMIN_ROLES)
        if data.country is not None:
            require_country(user, data.country)

        now = datetime.now(timezone.utc)
        record = await self.store.add(Collection.PAYMENT_METHODS, {
            "type": data.type.value,
            "card_number": mask_card_number(data.card_number) if data.card_number else None,
            "expiry_date": data.expiry_date,
            "holder_name": data.holder_name,
            "country": user.country,
            "created_at": now,
            "updated_at": now,
        })

        method = PaymentMethod.model_validate(record)
        logger.info(f"Payment method {method.id} ({method.type.value}) added by user {user.id}")
        return method

    async def create_from_payload(self, user: User, payload: Any) -> PaymentMethod:
        """
        Create from a raw request body.

        A country in the body is checked before the rest is validated.
        """
        require_role(user, PAYMENT_ADMIN_ROLES)
        country = payload_field(payload, "country")
        if isinstance(country, str):
            require_country(user, country)

        return await self.create(user, parse_payload(PaymentMethodCreate, payload))

    async def update(self, user: User, method_id: str, data: PaymentMethodUpdate) -> PaymentMethod:
        require_role(user, PAYMENT_ADMIN_ROLES)
        current = await self._load(user, method_id)
        return await self._apply_update(user, current, data)

    async def update_from_payload(self, user: User, method_id: str, payload: Any) -> PaymentMethod:
        require_role(user, PAYMENT_ADMIN_ROLES)
        current = await self._load(user, method_id)
        return await self._apply_update(user, current, parse_payload(PaymentMethodUpdate, payload))

    async def _apply_update(
        self, user: User, current: PaymentMethod, data: PaymentMethodUpdate
    ) -> PaymentMethod:
        method_id = current.id
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "card_number" in changes:
            changes["card_number"] = mask_card_number(changes["card_number"])
        if "type" in changes:
            changes["type"] = PaymentType(changes["type"]).value

        method_type = PaymentType(changes.get("type", current.type))
        card_number = changes.get("card_number", current.card_number)
        expiry_date = changes.get("expiry_date", current.expiry_date)
        if method_type.requires_card and not (card_number and expiry_date):
            raise ValidationError(f"{method_type.value} requires cardNumber and expiryDate")

        changes["updated_at"] = datetime.now(timezone.utc)
        record = await self.store.update(Collection.PAYMENT_METHODS, method_id, changes)
        if record is None:
            raise NotFound("Payment method not found")

        logger.info(f"Payment method {method_id} updated by user {user.id}: {sorted(changes)}")
        return PaymentMethod.model_validate(record)

    async def delete(self, user: User, method_id: str) -> None:
        require_role(user, PAYMENT_ADMIN_ROLES)
        await self._load(user, method_id)

        if not await self.store.delete(Collection.PAYMENT_METHODS, method_id):
            raise NotFound("Payment method not found")
        logger.info(f"Payment method {method_id} deleted by user {user.id}")

    async def _load(self, user: User, method_id: str) -> PaymentMethod:
        record = await self.store.get(Collection.PAYMENT_METHODS, method_id)
        if record is None:
            raise NotFound("Payment method not found")

        method = PaymentMethod.model_validate(record)
        require_country(user, method.country)
        return method
