"""
Order Lifecycle Manager

Places orders and applies the only two status transitions an order has:

    pending ──checkout──> paid        (terminal)
       └─────cancel────> cancelled   (terminal)

Preconditions are checked in a fixed order: role, existence, country,
current status, then the request payload. Transitions are written as
conditional updates on status == pending, so when two requests race for
the same order exactly one of them wins and the other gets InvalidTransition.

Ordered items must be on the restaurant's menu at the menu price; the
stored total is the server's sum of those prices.

Order creation reads the restaurant and writes the order as separate store
calls. A restaurant removed in between leaves the order pointing at a
missing restaurant; the store offers no transaction to prevent it.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from foodiehub.core.exceptions import InvalidTransition, NotFound, ValidationError
from foodiehub.schemas import (
    CheckoutRequest,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatus,
    User,
    parse_payload,
    payload_field,
)
from foodiehub.services.guard import (
    ORDER_MANAGEMENT_ROLES,
    ORDERING_ROLES,
    require_country,
    require_role,
)
from foodiehub.services.store import BaseDocumentStore, Collection

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """
    Exact two-place decimal for a float or string amount.

    Raises:
        ValidationError: not a finite amount representable in cents
    """
    try:
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount {value!r} is out of range")


def normalize_items(items: Iterable[OrderItem]) -> list[OrderItem]:
    """
    Merge repeated item ids into one line, keeping first-seen order.

    Raises:
        ValidationError: the same item id appears with two different prices
    """
    merged: dict[str, OrderItem] = {}

    for item in items:
        existing = merged.get(item.id)
        if existing is None:
            merged[item.id] = item.model_copy()
            continue
        if to_money(existing.price) != to_money(item.price):
            raise ValidationError(f"Item {item.id} listed with conflicting prices")
        merged[item.id] = existing.model_copy(
            update={"quantity": existing.quantity + item.quantity}
        )

    return list(merged.values())


def calculate_total(items: Iterable[OrderItem]) -> Decimal:
    """Sum of price × quantity, in exact cents."""
    total = sum(
        (to_money(item.price) * item.quantity for item in items),
        Decimal("0.00"),
    )
    return to_money(total)


class OrderLifecycleManager:
    """
    Creates, lists and transitions orders.

    Example:
        >>> manager = OrderLifecycleManager(store)
        >>> order = await manager.create(user, restaurant_id, items, 25.50)
        >>> order.status
        <OrderStatus.PENDING: 'pending'>
        >>> (await manager.cancel(manager_user, order.id)).status
        <OrderStatus.CANCELLED: 'cancelled'>
    """

    def __init__(self, store: BaseDocumentStore):
        self.store = store

    async def create(
        self,
        user: User,
        restaurant_id: str,
        items: list[OrderItem],
        total_amount: float,
    ) -> Order:
        """
        Place a pending order.

        The client-supplied total must equal the server-side sum of the
        normalized items; the stored total is the server's value.

        Raises:
            Forbidden: role not allowed to order, or restaurant in another country
            NotFound: restaurant does not exist
            ValidationError: no items, item not on the menu, wrong or
                conflicting item prices, or total mismatch
        """
        require_role(user, ORDERING_ROLES)
        await self._load_restaurant(user, restaurant_id)
        return await self._place(user, restaurant_id, items, total_amount)

    async def create_from_payload(self, user: User, payload: Any) -> Order:
        """
        Place an order from a raw request body.

        Only restaurantId is read before the restaurant's country is
        checked; the rest of the body is validated afterwards.
        """
        require_role(user, ORDERING_ROLES)

        restaurant_id = payload_field(payload, "restaurant_id")
        if not isinstance(restaurant_id, str) or not restaurant_id:
            raise ValidationError("restaurantId: Field required")
        await self._load_restaurant(user, restaurant_id)

        data = parse_payload(OrderCreate, payload)
        return await self._place(user, data.restaurant_id, data.items, data.total_amount)

    async def list_orders(self, user: User) -> list[Order]:
        """The user's own orders in their country, newest first."""
        records = await self.store.query(
            Collection.ORDERS,
            {"user_id": user.id, "country": user.country},
            order_by="created_at",
            descending=True,
        )
        return [Order.model_validate(record) for record in records]

    async def cancel(self, user: User, order_id: str) -> Order:
        """
        Move a pending order to cancelled.

        Raises:
            Forbidden: role is not admin/manager, or order in another country
            NotFound: order does not exist
            InvalidTransition: order is not pending
        """
        require_role(user, ORDER_MANAGEMENT_ROLES)
        order = await self._load_pending(user, order_id)

        now = datetime.now(timezone.utc)
        updated = await self._transition(order, OrderStatus.CANCELLED, {"updated_at": now})

        logger.info(f"Order #{order.id} cancelled by user {user.id}")
        return updated

    async def checkout(self, user: User, order_id: str, payment_method_id: str) -> Order:
        """
        Simulate charging a pending order: mark it paid with the given
        payment method. No payment gateway is contacted.

        Raises:
            Forbidden: role is not admin/manager, or order/payment method
                in another country
            NotFound: order or payment method does not exist
            InvalidTransition: order is not pending
        """
        require_role(user, ORDER_MANAGEMENT_ROLES)
        order = await self._load_pending(user, order_id)
        return await self._pay(user, order, payment_method_id)

    async def checkout_from_payload(self, user: User, order_id: str, payload: Any) -> Order:
        """Checkout from a raw request body, validated after the order's checks."""
        require_role(user, ORDER_MANAGEMENT_ROLES)
        order = await self._load_pending(user, order_id)

        data = parse_payload(CheckoutRequest, payload)
        return await self._pay(user, order, data.payment_method_id)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _load_restaurant(self, user: User, restaurant_id: str) -> dict:
        restaurant = await self.store.get(Collection.RESTAURANTS, restaurant_id)
        if restaurant is None:
            raise NotFound("Restaurant not found")
        require_country(user, restaurant["country"])
        return restaurant

    async def _priced_from_menu(self, restaurant_id: str, items: list[OrderItem]) -> list[OrderItem]:
        """Check every item against the menu; snapshot the menu name."""
        menu = {
            record["id"]: record
            for record in await self.store.query(Collection.MENU_ITEMS, {"restaurant_id": restaurant_id})
        }

        priced = []
        for item in items:
            menu_item = menu.get(item.id)
            if menu_item is None:
                raise ValidationError(f"Item {item.id} is not on this restaurant's menu")
            if to_money(item.price) != to_money(menu_item["price"]):
                raise ValidationError(
                    f"Item {item.id} price {to_money(item.price)} does not match "
                    f"menu price {to_money(menu_item['price'])}"
                )
            priced.append(item.model_copy(update={"name": menu_item["name"]}))
        return priced

    async def _place(
        self,
        user: User,
        restaurant_id: str,
        items: list[OrderItem],
        total_amount: float,
    ) -> Order:
        normalized = normalize_items(items)
        if not normalized:
            raise ValidationError("Order must contain at least one item")
        normalized = await self._priced_from_menu(restaurant_id, normalized)

        expected_total = calculate_total(normalized)
        if to_money(total_amount) != expected_total:
            logger.warning(
                f"Order total mismatch from user {user.id}: "
                f"client={total_amount} server={expected_total}"
            )
            raise ValidationError(
                f"totalAmount {to_money(total_amount)} does not match items total {expected_total}"
            )

        now = datetime.now(timezone.utc)
        record = await self.store.add(Collection.ORDERS, {
            "user_id": user.id,
            "restaurant_id": restaurant_id,
            "items": [item.model_dump() for item in normalized],
            "total_amount": float(expected_total),
            "status": OrderStatus.PENDING.value,
            "country": user.country,
            "created_at": now,
            "updated_at": now,
        })

        order = Order.model_validate(record)
        logger.info(
            f"Order #{order.id} created by user {user.id} "
            f"({len(normalized)} lines, {order.total_amount:.2f}, {order.country})"
        )
        return order

    async def _load_pending(self, user: User, order_id: str) -> Order:
        record = await self.store.get(Collection.ORDERS, order_id)
        if record is None:
            raise NotFound("Order not found")

        order = Order.model_validate(record)
        require_country(user, order.country)

        if order.status.is_terminal:
            raise InvalidTransition(f"Order is already {order.status.value}")
        return order

    async def _pay(self, user: User, order: Order, payment_method_id: str) -> Order:
        payment_method = await self.store.get(Collection.PAYMENT_METHODS, payment_method_id)
        if payment_method is None:
            raise NotFound("Payment method not found")
        require_country(user, payment_method["country"])

        now = datetime.now(timezone.utc)
        updated = await self._transition(order, OrderStatus.PAID, {
            "payment_method_id": payment_method_id,
            "paid_at": now,
            "updated_at": now,
        })

        logger.info(
            f"Order #{order.id} paid by user {user.id} "
            f"with payment method {payment_method_id} ({updated.total_amount:.2f})"
        )
        return updated

    async def _transition(self, order: Order, target: OrderStatus, changes: dict) -> Order:
        record = await self.store.update(
            Collection.ORDERS,
            order.id,
            {**changes, "status": target.value},
            expected={"status": OrderStatus.PENDING.value},
        )
        if record is None:
            # Another request moved the order out of pending first
            current = await self.store.get(Collection.ORDERS, order.id)
            state = current["status"] if current else "missing"
            logger.warning(f"Order #{order.id} lost transition race to {target.value} (now {state})")
            raise InvalidTransition(f"Order is already {state}")

        return Order.model_validate(record)
