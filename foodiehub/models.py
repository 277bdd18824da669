"""
SQLAlchemy Database Models

Tables backing the SQL document store. One table per collection:
- users
- restaurants
- menu_items
- orders
- payment_methods

Ids are opaque strings assigned by the store, so rows map one-to-one
onto the documents the services work with.

Author: FoodieHub Team
Version: 1.0.0
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, String, Float, DateTime, Text, JSON, ForeignKey

from foodiehub.database import Base


class DocumentMixin:
    """Row <-> document conversion shared by every collection table."""

    def to_dict(self) -> dict[str, Any]:
        document = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            # Backends without timezone support hand back naive UTC values
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            document[column.key] = value
        return document


class User(DocumentMixin, Base):
    """Credential store entry. Never mutated by the API."""
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    country = Column(String(50), nullable=False, index=True)

    def __repr__(self):
        return f"<User {self.email} - {self.role} - {self.country}>"


class Restaurant(DocumentMixin, Base):
    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    cuisine = Column(String(50), nullable=True)
    country = Column(String(50), nullable=False, index=True)
    rating = Column(Float, nullable=True)
    delivery_time = Column(String(50), nullable=True)
    image = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Restaurant {self.name} - {self.country}>"


class MenuItem(DocumentMixin, Base):
    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    category = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<MenuItem {self.name} - {self.price:.2f}>"


class Order(DocumentMixin, Base):
    """
    Placed orders.

    Status moves pending -> paid or pending -> cancelled only.
    The row is never deleted.
    """
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    restaurant_id = Column(String(64), nullable=False)
    items = Column(JSON, nullable=False)  # item snapshots
    total_amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, index=True)
    country = Column(String(50), nullable=False, index=True)

    # Payment (set at checkout)
    payment_method_id = Column(String(64), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Order #{self.id} - {self.country} - {self.status}>"


class PaymentMethod(DocumentMixin, Base):
    """Admin-managed payment methods. card_number is stored masked."""
    __tablename__ = "payment_methods"

    id = Column(String(64), primary_key=True)
    type = Column(String(20), nullable=False)
    card_number = Column(String(32), nullable=True)
    expiry_date = Column(String(10), nullable=True)
    holder_name = Column(String(100), nullable=False)
    country = Column(String(50), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<PaymentMethod {self.type} {self.card_number} - {self.country}>"
