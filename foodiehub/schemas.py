"""
Pydantic Schemas for Domain Records and Request/Response Validation

The browser client speaks camelCase JSON (restaurantId, totalAmount, ...);
Python code uses snake_case. CamelModel bridges the two with aliases and
accepts either spelling on input.

Author: FoodieHub Team
Version: 1.0.0
"""

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional, List

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as SchemaValidationError
from pydantic.alias_generators import to_camel

from foodiehub.core.exceptions import ValidationError


CARD_NUMBER_PATTERN = re.compile(r"^[0-9*Xx•\s-]+$")
EXPIRY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")

# Upper bound for any single price or order total
MAX_AMOUNT = 1_000_000


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class OrderStatus(str, Enum):
    """Order status workflow: pending -> paid | cancelled."""
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


class PaymentType(str, Enum):
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    PAYPAL = "PayPal"

    @property
    def requires_card(self) -> bool:
        return self is not PaymentType.PAYPAL


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# DOMAIN RECORDS
# =============================================================================

class User(CamelModel):
    """Authenticated user. The password hash never leaves the auth service."""
    id: str
    name: str
    email: str
    role: Role
    country: str


class Restaurant(CamelModel):
    id: str
    name: str
    cuisine: Optional[str] = None
    country: str
    rating: Optional[float] = None
    delivery_time: Optional[str] = None
    image: Optional[str] = None


class MenuItem(CamelModel):
    id: str
    restaurant_id: str
    name: str
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category: Optional[str] = None


class OrderItem(CamelModel):
    """Single ordered item: a snapshot of the menu item at order time."""
    id: str = Field(..., min_length=1, max_length=64, examples=["menu-item-id"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Butter Chicken"])
    price: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, examples=[12.99])
    quantity: int = Field(..., ge=1, le=99, examples=[2])


class Order(CamelModel):
    id: str
    user_id: str
    restaurant_id: str
    items: List[OrderItem]
    total_amount: float
    status: OrderStatus
    country: str
    created_at: datetime
    updated_at: datetime
    payment_method_id: Optional[str] = None
    paid_at: Optional[datetime] = None


class PaymentMethod(CamelModel):
    """Stored payment method. card_number is always masked."""
    id: str
    type: PaymentType
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    holder_name: str
    country: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, max_length=255, examples=["nick.fury@shield.com"])
    password: str = Field(..., min_length=1, max_length=128)


class OrderCreate(CamelModel):
    """Request schema for placing an order."""
    restaurant_id: str = Field(..., min_length=1, max_length=64)
    items: List[OrderItem] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False, examples=[25.50])


class CheckoutRequest(CamelModel):
    payment_method_id: str = Field(..., min_length=1, max_length=64)


def _validate_card_number(v: str) -> str:
    v = v.strip()
    if not CARD_NUMBER_PATTERN.match(v):
        raise ValueError("Card number may only contain digits, spaces, dashes and mask characters")
    if len(v) < 4 or not v[-4:].isdigit():
        raise ValueError("Card number must end with at least 4 digits")
    return v


def _validate_expiry(v: str) -> str:
    v = v.strip()
    if not EXPIRY_PATTERN.match(v):
        raise ValueError("Expiry date must use MM/YY format")
    return v


CardNumber = Annotated[str, AfterValidator(_validate_card_number)]
ExpiryDate = Annotated[str, AfterValidator(_validate_expiry)]


class PaymentMethodCreate(CamelModel):
    """Request schema for adding a payment method (admin only)."""
    type: PaymentType = Field(default=PaymentType.CREDIT_CARD, examples=["Credit Card"])
    card_number: Optional[CardNumber] = Field(None, max_length=32, examples=["4111 1111 1111 1111"])
    expiry_date: Optional[ExpiryDate] = Field(None, examples=["12/27"])
    holder_name: str = Field(..., min_length=1, max_length=100, examples=["Nick Fury"])
    country: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_card_fields(self) -> "PaymentMethodCreate":
        if self.type.requires_card and not (self.card_number and self.expiry_date):
            raise ValueError(f"{self.type.value} requires cardNumber and expiryDate")
        return self


class PaymentMethodUpdate(CamelModel):
    """
    Partial update. Omitted fields keep their stored values; a supplied
    card number is masked again before it is stored.
    """
    type: Optional[PaymentType] = None
    card_number: Optional[CardNumber] = Field(None, max_length=32)
    expiry_date: Optional[ExpiryDate] = None
    holder_name: Optional[str] = Field(None, min_length=1, max_length=100)


def payload_field(payload: Any, name: str) -> Any:
    """Read one field from a raw JSON body by camelCase or snake_case name."""
    if not isinstance(payload, dict):
        return None
    return payload.get(to_camel(name), payload.get(name))


def parse_payload(model: type[BaseModel], payload: Any):
    """
    Validate a raw JSON body against a request schema.

    Raises:
        ValidationError: the body does not match the schema
    """
    try:
        return model.model_validate({} if payload is None else payload)
    except SchemaValidationError as e:
        raise ValidationError.from_errors(e.errors())


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class LoginResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User


class CurrentUserResponse(CamelModel):
    user: User


class MessageResponse(CamelModel):
    message: str


class SampleLogin(CamelModel):
    """Quick-login entry shown on the development login page."""
    email: str
    password: Optional[str] = None
    name: str
    role: Role
    country: str


class ClientConfigResponse(CamelModel):
    """Configuration object handed to the browser client at startup."""
    app_name: str
    app_description: str
    version: str
    country_flags: dict[str, str]
    roles: List[Role]
    sample_users: List[SampleLogin] = []


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    store: str
    store_provider: str
    environment: str
    timestamp: datetime
