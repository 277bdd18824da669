"""
FastAPI Application Entry Point

FoodieHub - Role-based Food Ordering API
Every route below the API prefix requires a bearer token except login.
Access is gated by role and by the caller's country.

Endpoints (under API_PREFIX, default /api):
    - POST /auth/login: Exchange email/password for a token
    - GET /auth/me: Current user
    - GET /restaurants[/{id}[/menu]]: Catalog for the caller's country
    - POST /orders, GET /orders: Place and list own orders
    - PATCH /orders/{id}/cancel, POST /orders/{id}/checkout: Order transitions
    - GET/POST/PUT/DELETE /payments[/{id}]: Payment methods (admin)
    - GET /config: Client configuration

Unprefixed:
    - GET /: API root
    - GET /health: System health check

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Body, FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodiehub.core.config import get_settings, setup_logging
from foodiehub.core.exceptions import FoodieHubError, ValidationError
from foodiehub.dependencies import (
    get_auth_service,
    get_current_user,
    get_order_manager,
    get_payment_method_service,
    get_restaurant_service,
    get_store,
    require_roles,
)
from foodiehub.schemas import (
    ClientConfigResponse,
    CurrentUserResponse,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    MenuItem,
    MessageResponse,
    Order,
    PaymentMethod,
    Restaurant,
    Role,
    SampleLogin,
    User,
)
from foodiehub.services.auth import AuthService
from foodiehub.services.guard import ORDER_MANAGEMENT_ROLES, ORDERING_ROLES, PAYMENT_ADMIN_ROLES
from foodiehub.services.orders import OrderLifecycleManager
from foodiehub.services.payment_methods import PaymentMethodService
from foodiehub.services.restaurants import RestaurantService
from foodiehub.services.seed import SAMPLE_USERS, seed_sample_data
from foodiehub.services.store import BaseDocumentStore, get_document_store

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"⚠️ Missing production config: {missing}")

    store = get_document_store()
    logger.info(f"✅ Document Store: {store.provider_name}")

    if settings.use_sql_store:
        from foodiehub.database import init_db
        await init_db()
        logger.info("✅ Database tables ready")

    if settings.seed_sample_data:
        if await seed_sample_data(store):
            logger.info("✅ Sample data loaded")

    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    if settings.use_sql_store:
        from foodiehub.database import engine
        await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Role-based food ordering API. Restaurants, orders and payment "
        "methods are scoped to the caller's country and gated by role."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api = APIRouter(prefix=settings.api_prefix)

ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍽️ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "api": settings.api_prefix,
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    store: BaseDocumentStore = Depends(get_store),
) -> HealthResponse:
    """Verify the document store is reachable."""
    store_ok = await store.health_check()

    return HealthResponse(
        status="operational" if store_ok else "degraded",
        store="healthy" if store_ok else "unhealthy",
        store_provider=store.provider_name,
        environment=settings.env_mode.value,
        timestamp=datetime.now(timezone.utc),
    )


@api.get(
    "/config",
    response_model=ClientConfigResponse,
    tags=["Root"],
    summary="Client Configuration",
)
async def client_config() -> ClientConfigResponse:
    """Configuration object loaded once by the browser client."""
    sample_users = []
    if settings.is_development and settings.seed_sample_data:
        sample_users = [
            SampleLogin(
                email=u["email"],
                password=u["password"],
                name=u["name"],
                role=u["role"],
                country=u["country"],
            )
            for u in SAMPLE_USERS
        ]

    return ClientConfigResponse(
        app_name=settings.app_name,
        app_description=settings.app_description,
        version=settings.app_version,
        country_flags=settings.country_flags,
        roles=list(Role),
        sample_users=sample_users,
    )


# =============================================================================
# AUTH ENDPOINTS
# =============================================================================

@api.post(
    "/auth/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
    summary="Login",
)
async def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange email and password for a 24-hour bearer token."""
    result = await auth.authenticate(payload.email, payload.password)
    return LoginResponse(token=result.token, expires_at=result.expires_at, user=result.user)


@api.get(
    "/auth/me",
    response_model=CurrentUserResponse,
    responses=ERROR_RESPONSES,
    tags=["Auth"],
)
async def current_user(user: User = Depends(get_current_user)) -> CurrentUserResponse:
    return CurrentUserResponse(user=user)


# =============================================================================
# RESTAURANT ENDPOINTS
# =============================================================================

@api.get(
    "/restaurants",
    response_model=list[Restaurant],
    responses=ERROR_RESPONSES,
    tags=["Restaurants"],
)
async def list_restaurants(
    user: User = Depends(get_current_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[Restaurant]:
    """Restaurants in the caller's country."""
    return await service.list_restaurants(user)


@api.get(
    "/restaurants/{restaurant_id}",
    response_model=Restaurant,
    responses=ERROR_RESPONSES,
    tags=["Restaurants"],
)
async def get_restaurant(
    restaurant_id: str,
    user: User = Depends(get_current_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> Restaurant:
    return await service.get_restaurant(user, restaurant_id)


@api.get(
    "/restaurants/{restaurant_id}/menu",
    response_model=list[MenuItem],
    responses=ERROR_RESPONSES,
    tags=["Restaurants"],
)
async def get_menu(
    restaurant_id: str,
    user: User = Depends(get_current_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[MenuItem]:
    """Menu of one restaurant. 404 if missing, 403 if in another country."""
    return await service.get_menu(user, restaurant_id)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@api.post(
    "/orders",
    response_model=Order,
    status_code=201,
    responses={**ERROR_RESPONSES, 400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def create_order(
    payload: Any = Body(None, description="OrderCreate: restaurantId, items, totalAmount"),
    user: User = Depends(require_roles(*ORDERING_ROLES)),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> Order:
    """
    Place a pending order.

    totalAmount must equal the sum of price × quantity over the items.
    """
    return await manager.create_from_payload(user, payload)


@api.get(
    "/orders",
    response_model=list[Order],
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="List Own Orders",
)
async def list_orders(
    user: User = Depends(get_current_user),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> list[Order]:
    """The caller's own orders in their country, newest first."""
    return await manager.list_orders(user)


@api.patch(
    "/orders/{order_id}/cancel",
    response_model=Order,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def cancel_order(
    order_id: str,
    user: User = Depends(require_roles(*ORDER_MANAGEMENT_ROLES)),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> Order:
    return await manager.cancel(user, order_id)


@api.post(
    "/orders/{order_id}/checkout",
    response_model=Order,
    responses={**ERROR_RESPONSES, 400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def checkout_order(
    order_id: str,
    payload: Any = Body(None, description="CheckoutRequest: paymentMethodId"),
    user: User = Depends(require_roles(*ORDER_MANAGEMENT_ROLES)),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> Order:
    """Mark a pending order paid with one of the country's payment methods."""
    return await manager.checkout_from_payload(user, order_id, payload)


# =============================================================================
# PAYMENT METHOD ENDPOINTS
# =============================================================================

@api.get(
    "/payments",
    response_model=list[PaymentMethod],
    responses=ERROR_RESPONSES,
    tags=["Payment Methods"],
)
async def list_payment_methods(
    user: User = Depends(require_roles(*PAYMENT_ADMIN_ROLES)),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> list[PaymentMethod]:
    return await service.list_methods(user)


@api.get(
    "/payments/{method_id}",
    response_model=PaymentMethod,
    responses=ERROR_RESPONSES,
    tags=["Payment Methods"],
)
async def get_payment_method(
    method_id: str,
    user: User = Depends(require_roles(*PAYMENT_ADMIN_ROLES)),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> PaymentMethod:
    return await service.get_method(user, method_id)


@api.post(
    "/payments",
    response_model=PaymentMethod,
    status_code=201,
    responses={**ERROR_RESPONSES, 400: {"model": ErrorResponse}},
    tags=["Payment Methods"],
)
async def create_payment_method(
    payload: Any = Body(None, description="PaymentMethodCreate: type, cardNumber, expiryDate, holderName, country"),
    user: User = Depends(require_roles(*PAYMENT_ADMIN_ROLES)),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> PaymentMethod:
    """Add a payment method. The card number is stored masked."""
    return await service.create_from_payload(user, payload)


@api.put(
    "/payments/{method_id}",
    response_model=PaymentMethod,
    responses={**ERROR_RESPONSES, 400: {"model": ErrorResponse}},
    tags=["Payment Methods"],
)
async def update_payment_method(
    method_id: str,
    payload: Any = Body(None, description="PaymentMethodUpdate: any of type, cardNumber, expiryDate, holderName"),
    user: User = Depends(require_roles(*PAYMENT_ADMIN_ROLES)),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> PaymentMethod:
    return await service.update_from_payload(user, method_id, payload)


@api.delete(
    "/payments/{method_id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    tags=["Payment Methods"],
)
async def delete_payment_method(
    method_id: str,
    user: User = Depends(require_roles(*PAYMENT_ADMIN_ROLES)),
    service: PaymentMethodService = Depends(get_payment_method_service),
) -> MessageResponse:
    await service.delete(user, method_id)
    return MessageResponse(message="Payment method deleted successfully")


app.include_router(api)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(FoodieHubError)
async def foodiehub_exception_handler(request: Request, exc: FoodieHubError) -> JSONResponse:
    """Map the error taxonomy onto HTTP responses."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, detail=exc.message).model_dump(),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed payloads are reported as 400 ValidationError."""
    error = ValidationError.from_errors(exc.errors())

    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(error=error.error, detail=error.message).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("foodiehub.main:app", host=settings.api_host, port=settings.api_port)
