"""
Application Error Taxonomy

Every failure a request can hit is one of these exceptions. Services raise
them; the exception handlers in main.py turn them into JSON responses.
Nothing here is retried.

Author: FoodieHub Team
Version: 1.0.0
"""

from typing import Iterable, Optional


class FoodieHubError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    error: str = "InternalError"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# =============================================================================
# AUTHENTICATION
# =============================================================================

class MissingToken(FoodieHubError):
    status_code = 401
    error = "Unauthorized"
    default_message = "Access token required"


class InvalidCredentials(FoodieHubError):
    status_code = 401
    error = "InvalidCredentials"
    default_message = "Invalid credentials"


class UserNotFound(FoodieHubError):
    status_code = 401
    error = "UserNotFound"
    default_message = "User not found"


class InvalidToken(FoodieHubError):
    status_code = 403
    error = "InvalidToken"
    default_message = "Invalid token"


class TokenExpired(InvalidToken):
    """Expired tokens are reported to clients exactly like invalid ones."""
    error = "InvalidToken"
    default_message = "Invalid token"


# =============================================================================
# AUTHORIZATION & RESOURCES
# =============================================================================

class Forbidden(FoodieHubError):
    status_code = 403
    error = "Forbidden"
    default_message = "Insufficient permissions"


class NotFound(FoodieHubError):
    status_code = 404
    error = "NotFound"
    default_message = "Resource not found"


class InvalidTransition(FoodieHubError):
    status_code = 409
    error = "InvalidTransition"
    default_message = "Order is not in a state that allows this action"


class ValidationError(FoodieHubError):
    status_code = 400
    error = "ValidationError"
    default_message = "Validation error"

    @classmethod
    def from_errors(cls, errors: Iterable[dict]) -> "ValidationError":
        """Build one message from pydantic/FastAPI error dicts."""
        problems = []
        for error in errors:
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        return cls("; ".join(problems) or None)
