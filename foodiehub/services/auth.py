"""
Authentication Service

Verifies credentials against the users collection, issues signed bearer
tokens (JWT, HS256 by default) and resolves tokens back to users.

Token claims:
    sub: user id
    iat: issued-at
    exp: expiry (ACCESS_TOKEN_EXPIRE_HOURS after issue, 24h by default)

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext

from foodiehub.core.config import Settings, get_settings
from foodiehub.core.exceptions import (
    InvalidCredentials,
    InvalidToken,
    TokenExpired,
    UserNotFound,
)
from foodiehub.schemas import User
from foodiehub.services.store import BaseDocumentStore, Collection

logger = logging.getLogger(__name__)


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Malformed stored hash
        logger.error("Stored password hash could not be parsed")
        return False


@dataclass
class AuthResult:
    """Outcome of a successful login."""
    token: str
    expires_at: datetime
    user: User


class AuthService:
    """
    Credential verification and token handling.

    Example:
        >>> auth = AuthService(store)
        >>> result = await auth.authenticate("thor@shield.com", "member123")
        >>> (await auth.resolve(result.token)).email
        'thor@shield.com'
    """

    def __init__(self, store: BaseDocumentStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    # =========================================================================
    # TOKENS
    # =========================================================================

    def create_access_token(self, user_id: str) -> tuple[str, datetime]:
        """
        Issue a signed token for user_id.

        Returns:
            (token, expires_at)
        """
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(hours=self.settings.access_token_expire_hours)
        claims = {"sub": user_id, "iat": issued_at, "exp": expires_at}

        token = jwt.encode(claims, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)
        return token, expires_at

    def decode_token(self, token: str) -> str:
        """
        Verify signature and expiry.

        Returns:
            The user id carried by the token

        Raises:
            TokenExpired: exp is in the past
            InvalidToken: bad signature, malformed token or missing subject
        """
        try:
            claims = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidToken()

        user_id = claims.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken()
        return user_id

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """
        Check email/password and issue a token.

        Unknown email and wrong password raise the same InvalidCredentials.

        Returns:
            AuthResult with the token, its expiry and the user
        """
        matches = await self.store.query(Collection.USERS, {"email": email})
        record = matches[0] if matches else None

        if record is None:
            # Keep timing comparable to a real hash check
            pwd_context.dummy_verify()
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()

        if not verify_password(password, record.get("password_hash", "")):
            logger.info(f"Login failed: bad password for user {record['id']}")
            raise InvalidCredentials()

        user = User.model_validate(record)
        token, expires_at = self.create_access_token(user.id)

        logger.info(f"Login: user {user.id} ({user.role.value}, {user.country})")
        return AuthResult(token=token, expires_at=expires_at, user=user)

    async def resolve(self, token: str) -> User:
        """
        Map a bearer token to the current user record.

        Raises:
            InvalidToken / TokenExpired: token verification failed
            UserNotFound: the token's user no longer exists
        """
        user_id = self.decode_token(token)

        record = await self.store.get(Collection.USERS, user_id)
        if record is None:
            logger.warning(f"Token for unknown user {user_id}")
            raise UserNotFound()

        return User.model_validate(record)
