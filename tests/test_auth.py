from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from foodiehub.core.config import get_settings
from foodiehub.core.exceptions import (
    InvalidCredentials,
    InvalidToken,
    TokenExpired,
    UserNotFound,
)
from foodiehub.schemas import Role
from foodiehub.services.auth import AuthService, hash_password, verify_password
from foodiehub.services.store import Collection


@pytest.fixture
def auth(store):
    return AuthService(store)


def test_hash_and_verify_password():
    password_hash = hash_password("secret")
    assert password_hash != "secret"
    assert verify_password("secret", password_hash)
    assert not verify_password("Secret", password_hash)


def test_verify_password_with_malformed_hash_fails():
    assert not verify_password("secret", "not-a-bcrypt-hash")


async def test_authenticate_returns_token_and_user(auth):
    result = await auth.authenticate("nick.fury@shield.com", "admin123")

    assert result.user.email == "nick.fury@shield.com"
    assert result.user.role is Role.ADMIN
    assert result.user.country == "America"
    assert result.token
    assert result.expires_at > datetime.now(timezone.utc) + timedelta(hours=23)


async def test_authenticate_wrong_password(auth):
    with pytest.raises(InvalidCredentials):
        await auth.authenticate("nick.fury@shield.com", "wrong")


async def test_authenticate_unknown_email_is_indistinguishable(auth):
    with pytest.raises(InvalidCredentials) as unknown:
        await auth.authenticate("nobody@shield.com", "admin123")
    with pytest.raises(InvalidCredentials) as wrong:
        await auth.authenticate("nick.fury@shield.com", "nope")

    assert unknown.value.message == wrong.value.message


async def test_resolve_round_trip(auth):
    result = await auth.authenticate("thor@shield.com", "member123")

    user = await auth.resolve(result.token)
    assert user.id == result.user.id
    assert user.country == "India"


async def test_token_carries_subject_and_expiry(auth, member_india):
    token, expires_at = auth.create_access_token(member_india.id)
    settings = get_settings()

    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == member_india.id
    assert claims["exp"] == int(expires_at.timestamp())
    assert claims["exp"] - claims["iat"] == settings.access_token_expire_hours * 3600


async def test_resolve_rejects_tampered_token(auth, member_india):
    token, _ = auth.create_access_token(member_india.id)
    forged = jwt.encode({"sub": member_india.id}, "another-secret", algorithm="HS256")

    header, payload, _ = token.split(".")
    tampered = f"{header}.{payload}.{forged.split('.')[2]}"

    with pytest.raises(InvalidToken):
        await auth.resolve(tampered)
    with pytest.raises(InvalidToken):
        await auth.resolve(forged)
    with pytest.raises(InvalidToken):
        await auth.resolve("garbage")


async def test_resolve_rejects_expired_token(auth, member_india):
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(hours=25)
    token = jwt.encode(
        {"sub": member_india.id, "iat": past, "exp": past + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(TokenExpired):
        await auth.resolve(token)


async def test_resolve_rejects_token_without_subject(auth):
    settings = get_settings()
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidToken):
        await auth.resolve(token)


async def test_resolve_deleted_user(auth, store, member_america):
    token, _ = auth.create_access_token(member_america.id)
    await store.delete(Collection.USERS, member_america.id)

    with pytest.raises(UserNotFound):
        await auth.resolve(token)
