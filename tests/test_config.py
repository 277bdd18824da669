import pytest
from pydantic import ValidationError

from foodiehub.core.config import DEFAULT_JWT_SECRET, EnvironmentMode, Settings


def test_development_uses_memory_store():
    settings = Settings(env_mode="development")

    assert settings.is_development
    assert not settings.use_sql_store
    assert settings.validate_production_config() == []


@pytest.mark.parametrize("mode", ["staging", "PRODUCTION"])
def test_deployed_modes_use_sql_store(mode):
    settings = Settings(env_mode=mode)

    assert settings.use_sql_store
    assert settings.env_mode in (EnvironmentMode.STAGING, EnvironmentMode.PRODUCTION)


def test_default_jwt_secret_flagged_outside_development():
    assert "JWT_SECRET" in Settings(env_mode="production", jwt_secret=DEFAULT_JWT_SECRET).validate_production_config()
    assert Settings(env_mode="production", jwt_secret="s3cret").validate_production_config() == []


def test_invalid_env_mode():
    with pytest.raises(ValidationError):
        Settings(env_mode="qa")


def test_mask_char_cannot_be_digit():
    with pytest.raises(ValidationError):
        Settings(card_mask_char="0")


def test_cors_origins_list():
    settings = Settings(cors_origins="http://a.test, http://b.test,")
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
