"""
Tests for startup configuration checks
"""
import pytest

from app.config import Settings
from app.core.startup_checks import ConfigurationError, check_configuration, check_jwt_secrets


def make_settings(**overrides):
    values = {
        "MONGODB_URI": "mongodb://localhost:27017/tracker",
        "JWT_ACCESS_SECRET": "a" * 32,
        "JWT_REFRESH_SECRET": "b" * 32,
        "GOOGLE_CLIENT_ID": "client.apps.googleusercontent.com",
        "ENVIRONMENT": "development",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_valid_configuration_passes():
    check_configuration(make_settings())


def test_missing_database_uri():
    with pytest.raises(ConfigurationError, match="MONGODB_URI"):
        check_configuration(make_settings(MONGODB_URI=None))


def test_placeholder_secrets_fatal_in_production():
    config = make_settings(ENVIRONMENT="production", JWT_ACCESS_SECRET="change-this-access-secret")

    with pytest.raises(ConfigurationError, match="JWT_ACCESS_SECRET"):
        check_jwt_secrets(config)


def test_placeholder_secrets_warn_in_development(caplog):
    check_jwt_secrets(make_settings(JWT_REFRESH_SECRET="change-this-refresh-secret"))

    assert "JWT_REFRESH_SECRET" in caplog.text


def test_shared_secret_warns(caplog):
    check_jwt_secrets(make_settings(JWT_REFRESH_SECRET="a" * 32))

    assert "share the same secret" in caplog.text
