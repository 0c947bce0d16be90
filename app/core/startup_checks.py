"""Startup validation checks for the application."""

import logging

from app.config import Settings

logger = logging.getLogger(__name__)

PLACEHOLDER_SECRETS = ("change-this-access-secret", "change-this-refresh-secret")


class ConfigurationError(RuntimeError):
    """Configuration that prevents the service from starting."""


def check_database(config: Settings) -> None:
    if not config.MONGODB_URI:
        raise ConfigurationError("MONGODB_URI (or MONGO_URI) is not set")


def check_jwt_secrets(config: Settings) -> None:
    """
    Placeholder secrets are fatal in production and a warning elsewhere.
    """
    weak = [
        name
        for name, value in (
            ("JWT_ACCESS_SECRET", config.JWT_ACCESS_SECRET),
            ("JWT_REFRESH_SECRET", config.JWT_REFRESH_SECRET),
        )
        if not value or value in PLACEHOLDER_SECRETS
    ]
    if config.JWT_ACCESS_SECRET == config.JWT_REFRESH_SECRET:
        logger.warning("Access and refresh tokens share the same secret")

    if not weak:
        return
    if config.is_production:
        raise ConfigurationError(f"Placeholder JWT secrets in production: {', '.join(weak)}")
    logger.warning("Using placeholder JWT secrets: %s", ", ".join(weak))


def check_google(config: Settings) -> None:
    if not config.GOOGLE_CLIENT_ID:
        logger.warning("GOOGLE_CLIENT_ID not set; Google sign-in will fail")


def check_configuration(config: Settings) -> None:
    """
    Run all startup checks.

    Raises:
        ConfigurationError: on the first fatal problem
    """
    logger.info("Running startup checks (%s)", config.ENVIRONMENT)
    for check in (check_database, check_jwt_secrets, check_google):
        check(config)
    logger.info("Startup checks complete")
