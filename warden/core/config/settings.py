"""Main application settings and configuration management.

This module composes the settings from the different modules (app, database,
redis, auth, email, storage) into a single ``Settings`` class and exposes a
module-level ``settings`` singleton.

Environment files:
- development: ``.env``
- staging: ``.env.staging`` (falls back to ``.env``)
- production: ``.env.production`` (falls back to ``.env``)
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .redis import RedisSettings
from .storage import StorageSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(
    AppSettings, DatabaseSettings, RedisSettings, AuthSettings, EmailSettings, StorageSettings
):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - Sensitive fields (signing key, passwords) are ``SecretStr`` and must
          never be logged.
    Usage:
        - Access settings via the singleton instance ``settings``.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )


def create_settings() -> Settings:
    """Create settings instance from the environment-specific ``.env`` file.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
    else:
        logger.info(f"No .env file found, using environment variables only (environment: {env})")
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
