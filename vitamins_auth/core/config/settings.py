"""Main client settings and configuration management.

This module composes all the settings from the different modules (app, api,
auth flow) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the package.

Environment Support:
- Development: Uses .env, debug mode enabled
- Test: Uses .env.test
- Staging/Production: Uses .env.staging / .env.production
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .api import ApiSettings
from .app import AppSettings
from .auth_flow import AuthFlowSettings

logger = logging.getLogger(__name__)


class Settings(AppSettings, ApiSettings, AuthFlowSettings):
    """The main settings class that aggregates all client configurations.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Usage:
        - Access settings via the singleton instance `settings` throughout the package.
        - Tests and embedding applications may build their own `Settings(...)`
          and pass values explicitly instead.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env == "development":
            self.DEBUG = True
        logger.debug("Client running in %s environment (debug=%s)", env, self.DEBUG)


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    return Settings()


# Create a singleton instance of the settings to be used across the package.
settings = create_settings()
