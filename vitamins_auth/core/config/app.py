"""
Application-wide settings.
"""
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and logging.

    LOG_JSON switches the structlog renderer between JSON lines (for shipping
    logs off-device) and the human-readable console renderer.
    """
    PROJECT_NAME: str = "vitamins-auth"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    DEFAULT_LANGUAGE: str = Field(default="en", min_length=2)
    SUPPORTED_LANGUAGES: List[str] = ["en"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accepts log levels in any case ("debug", "Info", ...)."""
        if isinstance(v, str):
            return v.strip().upper()
        return v
