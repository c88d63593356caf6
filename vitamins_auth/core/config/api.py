"""Backend API connection settings.
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ApiSettings(BaseSettings):
    """Settings for the HTTP client talking to the Vitamins backend.

    Only connection establishment failures are retried; a request that reached
    the server is never sent twice.
    """

    API_BASE_URL: str = "http://localhost:8080/api/v1"
    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    HTTP_RETRY_ATTEMPTS: int = Field(default=3, ge=1)
    HTTP_RETRY_WAIT_SECONDS: float = Field(default=0.5, ge=0)

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip("/")
        return v
