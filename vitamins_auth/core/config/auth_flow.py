"""Authentication flow settings.
"""
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthFlowSettings(BaseSettings):
    """Defines the password-reset code countdown and the on-device storage locations.

    CODE_RESEND_SECONDS is both the number of countdown ticks and the initial
    value of the "resend code" counter shown to the user.
    """

    CODE_RESEND_SECONDS: int = Field(default=60, ge=0)
    CODE_RESEND_TICK_SECONDS: float = Field(default=1.0, gt=0)

    TOKEN_VAULT_PATH: Path = Path.home() / ".vitamins" / "tokens.json"
    PROFILE_CACHE_PATH: Path = Path.home() / ".vitamins" / "user_profile_v1.json"
