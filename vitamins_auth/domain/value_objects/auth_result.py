"""Payloads returned by the authentication gateway.

The backend speaks camelCase JSON; the models accept both the wire names and
the Python field names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )


class AuthUser(_WireModel):
    id: str
    email: str


class AuthResult(_WireModel):
    """Tokens issued by login or registration, with the user when the backend sends it."""

    access_token: str
    refresh_token: str
    user: Optional[AuthUser] = None

    @property
    def has_tokens(self) -> bool:
        return bool(self.access_token) and bool(self.refresh_token)


class VerifyCodeResult(_WireModel):
    """Opaque credential issued after a reset code was verified."""

    reset_token: str = Field(min_length=1)
