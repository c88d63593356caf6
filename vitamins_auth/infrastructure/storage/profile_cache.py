"""Cached profile of the signed-in user.

The flow only ever contributes the email address; first and last name are
filled in by other parts of the app and must survive an email upsert.
"""

from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from vitamins_auth.domain.interfaces.storage import IProfileCache

logger = structlog.get_logger(__name__)

PROFILE_STORAGE_KEY = "user_profile_v1"


class UserProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class InMemoryProfileCache(IProfileCache):
    def __init__(self, profile: Optional[UserProfile] = None):
        self._profile = profile or UserProfile()

    def load(self) -> UserProfile:
        return self._profile

    def save(self, profile: UserProfile) -> None:
        self._profile = profile

    def upsert(self, email: str) -> None:
        email = _non_blank(email)
        if email is None:
            return
        self._profile = self._profile.model_copy(update={"email": email})

    def clear(self) -> None:
        self._profile = UserProfile()


class JsonFileProfileCache(IProfileCache):
    """Profile cache persisted as camelCase JSON under `path`.

    A missing or corrupt file reads as an empty profile.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> UserProfile:
        try:
            return UserProfile.model_validate_json(self.path.read_bytes())
        except FileNotFoundError:
            return UserProfile()
        except (OSError, ValidationError) as e:
            logger.warning("profile_cache_unreadable", path=str(self.path), error=str(e))
            return UserProfile()

    def save(self, profile: UserProfile) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            profile.model_dump_json(by_alias=True, exclude_none=True), encoding="utf-8"
        )

    def upsert(self, email: str) -> None:
        email = _non_blank(email)
        if email is None:
            return
        self.save(self.load().model_copy(update={"email": email}))
        logger.debug("profile_cache_upserted", email_prefix=email[:3])

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
