"""Token vault implementations.

The session is considered authenticated exactly when an access token is
stored; the refresh token is kept alongside it but never consulted here.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from vitamins_auth.domain.interfaces.storage import ITokenVault

logger = structlog.get_logger(__name__)


class StoredTokens(BaseModel):
    """Token pair as persisted on disk."""

    model_config = ConfigDict(frozen=True)

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class InMemoryTokenVault(ITokenVault):
    """Process-local vault, used by tests and short-lived sessions."""

    def __init__(self, tokens: Optional[StoredTokens] = None):
        self._tokens = tokens or StoredTokens()

    @property
    def tokens(self) -> StoredTokens:
        return self._tokens

    def save(self, access_token: str, refresh_token: str) -> None:
        self._tokens = StoredTokens(access_token=access_token, refresh_token=refresh_token)

    def clear(self) -> None:
        self._tokens = StoredTokens()

    def is_authenticated(self) -> bool:
        return bool(self._tokens.access_token)


class FileTokenVault(ITokenVault):
    """Stores the token pair in a JSON file readable only by its owner.

    Writes go to a sibling temporary file which is then renamed over the
    target, so a crash never leaves a half-written vault behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> StoredTokens:
        try:
            return StoredTokens.model_validate_json(self.path.read_bytes())
        except FileNotFoundError:
            return StoredTokens()
        except (OSError, ValidationError) as e:
            logger.warning("token_vault_unreadable", path=str(self.path), error=str(e))
            return StoredTokens()

    def save(self, access_token: str, refresh_token: str) -> None:
        tokens = StoredTokens(access_token=access_token, refresh_token=refresh_token)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(tokens.model_dump_json())
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)
        logger.debug("token_vault_saved", path=str(self.path))

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.debug("token_vault_cleared", path=str(self.path))

    def is_authenticated(self) -> bool:
        return bool(self.load().access_token)
