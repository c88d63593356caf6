"""On-device storage interfaces.

Writes through these interfaces are side effects of a flow transition; the
controller never reads them back within the same transition.
"""

from abc import ABC, abstractmethod


class ITokenVault(ABC):
    """Secure storage for the access and refresh tokens."""

    @abstractmethod
    def save(self, access_token: str, refresh_token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_authenticated(self) -> bool:
        """True when an access token is stored."""
        raise NotImplementedError


class IProfileCache(ABC):
    """Local cache of the signed-in user's profile."""

    @abstractmethod
    def upsert(self, email: str) -> None:
        """Stores `email` on the cached profile; blank values are ignored."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
