"""On-device storage for tokens and the cached user profile."""

from .profile_cache import InMemoryProfileCache, JsonFileProfileCache, UserProfile
from .token_vault import FileTokenVault, InMemoryTokenVault, StoredTokens

__all__ = [
    "InMemoryProfileCache",
    "JsonFileProfileCache",
    "UserProfile",
    "FileTokenVault",
    "InMemoryTokenVault",
    "StoredTokens",
]
