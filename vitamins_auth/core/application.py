"""Factory wiring a ready-to-use authentication session from settings."""

from typing import Optional

from vitamins_auth.core.config.settings import Settings, settings as default_settings
from vitamins_auth.core.logging import configure_logging
from vitamins_auth.core.session import AuthSession
from vitamins_auth.infrastructure.services.http_auth_gateway import HttpAuthGateway
from vitamins_auth.infrastructure.storage.profile_cache import JsonFileProfileCache
from vitamins_auth.infrastructure.storage.token_vault import FileTokenVault


def create_auth_session(settings: Optional[Settings] = None) -> AuthSession:
    """Create an `AuthSession` backed by the HTTP gateway and file storage.

    Args:
        settings: Settings to wire from; the module singleton by default.

    Returns:
        AuthSession: Not yet routed; call `check_auth_status()` to begin.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    gateway = HttpAuthGateway(
        base_url=settings.API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        retry_attempts=settings.HTTP_RETRY_ATTEMPTS,
        retry_wait=settings.HTTP_RETRY_WAIT_SECONDS,
    )
    return AuthSession(
        gateway,
        FileTokenVault(settings.TOKEN_VAULT_PATH),
        JsonFileProfileCache(settings.PROFILE_CACHE_PATH),
        owns_gateway=True,
    )
