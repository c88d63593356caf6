"""Shared fixtures for the authentication flow tests."""

from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from vitamins_auth.domain.services.auth_flow.flow_controller import AuthFlowController
from vitamins_auth.domain.value_objects.auth_result import AuthResult, AuthUser, VerifyCodeResult
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode
from vitamins_auth.infrastructure.storage.profile_cache import InMemoryProfileCache
from vitamins_auth.infrastructure.storage.token_vault import InMemoryTokenVault


@pytest.fixture
def auth_result():
    return AuthResult(
        access_token="access-token",
        refresh_token="refresh-token",
        user=AuthUser(id="user-1", email="user@example.com"),
    )


@pytest.fixture
def mock_gateway(auth_result):
    """Gateway whose calls all succeed."""
    gateway = AsyncMock()
    gateway.login.return_value = auth_result
    gateway.register.return_value = auth_result
    gateway.request_password_reset.return_value = None
    gateway.verify_reset_code.return_value = VerifyCodeResult(reset_token="reset-token")
    gateway.confirm_password_reset.return_value = None
    return gateway


@pytest.fixture
def token_vault():
    return InMemoryTokenVault()


@pytest.fixture
def profile_cache():
    return InMemoryProfileCache()


@pytest.fixture
def mock_session_host():
    return Mock()


@pytest_asyncio.fixture
async def make_controller(mock_gateway, token_vault, profile_cache, mock_session_host):
    """Factory for started controllers; every controller is closed on teardown.

    The countdown ticks once an hour by default so it never interferes with a
    test unless the test asks for a short interval.
    """
    controllers = []

    async def factory(root_mode=ScreenMode.SIGN_IN, **kwargs):
        kwargs.setdefault("resend_seconds", 60)
        kwargs.setdefault("tick_interval", 3600.0)
        controller = AuthFlowController(
            mock_gateway,
            token_vault,
            profile_cache,
            mock_session_host,
            root_mode=root_mode,
            **kwargs,
        )
        await controller.start()
        controllers.append(controller)
        return controller

    yield factory

    for controller in controllers:
        await controller.close()
