"""Fixtures wiring a session to a fake backend over httpx."""

import json

import httpx
import pytest
import pytest_asyncio

from vitamins_auth.core.session import AuthSession
from vitamins_auth.domain.services.auth_flow.flow_controller import AuthFlowController
from vitamins_auth.infrastructure.services.http_auth_gateway import HttpAuthGateway
from vitamins_auth.infrastructure.storage.profile_cache import JsonFileProfileCache
from vitamins_auth.infrastructure.storage.token_vault import FileTokenVault


class FakeBackend:
    """In-process stand-in for the Vitamins auth API."""

    RESET_CODE = "424242"

    def __init__(self):
        self.accounts = {}
        self.reset_tokens = {}
        self.calls = []
        self.verify_status = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        body = json.loads(request.content or b"{}")
        self.calls.append(path)

        if path == "/auth/register":
            if body["email"] in self.accounts:
                return httpx.Response(409)
            self.accounts[body["email"]] = body["password"]
            return self._tokens(body["email"])

        if path == "/auth/login":
            if self.accounts.get(body["email"]) != body["password"]:
                return httpx.Response(401)
            return self._tokens(body["email"])

        if path == "/auth/password/reset/request":
            return httpx.Response(204)

        if path == "/auth/password/reset/verify":
            if self.verify_status is not None:
                return httpx.Response(self.verify_status)
            if body["code"] != self.RESET_CODE:
                return httpx.Response(400, json={"detail": "invalid code"})
            token = f"reset-{body['email']}"
            self.reset_tokens[token] = body["email"]
            return httpx.Response(200, json={"resetToken": token})

        if path == "/auth/password/reset/confirm":
            email = self.reset_tokens.pop(body["resetToken"], None)
            if email is None:
                return httpx.Response(401)
            if body["password"] != body["passwordConfirm"]:
                return httpx.Response(422)
            self.accounts[email] = body["password"]
            return httpx.Response(204)

        return httpx.Response(404)

    @staticmethod
    def _tokens(email):
        return httpx.Response(
            200,
            json={
                "accessToken": f"access-{email}",
                "refreshToken": f"refresh-{email}",
                "user": {"id": email, "email": email},
            },
        )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def token_vault(tmp_path):
    return FileTokenVault(tmp_path / "tokens.json")


@pytest.fixture
def profile_cache(tmp_path):
    return JsonFileProfileCache(tmp_path / "user_profile_v1.json")


@pytest_asyncio.fixture
async def session(backend, token_vault, profile_cache):
    def factory(*args, **kwargs):
        return AuthFlowController(*args, tick_interval=3600.0, **kwargs)

    async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as client:
        gateway = HttpAuthGateway(
            base_url="http://backend.test/api/v1", retry_wait=0, client=client
        )
        session = AuthSession(gateway, token_vault, profile_cache, controller_factory=factory)
        yield session
        await session.close()
