"""Tests for the httpx-backed authentication gateway."""

import json

import httpx
import pytest
import pytest_asyncio

from vitamins_auth.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NetworkClientError,
    NotFoundError,
    SerializationError,
    ServerError,
    UnauthorizedError,
    UnexpectedStatusError,
    UnprocessableEntityError,
)
from vitamins_auth.infrastructure.services.http_auth_gateway import HttpAuthGateway

BASE_URL = "http://backend.test/api/v1"

AUTH_BODY = {
    "accessToken": "access",
    "refreshToken": "refresh",
    "user": {"id": "42", "email": "a@b.com"},
}


class RecordingHandler:
    """MockTransport handler answering every request with one canned response."""

    def __init__(self, status_code=200, json_body=None, content=None, error=None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"{self.error.__name__} for test", request=request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, content=self.content or b"")

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def handler():
    return RecordingHandler(json_body=AUTH_BODY)


@pytest_asyncio.fixture
async def gateway(handler):
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        yield HttpAuthGateway(
            base_url=BASE_URL + "/",
            timeout=1.0,
            retry_attempts=3,
            retry_wait=0,
            client=client,
        )


class TestEndpoints:
    """Test suite for request shapes."""

    @pytest.mark.asyncio
    async def test_login_posts_credentials_and_decodes_tokens(self, gateway, handler):
        result = await gateway.login("a@b.com", "secret")

        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/auth/login"
        assert request.headers["accept"] == "application/json"
        assert handler.last_json == {"email": "a@b.com", "password": "secret"}
        assert result.access_token == "access"
        assert result.user.id == "42"

    @pytest.mark.asyncio
    async def test_register_posts_to_register(self, gateway, handler):
        await gateway.register("a@b.com", "secret")

        assert str(handler.requests[0].url) == f"{BASE_URL}/auth/register"

    @pytest.mark.asyncio
    async def test_request_password_reset_ignores_body(self, gateway, handler):
        handler.json_body = None
        handler.status_code = 204

        assert await gateway.request_password_reset("a@b.com") is None
        assert str(handler.requests[0].url) == f"{BASE_URL}/auth/password/reset/request"
        assert handler.last_json == {"email": "a@b.com"}

    @pytest.mark.asyncio
    async def test_verify_reset_code_returns_token(self, gateway, handler):
        handler.json_body = {"resetToken": "tok"}

        result = await gateway.verify_reset_code("a@b.com", "123456")

        assert result.reset_token == "tok"
        assert handler.last_json == {"email": "a@b.com", "code": "123456"}
        assert str(handler.requests[0].url) == f"{BASE_URL}/auth/password/reset/verify"

    @pytest.mark.asyncio
    async def test_confirm_uses_camel_case_body(self, gateway, handler):
        handler.json_body = {}

        await gateway.confirm_password_reset("new", "new", "tok")

        assert handler.last_json == {
            "password": "new",
            "passwordConfirm": "new",
            "resetToken": "tok",
        }
        assert str(handler.requests[0].url) == f"{BASE_URL}/auth/password/reset/confirm"


class TestStatusMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, error_type",
        [
            (400, BadRequestError),
            (401, UnauthorizedError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (409, ConflictError),
            (422, UnprocessableEntityError),
            (500, ServerError),
            (503, ServerError),
            (302, UnexpectedStatusError),
            (418, UnexpectedStatusError),
        ],
    )
    async def test_error_statuses(self, gateway, handler, status_code, error_type):
        handler.json_body = {"detail": "nope"}
        handler.status_code = status_code

        with pytest.raises(error_type) as exc_info:
            await gateway.login("a@b.com", "secret")

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_unprocessable_keeps_body(self, gateway, handler):
        handler.json_body = None
        handler.status_code = 422
        handler.content = b'{"errors":["email"]}'

        with pytest.raises(UnprocessableEntityError) as exc_info:
            await gateway.register("a@b.com", "secret")

        assert exc_info.value.body == b'{"errors":["email"]}'

    @pytest.mark.asyncio
    async def test_undecodable_body_is_serialization_error(self, gateway, handler):
        handler.json_body = None
        handler.content = b"<html>gateway</html>"

        with pytest.raises(SerializationError):
            await gateway.login("a@b.com", "secret")

    @pytest.mark.asyncio
    async def test_body_missing_fields_is_serialization_error(self, gateway, handler):
        handler.json_body = {"accessToken": "only"}

        with pytest.raises(SerializationError):
            await gateway.login("a@b.com", "secret")


class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_connect_error_is_retried_then_raised(self, gateway, handler):
        handler.error = httpx.ConnectError

        with pytest.raises(NetworkClientError):
            await gateway.login("a@b.com", "secret")

        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_timeout_is_not_retried(self, gateway, handler):
        handler.error = httpx.ReadTimeout

        with pytest.raises(NetworkClientError):
            await gateway.register("a@b.com", "secret")

        assert len(handler.requests) == 1


class TestClientOwnership:
    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self, handler):
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            async with HttpAuthGateway(base_url=BASE_URL, client=client):
                pass

            assert not client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        gateway = HttpAuthGateway(base_url=BASE_URL)

        await gateway.aclose()

        assert gateway._client.is_closed


class TestEmptySuccessBodies:
    """Endpoints that promise a payload must not return None on an empty answer."""

    @pytest.mark.asyncio
    async def test_no_content_on_verify_is_serialization_error(self, gateway, handler):
        handler.json_body = None
        handler.status_code = 204

        with pytest.raises(SerializationError) as exc_info:
            await gateway.verify_reset_code("a@b.com", "123456")

        assert exc_info.value.code == "decoding_error"

    @pytest.mark.asyncio
    async def test_empty_ok_on_login_is_serialization_error(self, gateway, handler):
        handler.json_body = None
        handler.status_code = 200

        with pytest.raises(SerializationError):
            await gateway.login("a@b.com", "secret")

    @pytest.mark.asyncio
    async def test_no_content_is_fine_where_no_payload_is_expected(self, gateway, handler):
        handler.json_body = None
        handler.status_code = 204

        assert await gateway.confirm_password_reset("new", "new", "tok") is None
