"""HTTP implementation of the authentication gateway.

Talks to the Vitamins backend over httpx and translates every non-success
answer into the `ApiError` family, transport failures into
`NetworkClientError`, and undecodable bodies into `SerializationError`. No
user-facing text is produced here.
"""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from vitamins_auth.core.config.settings import settings
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
from vitamins_auth.domain.interfaces.auth_gateway import IAuthGateway
from vitamins_auth.domain.value_objects.auth_result import AuthResult, VerifyCodeResult

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
PASSWORD_RESET_REQUEST_PATH = "/auth/password/reset/request"
PASSWORD_RESET_VERIFY_PATH = "/auth/password/reset/verify"
PASSWORD_RESET_CONFIRM_PATH = "/auth/password/reset/confirm"


class HttpAuthGateway(IAuthGateway):
    """Authentication gateway backed by `httpx.AsyncClient`.

    Only `httpx.ConnectError` is retried: the request never reached the server,
    so sending it again cannot duplicate a registration or a reset email.

    Args:
        base_url: API root, e.g. "http://localhost:8080/api/v1".
        timeout: Per-request timeout in seconds.
        retry_attempts: Total attempts when the connection cannot be opened.
        retry_wait: Seconds between connection attempts.
        client: Pre-built client (tests inject one with a mock transport).
            A client passed in is not closed by `aclose()`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self._retry_attempts = (
            settings.HTTP_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        )
        self._retry_wait = settings.HTTP_RETRY_WAIT_SECONDS if retry_wait is None else retry_wait
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._timeout)

        logger.info("HttpAuthGateway initialized", base_url=self._base_url)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpAuthGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, traceback) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # IAuthGateway
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        return await self._post(
            LOGIN_PATH, {"email": email, "password": password}, AuthResult
        )

    async def register(self, email: str, password: str) -> AuthResult:
        return await self._post(
            REGISTER_PATH, {"email": email, "password": password}, AuthResult
        )

    async def request_password_reset(self, email: str) -> None:
        await self._post(PASSWORD_RESET_REQUEST_PATH, {"email": email})

    async def verify_reset_code(self, email: str, code: str) -> VerifyCodeResult:
        return await self._post(
            PASSWORD_RESET_VERIFY_PATH, {"email": email, "code": code}, VerifyCodeResult
        )

    async def confirm_password_reset(
        self, password: str, password_confirm: str, reset_token: str
    ) -> None:
        await self._post(
            PASSWORD_RESET_CONFIRM_PATH,
            {
                "password": password,
                "passwordConfirm": password_confirm,
                "resetToken": reset_token,
            },
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _post(
        self,
        path: str,
        body: Dict[str, Any],
        response_model: Optional[Type[M]] = None,
    ) -> Optional[M]:
        url = f"{self._base_url}{path}"
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.ConnectError),
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_fixed(self._retry_wait),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.post(
                        url, json=body, headers={"Accept": "application/json"}
                    )
        except httpx.InvalidURL as e:
            raise NetworkClientError(f"Malformed URL: {url}", code="malformed_url") from e
        except httpx.RequestError as e:
            logger.warning(
                "auth_gateway_transport_error",
                path=path,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise NetworkClientError(f"Request to {path} failed: {e}") from e

        logger.debug("auth_gateway_response", path=path, status_code=response.status_code)
        self._raise_for_status(response)

        if response_model is None:
            return None
        if response.status_code == 204 or not response.content:
            raise SerializationError(
                f"Empty response body for {response_model.__name__} from {path}",
                code="decoding_error",
            )
        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SerializationError(
                f"Could not decode {response_model.__name__} from {path}",
                code="decoding_error",
            ) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        if status == 400:
            raise BadRequestError(body=response.content)
        if status == 401:
            raise UnauthorizedError()
        if status == 403:
            raise ForbiddenError()
        if status == 404:
            raise NotFoundError()
        if status == 409:
            raise ConflictError()
        if status == 422:
            raise UnprocessableEntityError(body=response.content)
        if 500 <= status < 600:
            raise ServerError(status)
        raise UnexpectedStatusError(status)
