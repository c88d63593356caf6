"""Centralized, structured exception hierarchy for the Vitamins auth client.

Every exception carries a machine-readable `code` for programmatic handling and
a human-readable `message` for logging. The HTTP family mirrors the status codes
the backend answers with, so the error classifier can map them without looking
at transport details.
"""

from __future__ import annotations

from typing import Final, Optional

__all__: Final = [
    "VitaminsError",
    "ApiError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "ServerError",
    "UnexpectedStatusError",
    "NetworkClientError",
    "SerializationError",
    "AuthFlowClosedError",
]


class VitaminsError(Exception):
    """Base exception class for all custom errors in the client.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# API errors (the backend answered with a non-success status)
# ---------------------------------------------------------------------------


class ApiError(VitaminsError):
    """Raised when the backend answers with a status the client treats as failure.

    Attributes:
        status_code (int): HTTP status returned by the backend.
        body (Optional[bytes]): Raw response body, kept for 400/422 diagnostics.
    """

    status_code: int = 0

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[bytes] = None,
        code: str = "api_error",
    ):
        super().__init__(message, code)
        if status_code is not None:
            self.status_code = status_code
        self.body = body


class BadRequestError(ApiError):
    """400 Bad Request."""

    status_code = 400

    def __init__(self, message: str = "Bad request", body: Optional[bytes] = None):
        super().__init__(message, body=body, code="bad_request")


class UnauthorizedError(ApiError):
    """401 Unauthorized: wrong email or password."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="unauthorized")


class ForbiddenError(ApiError):
    """403 Forbidden."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="forbidden")


class NotFoundError(ApiError):
    """404 Not Found."""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="not_found")


class ConflictError(ApiError):
    """409 Conflict: the account is already registered."""

    status_code = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, code="conflict")


class UnprocessableEntityError(ApiError):
    """422 Unprocessable Entity: the backend rejected the payload."""

    status_code = 422

    def __init__(self, message: str = "Unprocessable entity", body: Optional[bytes] = None):
        super().__init__(message, body=body, code="unprocessable_entity")


class ServerError(ApiError):
    """Any 5xx answer; the exact status is preserved."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(
            message or f"Server error ({status_code})",
            status_code=status_code,
            code="server_error",
        )


class UnexpectedStatusError(ApiError):
    """A status outside every mapped range (e.g. 3xx or an unmapped 4xx)."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(
            message or f"Unexpected status code {status_code}",
            status_code=status_code,
            code="unexpected_status",
        )


# ---------------------------------------------------------------------------
# Transport and serialization errors
# ---------------------------------------------------------------------------


class NetworkClientError(VitaminsError):
    """Raised when no HTTP answer could be obtained (bad URL, connection, timeout)."""

    def __init__(self, message: str, code: str = "network_error"):
        super().__init__(message, code)


class SerializationError(VitaminsError):
    """Raised when a request cannot be encoded or a response cannot be decoded."""

    def __init__(self, message: str, code: str = "serialization_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Flow lifecycle errors
# ---------------------------------------------------------------------------


class AuthFlowClosedError(VitaminsError):
    """Raised when an event is sent to a flow controller that has stopped."""

    def __init__(self, message: str = "Authentication flow is closed", code: str = "auth_flow_closed"):
        super().__init__(message, code)
