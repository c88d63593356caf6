"""Classification of gateway failures.

`classify` reduces anything a gateway call can raise to a closed taxonomy, and
`apply_to_form` turns a classified failure into inline field errors. Failures
that have no field of their own are shown in the email slot.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import structlog

from vitamins_auth.core.exceptions import (
    ApiError,
    BadRequestError,
    ConflictError,
    NetworkClientError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from vitamins_auth.domain.entities.form_state import FormState
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode
from vitamins_auth.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)


class AuthErrorKind(str, Enum):
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    UNPROCESSABLE = "unprocessable"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AuthFailure:
    """A classified failure; `status_code` is kept for SERVER_ERROR."""

    kind: AuthErrorKind
    status_code: Optional[int] = None


def classify(error: BaseException) -> AuthFailure:
    if isinstance(error, ConflictError):
        return AuthFailure(AuthErrorKind.CONFLICT, ConflictError.status_code)
    if isinstance(error, UnauthorizedError):
        return AuthFailure(AuthErrorKind.UNAUTHORIZED, UnauthorizedError.status_code)
    if isinstance(error, BadRequestError):
        return AuthFailure(AuthErrorKind.BAD_REQUEST, BadRequestError.status_code)
    if isinstance(error, UnprocessableEntityError):
        return AuthFailure(AuthErrorKind.UNPROCESSABLE, UnprocessableEntityError.status_code)
    if isinstance(error, ApiError):
        if 500 <= error.status_code < 600:
            return AuthFailure(AuthErrorKind.SERVER_ERROR, error.status_code)
        return AuthFailure(AuthErrorKind.UNKNOWN, error.status_code)
    if isinstance(error, (NetworkClientError, ConnectionError, TimeoutError)):
        return AuthFailure(AuthErrorKind.NETWORK_ERROR)
    return AuthFailure(AuthErrorKind.UNKNOWN)


def apply_to_form(
    failure: AuthFailure,
    mode: ScreenMode,
    form: FormState,
    language: Optional[str] = None,
) -> FormState:
    kind = failure.kind

    if kind == AuthErrorKind.CONFLICT and mode == ScreenMode.SIGN_UP:
        return replace(
            form, email_error=get_translated_message("account_already_registered", language)
        )

    if kind == AuthErrorKind.UNAUTHORIZED and mode == ScreenMode.SIGN_IN:
        message = get_translated_message("invalid_email_or_password", language)
        return replace(form, email_error=message, password_error=message)

    if kind in (AuthErrorKind.BAD_REQUEST, AuthErrorKind.UNPROCESSABLE):
        key = "check_your_input"
    elif kind == AuthErrorKind.NETWORK_ERROR:
        key = "connection_error"
    elif kind == AuthErrorKind.SERVER_ERROR:
        key = "server_error_try_later"
    else:
        # UNKNOWN, and CONFLICT/UNAUTHORIZED on screens where they have no field.
        key = "unexpected_error"

    logger.debug(
        "auth_failure_applied",
        kind=kind.value,
        status_code=failure.status_code,
        mode=mode.value,
    )
    return replace(form, email_error=get_translated_message(key, language))
