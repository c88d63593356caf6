"""Tests for gateway failure classification and field mapping."""

import pytest

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
from vitamins_auth.domain.entities.form_state import FormState
from vitamins_auth.domain.services.auth_flow.error_classifier import (
    AuthErrorKind,
    AuthFailure,
    apply_to_form,
    classify,
)
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode


class TestClassify:
    @pytest.mark.parametrize(
        "error, kind, status_code",
        [
            (ConflictError(), AuthErrorKind.CONFLICT, 409),
            (UnauthorizedError(), AuthErrorKind.UNAUTHORIZED, 401),
            (BadRequestError(), AuthErrorKind.BAD_REQUEST, 400),
            (UnprocessableEntityError(), AuthErrorKind.UNPROCESSABLE, 422),
            (ServerError(503), AuthErrorKind.SERVER_ERROR, 503),
            (ServerError(500), AuthErrorKind.SERVER_ERROR, 500),
            (ForbiddenError(), AuthErrorKind.UNKNOWN, 403),
            (NotFoundError(), AuthErrorKind.UNKNOWN, 404),
            (UnexpectedStatusError(302), AuthErrorKind.UNKNOWN, 302),
        ],
    )
    def test_api_errors(self, error, kind, status_code):
        assert classify(error) == AuthFailure(kind, status_code)

    @pytest.mark.parametrize(
        "error",
        [
            NetworkClientError("refused"),
            ConnectionRefusedError(),
            TimeoutError(),
        ],
    )
    def test_transport_failures_are_network_errors(self, error):
        assert classify(error).kind == AuthErrorKind.NETWORK_ERROR

    @pytest.mark.parametrize("error", [SerializationError("bad json"), RuntimeError("boom")])
    def test_anything_else_is_unknown(self, error):
        assert classify(error) == AuthFailure(AuthErrorKind.UNKNOWN)


class TestApplyToForm:
    def test_conflict_on_sign_up_targets_email(self):
        form = apply_to_form(
            AuthFailure(AuthErrorKind.CONFLICT), ScreenMode.SIGN_UP, FormState()
        )

        assert form.email_error == "account already registered"
        assert form.password_error is None

    def test_unauthorized_on_sign_in_targets_email_and_password(self):
        form = apply_to_form(
            AuthFailure(AuthErrorKind.UNAUTHORIZED), ScreenMode.SIGN_IN, FormState()
        )

        assert form.email_error == "invalid email or password"
        assert form.password_error == "invalid email or password"

    def test_unauthorized_outside_sign_in_is_unexpected(self):
        form = apply_to_form(
            AuthFailure(AuthErrorKind.UNAUTHORIZED),
            ScreenMode.PASSWORD_RESET_CONFIRM,
            FormState(),
        )

        assert form.email_error == "unexpected error"
        assert form.password_error is None

    def test_conflict_outside_sign_up_is_unexpected(self):
        form = apply_to_form(AuthFailure(AuthErrorKind.CONFLICT), ScreenMode.SIGN_IN, FormState())

        assert form.email_error == "unexpected error"

    @pytest.mark.parametrize(
        "kind, message",
        [
            (AuthErrorKind.BAD_REQUEST, "check your input"),
            (AuthErrorKind.UNPROCESSABLE, "check your input"),
            (AuthErrorKind.NETWORK_ERROR, "connection error"),
            (AuthErrorKind.SERVER_ERROR, "server error, try later"),
            (AuthErrorKind.UNKNOWN, "unexpected error"),
        ],
    )
    @pytest.mark.parametrize("mode", list(ScreenMode))
    def test_generic_failures_use_email_slot(self, kind, message, mode):
        form = apply_to_form(AuthFailure(kind), mode, FormState(password_error="kept"))

        assert form.email_error == message
        assert form.password_error == "kept"
