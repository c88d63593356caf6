"""Tests for the exception hierarchy."""

from vitamins_auth.core import exceptions
from vitamins_auth.core.exceptions import ApiError, ServerError, UnauthorizedError, VitaminsError


def test_module_is_documented():
    assert exceptions.__doc__


def test_api_errors_carry_status_and_code():
    error = UnauthorizedError()

    assert isinstance(error, ApiError)
    assert isinstance(error, VitaminsError)
    assert error.status_code == 401
    assert error.code == "unauthorized"


def test_server_error_keeps_exact_status():
    error = ServerError(502)

    assert error.status_code == 502
    assert str(error) == "Server error (502)"
