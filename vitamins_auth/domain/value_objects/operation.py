"""Cancellation identities of the authentication flow's background work."""

from enum import Enum


class Operation(str, Enum):
    """Each member names one single-flight task slot.

    Starting an operation cancels the previous run under the same identity;
    different identities never cancel each other. The password reset request
    and the "resend code" request share RESEND_CODE.
    """

    CODE_TIMER = "code_timer"
    VERIFY_CODE = "verify_code"
    RESEND_CODE = "resend_code"
    PASSWORD_RESET_CONFIRM = "password_reset_confirm"
    AUTHENTICATE = "authenticate"
