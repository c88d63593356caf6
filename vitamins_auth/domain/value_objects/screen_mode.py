"""Screen modes of the authentication flow.

`ScreenMode` is a closed set: every dispatch over it must handle all five
members and end in an explicit error branch, so adding a mode cannot silently
skip a transition.
"""

from enum import Enum


class ScreenMode(str, Enum):
    """Identifies which authentication screen/step is active."""

    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"
    PASSWORD_RESET_REQUEST = "password_reset_request"
    PASSWORD_RESET_CODE = "password_reset_code"
    PASSWORD_RESET_CONFIRM = "password_reset_confirm"

    @property
    def is_password_reset(self) -> bool:
        return self in (
            ScreenMode.PASSWORD_RESET_REQUEST,
            ScreenMode.PASSWORD_RESET_CODE,
            ScreenMode.PASSWORD_RESET_CONFIRM,
        )


class CodeValidationStatus(str, Enum):
    IDLE = "idle"
    SUCCESS = "success"
    ERROR = "error"


class RegistrationStatus(str, Enum):
    """Progress of account creation, shown on the sign-up status screen."""

    CREATING = "creating"
    SUCCESS = "success"
