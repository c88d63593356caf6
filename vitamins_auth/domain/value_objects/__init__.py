"""Domain value objects of the authentication flow."""

from .auth_result import AuthResult, AuthUser, VerifyCodeResult
from .operation import Operation
from .screen_config import ScreenConfig, screen_config_for
from .screen_mode import CodeValidationStatus, RegistrationStatus, ScreenMode

__all__ = [
    "AuthResult",
    "AuthUser",
    "VerifyCodeResult",
    "Operation",
    "ScreenConfig",
    "screen_config_for",
    "CodeValidationStatus",
    "RegistrationStatus",
    "ScreenMode",
]
