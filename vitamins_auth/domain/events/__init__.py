"""Domain events of the authentication flow."""

from .auth_flow_events import (
    AuthFlowEvent,
    AuthResponse,
    BackButtonTapped,
    CodeDigitChanged,
    CodeTimerTick,
    EmailChanged,
    FormAction,
    NavigationPathUpdated,
    OperationCompleted,
    PasswordChanged,
    PasswordResetConfirmResponse,
    PasswordResetRequestResponse,
    PrimaryButtonTapped,
    ProceedToHome,
    RepeatPasswordChanged,
    ResendCodeTapped,
    SecondaryButtonTapped,
    VerifyCodeResponse,
)

__all__ = [
    "AuthFlowEvent",
    "AuthResponse",
    "BackButtonTapped",
    "CodeDigitChanged",
    "CodeTimerTick",
    "EmailChanged",
    "FormAction",
    "NavigationPathUpdated",
    "OperationCompleted",
    "PasswordChanged",
    "PasswordResetConfirmResponse",
    "PasswordResetRequestResponse",
    "PrimaryButtonTapped",
    "ProceedToHome",
    "RepeatPasswordChanged",
    "ResendCodeTapped",
    "SecondaryButtonTapped",
    "VerifyCodeResponse",
]
