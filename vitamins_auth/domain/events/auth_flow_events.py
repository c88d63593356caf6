"""Events consumed by the authentication flow controller.

Two kinds of events share one queue:
- UI events, sent by the presentation layer (button taps, text edits).
- Completion events, posted by background operations. Each carries the
  `Ticket` of the run that produced it so superseded results can be discarded.

All events are immutable.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from vitamins_auth.core.task_slots import Ticket
from vitamins_auth.domain.value_objects.auth_result import AuthResult, VerifyCodeResult
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode


@dataclass(frozen=True)
class AuthFlowEvent:
    """Base class for every event the controller accepts."""


# ---------------------------------------------------------------------------
# Form actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FormAction(AuthFlowEvent):
    """An edit of the current screen's form."""


@dataclass(frozen=True)
class EmailChanged(FormAction):
    text: str


@dataclass(frozen=True)
class PasswordChanged(FormAction):
    text: str


@dataclass(frozen=True)
class RepeatPasswordChanged(FormAction):
    text: str


@dataclass(frozen=True)
class CodeDigitChanged(FormAction):
    index: int
    text: str


# ---------------------------------------------------------------------------
# UI events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimaryButtonTapped(AuthFlowEvent):
    pass


@dataclass(frozen=True)
class SecondaryButtonTapped(AuthFlowEvent):
    pass


@dataclass(frozen=True)
class BackButtonTapped(AuthFlowEvent):
    pass


@dataclass(frozen=True)
class ResendCodeTapped(AuthFlowEvent):
    pass


@dataclass(frozen=True)
class NavigationPathUpdated(AuthFlowEvent):
    """The platform changed the navigation path on its own (e.g. a back swipe)."""

    path: Tuple[ScreenMode, ...]


@dataclass(frozen=True)
class ProceedToHome(AuthFlowEvent):
    pass


# ---------------------------------------------------------------------------
# Completion events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OperationCompleted(AuthFlowEvent):
    """Result of one background run; `error` is set when the run failed."""

    ticket: Ticket
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CodeTimerTick(OperationCompleted):
    pass


@dataclass(frozen=True)
class AuthResponse(OperationCompleted):
    result: Optional[AuthResult] = None


@dataclass(frozen=True)
class PasswordResetRequestResponse(OperationCompleted):
    email: str = ""


@dataclass(frozen=True)
class VerifyCodeResponse(OperationCompleted):
    result: Optional[VerifyCodeResult] = None


@dataclass(frozen=True)
class PasswordResetConfirmResponse(OperationCompleted):
    pass
