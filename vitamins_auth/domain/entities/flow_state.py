"""State of one authentication session, owned by the flow controller."""

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from vitamins_auth.domain.entities.form_state import FormState
from vitamins_auth.domain.value_objects.screen_config import ScreenConfig, screen_config_for
from vitamins_auth.domain.value_objects.screen_mode import RegistrationStatus, ScreenMode


@dataclass(frozen=True)
class FlowState:
    """Immutable snapshot of the authentication flow.

    The controller replaces the snapshot on every transition and hands each new
    one to its observers. `navigation_stack` holds the screens pushed on top of
    `root_mode`; an empty stack means the root screen is showing.

    Attributes:
        root_mode: Entry screen of the session.
        navigation_stack: Screens pushed on top of the root, in order.
        forms: Form state per visited screen, created on first use.
        is_loading: True while a submitted request is in flight.
        reset_email: Email the reset code was requested for.
        reset_token: Credential returned by code verification.
        code_resend_seconds_remaining: Countdown until the code may be resent.
        registration_status: Account creation progress while on sign-up.
    """

    root_mode: ScreenMode = ScreenMode.SIGN_UP
    navigation_stack: Tuple[ScreenMode, ...] = ()
    forms: Mapping[ScreenMode, FormState] = field(default_factory=dict)
    is_loading: bool = False
    reset_email: str = ""
    reset_token: str = ""
    code_resend_seconds_remaining: int = 0
    registration_status: Optional[RegistrationStatus] = None

    @property
    def current_mode(self) -> ScreenMode:
        if self.navigation_stack:
            return self.navigation_stack[-1]
        return self.root_mode

    @property
    def current_form(self) -> FormState:
        return self.form_for(self.current_mode)

    @property
    def screen(self) -> ScreenConfig:
        return screen_config_for(self.current_mode)

    def form_for(self, mode: ScreenMode) -> FormState:
        return self.forms.get(mode) or FormState()

    def with_form(self, mode: ScreenMode, form: FormState) -> "FlowState":
        forms = dict(self.forms)
        forms[mode] = form
        return replace(self, forms=forms)

    def pushed(self, mode: ScreenMode) -> "FlowState":
        return replace(self, navigation_stack=self.navigation_stack + (mode,))

    def popped(self) -> "FlowState":
        if not self.navigation_stack:
            return self
        return replace(self, navigation_stack=self.navigation_stack[:-1])
