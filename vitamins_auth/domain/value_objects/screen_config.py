"""Static per-screen configuration.

Carries the titles the UI renders and, more importantly for the flow, whether a
screen has a secondary navigation action at all.
"""

from dataclasses import dataclass
from typing import Optional

from vitamins_auth.domain.value_objects.screen_mode import ScreenMode


@dataclass(frozen=True, slots=True)
class ScreenConfig:
    title: str
    primary_button_title: str
    subtitle: Optional[str] = None
    secondary_prefix: Optional[str] = None
    secondary_action: Optional[str] = None

    @property
    def has_secondary_action(self) -> bool:
        return self.secondary_action is not None


def screen_config_for(mode: ScreenMode) -> ScreenConfig:
    if mode == ScreenMode.SIGN_IN:
        return ScreenConfig(
            title="Sign in to your account",
            primary_button_title="Sign in",
            secondary_action="Forgot password?",
        )
    elif mode == ScreenMode.SIGN_UP:
        return ScreenConfig(
            title="Create an account",
            primary_button_title="Sign up",
            secondary_prefix="Already have an account?",
            secondary_action="Sign in",
        )
    elif mode == ScreenMode.PASSWORD_RESET_REQUEST:
        return ScreenConfig(
            title="Password reset",
            subtitle="Enter your email and we will send you a code to reset your password.",
            primary_button_title="Send",
        )
    elif mode == ScreenMode.PASSWORD_RESET_CODE:
        return ScreenConfig(
            title="Enter the code",
            subtitle="We sent a 6-digit code to your email.",
            primary_button_title="Continue",
        )
    elif mode == ScreenMode.PASSWORD_RESET_CONFIRM:
        return ScreenConfig(
            title="Password recovery",
            subtitle="Choose a new password",
            primary_button_title="Continue",
        )
    else:
        raise ValueError(f"Unhandled screen mode: {mode}")
