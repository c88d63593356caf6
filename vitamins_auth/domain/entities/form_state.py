"""Per-screen form state.

One `FormState` exists per visited `ScreenMode`. It is immutable: the form
reducer returns a new instance for every change.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from vitamins_auth.domain.value_objects.screen_mode import CodeValidationStatus

CODE_LENGTH = 6

EMPTY_CODE: Tuple[str, ...] = ("",) * CODE_LENGTH


@dataclass(frozen=True)
class FormState:
    """User-entered text and inline validation errors of one screen.

    Attributes:
        email: Email field text, as typed (trimmed only when submitted).
        password: Password field text.
        repeat_password: Password confirmation field text.
        code_digits: The six one-character slots of the reset code screen.
        code_validation_status: Outcome of the last code verification.
        email_error: Error shown under the email field; also the catch-all
            slot for failures that do not belong to a specific field.
        password_error: Error shown under the password field.
        repeat_password_error: Error shown under the confirmation field.
        code_error: Error shown under the code slots.
    """

    email: str = ""
    password: str = ""
    repeat_password: str = ""
    code_digits: Tuple[str, ...] = field(default=EMPTY_CODE)
    code_validation_status: CodeValidationStatus = CodeValidationStatus.IDLE

    email_error: Optional[str] = None
    password_error: Optional[str] = None
    repeat_password_error: Optional[str] = None
    code_error: Optional[str] = None

    @property
    def code(self) -> str:
        return "".join(self.code_digits)

    @property
    def is_code_complete(self) -> bool:
        return len(self.code_digits) == CODE_LENGTH and all(self.code_digits)

    @property
    def has_errors(self) -> bool:
        return any(
            error is not None
            for error in (
                self.email_error,
                self.password_error,
                self.repeat_password_error,
                self.code_error,
            )
        )
