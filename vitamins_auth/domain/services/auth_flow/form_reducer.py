"""Form state reducer.

Pure functions over `FormState`: each returns a new form and never raises for
user input. Error slots are cleared as soon as their input changes and are only
filled again by `validate_form` or by API-failure mapping.
"""

from dataclasses import replace
from typing import Optional

from vitamins_auth.domain.entities.form_state import CODE_LENGTH, FormState
from vitamins_auth.domain.events.auth_flow_events import (
    CodeDigitChanged,
    EmailChanged,
    FormAction,
    PasswordChanged,
    RepeatPasswordChanged,
)
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode
from vitamins_auth.utils.i18n import get_translated_message

_DIGITS = frozenset("0123456789")

_EMAIL_MODES = frozenset(
    {ScreenMode.SIGN_IN, ScreenMode.SIGN_UP, ScreenMode.PASSWORD_RESET_REQUEST}
)
_PASSWORD_MODES = frozenset(
    {ScreenMode.SIGN_IN, ScreenMode.SIGN_UP, ScreenMode.PASSWORD_RESET_CONFIRM}
)
_REPEAT_PASSWORD_MODES = frozenset({ScreenMode.SIGN_UP, ScreenMode.PASSWORD_RESET_CONFIRM})


def reduce_form(form: FormState, action: FormAction) -> FormState:
    """Apply one form action.

    Raises:
        ValueError: For an unknown action type or a digit index outside the code.
    """
    if isinstance(action, EmailChanged):
        return replace(form, email=action.text, email_error=None)

    elif isinstance(action, PasswordChanged):
        changed = replace(form, password=action.text, password_error=None)
        if changed.repeat_password == changed.password:
            changed = replace(changed, repeat_password_error=None)
        return changed

    elif isinstance(action, RepeatPasswordChanged):
        return replace(form, repeat_password=action.text, repeat_password_error=None)

    elif isinstance(action, CodeDigitChanged):
        if not 0 <= action.index < CODE_LENGTH:
            raise ValueError(f"Code digit index out of range: {action.index}")
        digits = list(form.code_digits)
        digits[action.index] = _single_digit(action.text)
        return replace(form, code_digits=tuple(digits))

    else:
        raise ValueError(f"Unknown form action: {type(action).__name__}")


def validate_form(form: FormState, mode: ScreenMode, language: Optional[str] = None) -> FormState:
    """Run the field rules of `mode`.

    Only the fields that `mode` shows are checked; their slots are set to an
    error or cleared. Slots of other fields are left as they are.
    """
    validated = form

    if mode in _EMAIL_MODES:
        email_error = None
        if not form.email.strip():
            email_error = get_translated_message("email_required", language)
        validated = replace(validated, email_error=email_error)

    if mode in _PASSWORD_MODES:
        password_error = None
        if not form.password:
            password_error = get_translated_message("password_required", language)
        validated = replace(validated, password_error=password_error)

    if mode in _REPEAT_PASSWORD_MODES:
        repeat_error = None
        if not form.repeat_password:
            repeat_error = get_translated_message("repeat_password_required", language)
        elif form.repeat_password != form.password:
            repeat_error = get_translated_message("passwords_do_not_match", language)
        validated = replace(validated, repeat_password_error=repeat_error)

    return validated


def clear_errors(form: FormState) -> FormState:
    return replace(
        form,
        email_error=None,
        password_error=None,
        repeat_password_error=None,
        code_error=None,
    )


def _single_digit(text: str) -> str:
    # The UI appends to a slot that already holds a digit, so keep the newest one.
    digits = [char for char in text if char in _DIGITS]
    return digits[-1] if digits else ""
