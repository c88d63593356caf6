"""Authentication flow domain services.

- form_reducer: per-screen input and inline validation
- error_classifier: gateway failures to field errors
- resend_timer: "resend code" countdown
- flow_controller: the screen state machine tying them together
"""

from .error_classifier import AuthErrorKind, AuthFailure, apply_to_form, classify
from .flow_controller import AuthFlowController, StateObserver
from .form_reducer import clear_errors, reduce_form, validate_form
from .resend_timer import ResendTimer

__all__ = [
    "AuthErrorKind",
    "AuthFailure",
    "apply_to_form",
    "classify",
    "AuthFlowController",
    "StateObserver",
    "clear_errors",
    "reduce_form",
    "validate_form",
    "ResendTimer",
]
