"""Domain entities of the authentication flow."""

from .flow_state import FlowState
from .form_state import CODE_LENGTH, EMPTY_CODE, FormState

__all__ = ["FlowState", "FormState", "CODE_LENGTH", "EMPTY_CODE"]
