"""Authentication gateway interface.

The gateway is the only way the flow reaches the backend. Implementations
return typed payloads on success and raise on failure; the flow controller
classifies whatever they raise, so implementations must not translate errors
into user-facing text themselves.
"""

from abc import ABC, abstractmethod

from vitamins_auth.domain.value_objects.auth_result import AuthResult, VerifyCodeResult


class IAuthGateway(ABC):
    """Interface for the backend authentication endpoints.

    Raises (all methods):
        ApiError: The backend answered with a failure status.
        NetworkClientError: No answer could be obtained.
        SerializationError: The answer could not be decoded.
    """

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthResult:
        """Signs an existing user in and returns the issued tokens."""
        raise NotImplementedError

    @abstractmethod
    async def register(self, email: str, password: str) -> AuthResult:
        """Creates an account and returns the issued tokens."""
        raise NotImplementedError

    @abstractmethod
    async def request_password_reset(self, email: str) -> None:
        """Asks the backend to email a reset code to `email`."""
        raise NotImplementedError

    @abstractmethod
    async def verify_reset_code(self, email: str, code: str) -> VerifyCodeResult:
        """Exchanges the emailed code for a reset token."""
        raise NotImplementedError

    @abstractmethod
    async def confirm_password_reset(
        self, password: str, password_confirm: str, reset_token: str
    ) -> None:
        """Sets the new password using the token from `verify_reset_code`."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Releases transport resources; gateways without any keep this no-op."""
        return None
