"""Top-level session: decides between the authentication flow and home.

`AuthSession` owns at most one `AuthFlowController` at a time and is the
controller's `ISessionHost`. It never inspects flow state; the only signal it
receives from a flow is `proceed_to_home`.
"""

from enum import Enum
from typing import Callable, List, Optional

import structlog

from vitamins_auth.domain.interfaces.auth_gateway import IAuthGateway
from vitamins_auth.domain.interfaces.session import ISessionHost
from vitamins_auth.domain.interfaces.storage import IProfileCache, ITokenVault
from vitamins_auth.domain.services.auth_flow.flow_controller import AuthFlowController
from vitamins_auth.domain.value_objects.screen_mode import ScreenMode

logger = structlog.get_logger(__name__)

ControllerFactory = Callable[..., AuthFlowController]


class SessionPhase(str, Enum):
    AUTH = "auth"
    HOME = "home"


class AuthSession(ISessionHost):
    """Switches between the authentication flow and the home screen.

    Args:
        gateway: Passed through to every flow controller.
        token_vault: Decides whether the user is already signed in.
        profile_cache: Cleared on logout.
        controller_factory: Builds a controller as
            ``factory(gateway, token_vault, profile_cache, session_host, root_mode=...)``.
        owns_gateway: Close the gateway together with the session.
    """

    def __init__(
        self,
        gateway: IAuthGateway,
        token_vault: ITokenVault,
        profile_cache: IProfileCache,
        controller_factory: ControllerFactory = AuthFlowController,
        owns_gateway: bool = False,
    ):
        self._gateway = gateway
        self._token_vault = token_vault
        self._profile_cache = profile_cache
        self._controller_factory = controller_factory
        self._owns_gateway = owns_gateway
        self._phase = SessionPhase.AUTH
        self._controller: Optional[AuthFlowController] = None
        self._listeners: List[Callable[[SessionPhase], None]] = []

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def controller(self) -> Optional[AuthFlowController]:
        """The running authentication flow, or None on the home screen."""
        return self._controller

    def on_phase_change(self, listener: Callable[[SessionPhase], None]) -> None:
        self._listeners.append(listener)

    async def check_auth_status(self) -> SessionPhase:
        """Route to home when tokens are stored, otherwise into the auth flow."""
        if self._token_vault.is_authenticated():
            await self._release_controller()
            self._set_phase(SessionPhase.HOME)
        elif self._controller is None or self._controller.is_closed:
            await self.start_auth_flow(ScreenMode.SIGN_UP)
        else:
            self._set_phase(SessionPhase.AUTH)
        return self._phase

    async def start_auth_flow(self, root_mode: ScreenMode = ScreenMode.SIGN_UP) -> AuthFlowController:
        """Replace any running flow with a fresh one rooted at `root_mode`."""
        await self._release_controller()
        controller = self._controller_factory(
            self._gateway,
            self._token_vault,
            self._profile_cache,
            self,
            root_mode=root_mode,
        )
        await controller.start()
        self._controller = controller
        self._set_phase(SessionPhase.AUTH)
        return controller

    def proceed_to_home(self) -> None:
        # Called from inside the controller's runner; the controller has
        # already stopped itself, so it is only dropped here.
        self._controller = None
        self._set_phase(SessionPhase.HOME)

    async def logout(self) -> AuthFlowController:
        self._token_vault.clear()
        self._profile_cache.clear()
        logger.info("session_logged_out")
        return await self.start_auth_flow(ScreenMode.SIGN_UP)

    async def close(self) -> None:
        await self._release_controller()
        if self._owns_gateway:
            await self._gateway.aclose()

    async def _release_controller(self) -> None:
        controller, self._controller = self._controller, None
        if controller is not None:
            await controller.close()

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase == self._phase:
            return
        logger.info("session_phase_changed", previous=self._phase.value, phase=phase.value)
        self._phase = phase
        for listener in list(self._listeners):
            listener(phase)
