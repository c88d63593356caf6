"""Authentication flow controller.

The controller is the single owner of `FlowState`. UI events and background
completions go through one asyncio queue and are processed one at a time by a
runner task, so state is never mutated concurrently. Network calls and the
resend countdown run as cancellable tasks in per-operation slots and post their
results back as events; a result whose slot has since been restarted or
cancelled is discarded.

Typical use:

    async with AuthFlowController(gateway, vault, cache, root_mode=ScreenMode.SIGN_IN) as flow:
        flow.subscribe(render)
        flow.send(EmailChanged("a@b.com"))
        flow.send(PasswordChanged("secret"))
        flow.send(PrimaryButtonTapped())
"""

import asyncio
from dataclasses import replace
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type

import structlog

from vitamins_auth.core.config.settings import settings
from vitamins_auth.core.exceptions import AuthFlowClosedError, SerializationError
from vitamins_auth.core.task_slots import TaskSlots, Ticket
from vitamins_auth.domain.entities.flow_state import FlowState
from vitamins_auth.domain.entities.form_state import CODE_LENGTH, EMPTY_CODE, FormState
from vitamins_auth.domain.events.auth_flow_events import (
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
from vitamins_auth.domain.interfaces.auth_gateway import IAuthGateway
from vitamins_auth.domain.interfaces.session import ISessionHost
from vitamins_auth.domain.interfaces.storage import IProfileCache, ITokenVault
from vitamins_auth.domain.services.auth_flow.error_classifier import apply_to_form, classify
from vitamins_auth.domain.services.auth_flow.form_reducer import (
    clear_errors,
    reduce_form,
    validate_form,
)
from vitamins_auth.domain.services.auth_flow.resend_timer import ResendTimer
from vitamins_auth.domain.value_objects.operation import Operation
from vitamins_auth.domain.value_objects.screen_mode import (
    CodeValidationStatus,
    RegistrationStatus,
    ScreenMode,
)
from vitamins_auth.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

StateObserver = Callable[[FlowState], None]

_STOP = object()

_FORM_ACTIONS = frozenset({EmailChanged, PasswordChanged, RepeatPasswordChanged, CodeDigitChanged})


class AuthFlowController:
    """State machine of the sign-in, sign-up and password-reset screens.

    Args:
        gateway: Backend authentication endpoints.
        token_vault: Receives the tokens of a successful sign-in or sign-up.
        profile_cache: Receives the email of the signed-in user.
        session_host: Notified when the flow hands over to the home screen.
        root_mode: Entry screen of this session.
        resend_seconds: Countdown length before a reset code may be resent.
        tick_interval: Seconds per countdown tick.
        language: Language of the inline error messages.
    """

    def __init__(
        self,
        gateway: IAuthGateway,
        token_vault: ITokenVault,
        profile_cache: IProfileCache,
        session_host: Optional[ISessionHost] = None,
        *,
        root_mode: ScreenMode = ScreenMode.SIGN_UP,
        resend_seconds: Optional[int] = None,
        tick_interval: Optional[float] = None,
        language: Optional[str] = None,
    ):
        self._gateway = gateway
        self._token_vault = token_vault
        self._profile_cache = profile_cache
        self._session_host = session_host
        self._language = language

        self._resend_seconds = (
            settings.CODE_RESEND_SECONDS if resend_seconds is None else resend_seconds
        )
        self._state = FlowState(root_mode=root_mode, forms={root_mode: FormState()})

        self._queue: asyncio.Queue = asyncio.Queue()
        self._slots: TaskSlots[Operation] = TaskSlots(Operation)
        self._timer = ResendTimer(
            self._slots[Operation.CODE_TIMER],
            self._post,
            ticks=self._resend_seconds,
            interval=settings.CODE_RESEND_TICK_SECONDS if tick_interval is None else tick_interval,
        )
        self._observers: List[StateObserver] = []
        self._runner: Optional[asyncio.Task] = None
        self._closed = False
        self._exit_requested = False

        self._handlers: Dict[Type[AuthFlowEvent], Callable[[Any], None]] = {
            PrimaryButtonTapped: self._on_primary_button_tapped,
            SecondaryButtonTapped: self._on_secondary_button_tapped,
            BackButtonTapped: self._on_back_button_tapped,
            ResendCodeTapped: self._on_resend_code_tapped,
            NavigationPathUpdated: self._on_navigation_path_updated,
            ProceedToHome: self._on_proceed_to_home,
            CodeTimerTick: self._on_code_timer_tick,
            AuthResponse: self._on_auth_response,
            PasswordResetRequestResponse: self._on_password_reset_request_response,
            VerifyCodeResponse: self._on_verify_code_response,
            PasswordResetConfirmResponse: self._on_password_reset_confirm_response,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_code_timer_running(self) -> bool:
        return self._timer.is_running

    async def start(self) -> "AuthFlowController":
        if self._closed:
            raise AuthFlowClosedError()
        if self._runner is None:
            self._runner = asyncio.get_running_loop().create_task(
                self._run(), name="auth-flow-controller"
            )
            logger.info("auth_flow_started", root_mode=self._state.root_mode.value)
        return self

    async def close(self) -> None:
        """Cancel every operation and stop the runner. Idempotent."""
        self._closed = True
        self._slots.cancel_all()
        runner, self._runner = self._runner, None
        if runner is None:
            return
        if not runner.done():
            self._queue.put_nowait(_STOP)
        await runner
        logger.info("auth_flow_closed")

    async def __aenter__(self) -> "AuthFlowController":
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, traceback) -> None:
        await self.close()

    def send(self, event: AuthFlowEvent) -> None:
        """Enqueue a UI event.

        Raises:
            AuthFlowClosedError: The flow has been closed or has handed over to home.
            ValueError: The event is not one the controller understands.
        """
        if self._closed:
            raise AuthFlowClosedError()
        if type(event) not in _FORM_ACTIONS and type(event) not in self._handlers:
            raise ValueError(f"Unknown auth flow event: {type(event).__name__}")
        if isinstance(event, CodeDigitChanged) and not 0 <= event.index < CODE_LENGTH:
            raise ValueError(f"Code digit index out of range: {event.index}")
        self._queue.put_nowait(event)

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register `observer` for every new state; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def wait_until_idle(self) -> None:
        """Wait until the queue is drained and no request is in flight.

        The resend countdown is not waited for.
        """
        if self._runner is None and not self._closed:
            raise RuntimeError("Auth flow controller is not started")
        while not self._closed:
            pending = self._slots.running_tasks(exclude=(Operation.CODE_TIMER,))
            if pending:
                await asyncio.wait(pending)
                continue
            await self._queue.join()
            if self._queue.empty() and not self._slots.running_tasks(
                exclude=(Operation.CODE_TIMER,)
            ):
                return

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                if event is _STOP or self._closed:
                    break
                try:
                    self._process(event)
                except Exception:
                    logger.exception("auth_flow_event_failed", event_type=type(event).__name__)
            finally:
                self._queue.task_done()
            if self._closed:
                break
        self._drain()

    def _drain(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    def _post(self, event: AuthFlowEvent) -> None:
        if self._closed:
            logger.debug("auth_flow_event_dropped", event_type=type(event).__name__)
            return
        self._queue.put_nowait(event)

    def _process(self, event: AuthFlowEvent) -> None:
        if isinstance(event, OperationCompleted) and not self._slots.is_current(event.ticket):
            logger.debug(
                "stale_completion_discarded",
                event_type=type(event).__name__,
                operation=str(event.ticket.key),
            )
            return

        if isinstance(event, FormAction):
            handler = self._on_form_action
        else:
            handler = self._handlers[type(event)]

        previous = self._state
        handler(event)
        if self._state is not previous:
            self._notify()

        if self._exit_requested:
            self._exit_to_home()

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception as e:
                logger.error("auth_flow_observer_failed", error=str(e))

    def _exit_to_home(self) -> None:
        self._closed = True
        self._slots.cancel_all()
        logger.info("auth_flow_proceeding_to_home")
        if self._session_host is not None:
            self._session_host.proceed_to_home()

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)

    def _set_form(self, mode: ScreenMode, form: FormState) -> None:
        self._state = self._state.with_form(mode, form)

    def _push(self, mode: ScreenMode) -> None:
        state = self._state.pushed(mode)
        if mode not in state.forms:
            state = state.with_form(mode, FormState())
        self._state = state

    def _apply_failure(self, error: BaseException) -> None:
        mode = self._state.current_mode
        failure = classify(error)
        logger.warning(
            "auth_request_failed",
            mode=mode.value,
            kind=failure.kind.value,
            status_code=failure.status_code,
            error_type=type(error).__name__,
        )
        self._set_form(
            mode, apply_to_form(failure, mode, self._state.form_for(mode), self._language)
        )

    def _launch(
        self,
        operation: Operation,
        call: Callable[[], Awaitable[Any]],
        respond: Callable[[Ticket, Any, Optional[BaseException]], AuthFlowEvent],
    ) -> Ticket:
        """Run `call` in the slot of `operation` and post `respond(...)` when it ends."""

        async def run(ticket: Ticket) -> None:
            try:
                payload = await call()
            except Exception as error:
                self._post(respond(ticket, None, error))
            else:
                self._post(respond(ticket, payload, None))

        return self._slots.start(operation, run)

    def _request_reset_code(self, email: str) -> None:
        self._set(is_loading=True)
        logger.info("password_reset_code_requested", email_prefix=email[:3])
        self._launch(
            Operation.RESEND_CODE,
            partial(self._gateway.request_password_reset, email),
            lambda ticket, _, error: PasswordResetRequestResponse(
                ticket=ticket, error=error, email=email
            ),
        )

    # ------------------------------------------------------------------
    # UI events
    # ------------------------------------------------------------------

    def _on_primary_button_tapped(self, event: PrimaryButtonTapped) -> None:
        mode = self._state.current_mode
        if mode == ScreenMode.PASSWORD_RESET_CODE:
            # The code is submitted when its last digit is entered.
            return

        form = validate_form(clear_errors(self._state.form_for(mode)), mode, self._language)
        self._set_form(mode, form)
        if form.has_errors:
            logger.debug("auth_form_invalid", mode=mode.value)
            return

        if mode in (ScreenMode.SIGN_IN, ScreenMode.SIGN_UP):
            email = form.email.strip()
            password = form.password
            if mode == ScreenMode.SIGN_UP:
                self._set(is_loading=True, registration_status=RegistrationStatus.CREATING)
                call = self._gateway.register
            else:
                self._set(is_loading=True)
                call = self._gateway.login
            logger.info("auth_submitted", mode=mode.value, email_prefix=email[:3])
            self._launch(
                Operation.AUTHENTICATE,
                partial(call, email, password),
                lambda ticket, result, error: AuthResponse(
                    ticket=ticket, error=error, result=result
                ),
            )

        elif mode == ScreenMode.PASSWORD_RESET_REQUEST:
            email = form.email.strip()
            self._set(reset_email=email, reset_token="")
            self._request_reset_code(email)

        elif mode == ScreenMode.PASSWORD_RESET_CONFIRM:
            password = form.password
            password_confirm = form.repeat_password
            reset_token = self._state.reset_token
            self._set(is_loading=True)
            logger.info("password_reset_confirm_submitted")
            self._launch(
                Operation.PASSWORD_RESET_CONFIRM,
                partial(
                    self._gateway.confirm_password_reset, password, password_confirm, reset_token
                ),
                lambda ticket, _, error: PasswordResetConfirmResponse(ticket=ticket, error=error),
            )

        else:
            raise ValueError(f"Unhandled screen mode: {mode}")

    def _on_form_action(self, action: FormAction) -> None:
        mode = self._state.current_mode
        form = reduce_form(self._state.form_for(mode), action)
        self._set_form(mode, form)

        if (
            mode == ScreenMode.PASSWORD_RESET_CODE
            and isinstance(action, CodeDigitChanged)
            and form.is_code_complete
            and self._state.reset_email
        ):
            email = self._state.reset_email
            code = form.code
            self._set(is_loading=True)
            logger.info("reset_code_submitted", email_prefix=email[:3])
            self._launch(
                Operation.VERIFY_CODE,
                partial(self._gateway.verify_reset_code, email, code),
                lambda ticket, result, error: VerifyCodeResponse(
                    ticket=ticket, error=error, result=result
                ),
            )

    def _on_secondary_button_tapped(self, event: SecondaryButtonTapped) -> None:
        mode = self._state.current_mode
        if mode == ScreenMode.SIGN_IN:
            self._push(ScreenMode.PASSWORD_RESET_REQUEST)
        elif mode == ScreenMode.SIGN_UP:
            self._push(ScreenMode.SIGN_IN)
        elif mode.is_password_reset:
            return
        else:
            raise ValueError(f"Unhandled screen mode: {mode}")

    def _on_back_button_tapped(self, event: BackButtonTapped) -> None:
        if self._state.current_mode == ScreenMode.PASSWORD_RESET_CONFIRM:
            # The code is single-use; going back lands on the email screen.
            self._set(
                navigation_stack=(ScreenMode.PASSWORD_RESET_REQUEST,), is_loading=False
            )
            return
        self._state = self._state.popped()
        self._set(is_loading=False)

    def _on_resend_code_tapped(self, event: ResendCodeTapped) -> None:
        email = self._state.reset_email
        if not email:
            logger.debug("resend_code_ignored", reason="no_reset_email")
            return
        self._request_reset_code(email)

    def _on_navigation_path_updated(self, event: NavigationPathUpdated) -> None:
        path: Tuple[ScreenMode, ...] = tuple(event.path)
        popped = len(path) < len(self._state.navigation_stack)
        state = replace(self._state, navigation_stack=path)
        for mode in path:
            if mode not in state.forms:
                state = state.with_form(mode, FormState())
        self._state = state
        if popped:
            self._set(is_loading=False)

    def _on_proceed_to_home(self, event: ProceedToHome) -> None:
        self._set(registration_status=None, is_loading=False)
        self._exit_requested = True

    def _on_code_timer_tick(self, event: CodeTimerTick) -> None:
        remaining = self._state.code_resend_seconds_remaining
        if remaining > 0:
            self._set(code_resend_seconds_remaining=remaining - 1)

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def _on_auth_response(self, event: AuthResponse) -> None:
        mode = self._state.current_mode
        self._set(is_loading=False)

        error = event.error
        if error is None and event.result is None:
            error = SerializationError("Authentication succeeded without a token payload")
        if error is not None:
            if mode == ScreenMode.SIGN_UP:
                self._set(registration_status=None)
            self._apply_failure(error)
            return

        result = event.result
        if result.has_tokens:
            self._save_tokens(result.access_token, result.refresh_token)

        email = ""
        if result.user is not None:
            email = result.user.email
        if not email.strip():
            email = self._state.form_for(mode).email
        if email.strip():
            self._cache_email(email)

        logger.info("auth_succeeded", mode=mode.value)
        if mode == ScreenMode.SIGN_UP:
            # The success screen asks the user to continue explicitly.
            self._set(registration_status=RegistrationStatus.SUCCESS)
        else:
            self._on_proceed_to_home(ProceedToHome())

    def _on_password_reset_request_response(self, event: PasswordResetRequestResponse) -> None:
        self._set(is_loading=False)
        if not event.succeeded:
            self._apply_failure(event.error)
            return

        self._set(reset_email=event.email.strip())
        if self._state.current_mode != ScreenMode.PASSWORD_RESET_CODE:
            self._push(ScreenMode.PASSWORD_RESET_CODE)
        self._set(code_resend_seconds_remaining=self._resend_seconds)
        self._timer.start()

    def _on_verify_code_response(self, event: VerifyCodeResponse) -> None:
        self._set(is_loading=False)
        mode = ScreenMode.PASSWORD_RESET_CODE
        form = self._state.form_for(mode)

        if not event.succeeded or event.result is None:
            logger.warning(
                "reset_code_rejected",
                kind=classify(event.error).kind.value,
                error_type=type(event.error).__name__,
            )
            self._set_form(
                mode,
                replace(
                    form,
                    code_validation_status=CodeValidationStatus.ERROR,
                    code_error=get_translated_message("invalid_code", self._language),
                    code_digits=EMPTY_CODE,
                ),
            )
            return

        self._set_form(
            mode,
            replace(form, code_validation_status=CodeValidationStatus.SUCCESS, code_error=None),
        )
        self._set(reset_token=event.result.reset_token)
        self._push(ScreenMode.PASSWORD_RESET_CONFIRM)

    def _on_password_reset_confirm_response(self, event: PasswordResetConfirmResponse) -> None:
        self._set(is_loading=False)
        if not event.succeeded:
            self._apply_failure(event.error)
            return

        logger.info("password_reset_completed")
        self._timer.cancel()
        self._set(navigation_stack=(), root_mode=ScreenMode.SIGN_IN)
        self._set_form(ScreenMode.SIGN_IN, FormState(email=self._state.reset_email))

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _save_tokens(self, access_token: str, refresh_token: str) -> None:
        try:
            self._token_vault.save(access_token, refresh_token)
        except Exception as e:
            logger.error("token_vault_save_failed", error=str(e))

    def _cache_email(self, email: str) -> None:
        try:
            self._profile_cache.upsert(email.strip())
        except Exception as e:
            logger.error("profile_cache_upsert_failed", error=str(e))
