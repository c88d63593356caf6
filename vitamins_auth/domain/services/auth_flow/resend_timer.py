"""Countdown driving the "resend code" button.

The timer owns no state of the flow. It runs in the CODE_TIMER task slot and
posts one `CodeTimerTick` per interval; the controller decrements its own
counter when it processes a tick. Restarting replaces the running countdown.
"""

import asyncio
from typing import Callable

import structlog

from vitamins_auth.core.task_slots import TaskSlot, Ticket
from vitamins_auth.domain.events.auth_flow_events import AuthFlowEvent, CodeTimerTick

logger = structlog.get_logger(__name__)


class ResendTimer:
    """Restartable, cancellable countdown emitting tick events.

    Args:
        slot: Task slot the countdown runs in.
        emit: Callback posting an event to the controller's queue.
        ticks: Number of ticks per run.
        interval: Seconds between ticks.
    """

    def __init__(
        self,
        slot: TaskSlot,
        emit: Callable[[AuthFlowEvent], None],
        ticks: int = 60,
        interval: float = 1.0,
    ):
        if ticks < 0:
            raise ValueError("ticks must be >= 0")
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._slot = slot
        self._emit = emit
        self.ticks = ticks
        self.interval = interval

    @property
    def is_running(self) -> bool:
        return self._slot.is_running

    def start(self) -> Ticket:
        logger.debug("resend_timer_started", ticks=self.ticks, interval=self.interval)
        return self._slot.start(self._count_down)

    def cancel(self) -> None:
        if self._slot.cancel():
            logger.debug("resend_timer_cancelled")

    async def _count_down(self, ticket: Ticket) -> None:
        for _ in range(self.ticks):
            await asyncio.sleep(self.interval)
            self._emit(CodeTimerTick(ticket=ticket))
