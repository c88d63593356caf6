"""Single-flight task slots for cancellable background operations.

A slot owns at most one asyncio task. Starting a new task in a slot cancels the
occupant first, so for every logical operation there is only ever one request
in flight. Each start hands out a `Ticket`; the task stamps it on the event it
posts back, and the consumer checks `is_current` before applying the event. A
superseded task is cancelled before it can post, and anything it posted before
being superseded carries a stale ticket.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

import structlog

logger = structlog.get_logger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class Ticket:
    """Identifies one run of one slot."""

    key: Hashable
    generation: int


class TaskSlot:
    """Holds the single in-flight task of one cancellation identity."""

    def __init__(self, key: Hashable):
        self.key = key
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def start(self, factory: Callable[[Ticket], Awaitable[None]]) -> Ticket:
        """Cancel the current occupant and run `factory(ticket)` in its place.

        Must be called from inside a running event loop.
        """
        self.cancel()
        self._generation += 1
        ticket = Ticket(self.key, self._generation)
        task = asyncio.get_running_loop().create_task(
            factory(ticket), name=f"{self.key}#{self._generation}"
        )
        task.add_done_callback(self._log_failure)
        self._task = task
        logger.debug("task_slot_started", slot=str(self.key), generation=self._generation)
        return ticket

    def cancel(self) -> bool:
        """Cancel the occupant, if any. Safe to call repeatedly.

        Returns:
            True if a task was occupying the slot.
        """
        task, self._task = self._task, None
        if task is None:
            return False
        # Invalidate whatever the task may already have posted.
        self._generation += 1
        if not task.done():
            task.cancel()
            logger.debug("task_slot_cancelled", slot=str(self.key))
        return True

    def is_current(self, ticket: Ticket) -> bool:
        return ticket.key == self.key and ticket.generation == self._generation

    def _log_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "task_slot_failed",
                slot=str(self.key),
                error=str(error),
                error_type=type(error).__name__,
            )


class TaskSlots(Generic[K]):
    """One `TaskSlot` per key of a closed set of operation identities."""

    def __init__(self, keys: Iterable[K]):
        self._slots: Dict[K, TaskSlot] = {key: TaskSlot(key) for key in keys}

    def __getitem__(self, key: K) -> TaskSlot:
        return self._slots[key]

    def start(self, key: K, factory: Callable[[Ticket], Awaitable[None]]) -> Ticket:
        return self._slots[key].start(factory)

    def cancel(self, key: K) -> bool:
        return self._slots[key].cancel()

    def cancel_all(self) -> None:
        for slot in self._slots.values():
            slot.cancel()

    def is_current(self, ticket: Ticket) -> bool:
        slot = self._slots.get(ticket.key)
        return slot is not None and slot.is_current(ticket)

    def running_tasks(self, exclude: Iterable[K] = ()) -> List[asyncio.Task]:
        skipped = set(exclude)
        return [
            slot.task
            for key, slot in self._slots.items()
            if key not in skipped and slot.is_running
        ]
