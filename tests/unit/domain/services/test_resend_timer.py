"""Tests for the resend-code countdown."""

import asyncio

import pytest

from vitamins_auth.core.task_slots import TaskSlot
from vitamins_auth.domain.events.auth_flow_events import CodeTimerTick
from vitamins_auth.domain.services.auth_flow.resend_timer import ResendTimer


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def slot():
    return TaskSlot("code_timer")


class TestResendTimer:
    """Test suite for ResendTimer."""

    @pytest.mark.asyncio
    async def test_emits_one_tick_per_interval_then_stops(self, slot, emitted):
        # Arrange
        timer = ResendTimer(slot, emitted.append, ticks=3, interval=0.001)

        # Act
        ticket = timer.start()
        await slot.task

        # Assert
        assert emitted == [CodeTimerTick(ticket=ticket)] * 3
        assert not timer.is_running

    @pytest.mark.asyncio
    async def test_restart_cancels_previous_run(self, slot, emitted):
        timer = ResendTimer(slot, emitted.append, ticks=2, interval=0.001)

        first = timer.start()
        first_task = slot.task
        second = timer.start()
        await slot.task

        assert first_task.cancelled()
        assert first != second
        assert all(tick.ticket == second for tick in emitted)
        assert len(emitted) == 2

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self, slot, emitted):
        timer = ResendTimer(slot, emitted.append, ticks=5, interval=10)
        timer.start()
        task = slot.task

        timer.cancel()
        timer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not timer.is_running
        assert emitted == []

    def test_cancel_without_start_is_safe(self, slot, emitted):
        ResendTimer(slot, emitted.append).cancel()

    @pytest.mark.asyncio
    async def test_zero_ticks_finishes_immediately(self, slot, emitted):
        timer = ResendTimer(slot, emitted.append, ticks=0, interval=1)

        timer.start()
        await slot.task

        assert emitted == []

    @pytest.mark.parametrize("ticks, interval", [(-1, 1.0), (60, 0), (60, -1.0)])
    def test_rejects_invalid_configuration(self, slot, emitted, ticks, interval):
        with pytest.raises(ValueError):
            ResendTimer(slot, emitted.append, ticks=ticks, interval=interval)
