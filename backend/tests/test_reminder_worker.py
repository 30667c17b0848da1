"""
Tests for the background reminder worker
"""
import pytest
from unittest.mock import AsyncMock, Mock

from application.services.reminder_worker import ReminderWorker
from core.exceptions import RepositoryException


def stop_after(worker_ref, cycles):
    """Sleep stand-in that stops the worker after ``cycles`` sleeps"""
    calls = []

    async def fake_sleep(seconds):
        calls.append(seconds)
        if len(calls) >= cycles:
            await worker_ref[0].stop()

    return fake_sleep, calls


class TestReminderWorker:
    """Test worker loop"""

    @pytest.mark.asyncio
    async def test_runs_cycle_every_interval(self):
        scheduler = Mock()
        scheduler.run_cycle = AsyncMock(return_value=Mock())
        ref = []
        fake_sleep, calls = stop_after(ref, 3)
        worker = ReminderWorker(scheduler, poll_interval=60, sleep=fake_sleep)
        ref.append(worker)

        await worker.start()

        assert scheduler.run_cycle.await_count == 3
        assert calls == [60, 60, 60]
        assert worker.running is False

    @pytest.mark.asyncio
    async def test_cycle_errors_do_not_kill_loop(self):
        scheduler = Mock()
        scheduler.run_cycle = AsyncMock(side_effect=[
            RepositoryException("database unreachable"),
            RuntimeError("boom"),
            Mock(),
        ])
        ref = []
        fake_sleep, _ = stop_after(ref, 3)
        worker = ReminderWorker(scheduler, poll_interval=5, sleep=fake_sleep)
        ref.append(worker)

        await worker.start()

        assert scheduler.run_cycle.await_count == 3
        assert worker.cycles == 3

    @pytest.mark.asyncio
    async def test_tick_returns_report(self):
        report = Mock()
        scheduler = Mock()
        scheduler.run_cycle = AsyncMock(return_value=report)
        worker = ReminderWorker(scheduler, poll_interval=1)

        assert await worker._tick() is report

    @pytest.mark.asyncio
    async def test_tick_returns_none_on_failure(self):
        scheduler = Mock()
        scheduler.run_cycle = AsyncMock(side_effect=RepositoryException("down"))
        worker = ReminderWorker(scheduler, poll_interval=1)

        assert await worker._tick() is None

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ReminderWorker(Mock(), poll_interval=0)
