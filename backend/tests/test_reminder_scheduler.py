"""
Tests for the reminder batch cycle
"""
from datetime import datetime, timedelta, timezone

import pytest

from application.services.reminder_scheduler import ReminderScheduler
from core.exceptions import RepositoryException
from domain.value_objects import ReminderFailureReason, ReminderStatus

from conftest import FakeTransport, make_application, make_reminder


@pytest.fixture
def scheduler(store_scope, transport, clock):
    return ReminderScheduler(store_scope, transport, clock=clock, batch_size=5)


class TestDeliveryScenarios:
    """End-to-end cycle scenarios"""

    @pytest.mark.asyncio
    async def test_sends_due_reminder_and_marks_sent(self, scheduler, store, transport, clock):
        """Deadline 10:00Z, send time 09:00Z, cycle at 09:00:01Z"""
        application = store.add_application(make_application("Acme Corp"))
        reminder = store.add_reminder(make_reminder(application))
        assert reminder.send_time == datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)

        report = await scheduler.run_cycle()

        assert report.considered == 1
        assert report.sent == 1
        assert len(transport.sent) == 1
        assert transport.sent[0]["to"] == "candidate@example.com"
        assert "Acme Corp" in transport.sent[0]["subject"]
        saved = store.reminders[reminder.id]
        assert saved.status == ReminderStatus.SENT
        assert saved.sent_at == clock()

    @pytest.mark.asyncio
    async def test_sent_reminder_is_never_resent(self, scheduler, store, transport, clock):
        application = store.add_application(make_application())
        store.add_reminder(make_reminder(application))

        await scheduler.run_cycle()
        clock.advance(minutes=1)
        report = await scheduler.run_cycle()

        assert report.considered == 0
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_deleted_application_marks_failed_without_email(self, scheduler, store, transport):
        application = make_application()
        reminder = store.add_reminder(make_reminder(application))

        report = await scheduler.run_cycle()

        assert report.failed == 1
        assert transport.attempts == 0
        saved = store.reminders[reminder.id]
        assert saved.status == ReminderStatus.FAILED
        assert saved.failure_reason == ReminderFailureReason.APPLICATION_NOT_FOUND

    @pytest.mark.asyncio
    async def test_failed_reminder_is_not_retried(self, scheduler, store, transport, clock):
        application = make_application()
        store.add_reminder(make_reminder(application))

        await scheduler.run_cycle()
        clock.advance(minutes=1)
        report = await scheduler.run_cycle()

        assert report.considered == 0
        assert transport.attempts == 0

    @pytest.mark.asyncio
    async def test_transient_error_keeps_pending_and_retries_next_cycle(self, store, store_scope, clock):
        transport = FakeTransport(fail_next=1)
        scheduler = ReminderScheduler(store_scope, transport, clock=clock)
        application = store.add_application(make_application())
        reminder = store.add_reminder(make_reminder(application))

        first = await scheduler.run_cycle()

        assert first.retried == 1
        saved = store.reminders[reminder.id]
        assert saved.status == ReminderStatus.PENDING
        assert saved.attempts == 1
        assert "connection refused" in saved.last_error
        assert saved.is_due(clock())

        clock.advance(minutes=1)
        second = await scheduler.run_cycle()

        assert second.sent == 1
        assert store.reminders[reminder.id].status == ReminderStatus.SENT
        assert transport.attempts == 2

    @pytest.mark.asyncio
    async def test_abandoned_after_max_attempts(self, store, store_scope, clock):
        transport = FakeTransport(fail_next=3)
        scheduler = ReminderScheduler(store_scope, transport, clock=clock)
        application = store.add_application(make_application())
        reminder = store.add_reminder(make_reminder(application, max_attempts=3))

        reports = []
        for _ in range(4):
            reports.append(await scheduler.run_cycle())
            clock.advance(minutes=1)

        assert [r.retried for r in reports[:2]] == [1, 1]
        assert reports[2].abandoned == 1
        assert reports[3].considered == 0
        saved = store.reminders[reminder.id]
        assert saved.status == ReminderStatus.ABANDONED
        assert saved.attempts == 3
        assert saved.failure_reason == ReminderFailureReason.MAX_ATTEMPTS_EXCEEDED
        assert transport.attempts == 3


class TestDueSelection:
    """Which reminders a cycle looks at"""

    @pytest.mark.asyncio
    async def test_future_reminders_are_untouched(self, scheduler, store, transport):
        application = store.add_application(
            make_application(deadline=datetime(2025, 6, 1, 10, 0, 2, tzinfo=timezone.utc))
        )
        reminder = store.add_reminder(make_reminder(application))

        report = await scheduler.run_cycle()

        assert report.considered == 0
        assert transport.attempts == 0
        assert store.reminders[reminder.id] == reminder

    @pytest.mark.asyncio
    async def test_empty_cycle_returns_empty_report(self, scheduler, clock):
        report = await scheduler.run_cycle()

        assert report.started_at == clock()
        assert (report.considered, report.sent, report.failed) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_batch_is_capped_and_rest_wait_for_next_cycle(self, scheduler, store, transport, clock):
        application = store.add_application(make_application())
        for minutes in range(7):
            store.add_reminder(make_reminder(application, lead_time=timedelta(hours=1, minutes=minutes)))

        first = await scheduler.run_cycle()

        assert first.considered == 5
        assert first.sent == 5
        still_pending = [r for r in store.reminders.values() if r.status == ReminderStatus.PENDING]
        assert len(still_pending) == 2

        clock.advance(minutes=1)
        second = await scheduler.run_cycle()

        assert second.sent == 2
        assert len(transport.sent) == 7

    @pytest.mark.asyncio
    async def test_most_overdue_processed_first(self, store, store_scope, transport, clock):
        scheduler = ReminderScheduler(store_scope, transport, clock=clock, batch_size=1)
        early = store.add_application(make_application("Early Inc"))
        late = store.add_application(make_application("Late Ltd"))
        store.add_reminder(make_reminder(late, lead_time=timedelta(hours=1)))
        store.add_reminder(make_reminder(early, lead_time=timedelta(hours=3)))

        await scheduler.run_cycle()

        assert "Early Inc" in transport.sent[0]["subject"]
        assert store.queries[0][1] == 1


class TestFailureIsolation:
    """Query and persist failures"""

    @pytest.mark.asyncio
    async def test_query_failure_propagates(self, scheduler, store, transport):
        store.query_error = RepositoryException("database unreachable")

        with pytest.raises(RepositoryException):
            await scheduler.run_cycle()

        assert transport.attempts == 0

    @pytest.mark.asyncio
    async def test_persist_failure_does_not_stop_batch(self, scheduler, store, transport):
        application = store.add_application(make_application())
        broken = store.add_reminder(make_reminder(application, lead_time=timedelta(hours=2)))
        healthy = store.add_reminder(make_reminder(application, lead_time=timedelta(hours=1)))
        store.failing_saves.add(broken.id)

        report = await scheduler.run_cycle()

        assert report.errors == 1
        assert report.sent == 1
        assert store.reminders[healthy.id].status == ReminderStatus.SENT
        assert store.reminders[broken.id].status == ReminderStatus.PENDING

    @pytest.mark.asyncio
    async def test_vanished_reminder_is_skipped(self, scheduler, store, store_scope, transport, clock):
        application = store.add_application(make_application())
        reminder = store.add_reminder(make_reminder(application))

        original_find = store.find_due_reminders

        async def find_then_delete(now, limit):
            due = await original_find(now, limit)
            store.reminders.pop(reminder.id)
            return due

        store.find_due_reminders = find_then_delete

        report = await scheduler.run_cycle()

        assert report.skipped == 1
        assert report.sent == 0


def test_batch_size_must_be_positive(store_scope, transport):
    with pytest.raises(ValueError):
        ReminderScheduler(store_scope, transport, batch_size=0)
