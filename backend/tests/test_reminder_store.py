"""
Tests for the SQLAlchemy reminder store driving a real scheduler cycle
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from application.services.reminder_scheduler import ReminderScheduler
from domain.entities import CompanyApplication
from domain.value_objects import ReminderFailureReason, ReminderStatus
from infrastructure.persistence.repositories.company_application import (
    SQLAlchemyCompanyApplicationRepository,
)
from infrastructure.persistence.repositories.reminder_store import (
    SQLAlchemyReminderStore,
    reminder_store_scope,
)
from infrastructure.persistence.repositories.scheduled_reminder import (
    SQLAlchemyScheduledReminderRepository,
)
from infrastructure.services.application_tracking_service import ApplicationTrackingService

from conftest import FakeTransport, make_application, make_reminder


class HeldTransport(FakeTransport):
    """Blocks every send until released, then succeeds or fails"""

    def __init__(self, fail: bool = False):
        super().__init__(fail_next=1 if fail else 0)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def send(self, to: str, subject: str, body: str) -> None:
        self.entered.set()
        await self.release.wait()
        await super().send(to, subject, body)


async def seed(database, *items):
    async with database.session() as session:
        for item in items:
            if isinstance(item, CompanyApplication):
                await SQLAlchemyCompanyApplicationRepository(session).create(item)
            else:
                await SQLAlchemyScheduledReminderRepository(session).create(item)


async def load(database, reminder_id):
    async with database.session() as session:
        return await SQLAlchemyScheduledReminderRepository(session).get_by_id(reminder_id)


class TestReminderStore:
    """Test store semantics"""

    @pytest.mark.asyncio
    async def test_save_reminder_commits(self, database):
        application = make_application()
        reminder = make_reminder(application)
        await seed(database, application, reminder)

        async with database.session() as session:
            store = SQLAlchemyReminderStore(session)
            assert await store.save_reminder(reminder.mark_sent(reminder.send_time))

        assert (await load(database, reminder.id)).status == ReminderStatus.SENT

    @pytest.mark.asyncio
    async def test_save_vanished_reminder_returns_false(self, database):
        async with database.session() as session:
            store = SQLAlchemyReminderStore(session)
            assert await store.save_reminder(make_reminder(make_application())) is False


class TestSchedulerOnDatabase:
    """Full cycle against SQLite"""

    @pytest.mark.asyncio
    async def test_cycle_sends_fails_and_retries(self, database, clock):
        live = make_application("Acme Corp")
        gone = make_application("Gone Inc")
        to_send = make_reminder(live)
        orphan = make_reminder(gone)
        future = make_reminder(live, lead_time=timedelta(0))
        await seed(database, live, to_send, orphan, future)

        transport = FakeTransport()
        scheduler = ReminderScheduler(reminder_store_scope(database), transport, clock=clock)

        report = await scheduler.run_cycle()

        assert report.considered == 2
        assert report.sent == 1
        assert report.failed == 1
        assert transport.sent[0]["to"] == "candidate@example.com"
        assert (await load(database, to_send.id)).status == ReminderStatus.SENT
        failed = await load(database, orphan.id)
        assert failed.status == ReminderStatus.FAILED
        assert failed.failure_reason == ReminderFailureReason.APPLICATION_NOT_FOUND
        assert (await load(database, future.id)).status == ReminderStatus.PENDING

    @pytest.mark.asyncio
    async def test_transport_failure_persists_attempt(self, database, clock):
        application = make_application()
        reminder = make_reminder(application)
        await seed(database, application, reminder)

        scheduler = ReminderScheduler(reminder_store_scope(database), FakeTransport(fail_next=1), clock=clock)
        report = await scheduler.run_cycle()

        assert report.retried == 1
        saved = await load(database, reminder.id)
        assert saved.status == ReminderStatus.PENDING
        assert saved.attempts == 1


class TestConcurrentChanges:
    """Outcomes never overwrite work done elsewhere while a send is in flight"""

    @pytest.mark.asyncio
    async def test_overlapping_cycle_cannot_reopen_sent_reminder(self, database, clock):
        application = make_application()
        reminder = make_reminder(application)
        await seed(database, application, reminder)
        slow_transport = HeldTransport(fail=True)
        fast_transport = FakeTransport()
        slow = ReminderScheduler(reminder_store_scope(database), slow_transport, clock=clock)
        fast = ReminderScheduler(reminder_store_scope(database), fast_transport, clock=clock)

        slow_cycle = asyncio.create_task(slow.run_cycle())
        await slow_transport.entered.wait()
        fast_report = await fast.run_cycle()
        slow_transport.release.set()
        slow_report = await slow_cycle

        assert fast_report.sent == 1
        assert slow_report.skipped == 1
        assert slow_report.retried == 0
        saved = await load(database, reminder.id)
        assert saved.status == ReminderStatus.SENT
        assert saved.attempts == 0

        assert (await fast.run_cycle()).considered == 0
        assert len(fast_transport.sent) == 1

    @pytest.mark.asyncio
    async def test_deadline_edit_during_send_keeps_new_send_time(self, database, clock):
        application = make_application()
        reminder = make_reminder(application)
        await seed(database, application, reminder)
        transport = HeldTransport(fail=True)
        scheduler = ReminderScheduler(reminder_store_scope(database), transport, clock=clock)
        new_deadline = datetime(2025, 6, 10, 10, 0, tzinfo=timezone.utc)

        cycle = asyncio.create_task(scheduler.run_cycle())
        await transport.entered.wait()
        async with database.session() as session:
            service = ApplicationTrackingService(
                SQLAlchemyCompanyApplicationRepository(session),
                SQLAlchemyScheduledReminderRepository(session),
                session,
                clock=clock,
            )
            await service.update_application(application.owner_id, application.id, {"deadline": new_deadline})
        transport.release.set()
        report = await cycle

        assert report.skipped == 1
        saved = await load(database, reminder.id)
        assert saved.status == ReminderStatus.PENDING
        assert saved.send_time == new_deadline - timedelta(hours=1)
        assert saved.attempts == 0

    @pytest.mark.asyncio
    async def test_deadline_edit_leaves_sent_reminder_sent(self, database, clock):
        application = make_application()
        reminder = make_reminder(application)
        await seed(database, application, reminder)
        await ReminderScheduler(reminder_store_scope(database), FakeTransport(), clock=clock).run_cycle()

        async with database.session() as session:
            repo = SQLAlchemyScheduledReminderRepository(session)
            assert await repo.save(reminder.reschedule(reminder.send_time + timedelta(days=1), clock())) is False

        saved = await load(database, reminder.id)
        assert saved.status == ReminderStatus.SENT
        assert saved.send_time == reminder.send_time
