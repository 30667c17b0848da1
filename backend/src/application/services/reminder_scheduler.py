"""
Reminder Scheduler
One batch cycle: find due reminders, send them, record the outcome
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import AsyncContextManager, Callable

from loguru import logger

from core.clock import Clock, utc_now
from domain.entities import CompanyApplication, ScheduledReminder
from domain.value_objects import ReminderFailureReason, ReminderStatus
from application.repositories.interfaces import IReminderStore
from application.services.notifications import IEmailTransport, build_reminder_message

StoreScope = Callable[[], AsyncContextManager[IReminderStore]]

DEFAULT_BATCH_SIZE = 5


@dataclass
class BatchReport:
    """Counters of one batch cycle"""

    started_at: datetime
    considered: int = 0
    sent: int = 0
    failed: int = 0
    retried: int = 0
    abandoned: int = 0
    skipped: int = 0
    errors: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        return data


class ReminderScheduler:
    """
    Scan-and-send batch cycle

    Due reminders (pending, send_time <= now) are processed sequentially,
    most overdue first, at most ``batch_size`` per cycle. Outcomes:

    - application missing: FAILED, never retried
    - transport error: attempt counted, stays PENDING until max attempts,
      then ABANDONED
    - delivered: SENT

    A failed query aborts the cycle and propagates. A failed save only
    affects its own reminder. An outcome for a reminder that another cycle
    finished, or that was rescheduled mid-send, is dropped as skipped.
    Delivery is at-least-once: a crash between send and save re-sends on
    the next cycle.
    """

    def __init__(
        self,
        store_scope: StoreScope,
        transport: IEmailTransport,
        clock: Clock = utc_now,
        batch_size: int = DEFAULT_BATCH_SIZE,
        sender_name: str = "TrackerPro",
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store_scope = store_scope
        self.transport = transport
        self.clock = clock
        self.batch_size = batch_size
        self.sender_name = sender_name

    async def run_cycle(self) -> BatchReport:
        """Execute one batch cycle and report what happened"""
        now = self.clock()
        report = BatchReport(started_at=now)

        async with self.store_scope() as store:
            reminders = await store.find_due_reminders(now, self.batch_size)
            if not reminders:
                logger.debug(f"No due reminders at {now.isoformat()}")
                return report

            report.considered = len(reminders)
            logger.info(f"Processing {len(reminders)} due reminder(s)")

            for reminder in reminders:
                await self._process(store, reminder, now, report)

        logger.info(
            f"Reminder cycle done: sent={report.sent} retried={report.retried} "
            f"failed={report.failed} abandoned={report.abandoned} "
            f"skipped={report.skipped} errors={report.errors}"
        )
        return report

    async def _process(
        self,
        store: IReminderStore,
        reminder: ScheduledReminder,
        now: datetime,
        report: BatchReport,
    ) -> None:
        try:
            application = await store.find_application_by_id(reminder.application_id)
        except Exception as e:
            logger.error(f"Could not resolve application for reminder {reminder.id}: {e}")
            report.errors += 1
            return

        if application is None:
            logger.warning(
                f"Reminder {reminder.id}: application {reminder.application_id} not found, marking failed"
            )
            updated = reminder.mark_failed(ReminderFailureReason.APPLICATION_NOT_FOUND, now)
        else:
            updated = await self._deliver(reminder, application, now)

        await self._persist(store, updated, report)

    async def _deliver(
        self,
        reminder: ScheduledReminder,
        application: CompanyApplication,
        now: datetime,
    ) -> ScheduledReminder:
        recipient = str(reminder.recipient)
        message = build_reminder_message(
            application.company,
            application.deadline,
            role=application.role,
            sender_name=self.sender_name,
        )
        try:
            await self.transport.send(recipient, message.subject, message.body)
        except Exception as e:
            updated = reminder.record_failed_attempt(str(e), now)
            logger.warning(
                f"Reminder {reminder.id} to {recipient} failed "
                f"(attempt {updated.attempts}/{updated.max_attempts}): {e}"
            )
            return updated

        logger.info(f"Reminder {reminder.id} sent to {recipient} for {application.company}")
        return reminder.mark_sent(now)

    @staticmethod
    async def _persist(store: IReminderStore, reminder: ScheduledReminder, report: BatchReport) -> None:
        try:
            saved = await store.save_reminder(reminder)
        except Exception as e:
            logger.error(f"Failed to save reminder {reminder.id}: {e}")
            report.errors += 1
            return

        if not saved:
            logger.warning(f"Reminder {reminder.id} was deleted or changed elsewhere; outcome dropped")
            report.skipped += 1
            return

        if reminder.status == ReminderStatus.SENT:
            report.sent += 1
        elif reminder.status == ReminderStatus.FAILED:
            report.failed += 1
        elif reminder.status == ReminderStatus.ABANDONED:
            report.abandoned += 1
        else:
            report.retried += 1
