"""
Reminder Worker - Background loop driving the reminder scheduler
Runs one batch cycle every poll interval until stopped
"""
import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger

from .reminder_scheduler import BatchReport, ReminderScheduler

Sleep = Callable[[float], Awaitable[None]]


class ReminderWorker:
    """Background worker for due reminders"""

    def __init__(
        self,
        scheduler: ReminderScheduler,
        poll_interval: float = 60,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize reminder worker

        Args:
            scheduler: Batch cycle to run
            poll_interval: Seconds between cycles
            sleep: Awaitable used between cycles (replaced in tests)
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.scheduler = scheduler
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.running = False
        self.cycles = 0

    async def start(self):
        """Start the background worker; returns once stopped"""
        self.running = True
        logger.info(f"Reminder worker started (poll_interval={self.poll_interval}s)")

        try:
            while self.running:
                await self._tick()
                if not self.running:
                    break
                await self._sleep(self.poll_interval)
        finally:
            self.running = False
            logger.info("Reminder worker stopped")

    async def stop(self):
        """Stop the background worker after the current cycle"""
        logger.info("Stopping reminder worker...")
        self.running = False

    async def _tick(self) -> Optional[BatchReport]:
        """Run one cycle; failures are logged and never end the loop"""
        self.cycles += 1
        try:
            return await self.scheduler.run_cycle()
        except Exception as e:
            logger.error(f"Reminder cycle {self.cycles} failed: {e}")
            return None
