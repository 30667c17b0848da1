"""
Run reminder batch cycles outside the API process

One cycle by default (for cron/serverless schedulers); --loop keeps
polling like the in-process worker.

    python scripts/run_reminder_cycle.py
    python scripts/run_reminder_cycle.py --loop --interval 60
"""
import argparse
import asyncio
import json
import os
import sys

# Add backend/src to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend", "src"))

from loguru import logger

from core.config import settings
from core.database import Database
from core.exceptions import ConfigurationException, RepositoryException
from core.logging_config import configure_logging
from application.services.reminder_scheduler import ReminderScheduler
from application.services.reminder_worker import ReminderWorker
from infrastructure.external.email_transport import build_email_transport
from infrastructure.persistence.repositories.reminder_store import reminder_store_scope


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send due application deadline reminders")
    parser.add_argument("--loop", action="store_true", help="keep running cycles until interrupted")
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.REMINDER_POLL_INTERVAL_SECONDS,
        help="seconds between cycles with --loop",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    database = Database.from_settings(settings)
    try:
        await database.init_models()
        scheduler = ReminderScheduler(
            reminder_store_scope(database),
            build_email_transport(settings),
            batch_size=settings.REMINDER_BATCH_SIZE,
            sender_name=settings.SMTP_FROM_NAME,
        )

        if args.loop:
            await ReminderWorker(scheduler, poll_interval=args.interval).start()
            return 0

        try:
            report = await scheduler.run_cycle()
        except RepositoryException as e:
            logger.error(f"Reminder cycle aborted: {e}")
            return 1

        print(json.dumps(report.to_dict()))
        return 0
    finally:
        await database.dispose()


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(settings)

    try:
        settings.validate_for_scheduler()
    except ConfigurationException as e:
        logger.error(str(e))
        return 2

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
