"""Run the scheduled notification jobs once.

Usage:
    python -m scripts.reminders [birthdays|anniversaries|upcoming-leave|cleanup|all]
        [--date YYYY-MM-DD] [--days-ahead N] [--days-old N]

Meant to be triggered daily by cron or a similar scheduler.
"""

import argparse
import logging
import sys
from datetime import date

from app.clock import local_today
from config.database import Database
from config.settings import Settings, settings as default_settings
from services.email_service import EmailService
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

JOBS = ["birthdays", "anniversaries", "upcoming-leave", "cleanup"]


def run_jobs(
    service: NotificationService,
    jobs: list[str],
    today: date,
    days_ahead: int = 1,
    days_old: int = 30,
) -> dict[str, int]:
    """Run the selected jobs and return how many items each one handled."""
    results: dict[str, int] = {}
    for job in jobs:
        if job == "birthdays":
            results[job] = service.send_birthday_reminders(today)
        elif job == "anniversaries":
            results[job] = service.send_work_anniversary_reminders(today)
        elif job == "upcoming-leave":
            results[job] = service.send_upcoming_leave_reminders(today, days_ahead)
        elif job == "cleanup":
            results[job] = service.cleanup_old_notifications(days_old)
    return results


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run scheduled notification jobs")
    parser.add_argument("job", nargs="?", choices=[*JOBS, "all"], default="all")
    parser.add_argument("--date", type=date.fromisoformat, help="reference date (default: today)")
    parser.add_argument("--days-ahead", type=int, default=1, help="leave reminder horizon in days")
    parser.add_argument("--days-old", type=int, default=30, help="age of read notifications to delete")
    args = parser.parse_args(argv)

    settings = settings or default_settings
    today = args.date or local_today(settings.timezone)
    jobs = JOBS if args.job == "all" else [args.job]

    database = Database(settings)
    try:
        with database.session() as db:
            service = NotificationService(db, EmailService(settings))
            results = run_jobs(service, jobs, today, args.days_ahead, args.days_old)
    finally:
        database.dispose()

    for job, count in results.items():
        logger.info("%s: %s", job, count)
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    sys.exit(main())
