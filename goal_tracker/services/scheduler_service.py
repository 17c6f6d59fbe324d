"""
Background scheduler for goal reminders.
Checks every minute whether the configured reminder time has passed and, if
so, runs the once-per-day reminder check.
"""

import logging
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from goal_tracker.database import SessionLocal
from goal_tracker.services.date_service import DateService
from goal_tracker.services.notification_service import NotificationService

logger = logging.getLogger("goal_tracker.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


async def run_reminder_check(now: datetime = None):
    """Job: surface the daily reminder once reminder_time has passed"""
    db = SessionLocal()
    try:
        service = NotificationService(db)
        settings = service.get_settings()
        if not settings.enabled:
            return

        now = now or DateService.now()
        if not DateService.has_time_passed(settings.reminder_time, now):
            return

        if settings.last_notification_date == now.date():
            return

        reminder = service.check_for_reminders(now=now)
        if reminder:
            logger.info(f"[REMINDER] {reminder.title}: {reminder.message}")

    except Exception as e:
        logger.error(f"Scheduler Error (Reminders): {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if not scheduler.running:
        trigger = CronTrigger(minute='*')

        scheduler.add_job(
            run_reminder_check,
            trigger,
            id='reminder_check',
            replace_existing=True
        )

        scheduler.start()
        logger.info(">>> APScheduler STARTED <<<")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("APScheduler stopped")
