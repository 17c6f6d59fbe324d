"""
Notification service.
Decides, at most once per calendar day, whether to surface a reminder about
goals that are behind schedule or have gone quiet.
"""
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from goal_tracker.models import Goal, NotificationSettings
from goal_tracker.schemas import NotificationSettingsUpdate, ReminderResponse
from goal_tracker.repositories.settings_repository import NotificationSettingsRepository
from goal_tracker.services.goal_service import GoalService
from goal_tracker.services.progress_service import ProgressService
from goal_tracker.services.date_service import DateService
from goal_tracker.constants import (
    REMINDER_BEHIND_SCHEDULE,
    REMINDER_NO_RECENT_PROGRESS,
    REMINDER_TITLES_SHOWN
)

logger = logging.getLogger("goal_tracker.notifications")


def _describe_goals(goals: List[Goal]) -> str:
    """'A, B and 3 more' style listing"""
    names = ", ".join(goal.title for goal in goals[:REMINDER_TITLES_SHOWN])
    remaining = len(goals) - REMINDER_TITLES_SHOWN
    if remaining > 0:
        names += f" and {remaining} more"
    return names


class NotificationService:
    """Service for reminder settings and the daily reminder check"""

    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = NotificationSettingsRepository()
        self.goal_service = GoalService(db)

    def get_settings(self) -> NotificationSettings:
        return self.settings_repo.get(self.db)

    def update_settings(self, settings_update: NotificationSettingsUpdate) -> NotificationSettings:
        """Apply a partial settings update"""
        settings = self.get_settings()
        for key, value in settings_update.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(settings, key, value)
        return self.settings_repo.update(self.db, settings)

    def get_last_progress_date(self, goal_id: str, entries: List) -> Optional[datetime]:
        """Date of the most recent entry for a goal"""
        dates = [entry.date for entry in entries if entry.goal_id == goal_id]
        return max(dates) if dates else None

    def check_for_reminders(
        self,
        goals: Optional[List[Goal]] = None,
        now: Optional[datetime] = None
    ) -> Optional[ReminderResponse]:
        """
        Surface at most one reminder per calendar day.

        Goals behind schedule take precedence over goals without recent
        progress. Surfacing a reminder stamps last_notification_date so later
        checks on the same day are suppressed.

        Args:
            goals: Goals to inspect (defaults to all stored goals)
            now: Current time (defaults to now, UTC)

        Returns:
            The reminder to show, or None
        """
        settings = self.get_settings()
        if not settings.enabled:
            return None

        now = DateService.to_naive_utc(now) if now else DateService.now()
        today = now.date()
        if settings.last_notification_date == today:
            return None

        goals = goals if goals is not None else self.goal_service.get_all_goals()
        if not goals:
            return None

        entries = self.goal_service.get_all_progress()

        behind_schedule = [
            goal for goal in goals
            if ProgressService.is_behind_schedule(goal, entries, now)
        ]

        no_recent_progress = []
        for goal in goals:
            last_date = self.get_last_progress_date(goal.id, entries)
            if last_date is None or DateService.days_since(last_date, now) >= settings.reminder_days:
                no_recent_progress.append(goal)

        if behind_schedule:
            reminder = ReminderResponse(
                kind=REMINDER_BEHIND_SCHEDULE,
                title="Goals Need Attention",
                message=(
                    f"{_describe_goals(behind_schedule)} "
                    f"{'is' if len(behind_schedule) == 1 else 'are'} behind schedule. "
                    f"Log your progress to stay on track!"
                ),
                goal_ids=[goal.id for goal in behind_schedule],
                notification_date=today
            )
        elif no_recent_progress:
            reminder = ReminderResponse(
                kind=REMINDER_NO_RECENT_PROGRESS,
                title="Time to Log Progress",
                message=(
                    f"You haven't logged progress for {_describe_goals(no_recent_progress)} "
                    f"recently. Keep the momentum going!"
                ),
                goal_ids=[goal.id for goal in no_recent_progress],
                notification_date=today
            )
        else:
            return None

        settings.last_notification_date = today
        self.settings_repo.update(self.db, settings)

        logger.info(f"Reminder surfaced ({reminder.kind}) for {len(reminder.goal_ids)} goal(s)")
        return reminder
