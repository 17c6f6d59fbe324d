"""
Reminder settings repository.
The reminder configuration is a single row: whether reminders are on, how many
idle days trigger one, the daily time after which the check runs, and the date
a reminder was last surfaced.
"""
from sqlalchemy.orm import Session
from goal_tracker.models import NotificationSettings


class NotificationSettingsRepository:
    """Access to the single reminder settings row"""

    @staticmethod
    def get(db: Session) -> NotificationSettings:
        """
        Load the reminder settings, creating the row on first use.

        A fresh row is enabled, with a two day inactivity window and a
        09:00 check time.
        """
        settings = db.query(NotificationSettings).first()
        if not settings:
            settings = NotificationSettings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: NotificationSettings) -> NotificationSettings:
        """
        Persist changes made to the settings row.

        Used both for user edits and for stamping last_notification_date
        after a reminder is shown.
        """
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def delete_all(db: Session) -> int:
        """Drop the settings row so the next read recreates defaults (caller commits)"""
        return db.query(NotificationSettings).delete()
