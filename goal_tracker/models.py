from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Date
from datetime import datetime, timezone
from uuid import uuid4

from goal_tracker.database import Base
from goal_tracker.constants import DEFAULT_REMINDER_DAYS, DEFAULT_REMINDER_TIME


def generate_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    """Current time as naive UTC (the storage convention for every datetime column)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Goal(Base):
    __tablename__ = "goals"

    # Surrogate key; the public id is not unique because merge imports append duplicates
    pk = Column(Integer, primary_key=True, index=True)
    id = Column(String, index=True, nullable=False, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    total_required_time = Column(Float, nullable=False)  # Hours
    deadline = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    # Optional breakdown of required effort (hours)
    daily_time_allotment = Column(Float, nullable=True)
    weekly_time_allotment = Column(Float, nullable=True)
    monthly_time_allotment = Column(Float, nullable=True)


class ProgressEntry(Base):
    __tablename__ = "progress_entries"

    pk = Column(Integer, primary_key=True, index=True)
    id = Column(String, index=True, nullable=False, default=generate_id)
    goal_id = Column(String, index=True, nullable=False)  # References Goal.id, not re-validated
    time_spent = Column(Float, nullable=False)  # Hours
    date = Column(DateTime, nullable=False)
    notes = Column(String, nullable=True)


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, index=True)
    enabled = Column(Boolean, default=True)
    reminder_days = Column(Integer, default=DEFAULT_REMINDER_DAYS)  # Days of inactivity before a reminder
    reminder_time = Column(String, default=DEFAULT_REMINDER_TIME)  # HH:MM, when the scheduler checks
    last_notification_date = Column(Date, nullable=True)  # Enforces one reminder per day
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
