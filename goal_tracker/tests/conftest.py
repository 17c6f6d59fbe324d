"""
Shared fixtures: an in-memory database, a fixed clock and record factories.
"""
import os
import tempfile

os.environ.setdefault("GOAL_TRACKER_DATABASE_URL", "sqlite://")
os.environ.setdefault("GOAL_TRACKER_LOG_DIR", tempfile.gettempdir())
os.environ.setdefault("GOAL_TRACKER_SCHEDULER_ENABLED", "false")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from goal_tracker.database import Base
from goal_tracker.models import Goal, ProgressEntry, NotificationSettings, generate_id


@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def day_zero():
    """Fixed creation time used as 'day 0' in scenarios"""
    return datetime(2026, 3, 1, 0, 0, 0)


@pytest.fixture
def now(day_zero):
    return day_zero + timedelta(days=5)


@pytest.fixture
def default_settings(db_session):
    settings = NotificationSettings()
    db_session.add(settings)
    db_session.commit()
    db_session.refresh(settings)
    return settings


def build_goal(
    title: str = "Learn piano",
    total_required_time: float = 100.0,
    created_at: datetime = datetime(2026, 3, 1),
    deadline_days: float = 10,
    **kwargs
) -> Goal:
    """Unsaved goal; deadline is created_at + deadline_days"""
    return Goal(
        id=kwargs.pop("id", generate_id()),
        title=title,
        total_required_time=total_required_time,
        created_at=created_at,
        updated_at=created_at,
        deadline=created_at + timedelta(days=deadline_days),
        **kwargs
    )


def build_entry(goal_id: str, time_spent: float, date: datetime, **kwargs) -> ProgressEntry:
    """Unsaved progress entry"""
    return ProgressEntry(
        id=kwargs.pop("id", generate_id()),
        goal_id=goal_id,
        time_spent=time_spent,
        date=date,
        **kwargs
    )


def create_goal(db, **kwargs) -> Goal:
    goal = build_goal(**kwargs)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def create_entry(db, goal_id: str, time_spent: float, date: datetime, **kwargs) -> ProgressEntry:
    entry = build_entry(goal_id, time_spent, date, **kwargs)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry
