"""
Application constants and environment-driven configuration.
"""
import os

# Database
DATABASE_URL = os.getenv("GOAL_TRACKER_DATABASE_URL", "sqlite:///./goal_tracker.db")

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/goal-tracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# CORS
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "GOAL_TRACKER_CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]

# Scheduler
SCHEDULER_ENABLED = os.getenv("GOAL_TRACKER_SCHEDULER_ENABLED", "true").lower() in ("1", "true", "yes")

# Progress status values
STATUS_ON_TRACK = "on_track"
STATUS_SLIGHTLY_BEHIND = "slightly_behind"
STATUS_SIGNIFICANTLY_BEHIND = "significantly_behind"

# Percentage-point gap below which a goal is only slightly behind
SLIGHTLY_BEHIND_THRESHOLD = 10

# Notifications
DEFAULT_REMINDER_DAYS = 2
DEFAULT_REMINDER_TIME = "09:00"
REMINDER_TITLES_SHOWN = 2

REMINDER_BEHIND_SCHEDULE = "behind_schedule"
REMINDER_NO_RECENT_PROGRESS = "no_recent_progress"

# Analytics
DEFAULT_RECENT_ENTRIES_LIMIT = 7
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Import/Export
EXPORT_VERSION = "1.0.0"
EXPORT_FILENAME_PREFIX = "goal-tracker-backup"

SECONDS_PER_DAY = 60 * 60 * 24
