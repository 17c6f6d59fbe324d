"""
Date calculation and manipulation service.
Handles the UTC storage convention, whole-day arithmetic and HH:MM parsing.
"""
import math
from datetime import datetime, date, timezone
from typing import Optional

from goal_tracker.constants import DAY_NAMES, SECONDS_PER_DAY
from goal_tracker.exceptions import InvalidTimeFormatException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def now() -> datetime:
        """Current time as naive UTC"""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def today() -> date:
        return DateService.now().date()

    @staticmethod
    def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
        """
        Convert a datetime to naive UTC.

        Timezone-aware values are shifted to UTC first; naive values are
        assumed to already be UTC and returned unchanged.

        Args:
            value: Datetime to convert (may be None)

        Returns:
            Naive UTC datetime, or None
        """
        if value is None:
            return None
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @staticmethod
    def days_between_ceil(start: datetime, end: datetime) -> int:
        """
        Whole days from start to end, rounded up.

        A partial day counts as a full day; a negative span yields a
        non-positive result.
        """
        start = DateService.to_naive_utc(start)
        end = DateService.to_naive_utc(end)
        return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)

    @staticmethod
    def days_since(past: datetime, now: Optional[datetime] = None) -> int:
        """Absolute number of days between past and now, rounded up"""
        now = DateService.to_naive_utc(now or DateService.now())
        elapsed = abs((now - DateService.to_naive_utc(past)).total_seconds())
        return math.ceil(elapsed / SECONDS_PER_DAY)

    @staticmethod
    def day_of_week_index(value: datetime) -> int:
        """Day of week with Sunday = 0 through Saturday = 6"""
        return (value.weekday() + 1) % 7

    @staticmethod
    def day_name(index: int) -> str:
        return DAY_NAMES[index]

    @staticmethod
    def parse_time(time_str: str) -> tuple[int, int]:
        """
        Parse time string into hour and minute.

        Args:
            time_str: Time string in "HH:MM" format

        Returns:
            Tuple of (hour, minute)

        Raises:
            InvalidTimeFormatException: If time string is invalid
        """
        try:
            parts = time_str.split(":")
            hour = int(parts[0])
            minute = int(parts[1])
        except (ValueError, IndexError, AttributeError):
            raise InvalidTimeFormatException(str(time_str))

        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise InvalidTimeFormatException(time_str)
        return hour, minute

    @staticmethod
    def has_time_passed(time_str: Optional[str], now: datetime) -> bool:
        """True once the wall-clock time of now has reached time_str (None means midnight)"""
        hour, minute = DateService.parse_time(time_str or "00:00")
        return (now.hour, now.minute) >= (hour, minute)
