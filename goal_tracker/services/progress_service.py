"""
Progress accounting service.
Computes planned progress, actual progress, delay and status for a goal.

Every function is pure: it reads only the goal and entries it is given and
never touches the database, so derived metrics are recomputed on every read.
"""
import math
from datetime import datetime
from typing import Iterable, Optional

from goal_tracker.schemas import GoalProgress
from goal_tracker.services.date_service import DateService
from goal_tracker.constants import (
    STATUS_ON_TRACK,
    STATUS_SLIGHTLY_BEHIND,
    STATUS_SIGNIFICANTLY_BEHIND,
    SLIGHTLY_BEHIND_THRESHOLD
)


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity (Python's round() uses banker's rounding)"""
    return int(math.floor(value + 0.5))


class ProgressService:
    """Service for goal progress accounting"""

    @staticmethod
    def calculate_actual_progress(goal_id: str, entries: Iterable) -> float:
        """
        Sum of logged hours for a goal.

        Args:
            goal_id: Goal whose entries are summed
            entries: Progress entries (any goal; non-matching ones are ignored)

        Returns:
            Total hours spent, 0 when nothing is logged
        """
        return sum(
            (entry.time_spent for entry in entries if entry.goal_id == goal_id),
            0.0
        )

    @staticmethod
    def calculate_planned_progress(goal, as_of: Optional[datetime] = None) -> float:
        """
        Expected cumulative hours at as_of under linear pacing.

        Pacing runs from created_at to deadline in whole days (partial days
        round up). The fraction is clamped to [0, 1] so the result never
        extrapolates before creation or past the deadline.

        A goal whose deadline is at or before its creation time is fully due
        immediately, so the whole required time is planned.

        Args:
            goal: Goal with created_at, deadline and total_required_time
            as_of: Point in time to evaluate (defaults to now, UTC)

        Returns:
            Planned hours
        """
        as_of = DateService.to_naive_utc(as_of) if as_of else DateService.now()

        total_days = DateService.days_between_ceil(goal.created_at, goal.deadline)
        if total_days <= 0:
            return float(goal.total_required_time)

        days_passed = DateService.days_between_ceil(goal.created_at, as_of)
        fraction = min(max(days_passed / total_days, 0.0), 1.0)

        return goal.total_required_time * fraction

    @staticmethod
    def calculate_delay(goal, entries: Iterable, as_of: Optional[datetime] = None) -> float:
        """Shortfall of actual below planned hours, never negative"""
        planned = ProgressService.calculate_planned_progress(goal, as_of)
        actual = ProgressService.calculate_actual_progress(goal.id, entries)
        return max(0.0, planned - actual)

    @staticmethod
    def is_behind_schedule(goal, entries: Iterable, as_of: Optional[datetime] = None) -> bool:
        """Raw-hours comparison: actual below planned"""
        actual = ProgressService.calculate_actual_progress(goal.id, entries)
        return actual < ProgressService.calculate_planned_progress(goal, as_of)

    @staticmethod
    def calculate_percentage(hours: float, total_required_time: float) -> int:
        """
        Share of total_required_time as a whole percentage, capped at 100.
        Returns 0 when total_required_time is not positive.
        """
        if not total_required_time or total_required_time <= 0:
            return 0
        return min(round_half_up(hours / total_required_time * 100), 100)

    @staticmethod
    def classify_status(actual_percentage: int, planned_percentage: int) -> str:
        """
        Classify a goal by the gap between planned and actual percentages.

        Returns:
            on_track when actual >= planned, slightly_behind when the gap is
            under the threshold, significantly_behind otherwise
        """
        if actual_percentage >= planned_percentage:
            return STATUS_ON_TRACK
        if 0 < planned_percentage - actual_percentage < SLIGHTLY_BEHIND_THRESHOLD:
            return STATUS_SLIGHTLY_BEHIND
        return STATUS_SIGNIFICANTLY_BEHIND

    @staticmethod
    def summarize(goal, entries: Iterable, as_of: Optional[datetime] = None) -> GoalProgress:
        """Bundle every derived metric for one goal"""
        entries = list(entries)
        actual = ProgressService.calculate_actual_progress(goal.id, entries)
        planned = ProgressService.calculate_planned_progress(goal, as_of)

        actual_percentage = ProgressService.calculate_percentage(actual, goal.total_required_time)
        planned_percentage = ProgressService.calculate_percentage(planned, goal.total_required_time)

        return GoalProgress(
            actual_hours=actual,
            planned_hours=planned,
            delay_hours=max(0.0, planned - actual),
            actual_percentage=actual_percentage,
            planned_percentage=planned_percentage,
            status=ProgressService.classify_status(actual_percentage, planned_percentage)
        )
