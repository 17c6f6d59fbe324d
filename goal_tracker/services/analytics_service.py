"""
Analytics service.
Read-only aggregates over goals and progress entries: overall totals, weekly
patterns, recent activity, best performer, time distribution and
recommendations.
"""
from datetime import datetime
from typing import List, Optional

from goal_tracker.schemas import (
    AnalyticsResponse, OverallStats, DayOfWeekStats, RecentEntry,
    BestPerformingGoal, GoalTimeShare, BehindGoal, Recommendations,
    ProgressEntryResponse
)
from goal_tracker.services.date_service import DateService
from goal_tracker.services.progress_service import ProgressService, round_half_up
from goal_tracker.constants import DAY_NAMES, DEFAULT_RECENT_ENTRIES_LIMIT


def _percentage_of(part: float, whole: float) -> int:
    """Whole percentage of part in whole, 0 when whole is zero"""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


class AnalyticsService:
    """Service for derived, presentation-only statistics"""

    def __init__(self, goals: List, entries: List, as_of: Optional[datetime] = None):
        self.goals = list(goals)
        self.entries = list(entries)
        self.as_of = DateService.to_naive_utc(as_of) if as_of else DateService.now()

        # Derived once per report; nothing here outlives the request
        self._actual = {
            goal.id: ProgressService.calculate_actual_progress(goal.id, self.entries)
            for goal in self.goals
        }
        self._planned = {
            goal.id: ProgressService.calculate_planned_progress(goal, self.as_of)
            for goal in self.goals
        }

    def _is_on_track(self, goal) -> bool:
        return self._actual[goal.id] >= self._planned[goal.id]

    def get_overall_stats(self) -> OverallStats:
        """Totals and percentages across all goals"""
        total_required = sum(goal.total_required_time for goal in self.goals)
        total_completed = sum(self._actual[goal.id] for goal in self.goals)
        total_planned = sum(self._planned[goal.id] for goal in self.goals)

        on_track = [goal for goal in self.goals if self._is_on_track(goal)]

        return OverallStats(
            total_required_hours=total_required,
            total_completed_hours=total_completed,
            total_planned_hours=total_planned,
            completion_percentage=_percentage_of(total_completed, total_required),
            planned_percentage=_percentage_of(total_planned, total_required),
            on_track_count=len(on_track),
            behind_count=len(self.goals) - len(on_track)
        )

    def _goal_entries(self) -> List[tuple]:
        """Entries paired with their goal, grouped goal by goal"""
        paired = []
        for goal in self.goals:
            for entry in self.entries:
                if entry.goal_id == goal.id:
                    paired.append((entry, goal))
        return paired

    def get_weekly_pattern(self) -> List[DayOfWeekStats]:
        """
        Hours and entry counts bucketed by day of week, Sunday first.

        Only entries belonging to a known goal are counted.
        """
        buckets = [DayOfWeekStats(day=DateService.day_name(index)) for index in range(len(DAY_NAMES))]
        for entry, _ in self._goal_entries():
            bucket = buckets[DateService.day_of_week_index(entry.date)]
            bucket.hours += entry.time_spent
            bucket.count += 1
        return buckets

    def get_most_productive_day(self, pattern: Optional[List[DayOfWeekStats]] = None) -> Optional[DayOfWeekStats]:
        """Day with the most hours; earlier days win ties; None when nothing is logged"""
        pattern = pattern if pattern is not None else self.get_weekly_pattern()
        best = sorted(pattern, key=lambda day: day.hours, reverse=True)[0]
        return best if best.hours > 0 else None

    def get_recent_entries(self, limit: int = DEFAULT_RECENT_ENTRIES_LIMIT) -> List[RecentEntry]:
        """Most recent entries across all goals, newest first"""
        paired = sorted(self._goal_entries(), key=lambda pair: pair[0].date, reverse=True)
        return [
            RecentEntry(
                entry=ProgressEntryResponse.model_validate(entry),
                goal_title=goal.title
            )
            for entry, goal in paired[:limit]
        ]

    def get_best_performing_goal(self) -> Optional[BestPerformingGoal]:
        """Goal with the highest actual/planned ratio (ratio 0 when nothing is planned yet)"""
        if not self.goals:
            return None

        ratios = []
        for goal in self.goals:
            planned = self._planned[goal.id]
            ratio = self._actual[goal.id] / planned if planned > 0 else 0.0
            ratios.append((goal, ratio))

        goal, ratio = sorted(ratios, key=lambda item: item[1], reverse=True)[0]
        return BestPerformingGoal(goal_id=goal.id, title=goal.title, ratio=ratio)

    def get_time_distribution(self) -> List[GoalTimeShare]:
        """Each goal's share of all completed hours"""
        total_completed = sum(self._actual[goal.id] for goal in self.goals)
        return [
            GoalTimeShare(
                goal_id=goal.id,
                title=goal.title,
                hours=self._actual[goal.id],
                percentage=_percentage_of(self._actual[goal.id], total_completed)
            )
            for goal in self.goals
        ]

    def get_recommendations(self, most_productive_day: Optional[DayOfWeekStats] = None) -> Recommendations:
        """Suggestions derived from schedule status and logging habits"""
        behind = [
            BehindGoal(
                goal_id=goal.id,
                title=goal.title,
                planned_hours=self._planned[goal.id],
                actual_hours=self._actual[goal.id]
            )
            for goal in self.goals
            if not self._is_on_track(goal)
        ]
        on_track_count = len(self.goals) - len(behind)
        missing_allotments = any(
            not goal.daily_time_allotment and not goal.weekly_time_allotment
            for goal in self.goals
        )

        messages = []
        for item in behind:
            messages.append(
                f"{item.title} - {item.planned_hours:.1f} hours planned vs "
                f"{item.actual_hours:.1f} hours completed"
            )
        if most_productive_day:
            messages.append(
                f"You're most productive on {most_productive_day.day}s. Consider scheduling "
                f"more work on this day to maximize your efficiency."
            )
        if on_track_count > 0:
            messages.append(
                f"You're doing great with {on_track_count} goal(s)! Consider applying similar "
                f"strategies to goals where you're falling behind."
            )
        if missing_allotments:
            messages.append(
                "Some of your goals don't have daily or weekly time allotments. Setting these "
                "can help you stay on track with regular progress."
            )

        return Recommendations(
            behind_goals=behind,
            most_productive_day=most_productive_day.day if most_productive_day else None,
            on_track_count=on_track_count,
            missing_allotments=missing_allotments,
            messages=messages
        )

    def build_report(self, recent_limit: int = DEFAULT_RECENT_ENTRIES_LIMIT) -> AnalyticsResponse:
        """Full analytics report"""
        pattern = self.get_weekly_pattern()
        most_productive = self.get_most_productive_day(pattern)

        return AnalyticsResponse(
            has_goals=bool(self.goals),
            overall=self.get_overall_stats(),
            weekly_pattern=pattern,
            most_productive_day=most_productive,
            recent_entries=self.get_recent_entries(recent_limit),
            best_performing_goal=self.get_best_performing_goal(),
            time_distribution=self.get_time_distribution(),
            recommendations=self.get_recommendations(most_productive)
        )
