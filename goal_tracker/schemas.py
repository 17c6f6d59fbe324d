from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, date, timezone
from typing import List, Optional


# Goal schemas
class GoalBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    total_required_time: float = Field(..., gt=0, allow_inf_nan=False)  # Hours
    deadline: datetime

    # Optional breakdown of required effort (hours)
    daily_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    weekly_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    monthly_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class GoalCreate(GoalBase):
    pass


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    total_required_time: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    deadline: Optional[datetime] = None
    daily_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    weekly_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    monthly_time_allotment: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class GoalResponse(GoalBase):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Derived progress (never persisted)
class GoalProgress(BaseModel):
    actual_hours: float
    planned_hours: float
    delay_hours: float
    actual_percentage: int
    planned_percentage: int
    status: str


class GoalWithProgressResponse(GoalResponse):
    progress: GoalProgress


# Progress entry schemas
class ProgressEntryBase(BaseModel):
    goal_id: str = Field(..., min_length=1)
    time_spent: float = Field(..., gt=0, allow_inf_nan=False)  # Hours
    date: datetime
    notes: Optional[str] = None


class ProgressEntryCreate(ProgressEntryBase):
    pass


class ProgressEntryResponse(ProgressEntryBase):
    id: str

    class Config:
        from_attributes = True


class GoalDetailResponse(GoalWithProgressResponse):
    entries: List[ProgressEntryResponse] = []


# Notification settings schemas
class NotificationSettingsBase(BaseModel):
    enabled: bool = Field(default=True)
    reminder_days: int = Field(default=2, ge=1, le=30)
    reminder_time: str = Field(default="09:00", pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


class NotificationSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    reminder_days: Optional[int] = Field(None, ge=1, le=30)
    reminder_time: Optional[str] = Field(None, pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


class NotificationSettingsResponse(NotificationSettingsBase):
    last_notification_date: Optional[date] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReminderResponse(BaseModel):
    kind: str  # behind_schedule or no_recent_progress
    title: str
    message: str
    goal_ids: List[str]
    notification_date: date


# Analytics schemas
class OverallStats(BaseModel):
    total_required_hours: float
    total_completed_hours: float
    total_planned_hours: float
    completion_percentage: int
    planned_percentage: int
    on_track_count: int
    behind_count: int


class DayOfWeekStats(BaseModel):
    day: str
    hours: float = 0.0
    count: int = 0


class RecentEntry(BaseModel):
    entry: ProgressEntryResponse
    goal_title: str


class BestPerformingGoal(BaseModel):
    goal_id: str
    title: str
    ratio: float


class GoalTimeShare(BaseModel):
    goal_id: str
    title: str
    hours: float
    percentage: int


class BehindGoal(BaseModel):
    goal_id: str
    title: str
    planned_hours: float
    actual_hours: float


class Recommendations(BaseModel):
    behind_goals: List[BehindGoal] = []
    most_productive_day: Optional[str] = None
    on_track_count: int = 0
    missing_allotments: bool = False
    messages: List[str] = []


class AnalyticsResponse(BaseModel):
    has_goals: bool
    overall: OverallStats
    weekly_pattern: List[DayOfWeekStats]
    most_productive_day: Optional[DayOfWeekStats] = None
    recent_entries: List[RecentEntry] = []
    best_performing_goal: Optional[BestPerformingGoal] = None
    time_distribution: List[GoalTimeShare] = []
    recommendations: Recommendations


# Import/Export document schemas (camelCase on the wire)
def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class GoalRecord(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    total_required_time: float = Field(..., gt=0, allow_inf_nan=False)
    deadline: datetime
    created_at: datetime
    updated_at: datetime
    daily_time_allotment: Optional[float] = Field(None, allow_inf_nan=False)
    weekly_time_allotment: Optional[float] = Field(None, allow_inf_nan=False)
    monthly_time_allotment: Optional[float] = Field(None, allow_inf_nan=False)

    @field_validator("deadline", "created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ProgressRecord(BaseModel):
    id: str = Field(..., min_length=1)
    goal_id: str = Field(..., min_length=1)
    time_spent: float = Field(..., gt=0, allow_inf_nan=False)
    date: datetime
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ImportResult(BaseModel):
    goals_imported: int
    progress_imported: int
    overwrite: bool
