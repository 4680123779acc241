from pydantic import Field, field_validator
from typing import Optional, List, Dict
import datetime as dt

from life_ledger.models.common import WireModel

# ===== HABIT PYDANTIC MODELS =====

class HabitCreate(WireModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=32)
    start_date: dt.date = Field(default_factory=dt.date.today)
    active_from_date: Optional[dt.date] = Field(None, description="Overrides startDate as the first editable day")
    frequency: str = Field("daily", max_length=32)
    goal_target: float = Field(1, gt=0, description="Logged value that counts as completed")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        return v.strip()


class HabitUpdate(WireModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=32)
    start_date: Optional[dt.date] = None
    active_from_date: Optional[dt.date] = None
    frequency: Optional[str] = Field(None, max_length=32)
    goal_target: Optional[float] = Field(None, gt=0)


class HabitResponse(WireModel):
    id: int
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    start_date: dt.date
    active_from_date: Optional[dt.date] = None
    archived_at: Optional[dt.datetime] = None
    frequency: str = "daily"
    goal_target: float = 1


class HabitLogCreate(WireModel):
    habit_id: int
    date: dt.date
    completed_value: float = Field(1, ge=0)


class HabitLogResponse(HabitLogCreate):
    id: int


class DailyHabitStat(WireModel):
    date: dt.date
    total_habits: int
    completed_habits: int
    percentage: float


class HabitStatsResponse(WireModel):
    daily_stats: List[DailyHabitStat]
    # habitId -> ISO date -> logged value
    logs: Dict[int, Dict[str, float]]
    habits: List[HabitResponse]


class HabitKPIs(WireModel):
    completion_rate: float
    best_day: Optional[dt.date] = None
    total_completions: int
    most_consistent_habit: Optional[str] = None
