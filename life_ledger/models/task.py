from pydantic import Field, field_validator
from typing import Optional, List
from datetime import date
from enum import Enum

from life_ledger.models.common import WireModel

# ===== TASK PYDANTIC MODELS =====

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class SubtaskIn(WireModel):
    title: str = Field(..., min_length=1, max_length=500)
    completed: bool = False


class Subtask(SubtaskIn):
    id: int


class TaskCreate(WireModel):
    title: str = Field(..., min_length=1, max_length=500)
    category: str = Field("", max_length=100)
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    due_date: Optional[date] = None
    completed: bool = False
    status: TaskStatus = Field(TaskStatus.TODO)
    subtasks: List[SubtaskIn] = Field(default_factory=list)
    notes: str = ""

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        return v.strip()


class TaskUpdate(WireModel):
    """Shallow merge; a ``subtasks`` list replaces the stored one."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    completed: Optional[bool] = None
    status: Optional[TaskStatus] = None
    subtasks: Optional[List[SubtaskIn]] = None
    notes: Optional[str] = None


class TaskResponse(WireModel):
    id: int
    title: str
    category: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    completed: bool = False
    status: TaskStatus = TaskStatus.TODO
    subtasks: List[Subtask] = Field(default_factory=list)
    notes: str = ""

    @field_validator('category', 'notes', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v if v is not None else ""


class AdvancedTaskFilter(WireModel):
    """Multi-select filter; when any field is set it replaces the basic filter."""
    priorities: List[TaskPriority] = Field(default_factory=list)
    statuses: List[TaskStatus] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return bool(self.priorities or self.statuses or self.categories or self.start_date or self.end_date)


class TaskOverview(WireModel):
    total: int
    completed: int
    high_priority_pending: int
