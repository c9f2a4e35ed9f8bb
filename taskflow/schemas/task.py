from datetime import date, datetime
from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints

from .base import CamelModel
from .category import Category
from .recurrence import RecurrenceRule, RecurrenceSpec, RecurringTaskPattern


TaskTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class TimerState(CamelModel):
    is_running: bool = False
    last_updated: datetime | None = None


class Task(CamelModel):
    id: int
    title: str = ""
    description: str = ""
    category: str = ""
    sub_category: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    completed: bool = False
    completed_at: datetime | None = None
    time_spent: int = Field(default=0, ge=0)
    timer_state: TimerState = Field(default_factory=TimerState)
    created_at: datetime


class TaskCreate(CamelModel):
    title: TaskTitle
    description: str = Field(default="", max_length=500)
    category: str = ""
    sub_category: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None


class TimerStatePatch(CamelModel):
    is_running: bool | None = None
    last_updated: datetime | None = None


class TaskUpdate(CamelModel):
    """
    Partial update. Only fields present in ``model_fields_set`` are written;
    an explicit ``null`` clears the stored value.
    """

    title: TaskTitle | None = None
    description: str | None = Field(default=None, max_length=500)
    category: str | None = None
    sub_category: str | None = None
    priority: Priority | None = None
    due_date: date | None = None
    completed: bool | None = None
    completed_at: datetime | None = None
    time_spent: int | None = Field(default=None, ge=0)
    timer_state: TimerStatePatch | None = None


class DueDateInfo(CamelModel):
    text: str
    urgent: bool = False
    overdue: bool = False


class TaskView(Task):
    due_label: DueDateInfo | None = None
    time_spent_label: str = ""
    elapsed_label: str = ""


class TaskFormSubmission(CamelModel):
    title: str = ""
    description: str = ""
    category: str = ""
    sub_category: str | None = ""
    priority: Priority = Priority.MEDIUM
    due_date: date | str | None = ""
    is_recurring: bool = False
    recurrence: RecurrenceSpec = Field(default_factory=RecurrenceSpec)


class TaskCreated(CamelModel):
    task: TaskView
    pattern: RecurringTaskPattern | None = None
    rule: RecurrenceRule | None = None


class TimerRead(CamelModel):
    task_id: int
    elapsed_seconds: int
    is_running: bool
    display: str


class TaskCounts(CamelModel):
    all: int = 0
    active: int = 0
    completed: int = 0


class TaskStats(CamelModel):
    total: int = 0
    completed: int = 0
    active: int = 0
    completion_rate: float = 0.0
    total_time_spent: int = 0
    average_time_per_task: float = 0.0


class TaskSummary(CamelModel):
    counts: TaskCounts
    category_counts: dict[str, int] = Field(default_factory=dict)
    stats: TaskStats


class Board(CamelModel):
    tasks: list[TaskView] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    summary: TaskSummary
