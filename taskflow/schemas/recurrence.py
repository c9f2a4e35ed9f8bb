from datetime import date, datetime
from enum import Enum

from pydantic import Field

from .base import CamelModel


class Frequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class DayOfWeek(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class WeekOfMonth(str, Enum):
    FIRST = "First"
    SECOND = "Second"
    THIRD = "Third"
    FOURTH = "Fourth"
    LAST = "Last"


class MonthlyPolicy(str, Enum):
    DAY_OF_MONTH = "day_of_month"
    WEEK_OF_MONTH = "week_of_month"
    END_OF_MONTH = "end_of_month"


class RecurringTaskPattern(CamelModel):
    id: int
    name: str = ""
    frequency: Frequency = Frequency.DAILY
    interval: int = 1
    day_of_week: DayOfWeek | None = None
    day_of_month: int | None = None
    week_of_month: WeekOfMonth | None = None
    end_of_month: bool = False
    created_at: datetime


class RecurringTaskPatternCreate(CamelModel):
    name: str = ""
    frequency: Frequency = Frequency.DAILY
    interval: int = Field(default=1, ge=1, le=365)
    day_of_week: DayOfWeek | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    week_of_month: WeekOfMonth | None = None
    end_of_month: bool = False


class RecurringTaskPatternUpdate(CamelModel):
    name: str | None = None
    frequency: Frequency | None = None
    interval: int | None = Field(default=None, ge=1, le=365)
    day_of_week: DayOfWeek | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    week_of_month: WeekOfMonth | None = None
    end_of_month: bool | None = None


class RecurrenceRule(CamelModel):
    id: int
    name: str = ""
    task_id: int | None = None
    task_title: str = ""
    pattern_id: int | None = None
    pattern_name: str = ""
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime


class RecurrenceRuleCreate(CamelModel):
    name: str = ""
    task_id: int
    pattern_id: int
    start_date: date
    end_date: date | None = None


class RecurrenceRuleUpdate(CamelModel):
    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class RecurrenceSpec(CamelModel):
    """
    Raw recurrence input as the task form submits it.

    Types are deliberately loose (empty strings, numeric strings) so that
    ``validate_recurrence`` can report field-level messages instead of the
    request being rejected wholesale.
    """

    frequency: str = Frequency.DAILY.value
    interval: int | str | None = 1
    day_of_week: str | None = ""
    day_of_month: int | str | None = ""
    week_of_month: str | None = ""
    end_of_month: bool = False
    start_date: date | str | None = ""
    end_date: date | str | None = ""


class ScheduleDescriptor(CamelModel):
    frequency: Frequency
    interval: int
    day_of_week: DayOfWeek | None = None
    monthly_policy: MonthlyPolicy | None = None
    day_of_month: int | None = None
    week_of_month: WeekOfMonth | None = None
    start_date: date
    end_date: date | None = None
    summary: str


class RecurrenceValidation(CamelModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    schedule: ScheduleDescriptor | None = None
