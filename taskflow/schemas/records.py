"""
Fixed storage-record schemas, one per table.

Every field is optional so that partially populated or legacy records still
validate; the mappers apply the documented defaults. Unknown keys are ignored.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LookupRef(RecordModel):
    Id: int
    Name: str = ""


class TaskRecord(RecordModel):
    Id: int
    title_c: str | None = None
    description_c: str | None = None
    category_c: LookupRef | None = None
    sub_category_c: str | None = None
    priority_c: str | None = None
    due_date_c: date | None = None
    completed_c: bool | None = None
    completed_at_c: datetime | None = None
    time_spent_c: int | None = None
    timer_state_is_running_c: bool | None = None
    timer_state_last_updated_c: datetime | None = None
    CreatedOn: datetime | None = None


class CategoryRecord(RecordModel):
    Id: int
    Name: str | None = None
    color_c: str | None = None
    icon_c: str | None = None
    sub_category_c: str | None = None


class PatternRecord(RecordModel):
    Id: int
    Name: str | None = None
    frequency_c: str | None = None
    interval_c: int | None = None
    day_of_week_c: str | None = None
    day_of_month_c: int | None = None
    week_of_month_c: str | None = None
    end_of_month_c: bool | None = None
    CreatedOn: datetime | None = None


class RuleRecord(RecordModel):
    Id: int
    Name: str | None = None
    task_c: LookupRef | None = None
    recurring_task_pattern_c: LookupRef | None = None
    start_date_c: date | None = None
    end_date_c: date | None = None
    CreatedOn: datetime | None = None
