"""
Explicit conversions between storage records and the domain shape.

``*_from_record`` accept a raw record dict (as returned by a ``RecordStore``),
validate it against the fixed record schema and apply defaults.
``*_to_record`` produce the full read-side record shape (lookups nested) and
``*_fields`` builders produce write-side payloads (lookups as bare ids).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core.timeutils import utcnow
from ..schemas.category import Category, CategoryCreate, CategoryUpdate
from ..schemas.records import CategoryRecord, PatternRecord, RuleRecord, TaskRecord
from ..schemas.recurrence import (
    DayOfWeek,
    Frequency,
    RecurrenceRule,
    RecurrenceRuleCreate,
    RecurrenceRuleUpdate,
    RecurringTaskPattern,
    RecurringTaskPatternCreate,
    RecurringTaskPatternUpdate,
    WeekOfMonth,
)
from ..schemas.task import Priority, Task, TaskCreate, TaskUpdate, TimerState

logger = logging.getLogger(__name__)


def _enum_or(enum_cls, raw: str | None, default):
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.debug("Unknown %s value %r; using %r", enum_cls.__name__, raw, default)
        return default


def _value(member) -> Any:
    return member.value if member is not None else None


def _lookup(ref_id: int | None, name: str | None) -> dict[str, Any] | None:
    if ref_id is None:
        return None
    return {"Id": ref_id, "Name": name or ""}


# ---- tasks ----


def task_from_record(raw: Mapping[str, Any]) -> Task:
    record = TaskRecord.model_validate(raw)
    return Task(
        id=record.Id,
        title=record.title_c or "",
        description=record.description_c or "",
        category=record.category_c.Name if record.category_c else "",
        sub_category=record.sub_category_c or None,
        priority=_enum_or(Priority, record.priority_c, Priority.MEDIUM),
        due_date=record.due_date_c,
        completed=bool(record.completed_c),
        completed_at=record.completed_at_c,
        time_spent=max(0, record.time_spent_c or 0),
        timer_state=TimerState(
            is_running=bool(record.timer_state_is_running_c),
            last_updated=record.timer_state_last_updated_c,
        ),
        created_at=record.CreatedOn or utcnow(),
    )


def task_to_record(task: Task, category_id: int | None = None) -> dict[str, Any]:
    # the category lookup needs its id; without one the reference is dropped
    return {
        "Id": task.id,
        "title_c": task.title,
        "description_c": task.description,
        "category_c": _lookup(category_id, task.category) if task.category else None,
        "sub_category_c": task.sub_category,
        "priority_c": task.priority.value,
        "due_date_c": task.due_date,
        "completed_c": task.completed,
        "completed_at_c": task.completed_at,
        "time_spent_c": task.time_spent,
        "timer_state_is_running_c": task.timer_state.is_running,
        "timer_state_last_updated_c": task.timer_state.last_updated,
        "CreatedOn": task.created_at,
    }


def task_create_fields(payload: TaskCreate, category_id: int | None) -> dict[str, Any]:
    return {
        "title_c": payload.title,
        "description_c": payload.description or "",
        "category_c": category_id,
        "sub_category_c": payload.sub_category or None,
        "priority_c": payload.priority.value,
        "due_date_c": payload.due_date,
        "completed_c": False,
        "completed_at_c": None,
        "time_spent_c": 0,
        "timer_state_is_running_c": False,
        "timer_state_last_updated_c": None,
    }


def task_patch_fields(patch: TaskUpdate, category_id: int | None = None) -> dict[str, Any]:
    """
    Write payload for the fields the caller actually set.

    ``category_id`` is only consulted when ``category`` was set; the caller
    resolves the name beforehand.
    """
    sent = patch.model_fields_set
    fields: dict[str, Any] = {}
    if "category" in sent:
        fields["category_c"] = category_id if patch.category else None
    if "title" in sent and patch.title is not None:
        fields["title_c"] = patch.title
    if "description" in sent:
        fields["description_c"] = patch.description or ""
    if "sub_category" in sent:
        fields["sub_category_c"] = patch.sub_category or None
    if "priority" in sent:
        fields["priority_c"] = _value(patch.priority) or Priority.MEDIUM.value
    if "due_date" in sent:
        fields["due_date_c"] = patch.due_date
    if "completed" in sent:
        fields["completed_c"] = bool(patch.completed)
    if "completed_at" in sent:
        fields["completed_at_c"] = patch.completed_at
    if "time_spent" in sent:
        fields["time_spent_c"] = patch.time_spent or 0
    if "timer_state" in sent and patch.timer_state is not None:
        timer_sent = patch.timer_state.model_fields_set
        if "is_running" in timer_sent:
            fields["timer_state_is_running_c"] = bool(patch.timer_state.is_running)
        if "last_updated" in timer_sent:
            fields["timer_state_last_updated_c"] = patch.timer_state.last_updated
    return fields


# ---- categories ----


def category_from_record(raw: Mapping[str, Any]) -> Category:
    record = CategoryRecord.model_validate(raw)
    return Category(
        id=record.Id,
        name=record.Name or "",
        color=record.color_c or "",
        icon=record.icon_c or "",
        sub_category=record.sub_category_c or None,
    )


def category_to_record(category: Category) -> dict[str, Any]:
    return {
        "Id": category.id,
        "Name": category.name,
        "color_c": category.color,
        "icon_c": category.icon,
        "sub_category_c": category.sub_category,
    }


def category_create_fields(payload: CategoryCreate) -> dict[str, Any]:
    return {
        "Name": payload.name,
        "color_c": payload.color,
        "icon_c": payload.icon,
        "sub_category_c": payload.sub_category,
    }


def category_patch_fields(patch: CategoryUpdate) -> dict[str, Any]:
    mapping = {"name": "Name", "color": "color_c", "icon": "icon_c", "sub_category": "sub_category_c"}
    fields = {mapping[key]: getattr(patch, key) for key in patch.model_fields_set if key in mapping}
    if fields.get("Name", "") is None:
        # name is required; a null is treated as "leave unchanged"
        del fields["Name"]
    return fields


# ---- recurrence ----


def pattern_from_record(raw: Mapping[str, Any]) -> RecurringTaskPattern:
    record = PatternRecord.model_validate(raw)
    return RecurringTaskPattern(
        id=record.Id,
        name=record.Name or "",
        frequency=_enum_or(Frequency, record.frequency_c, Frequency.DAILY),
        interval=record.interval_c or 1,
        day_of_week=_enum_or(DayOfWeek, record.day_of_week_c, None),
        day_of_month=record.day_of_month_c or None,
        week_of_month=_enum_or(WeekOfMonth, record.week_of_month_c, None),
        end_of_month=bool(record.end_of_month_c),
        created_at=record.CreatedOn or utcnow(),
    )


def pattern_to_record(pattern: RecurringTaskPattern) -> dict[str, Any]:
    return {
        "Id": pattern.id,
        "Name": pattern.name,
        "frequency_c": pattern.frequency.value,
        "interval_c": pattern.interval,
        "day_of_week_c": _value(pattern.day_of_week),
        "day_of_month_c": pattern.day_of_month,
        "week_of_month_c": _value(pattern.week_of_month),
        "end_of_month_c": pattern.end_of_month,
        "CreatedOn": pattern.created_at,
    }


def pattern_create_fields(payload: RecurringTaskPatternCreate) -> dict[str, Any]:
    return {
        "Name": payload.name or f"{payload.frequency.value} Pattern",
        "frequency_c": payload.frequency.value,
        "interval_c": payload.interval,
        "day_of_week_c": _value(payload.day_of_week),
        "day_of_month_c": payload.day_of_month,
        "week_of_month_c": _value(payload.week_of_month),
        "end_of_month_c": payload.end_of_month,
    }


def rule_from_record(raw: Mapping[str, Any]) -> RecurrenceRule:
    record = RuleRecord.model_validate(raw)
    task_ref = record.task_c
    pattern_ref = record.recurring_task_pattern_c
    return RecurrenceRule(
        id=record.Id,
        name=record.Name or "",
        task_id=task_ref.Id if task_ref else None,
        task_title=task_ref.Name if task_ref else "",
        pattern_id=pattern_ref.Id if pattern_ref else None,
        pattern_name=pattern_ref.Name if pattern_ref else "",
        start_date=record.start_date_c,
        end_date=record.end_date_c,
        created_at=record.CreatedOn or utcnow(),
    )


def rule_to_record(rule: RecurrenceRule) -> dict[str, Any]:
    return {
        "Id": rule.id,
        "Name": rule.name,
        "task_c": _lookup(rule.task_id, rule.task_title),
        "recurring_task_pattern_c": _lookup(rule.pattern_id, rule.pattern_name),
        "start_date_c": rule.start_date,
        "end_date_c": rule.end_date,
        "CreatedOn": rule.created_at,
    }


def rule_create_fields(payload: RecurrenceRuleCreate) -> dict[str, Any]:
    return {
        "Name": payload.name,
        "task_c": payload.task_id,
        "recurring_task_pattern_c": payload.pattern_id,
        "start_date_c": payload.start_date,
        "end_date_c": payload.end_date,
    }


def pattern_patch_fields(patch: RecurringTaskPatternUpdate) -> dict[str, Any]:
    sent = patch.model_fields_set
    fields: dict[str, Any] = {}
    if "name" in sent:
        fields["Name"] = patch.name or ""
    if "frequency" in sent and patch.frequency is not None:
        fields["frequency_c"] = patch.frequency.value
    if "interval" in sent and patch.interval is not None:
        fields["interval_c"] = patch.interval
    if "day_of_week" in sent:
        fields["day_of_week_c"] = _value(patch.day_of_week)
    if "day_of_month" in sent:
        fields["day_of_month_c"] = patch.day_of_month
    if "week_of_month" in sent:
        fields["week_of_month_c"] = _value(patch.week_of_month)
    if "end_of_month" in sent:
        fields["end_of_month_c"] = bool(patch.end_of_month)
    return fields


def rule_patch_fields(patch: RecurrenceRuleUpdate) -> dict[str, Any]:
    sent = patch.model_fields_set
    fields: dict[str, Any] = {}
    if "name" in sent:
        fields["Name"] = patch.name or ""
    if "start_date" in sent and patch.start_date is not None:
        fields["start_date_c"] = patch.start_date
    if "end_date" in sent:
        fields["end_date_c"] = patch.end_date
    return fields
