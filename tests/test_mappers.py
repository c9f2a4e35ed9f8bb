from datetime import date, datetime

from taskflow.schemas.category import Category, CategoryUpdate
from taskflow.schemas.recurrence import DayOfWeek, Frequency, RecurrenceRule, RecurringTaskPattern, WeekOfMonth
from taskflow.schemas.task import Priority, Task, TaskUpdate, TimerState
from taskflow.services.mappers import (
    category_from_record,
    category_patch_fields,
    category_to_record,
    pattern_from_record,
    pattern_to_record,
    rule_from_record,
    rule_to_record,
    task_from_record,
    task_patch_fields,
    task_to_record,
)

CREATED = datetime(2024, 5, 1, 8, 30)


def test_task_round_trip_with_every_field_populated():
    task = Task(
        id=1,
        title="Write report",
        description="Quarterly numbers",
        category="Work",
        sub_category="Reports",
        priority=Priority.HIGH,
        due_date=date(2024, 6, 1),
        completed=True,
        completed_at=datetime(2024, 5, 30, 12, 0),
        time_spent=125,
        timer_state=TimerState(is_running=True, last_updated=datetime(2024, 5, 30, 11, 58)),
        created_at=CREATED,
    )

    assert task_from_record(task_to_record(task, category_id=3)) == task


def test_task_round_trip_with_optional_fields_empty():
    task = Task(id=2, created_at=CREATED)

    record = task_to_record(task)

    assert record["category_c"] is None
    assert task_from_record(record) == task


def test_task_defaults_from_sparse_record():
    task = task_from_record({"Id": 9, "CreatedOn": CREATED, "Owner": "ignored"})

    assert task.title == ""
    assert task.category == ""
    assert task.priority is Priority.MEDIUM
    assert task.completed is False
    assert task.time_spent == 0
    assert task.timer_state.is_running is False


def test_unknown_priority_falls_back_to_medium():
    task = task_from_record({"Id": 1, "priority_c": "urgent", "CreatedOn": CREATED})
    assert task.priority is Priority.MEDIUM


def test_category_lookup_is_read_by_name():
    task = task_from_record({"Id": 1, "category_c": {"Id": 4, "Name": "Health"}, "CreatedOn": CREATED})
    assert task.category == "Health"


def test_patch_distinguishes_clear_from_unchanged():
    assert task_patch_fields(TaskUpdate()) == {}
    assert task_patch_fields(TaskUpdate.model_validate({"title": "Renamed"})) == {"title_c": "Renamed"}
    assert task_patch_fields(TaskUpdate.model_validate({"dueDate": None})) == {"due_date_c": None}
    assert task_patch_fields(TaskUpdate.model_validate({"category": None})) == {"category_c": None}
    assert task_patch_fields(TaskUpdate.model_validate({"category": "Work"}), category_id=5) == {"category_c": 5}


def test_patch_of_nested_timer_state():
    patch = TaskUpdate.model_validate({"timeSpent": 40, "timerState": {"isRunning": False}})
    assert task_patch_fields(patch) == {"time_spent_c": 40, "timer_state_is_running_c": False}


def test_category_round_trip_and_patch():
    category = Category(id=3, name="Work", color="#6366f1", icon="Briefcase", sub_category="Meetings")
    assert category_from_record(category_to_record(category)) == category

    assert category_patch_fields(CategoryUpdate.model_validate({"color": "#000000", "name": None})) == {
        "color_c": "#000000"
    }


def test_pattern_round_trip():
    pattern = RecurringTaskPattern(
        id=4,
        name="Monthly - Pay rent",
        frequency=Frequency.MONTHLY,
        interval=2,
        day_of_week=DayOfWeek.MONDAY,
        day_of_month=15,
        week_of_month=WeekOfMonth.LAST,
        end_of_month=True,
        created_at=CREATED,
    )
    assert pattern_from_record(pattern_to_record(pattern)) == pattern


def test_pattern_defaults():
    pattern = pattern_from_record({"Id": 1, "frequency_c": "Sometimes", "CreatedOn": CREATED})
    assert pattern.frequency is Frequency.DAILY
    assert pattern.interval == 1
    assert pattern.end_of_month is False
    assert pattern.day_of_week is None


def test_rule_round_trip():
    rule = RecurrenceRule(
        id=5,
        name="Rule for Pay rent",
        task_id=2,
        task_title="Pay rent",
        pattern_id=4,
        pattern_name="Monthly - Pay rent",
        start_date=date(2024, 6, 1),
        end_date=date(2025, 6, 1),
        created_at=CREATED,
    )
    assert rule_from_record(rule_to_record(rule)) == rule


def test_rule_with_dangling_lookups():
    rule = rule_from_record({"Id": 1, "task_c": None, "recurring_task_pattern_c": None, "CreatedOn": CREATED})
    assert rule.task_id is None
    assert rule.pattern_name == ""
