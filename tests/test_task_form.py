import logging
from datetime import date

import pytest

from taskflow.core.errors import PartialCreationError, TransportError, ValidationError
from taskflow.schemas.category import CategoryCreate
from taskflow.schemas.recurrence import Frequency
from taskflow.schemas.task import TaskFormSubmission
from taskflow.services.category_service import CategoryService
from taskflow.services.record_store import InMemoryRecordStore
from taskflow.services.recurrence_service import PatternService, RuleService
from taskflow.services.task_form import create_task_from_form, validate_task_form
from taskflow.services.task_service import TaskService

TODAY = date(2024, 6, 1)


class OfflineRuleService(RuleService):
    async def create(self, payload):
        raise TransportError("store offline")


@pytest.fixture
def services():
    store = InMemoryRecordStore()
    return TaskService(store), PatternService(store), RuleService(store), CategoryService(store)


def form(**overrides) -> TaskFormSubmission:
    values = {"title": "Water plants", "category": "Home", "priority": "low", "due_date": "2024-06-03"}
    values.update(overrides)
    return TaskFormSubmission(**values)


def weekly(**overrides):
    values = {"frequency": "Weekly", "interval": 1, "day_of_week": "Sunday", "start_date": "2024-06-02"}
    values.update(overrides)
    return values


def test_valid_form_has_no_errors():
    assert validate_task_form(form(), TODAY) == {}


def test_form_field_rules():
    errors = validate_task_form(form(title="   ", category="", description="x" * 501, due_date="2024-05-31"), TODAY)

    assert errors == {
        "title": "Task title is required",
        "description": "Description must be less than 500 characters",
        "category": "Please select a category",
        "dueDate": "Due date cannot be in the past",
    }


def test_title_length_limit():
    assert validate_task_form(form(title="x" * 101), TODAY)["title"] == "Title must be less than 100 characters"
    assert "title" not in validate_task_form(form(title="x" * 100), TODAY)


def test_recurrence_errors_are_merged_only_when_recurring():
    submission = form(is_recurring=True, recurrence=weekly(day_of_week="", start_date=""))
    errors = validate_task_form(submission, TODAY)
    assert set(errors) == {"recurrenceDayOfWeek", "recurrenceStartDate"}

    assert validate_task_form(form(is_recurring=False, recurrence=weekly(day_of_week="")), TODAY) == {}


@pytest.mark.asyncio
async def test_invalid_submission_writes_nothing(services):
    tasks, patterns, rules, _ = services

    with pytest.raises(ValidationError) as excinfo:
        await create_task_from_form(form(title=""), tasks, patterns, rules, TODAY)

    assert "title" in excinfo.value.errors
    assert await tasks.get_all() == []
    assert await patterns.get_all() == []


@pytest.mark.asyncio
async def test_plain_submission_creates_one_task(services):
    tasks, patterns, rules, categories = services
    await categories.create(CategoryCreate(name="Home"))

    created = await create_task_from_form(form(), tasks, patterns, rules, TODAY)

    assert created.pattern is None and created.rule is None
    assert created.task.category == "Home"
    assert created.task.due_date == date(2024, 6, 3)
    assert created.task.due_label.text == "Jun 3, 2024"
    assert len(await tasks.get_all()) == 1


@pytest.mark.asyncio
async def test_recurring_submission_creates_pattern_task_and_rule(services):
    tasks, patterns, rules, _ = services

    created = await create_task_from_form(
        form(is_recurring=True, recurrence=weekly(interval="2", end_date="2024-09-01")), tasks, patterns, rules, TODAY
    )

    assert len(await tasks.get_all()) == 1
    assert created.pattern.name == "Weekly - Water plants"
    assert created.pattern.frequency is Frequency.WEEKLY
    assert created.pattern.interval == 2
    assert created.rule.name == "Rule for Water plants"
    assert created.rule.task_id == created.task.id
    assert created.rule.pattern_id == created.pattern.id
    assert created.rule.start_date == date(2024, 6, 2)
    assert created.rule.end_date == date(2024, 9, 1)


@pytest.mark.asyncio
async def test_monthly_pattern_stores_the_resolved_policy(services):
    tasks, patterns, rules, _ = services
    recurrence = weekly(frequency="Monthly", day_of_week="", day_of_month=15, end_of_month=True)

    created = await create_task_from_form(form(is_recurring=True, recurrence=recurrence), tasks, patterns, rules, TODAY)

    assert created.pattern.day_of_month == 15
    assert created.pattern.end_of_month is False


@pytest.mark.asyncio
async def test_partial_failure_is_reported_and_logged(services, caplog):
    tasks, patterns, _, _ = services
    rules = OfflineRuleService(tasks.store)

    with caplog.at_level(logging.ERROR, logger="taskflow.services.task_form"):
        with pytest.raises(PartialCreationError) as excinfo:
            await create_task_from_form(form(is_recurring=True, recurrence=weekly()), tasks, patterns, rules, TODAY)

    error = excinfo.value
    assert error.step == "rule"
    assert set(error.created) == {"pattern", "task"}
    assert "failed at rule step" in caplog.text
    assert [task.id for task in await tasks.get_all()] == [error.created["task"]]
    assert [pattern.id for pattern in await patterns.get_all()] == [error.created["pattern"]]


@pytest.mark.xfail(strict=True, reason="no compensating delete after a partial recurring creation")
@pytest.mark.asyncio
async def test_partial_failure_rolls_back_created_records(services):
    tasks, patterns, _, _ = services
    rules = OfflineRuleService(tasks.store)

    with pytest.raises(PartialCreationError):
        await create_task_from_form(form(is_recurring=True, recurrence=weekly()), tasks, patterns, rules, TODAY)

    assert await tasks.get_all() == []
    assert await patterns.get_all() == []
