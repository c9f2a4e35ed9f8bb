"""
Task form submission: field validation and the create flow.

A recurring submission writes three records in sequence (pattern, task, rule).
Nothing is rolled back when a later step fails; the records already written are
logged and reported on the raised ``PartialCreationError``.
"""

from __future__ import annotations

import logging
from datetime import date

from ..core.errors import PartialCreationError, TransportError, ValidationError
from ..core.timeutils import today as current_date
from ..schemas.recurrence import MonthlyPolicy, RecurrenceRuleCreate, RecurringTaskPatternCreate
from ..schemas.task import TaskCreate, TaskCreated, TaskFormSubmission
from .recurrence import derive_schedule, parse_date, validate_recurrence
from .recurrence_service import PatternService, RuleService
from .task_service import TaskService
from .task_summary import to_view

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


def validate_task_form(form: TaskFormSubmission, today: date | None = None) -> dict[str, str]:
    today = today or current_date()
    errors: dict[str, str] = {}

    title = form.title.strip()
    if not title:
        errors["title"] = "Task title is required"
    elif len(title) > MAX_TITLE_LENGTH:
        errors["title"] = f"Title must be less than {MAX_TITLE_LENGTH} characters"

    if len(form.description) > MAX_DESCRIPTION_LENGTH:
        errors["description"] = f"Description must be less than {MAX_DESCRIPTION_LENGTH} characters"

    if not form.category.strip():
        errors["category"] = "Please select a category"

    due = parse_date(form.due_date)
    if due is not None:
        if not isinstance(due, date):
            errors["dueDate"] = "Due date is not a valid date"
        elif due < today:
            errors["dueDate"] = "Due date cannot be in the past"

    if form.is_recurring:
        errors.update(validate_recurrence(form.recurrence, today))

    return errors


def _task_payload(form: TaskFormSubmission) -> TaskCreate:
    return TaskCreate(
        title=form.title.strip(),
        description=form.description.strip(),
        category=form.category.strip(),
        sub_category=form.sub_category or None,
        priority=form.priority,
        due_date=parse_date(form.due_date),
    )


async def create_task_from_form(
    form: TaskFormSubmission,
    tasks: TaskService,
    patterns: PatternService,
    rules: RuleService,
    today: date | None = None,
) -> TaskCreated:
    today = today or current_date()
    errors = validate_task_form(form, today)
    if errors:
        raise ValidationError(errors)

    payload = _task_payload(form)
    if not form.is_recurring:
        task = await tasks.create(payload)
        return TaskCreated(task=to_view(task, today))

    schedule = derive_schedule(form.recurrence, today)
    created: dict[str, int] = {}

    pattern = await patterns.create(
        RecurringTaskPatternCreate(
            name=f"{schedule.frequency.value} - {payload.title}",
            frequency=schedule.frequency,
            interval=schedule.interval,
            day_of_week=schedule.day_of_week,
            day_of_month=schedule.day_of_month,
            week_of_month=schedule.week_of_month,
            end_of_month=schedule.monthly_policy is MonthlyPolicy.END_OF_MONTH,
        )
    )
    created["pattern"] = pattern.id

    step = "task"
    try:
        task = await tasks.create(payload)
        created["task"] = task.id
        step = "rule"
        rule = await rules.create(
            RecurrenceRuleCreate(
                name=f"Rule for {payload.title}",
                task_id=task.id,
                pattern_id=pattern.id,
                start_date=schedule.start_date,
                end_date=schedule.end_date,
            )
        )
    except TransportError as exc:
        logger.error("Recurring task creation failed at %s step; left behind: %s", step, created)
        raise PartialCreationError(step, created, exc) from exc

    return TaskCreated(task=to_view(task, today), pattern=pattern, rule=rule)
