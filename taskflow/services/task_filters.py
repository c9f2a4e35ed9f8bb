"""
Client-side filtering and ordering of the task list.

``filter_tasks`` is pure: it never mutates the input sequence and returns a new
list. Ordering, ascending by the key built in ``task_sort_key``:

1. incomplete before completed;
2. priority high, medium, low (anything else after low);
3. tasks with a due date before tasks without, earlier dates first;
4. newer ``created_at`` first.

Python's sort is stable, so tasks that tie on every key keep their input order.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from ..schemas.task import Priority, StatusFilter, Task

PRIORITY_ORDER: dict[Priority, int] = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
_UNKNOWN_PRIORITY = len(PRIORITY_ORDER)


def _created_key(created_at: datetime) -> float:
    return -created_at.timestamp()


def task_sort_key(task: Task) -> tuple:
    due = task.due_date
    return (
        task.completed,
        PRIORITY_ORDER.get(task.priority, _UNKNOWN_PRIORITY),
        due is None,
        due or date.max,
        _created_key(task.created_at),
    )


def due_date_renderings(due: date) -> list[str]:
    """The forms a user might type when searching for a due date, lower-cased."""
    renderings = [
        due.isoformat(),
        f"{due:%B} {due.year}",
        f"{due:%b} {due.day}",
        f"{due:%A}, {due:%B} {due.day}, {due.year}",
    ]
    return [text.lower() for text in renderings]


def matches_search(task: Task, query: str) -> bool:
    query = query.strip().lower()
    if not query:
        return True
    haystacks = [task.title, task.description, task.category]
    if any(query in text.lower() for text in haystacks):
        return True
    if task.due_date is not None:
        return any(query in text for text in due_date_renderings(task.due_date))
    return False


def matches_status(task: Task, status: StatusFilter | str) -> bool:
    status = StatusFilter(status)
    if status is StatusFilter.ACTIVE:
        return not task.completed
    if status is StatusFilter.COMPLETED:
        return task.completed
    return True


def filter_tasks(
    tasks: Iterable[Task],
    status: StatusFilter | str = StatusFilter.ALL,
    category: str | None = None,
    search: str | None = None,
) -> list[Task]:
    filtered = [task for task in tasks if matches_status(task, status)]
    if category:
        filtered = [task for task in filtered if task.category == category]
    if search and search.strip():
        filtered = [task for task in filtered if matches_search(task, search)]
    return sorted(filtered, key=task_sort_key)
