from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..schemas.task import DueDateInfo, Task, TaskCounts, TaskStats, TaskSummary, TaskView


def task_counts(tasks: Sequence[Task]) -> TaskCounts:
    completed = sum(1 for task in tasks if task.completed)
    return TaskCounts(all=len(tasks), active=len(tasks) - completed, completed=completed)


def category_counts(tasks: Iterable[Task]) -> dict[str, int]:
    """Active (incomplete) tasks per category name."""
    counter = Counter(task.category for task in tasks if not task.completed and task.category)
    return dict(sorted(counter.items()))


def task_stats(tasks: Sequence[Task]) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    total_time = sum(task.time_spent for task in tasks)
    return TaskStats(
        total=total,
        completed=completed,
        active=total - completed,
        completion_rate=(completed / total) * 100 if total else 0.0,
        total_time_spent=total_time,
        average_time_per_task=total_time / total if total else 0.0,
    )


def summarize(tasks: Sequence[Task]) -> TaskSummary:
    return TaskSummary(counts=task_counts(tasks), category_counts=category_counts(tasks), stats=task_stats(tasks))


def describe_due_date(due: date | None, today: date) -> DueDateInfo | None:
    if due is None:
        return None
    if due == today:
        return DueDateInfo(text="Today", urgent=True)
    if due == today + timedelta(days=1):
        return DueDateInfo(text="Tomorrow")
    if due < today:
        return DueDateInfo(text=f"Overdue ({due:%b} {due.day})", urgent=True, overdue=True)
    return DueDateInfo(text=f"{due:%b} {due.day}, {due.year}")


def format_time_spent(seconds: int) -> str:
    if not seconds:
        return "No time tracked"
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours:
        return f"{hours}h {minutes}m tracked"
    if minutes:
        return f"{minutes}m tracked"
    return f"{seconds}s tracked"


def format_elapsed(seconds: int) -> str:
    """Stopwatch display: ``M:SS`` under an hour, ``H:MM:SS`` otherwise."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def to_view(task: Task, today: date) -> TaskView:
    return TaskView(
        **task.model_dump(),
        due_label=describe_due_date(task.due_date, today),
        time_spent_label=format_time_spent(task.time_spent),
        elapsed_label=format_elapsed(task.time_spent),
    )
