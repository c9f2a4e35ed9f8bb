from datetime import date, datetime
from itertools import product

from conftest import make_task
from taskflow.schemas.task import Priority, StatusFilter
from taskflow.services.task_filters import due_date_renderings, filter_tasks


def _mixed_tasks():
    tasks = []
    combos = product([False, True], list(Priority), [None, date(2024, 6, 1), date(2024, 5, 20)])
    for index, (completed, priority, due) in enumerate(combos, start=1):
        tasks.append(
            make_task(
                index,
                completed=completed,
                completed_at=datetime(2024, 5, 2) if completed else None,
                priority=priority,
                due_date=due,
                category="Work" if index % 2 else "Personal",
            )
        )
    return tasks


def test_output_is_subset_and_stable():
    tasks = _mixed_tasks()
    snapshot = list(tasks)

    first = filter_tasks(tasks, status="active", search="task")
    second = filter_tasks(tasks, status="active", search="task")

    assert first == second
    assert len(first) <= len(tasks)
    assert all(task in tasks for task in first)
    assert tasks == snapshot


def test_incomplete_tasks_always_come_first():
    ordered = filter_tasks(_mixed_tasks())
    seen_completed = False
    for task in ordered:
        if task.completed:
            seen_completed = True
        else:
            assert not seen_completed


def test_end_to_end_ordering():
    tasks = [
        make_task(1, title="A", priority="high"),
        make_task(2, title="B", priority="low", due_date=date(2024, 6, 1)),
        make_task(3, title="C", priority="high", completed=True, completed_at=datetime(2024, 6, 1)),
    ]

    ordered = filter_tasks(list(reversed(tasks)), status=StatusFilter.ALL)

    assert [task.title for task in ordered] == ["A", "B", "C"]


def test_priority_then_due_date_then_newest():
    older = make_task(1, priority="medium", due_date=date(2024, 7, 1), created_at=datetime(2024, 1, 1))
    newer = make_task(2, priority="medium", due_date=date(2024, 7, 1), created_at=datetime(2024, 2, 1))
    earlier_due = make_task(3, priority="medium", due_date=date(2024, 6, 5))
    high = make_task(4, priority="high")

    ordered = filter_tasks([older, newer, earlier_due, high])

    assert [task.id for task in ordered] == [4, 3, 2, 1]


def test_status_and_category_filters():
    tasks = _mixed_tasks()

    assert all(not task.completed for task in filter_tasks(tasks, status="active"))
    assert all(task.completed for task in filter_tasks(tasks, status="completed"))
    assert {task.category for task in filter_tasks(tasks, category="Work")} == {"Work"}


def test_search_matches_text_case_insensitively():
    tasks = [
        make_task(1, title="Buy groceries"),
        make_task(2, title="Call mom", description="About the GROCERY list"),
        make_task(3, title="Gym", category="Health"),
    ]

    assert [task.id for task in filter_tasks(tasks, search="grocer")] == [2, 1]
    assert [task.id for task in filter_tasks(tasks, search="health")] == [3]


def test_blank_search_is_ignored_and_query_is_trimmed():
    tasks = [make_task(1, title="Alpha"), make_task(2, title="Beta")]

    assert len(filter_tasks(tasks, search="   ")) == 2
    assert [task.id for task in filter_tasks(tasks, search="  beta  ")] == [2]


def test_search_matches_due_date_renderings():
    tasks = [make_task(1, due_date=date(2024, 6, 1)), make_task(2, due_date=date(2024, 7, 4))]

    for query in ("2024-06-01", "june 2024", "Jun 1", "saturday, june 1, 2024"):
        assert [task.id for task in filter_tasks(tasks, search=query)] == [1], query


def test_due_date_renderings():
    assert due_date_renderings(date(2024, 6, 1)) == [
        "2024-06-01",
        "june 2024",
        "jun 1",
        "saturday, june 1, 2024",
    ]
