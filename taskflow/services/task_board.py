from __future__ import annotations

import asyncio
from datetime import date

from ..core.timeutils import today as current_date
from ..schemas.task import Board, StatusFilter
from .category_service import CategoryService
from .task_filters import filter_tasks
from .task_service import TaskService
from .task_summary import summarize, to_view


async def load_board(
    tasks: TaskService,
    categories: CategoryService,
    status: StatusFilter | str = StatusFilter.ALL,
    category: str | None = None,
    search: str | None = None,
    today: date | None = None,
) -> Board:
    """Everything the task page shows, fetched with one concurrent round of reads."""
    today = today or current_date()
    all_tasks, all_categories = await asyncio.gather(tasks.get_all(), categories.get_all())
    visible = filter_tasks(all_tasks, status=status, category=category, search=search)
    return Board(
        tasks=[to_view(task, today) for task in visible],
        categories=all_categories,
        summary=summarize(all_tasks),
    )
