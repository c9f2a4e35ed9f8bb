from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.timeutils import today
from ..dependencies import get_pattern_service, get_rule_service, get_task_service, get_timers
from ..schemas.task import (
    StatusFilter,
    TaskCreated,
    TaskFormSubmission,
    TaskSummary,
    TaskUpdate,
    TaskView,
    TimerRead,
)
from ..services.recurrence_service import PatternService, RuleService
from ..services.task_filters import filter_tasks
from ..services.task_form import create_task_from_form
from ..services.task_service import TaskService
from ..services.task_summary import format_elapsed, summarize, to_view
from ..services.timer import TimerRegistry

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.get("/", response_model=list[TaskView])
async def list_tasks(
    status: StatusFilter = StatusFilter.ALL,
    category: str | None = None,
    search: str | None = None,
    tasks: TaskService = Depends(get_task_service),
):
    current = today()
    visible = filter_tasks(await tasks.get_all(), status=status, category=category, search=search)
    return [to_view(task, current) for task in visible]


@router.get("/summary", response_model=TaskSummary)
async def task_summary(tasks: TaskService = Depends(get_task_service)):
    return summarize(await tasks.get_all())


@router.post("/", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task(
    form: TaskFormSubmission,
    tasks: TaskService = Depends(get_task_service),
    patterns: PatternService = Depends(get_pattern_service),
    rules: RuleService = Depends(get_rule_service),
):
    return await create_task_from_form(form, tasks, patterns, rules)


@router.get("/{task_id}", response_model=TaskView)
async def get_task(task_id: int, tasks: TaskService = Depends(get_task_service)):
    task = await tasks.get_by_id(task_id)
    if task is None:
        raise _not_found()
    return to_view(task, today())


@router.patch("/{task_id}", response_model=TaskView)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    tasks: TaskService = Depends(get_task_service),
    timers: TimerRegistry = Depends(get_timers),
):
    task = await tasks.update(task_id, payload)
    if task is None:
        raise _not_found()
    if payload.model_fields_set & {"time_spent", "timer_state"}:
        timers.sync(task)
    return to_view(task, today())


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    tasks: TaskService = Depends(get_task_service),
    timers: TimerRegistry = Depends(get_timers),
):
    await timers.discard(task_id)
    if not await tasks.delete(task_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{task_id}/toggle", response_model=TaskView)
async def toggle_task(task_id: int, tasks: TaskService = Depends(get_task_service)):
    return to_view(await tasks.toggle_complete(task_id), today())


@router.get("/{task_id}/timer", response_model=TimerRead)
async def read_timer(
    task_id: int,
    tasks: TaskService = Depends(get_task_service),
    timers: TimerRegistry = Depends(get_timers),
):
    tracker = timers.get(task_id)
    if tracker is not None:
        return tracker.read()
    task = await tasks.get_by_id(task_id)
    if task is None:
        raise _not_found()
    return TimerRead(
        task_id=task.id,
        elapsed_seconds=task.time_spent,
        is_running=task.timer_state.is_running,
        display=format_elapsed(task.time_spent),
    )


@router.post("/{task_id}/timer", response_model=TimerRead)
async def toggle_timer(
    task_id: int,
    tasks: TaskService = Depends(get_task_service),
    timers: TimerRegistry = Depends(get_timers),
):
    task = await tasks.get_by_id(task_id)
    if task is None:
        raise _not_found()
    tracker = await timers.toggle(task)
    return tracker.read()
