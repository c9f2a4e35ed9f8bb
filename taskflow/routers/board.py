from fastapi import APIRouter, Depends

from ..dependencies import get_category_service, get_task_service
from ..schemas.task import Board, StatusFilter
from ..services.category_service import CategoryService
from ..services.task_board import load_board
from ..services.task_service import TaskService

router = APIRouter(prefix="/board", tags=["board"])


@router.get("/", response_model=Board)
async def get_board(
    status: StatusFilter = StatusFilter.ALL,
    category: str | None = None,
    search: str | None = None,
    tasks: TaskService = Depends(get_task_service),
    categories: CategoryService = Depends(get_category_service),
):
    return await load_board(tasks, categories, status=status, category=category, search=search)
