from __future__ import annotations

import logging

from ..core.errors import NotFoundError
from ..core.timeutils import utcnow
from ..schemas.task import Task, TaskCreate, TaskUpdate
from .entity_service import EntityService
from .mappers import task_create_fields, task_from_record, task_patch_fields
from .record_store import CATEGORY_TABLE, TASK_TABLE, RecordStore

logger = logging.getLogger(__name__)


class TaskService(EntityService[Task]):
    table = TASK_TABLE
    entity_name = "task"

    def __init__(self, store: RecordStore) -> None:
        super().__init__(store, task_from_record)

    async def resolve_category_id(self, name: str | None) -> int | None:
        """Category name -> id; an unknown name resolves to ``None`` rather than failing."""
        if not name:
            return None
        records = await self._call(self.store.find_records, CATEGORY_TABLE, "Name", name)
        if not records:
            logger.warning("Category %r not found; task will have no category", name)
            return None
        return records[0]["Id"]

    async def create(self, payload: TaskCreate) -> Task:
        category_id = await self.resolve_category_id(payload.category)
        return await self._create(task_create_fields(payload, category_id))

    async def update(self, task_id: int, patch: TaskUpdate) -> Task | None:
        category_id = None
        if "category" in patch.model_fields_set:
            category_id = await self.resolve_category_id(patch.category)
        fields = task_patch_fields(patch, category_id)

        # completed_at is set iff completed
        if "completed_c" in fields:
            if not fields["completed_c"]:
                fields["completed_at_c"] = None
            elif fields.get("completed_at_c") is None:
                fields["completed_at_c"] = utcnow()
        elif "completed_at_c" in fields:
            fields["completed_c"] = fields["completed_at_c"] is not None

        return await self._update(task_id, fields)

    async def toggle_complete(self, task_id: int) -> Task:
        current = await self.get_by_id(task_id)
        if current is None:
            raise NotFoundError("Task", task_id)
        updated = await self.update(task_id, TaskUpdate(completed=not current.completed))
        if updated is None:
            raise NotFoundError("Task", task_id)
        return updated

    async def get_by_category(self, category: str) -> list[Task]:
        category_id = await self.resolve_category_id(category)
        if category_id is None:
            return []
        return await self.find("category_c", category_id)

    async def get_by_status(self, completed: bool) -> list[Task]:
        return await self.find("completed_c", completed)
