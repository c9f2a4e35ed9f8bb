from __future__ import annotations

from ..core.errors import ValidationError
from ..schemas.category import Category, CategoryCreate, CategoryUpdate
from .entity_service import EntityService
from .mappers import category_create_fields, category_from_record, category_patch_fields
from .record_store import CATEGORY_TABLE, RecordStore


class CategoryService(EntityService[Category]):
    table = CATEGORY_TABLE
    entity_name = "category"

    def __init__(self, store: RecordStore) -> None:
        super().__init__(store, category_from_record)

    async def _ensure_unique(self, name: str, exclude_id: int | None = None) -> None:
        for existing in await self.find("Name", name):
            if existing.id != exclude_id:
                raise ValidationError({"name": f"Category '{name}' already exists"})

    async def create(self, payload: CategoryCreate) -> Category:
        await self._ensure_unique(payload.name)
        return await self._create(category_create_fields(payload))

    async def update(self, category_id: int, patch: CategoryUpdate) -> Category | None:
        fields = category_patch_fields(patch)
        if "Name" in fields:
            await self._ensure_unique(fields["Name"], exclude_id=category_id)
        return await self._update(category_id, fields)
