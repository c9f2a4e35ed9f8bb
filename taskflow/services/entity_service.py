from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, Mapping, TypeVar

from .record_store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityService(Generic[T]):
    """
    Async CRUD over one record table.

    Store calls are blocking, so each one runs in a worker thread and the
    event loop stays free for other requests and for running timers.
    """

    table: str
    entity_name: str

    def __init__(self, store: RecordStore, from_record: Callable[[Mapping[str, Any]], T]) -> None:
        self.store = store
        self._from_record = from_record

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        return await asyncio.to_thread(fn, *args)

    async def get_all(self) -> list[T]:
        records = await self._call(self.store.fetch_records, self.table)
        return [self._from_record(record) for record in records]

    async def get_by_id(self, record_id: int) -> T | None:
        record = await self._call(self.store.get_record_by_id, self.table, record_id)
        return self._from_record(record) if record is not None else None

    async def find(self, field_name: str, value: Any) -> list[T]:
        records = await self._call(self.store.find_records, self.table, field_name, value)
        return [self._from_record(record) for record in records]

    async def delete(self, record_id: int) -> bool:
        deleted = await self._call(self.store.delete_record, self.table, record_id)
        if deleted:
            logger.info("Deleted %s id=%s", self.entity_name, record_id)
        return deleted

    async def _create(self, fields: dict[str, Any]) -> T:
        record = await self._call(self.store.create_record, self.table, fields)
        logger.info("Created %s id=%s", self.entity_name, record["Id"])
        return self._from_record(record)

    async def _update(self, record_id: int, fields: dict[str, Any]) -> T | None:
        if not fields:
            return await self.get_by_id(record_id)
        record = await self._call(self.store.update_record, self.table, record_id, fields)
        return self._from_record(record) if record is not None else None
