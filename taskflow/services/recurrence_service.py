from __future__ import annotations

from ..schemas.recurrence import (
    RecurrenceRule,
    RecurrenceRuleCreate,
    RecurrenceRuleUpdate,
    RecurringTaskPattern,
    RecurringTaskPatternCreate,
    RecurringTaskPatternUpdate,
)
from .entity_service import EntityService
from .mappers import (
    pattern_create_fields,
    pattern_from_record,
    pattern_patch_fields,
    rule_create_fields,
    rule_from_record,
    rule_patch_fields,
)
from .record_store import PATTERN_TABLE, RULE_TABLE, RecordStore


class PatternService(EntityService[RecurringTaskPattern]):
    table = PATTERN_TABLE
    entity_name = "recurring task pattern"

    def __init__(self, store: RecordStore) -> None:
        super().__init__(store, pattern_from_record)

    async def create(self, payload: RecurringTaskPatternCreate) -> RecurringTaskPattern:
        return await self._create(pattern_create_fields(payload))

    async def update(self, pattern_id: int, patch: RecurringTaskPatternUpdate) -> RecurringTaskPattern | None:
        return await self._update(pattern_id, pattern_patch_fields(patch))


class RuleService(EntityService[RecurrenceRule]):
    table = RULE_TABLE
    entity_name = "recurrence rule"

    def __init__(self, store: RecordStore) -> None:
        super().__init__(store, rule_from_record)

    async def create(self, payload: RecurrenceRuleCreate) -> RecurrenceRule:
        return await self._create(rule_create_fields(payload))

    async def update(self, rule_id: int, patch: RecurrenceRuleUpdate) -> RecurrenceRule | None:
        return await self._update(rule_id, rule_patch_fields(patch))

    async def get_by_task(self, task_id: int) -> list[RecurrenceRule]:
        return await self.find("task_c", task_id)
