from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..core.timeutils import utcnow

logger = logging.getLogger(__name__)

TASK_TABLE = "task_c"
CATEGORY_TABLE = "category_c"
PATTERN_TABLE = "recurring_task_pattern_c"
RULE_TABLE = "recurrence_rule_c"

Record = dict[str, Any]


@dataclass(frozen=True)
class LookupField:
    """A reference to another table, read back as ``{"Id": ..., "Name": ...}``."""

    table: str
    display_field: str = "Name"


@dataclass(frozen=True)
class TableSchema:
    name: str
    fields: tuple[str, ...]
    lookups: dict[str, LookupField] = field(default_factory=dict)
    order_by: str = "CreatedOn"
    descending: bool = True

    def check_fields(self, fields: Record) -> None:
        unknown = set(fields) - set(self.fields)
        if unknown:
            raise ValueError(f"Unknown fields for {self.name}: {sorted(unknown)}")


TABLES: dict[str, TableSchema] = {
    TASK_TABLE: TableSchema(
        name=TASK_TABLE,
        fields=(
            "title_c",
            "description_c",
            "category_c",
            "sub_category_c",
            "priority_c",
            "due_date_c",
            "completed_c",
            "completed_at_c",
            "time_spent_c",
            "timer_state_is_running_c",
            "timer_state_last_updated_c",
        ),
        lookups={"category_c": LookupField(CATEGORY_TABLE)},
    ),
    CATEGORY_TABLE: TableSchema(
        name=CATEGORY_TABLE,
        fields=("Name", "color_c", "icon_c", "sub_category_c"),
        order_by="Name",
        descending=False,
    ),
    PATTERN_TABLE: TableSchema(
        name=PATTERN_TABLE,
        fields=(
            "Name",
            "frequency_c",
            "interval_c",
            "day_of_week_c",
            "day_of_month_c",
            "week_of_month_c",
            "end_of_month_c",
        ),
    ),
    RULE_TABLE: TableSchema(
        name=RULE_TABLE,
        fields=("Name", "task_c", "recurring_task_pattern_c", "start_date_c", "end_date_c"),
        lookups={
            "task_c": LookupField(TASK_TABLE, display_field="title_c"),
            "recurring_task_pattern_c": LookupField(PATTERN_TABLE),
        },
    ),
}


def get_schema(table: str) -> TableSchema:
    try:
        return TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}") from None


class RecordStore(Protocol):
    """
    CRUD access to the record tables.

    Records are flat dicts keyed by storage field names. Lookup fields are
    written as integer ids and read back as ``{"Id": int, "Name": str}`` (or
    ``None`` when unset or dangling). Every method may raise ``TransportError``.
    """

    def fetch_records(self, table: str) -> list[Record]: ...
    def find_records(self, table: str, field_name: str, value: Any) -> list[Record]: ...
    def get_record_by_id(self, table: str, record_id: int) -> Record | None: ...
    def create_record(self, table: str, fields: Record) -> Record: ...
    def update_record(self, table: str, record_id: int, fields: Record) -> Record | None: ...
    def delete_record(self, table: str, record_id: int) -> bool: ...


class InMemoryRecordStore:
    """
    Record store that keeps every table in a dict owned by the instance.

    Used for the ``memory`` backend and in tests. Each instance is independent;
    pass it to the services that need it.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[int, Record]] = {name: {} for name in TABLES}
        self._next_ids: dict[str, int] = {name: 1 for name in TABLES}
        self._lock = threading.Lock()

    # ---- helpers ----

    def _rows(self, table: str) -> dict[int, Record]:
        get_schema(table)
        return self._tables[table]

    def _resolve(self, schema: TableSchema, row: Record) -> Record:
        out = copy.deepcopy(row)
        for name, lookup in schema.lookups.items():
            ref_id = row.get(name)
            target = self._tables[lookup.table].get(ref_id) if ref_id is not None else None
            out[name] = {"Id": ref_id, "Name": target.get(lookup.display_field) or ""} if target else None
        return out

    def _sorted(self, schema: TableSchema, rows: list[Record]) -> list[Record]:
        # secondary key keeps same-instant inserts deterministic
        by_id = sorted(rows, key=lambda r: r["Id"], reverse=schema.descending)
        return sorted(
            by_id,
            key=lambda r: (r.get(schema.order_by) is None, r.get(schema.order_by) or ""),
            reverse=schema.descending,
        )

    # ---- RecordStore ----

    def fetch_records(self, table: str) -> list[Record]:
        schema = get_schema(table)
        with self._lock:
            rows = [self._resolve(schema, row) for row in self._rows(table).values()]
        return self._sorted(schema, rows)

    def find_records(self, table: str, field_name: str, value: Any) -> list[Record]:
        schema = get_schema(table)
        if field_name not in schema.fields and field_name != "Id":
            raise ValueError(f"Unknown field for {table}: {field_name}")
        with self._lock:
            rows = [
                self._resolve(schema, row)
                for row in self._rows(table).values()
                if row.get(field_name) == value
            ]
        return self._sorted(schema, rows)

    def get_record_by_id(self, table: str, record_id: int) -> Record | None:
        schema = get_schema(table)
        with self._lock:
            row = self._rows(table).get(int(record_id))
            return self._resolve(schema, row) if row is not None else None

    def create_record(self, table: str, fields: Record) -> Record:
        schema = get_schema(table)
        schema.check_fields(fields)
        with self._lock:
            record_id = self._next_ids[table]
            self._next_ids[table] = record_id + 1
            row = {name: None for name in schema.fields}
            row.update(copy.deepcopy(fields))
            row["Id"] = record_id
            row["CreatedOn"] = utcnow()
            self._tables[table][record_id] = row
            logger.debug("Created %s record id=%s", table, record_id)
            return self._resolve(schema, row)

    def update_record(self, table: str, record_id: int, fields: Record) -> Record | None:
        schema = get_schema(table)
        schema.check_fields(fields)
        with self._lock:
            row = self._rows(table).get(int(record_id))
            if row is None:
                return None
            row.update(copy.deepcopy(fields))
            return self._resolve(schema, row)

    def delete_record(self, table: str, record_id: int) -> bool:
        with self._lock:
            return self._rows(table).pop(int(record_id), None) is not None
