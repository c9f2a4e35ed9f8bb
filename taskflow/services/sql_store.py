from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import TransportError
from ..models.tables import MODELS
from .record_store import Record, TableSchema, get_schema

logger = logging.getLogger(__name__)


class SqlRecordStore:
    """
    Record store over the SQLAlchemy models in ``taskflow.models``.

    Each call opens its own session, so the store can be used from worker
    threads. Any SQLAlchemy failure is logged and re-raised as ``TransportError``.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    # ---- helpers ----

    @staticmethod
    def _model(table: str):
        get_schema(table)
        return MODELS[table]

    def _to_record(self, session: Session, schema: TableSchema, row: Any) -> Record:
        record: Record = {column.key: getattr(row, column.key) for column in row.__table__.columns}
        for name, lookup in schema.lookups.items():
            ref_id = record.get(name)
            target = session.get(MODELS[lookup.table], ref_id) if ref_id is not None else None
            record[name] = {"Id": ref_id, "Name": getattr(target, lookup.display_field) or ""} if target else None
        return record

    def _ordered(self, schema: TableSchema, stmt):
        model = MODELS[schema.name]
        column = getattr(model, schema.order_by)
        if schema.descending:
            return stmt.order_by(column.desc(), model.Id.desc())
        return stmt.order_by(column.asc(), model.Id.asc())

    def _run(self, action: str, table: str, fn):
        try:
            with self._session_factory() as session:
                return fn(session)
        except SQLAlchemyError as exc:
            logger.exception("Record store %s failed on %s", action, table)
            raise TransportError(f"Failed to {action} {table}: {exc.__class__.__name__}") from exc

    # ---- RecordStore ----

    def fetch_records(self, table: str) -> list[Record]:
        schema = get_schema(table)
        model = self._model(table)

        def _fetch(session: Session) -> list[Record]:
            rows = session.scalars(self._ordered(schema, select(model))).all()
            return [self._to_record(session, schema, row) for row in rows]

        return self._run("fetch", table, _fetch)

    def find_records(self, table: str, field_name: str, value: Any) -> list[Record]:
        schema = get_schema(table)
        model = self._model(table)
        if field_name not in schema.fields and field_name != "Id":
            raise ValueError(f"Unknown field for {table}: {field_name}")

        def _find(session: Session) -> list[Record]:
            stmt = select(model).where(getattr(model, field_name) == value)
            rows = session.scalars(self._ordered(schema, stmt)).all()
            return [self._to_record(session, schema, row) for row in rows]

        return self._run("query", table, _find)

    def get_record_by_id(self, table: str, record_id: int) -> Record | None:
        schema = get_schema(table)
        model = self._model(table)

        def _get(session: Session) -> Record | None:
            row = session.get(model, int(record_id))
            return self._to_record(session, schema, row) if row is not None else None

        return self._run("fetch", table, _get)

    def create_record(self, table: str, fields: Record) -> Record:
        schema = get_schema(table)
        schema.check_fields(fields)
        model = self._model(table)

        def _create(session: Session) -> Record:
            row = model(**fields)
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.debug("Created %s record id=%s", table, row.Id)
            return self._to_record(session, schema, row)

        return self._run("create", table, _create)

    def update_record(self, table: str, record_id: int, fields: Record) -> Record | None:
        schema = get_schema(table)
        schema.check_fields(fields)
        model = self._model(table)

        def _update(session: Session) -> Record | None:
            row = session.get(model, int(record_id))
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_record(session, schema, row)

        return self._run("update", table, _update)

    def delete_record(self, table: str, record_id: int) -> bool:
        model = self._model(table)

        def _delete(session: Session) -> bool:
            row = session.get(model, int(record_id))
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

        return self._run("delete", table, _delete)
