import os
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

# importing taskflow.main builds the module-level app; keep it off the SQLite file
os.environ.setdefault("TASKFLOW_STORE_BACKEND", "memory")

from taskflow.core.config import Settings  # noqa: E402
from taskflow.core.database import Base, build_engine, build_session_factory  # noqa: E402
from taskflow.main import create_app  # noqa: E402
from taskflow.schemas.task import Task  # noqa: E402
from taskflow.services.category_service import CategoryService  # noqa: E402
from taskflow.services.record_store import InMemoryRecordStore  # noqa: E402
from taskflow.services.recurrence_service import PatternService, RuleService  # noqa: E402
from taskflow.services.sql_store import SqlRecordStore  # noqa: E402
from taskflow.services.task_service import TaskService  # noqa: E402

TODAY = date(2024, 6, 1)


def make_task(task_id: int, **overrides) -> Task:
    values = {"id": task_id, "title": f"Task {task_id}", "created_at": datetime(2024, 5, 1, 9, 0, task_id % 60)}
    values.update(overrides)
    return Task(**values)


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()


@pytest.fixture
def sqlite_store(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'taskflow.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlRecordStore(build_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def task_service(store):
    return TaskService(store)


@pytest.fixture
def category_service(store):
    return CategoryService(store)


@pytest.fixture
def pattern_service(store):
    return PatternService(store)


@pytest.fixture
def rule_service(store):
    return RuleService(store)


@pytest.fixture
def settings():
    return Settings(store_backend="memory", timer_interval_seconds=60, _env_file=None)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
