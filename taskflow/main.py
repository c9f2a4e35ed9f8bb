import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, get_settings
from .core.database import Base, build_engine, build_session_factory
from .core.errors import register_exception_handlers
from .core.logging_setup import setup_logging
from .routers import board, categories, health, recurrence, tasks
from .services.category_seed import seed_default_categories
from .services.category_service import CategoryService
from .services.record_store import InMemoryRecordStore, RecordStore
from .services.recurrence_service import PatternService, RuleService
from .services.sql_store import SqlRecordStore
from .services.task_service import TaskService
from .services.timer import TimerRegistry

logger = logging.getLogger(__name__)


def _build_store(settings: Settings) -> RecordStore:
    if settings.store_backend == "memory":
        return InMemoryRecordStore()
    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    return SqlRecordStore(build_session_factory(engine))


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    store = store if store is not None else _build_store(settings)
    task_service = TaskService(store)
    app.state.settings = settings
    app.state.store = store
    app.state.task_service = task_service
    app.state.category_service = CategoryService(store)
    app.state.pattern_service = PatternService(store)
    app.state.rule_service = RuleService(store)
    app.state.timers = TimerRegistry(task_service, settings.timer_interval_seconds)

    app.include_router(health.router)
    app.include_router(tasks.router, prefix=settings.api_prefix)
    app.include_router(categories.router, prefix=settings.api_prefix)
    app.include_router(recurrence.router, prefix=settings.api_prefix)
    app.include_router(board.router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def _prime_state() -> None:
        if settings.seed_default_categories:
            await seed_default_categories(app.state.category_service)
        if settings.resume_running_timers:
            app.state.timers.resume(await task_service.get_all())
        logger.info("%s ready (%s store)", settings.app_name, settings.store_backend)

    @app.on_event("shutdown")
    async def _stop_timers() -> None:
        await app.state.timers.shutdown()

    return app


app = create_app()
