from functools import lru_cache
from typing import Literal
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:4173",
    "http://localhost:3000",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="TASKFLOW_")

    app_name: str = "TaskFlow"
    api_prefix: str = "/api"
    database_url: str = "sqlite:///./taskflow.db"
    store_backend: Literal["sql", "memory"] = "sql"
    allowed_origins: list[str] | str = Field(default_factory=lambda: _DEFAULT_ORIGINS.copy())
    log_level: str = "INFO"
    timer_interval_seconds: float = Field(default=1.0, gt=0)
    seed_default_categories: bool = True
    resume_running_timers: bool = True

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return _DEFAULT_ORIGINS.copy()
            return [origin.strip() for origin in stripped.split(",") if origin.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    logging.getLogger("uvicorn").info("Store backend resolved: %s", settings.store_backend)
    return settings
