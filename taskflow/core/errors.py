from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


class TaskFlowError(Exception):
    """Base class for errors surfaced to API callers."""


class ValidationError(TaskFlowError):
    """Local input rules failed; ``errors`` maps field keys to messages."""

    def __init__(self, errors: dict[str, str], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.errors = dict(errors)


class NotFoundError(TaskFlowError):
    def __init__(self, entity: str, record_id: int) -> None:
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class TransportError(TaskFlowError):
    """A record store call failed."""


class PartialCreationError(TransportError):
    """
    A multi-step creation failed after some records were written.

    ``created`` maps record kind ("pattern", "task") to the ids that were left
    behind; no compensating delete is attempted.
    """

    def __init__(self, step: str, created: dict[str, int], cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to create {step}; already created: {created or 'nothing'}")
        self.step = step
        self.created = dict(created)
        self.cause = cause


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(TransportError)
    async def _transport_error(request: Request, exc: TransportError) -> JSONResponse:
        retryable = request.method == "GET"
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        content: dict = {"detail": str(exc), "retryable": retryable}
        if isinstance(exc, PartialCreationError):
            content["created"] = exc.created
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=content)
