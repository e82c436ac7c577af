"""Translate domain errors into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from commerce.exceptions import SubmissionError

logger = structlog.get_logger(__name__)


def _messages(exc) -> dict | list | str:
    messages = getattr(exc, "messages", None)
    return messages if messages is not None else str(exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": type(exc).__name__, "messages": _messages(exc)},
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "NotFound", "messages": _messages(exc)},
    )


async def invalid_operation_handler(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": "InvalidOperation", "messages": _messages(exc)},
    )


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    logger.error("Order submission failed", path=request.url.path)
    return JSONResponse(
        status_code=502,
        content={"error": "SubmissionError", "messages": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Protean's defaults first, then the mappings this service pins down."""
    register_protean_handlers(app)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidOperationError, invalid_operation_handler)
    app.add_exception_handler(SubmissionError, submission_error_handler)
