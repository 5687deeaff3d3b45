"""Error handling middleware."""

import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from ...config import get_settings
from ...core.errors import (
    ErrorKind,
    ExtractionError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.TRANSPORT: 503,
    ErrorKind.RESPONSE_FORMAT: 502,
    ErrorKind.NORMALIZATION: 422,
}

STATUS_BY_VALIDATION_REASON: dict[str, int] = {
    "too_large": 413,
    "unsupported_media_type": 415,
}


def status_code_for(error: ExtractionError) -> int:
    """HTTP status for a classified extraction failure."""
    if isinstance(error, ValidationError):
        return STATUS_BY_VALIDATION_REASON.get(error.reason, 400)
    if isinstance(error, TransportError) and error.timed_out:
        return 504
    return STATUS_BY_KIND.get(error.kind, 500)


async def error_handler_middleware(
    request: Request,
    call_next: Callable,
) -> Response:
    """
    Global error handler middleware.

    Catches unhandled exceptions and returns proper JSON error responses.
    """
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error processing {request.method} {request.url.path}")

        return JSONResponse(
            status_code=500,
            content={
                "error": "internal",
                "detail": str(e) if get_settings().debug else "An unexpected error occurred",
                "retryable": False,
            },
        )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup exception handlers for the FastAPI app."""

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())
