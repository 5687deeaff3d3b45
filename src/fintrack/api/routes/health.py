"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...core.pipeline import ExtractionPipeline
from .extractions import get_pipeline

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns service status and version.
    """
    from fintrack import __version__

    return {
        "status": "healthy",
        "version": __version__,
        "service": "fintrack",
    }


@router.get("/ready")
async def readiness_check(
    pipeline: Annotated[ExtractionPipeline, Depends(get_pipeline)],
) -> JSONResponse:
    """
    Readiness check endpoint.

    Probes the remote OCR API; answers 503 while it is unreachable or warming up.
    """
    checks = {
        "api": True,
        "ocr_api": await pipeline.client.check_ready(),
    }

    all_ready = all(checks.values())

    return JSONResponse(
        status_code=200 if all_ready else 503,
        content={
            "ready": all_ready,
            "checks": checks,
        },
    )
