"""API routes."""

from .extractions import router as extractions_router
from .health import router as health_router

__all__ = ["extractions_router", "health_router"]
