"""In-process extraction client for tests and local development."""

import asyncio
from typing import Any

from ..core.models import ExtractionHints, SourceDocument
from .base import BaseExtractionClient


class MockExtractionClient(BaseExtractionClient):
    """
    Return a canned payload instead of calling the OCR API.

    Records how it was used so callers can assert on it: ``call_count``,
    ``cancelled_count`` (calls cancelled while in flight) and ``last_hints``.
    """

    name = "mock"

    def __init__(
        self,
        payload: Any = None,
        delay: float = 0.0,
        error: Exception | None = None,
        ready: bool = True,
    ):
        self.payload = payload if payload is not None else {"success": True, "data": {}}
        self.delay = delay
        self.error = error
        self.ready = ready
        self.call_count = 0
        self.cancelled_count = 0
        self.last_hints: ExtractionHints | None = None

    async def submit(
        self,
        document: SourceDocument,
        hints: ExtractionHints | None = None,
    ) -> Any:
        self.call_count += 1
        self.last_hints = hints
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled_count += 1
            raise
        if self.error is not None:
            raise self.error
        return self.payload

    async def check_ready(self) -> bool:
        return self.ready
