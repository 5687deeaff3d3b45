"""Client for the remote OCR extraction API."""

import json
import logging
import time
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..core.errors import ResponseFormatError, TransportError
from ..core.models import ExtractionHints, SourceDocument
from .base import BaseExtractionClient

logger = logging.getLogger(__name__)


class OcrApiClient(BaseExtractionClient):
    """
    Upload documents to the OCR API as multipart/form-data.

    One ``httpx.AsyncClient`` (and its connection pool) is shared by every call
    made through this instance. Nothing request-specific is stored on it.
    """

    name = "ocr_api"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Settings to use. If None, uses get_settings().
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the pooled HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self.settings.ocr_request_timeout_seconds,
                    connect=min(10.0, self.settings.ocr_request_timeout_seconds),
                ),
                limits=httpx.Limits(
                    max_connections=self.settings.ocr_max_connections,
                    max_keepalive_connections=self.settings.ocr_max_connections,
                ),
                transport=self._transport,
            )
        return self._client

    async def submit(
        self,
        document: SourceDocument,
        hints: ExtractionHints | None = None,
    ) -> Any:
        """Upload ``document`` to the extraction endpoint and decode the JSON body."""
        if not self.settings.ocr_api_configured:
            raise TransportError(
                "OCR API endpoint is not configured",
                details=[f"OCR_API_BASE_URL={self.settings.ocr_api_base_url!r}"],
            )

        url = self.settings.ocr_extract_url
        files = {"file": (document.filename or "document", document.content, document.media_type)}
        data = hints.as_form_fields() if hints else {}

        t0 = time.monotonic()
        try:
            response = await self.client.post(url, files=files, data=data)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"OCR API did not respond within {self.settings.ocr_request_timeout_seconds:g}s",
                details=[type(e).__name__],
                timed_out=True,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Could not reach the OCR API: {e}", details=[type(e).__name__]) from e

        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.info(
            f"OCR API answered {response.status_code} in {elapsed_ms:.0f} ms "
            f"for {document.filename} ({document.size} bytes)"
        )

        if not response.is_success:
            raise TransportError(
                self._error_message(response),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseFormatError(
                "OCR API returned a body that is not JSON",
                details=[f"content-type: {response.headers.get('content-type', 'unknown')}", str(e)],
            ) from e

    async def check_ready(self) -> bool:
        """
        Probe the readiness endpoint.

        200 means ready; 503 means the service is still warming up. Any other
        status or a network failure counts as not ready.
        """
        if not self.settings.ocr_api_configured:
            return False
        try:
            response = await self.client.get(
                self.settings.ocr_health_url,
                timeout=self.settings.ocr_health_timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning(f"OCR API readiness probe failed: {e}")
            return False

        if response.status_code == 503:
            logger.info("OCR API is still warming up")
        return response.status_code == 200

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Remote ``error``/``message`` when the error body is JSON, else a generic message."""
        message = f"OCR API returned error {response.status_code}"
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return message
        if isinstance(body, dict):
            remote = body.get("error") or body.get("message") or body.get("detail")
            if isinstance(remote, str) and remote:
                return f"{message}: {remote}"
        return message
