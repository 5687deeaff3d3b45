"""Tests for the OCR API client."""

import httpx
import pytest

from fintrack.core.errors import ResponseFormatError, TransportError
from fintrack.core.models import ExtractionHints
from fintrack.extractors import MockExtractionClient, OcrApiClient


def make_client(settings, handler) -> OcrApiClient:
    return OcrApiClient(settings, transport=httpx.MockTransport(handler))


class TestOcrApiClientSubmit:
    """Test cases for OcrApiClient.submit."""

    @pytest.mark.asyncio
    async def test_uploads_multipart_and_decodes_json(self, settings, pdf_document, expense_payload):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json=expense_payload)

        client = make_client(settings, handler)
        try:
            body = await client.submit(pdf_document, ExtractionHints(language_hint="pt"))
        finally:
            await client.aclose()

        assert body == expense_payload
        assert seen["method"] == "POST"
        assert seen["url"] == "https://ocr.test/extract"
        assert seen["content_type"].startswith("multipart/form-data")
        assert b'name="file"; filename="conta_luz.pdf"' in seen["body"]
        assert b"application/pdf" in seen["body"]
        assert b'name="language_hint"' in seen["body"]
        assert b'name="document_type_hint"' not in seen["body"]

    @pytest.mark.asyncio
    async def test_error_status_is_transport_error(self, settings, pdf_document):
        client = make_client(
            settings, lambda request: httpx.Response(500, json={"error": "model overloaded"})
        )

        with pytest.raises(TransportError) as exc_info:
            await client.submit(pdf_document)

        assert exc_info.value.status_code == 500
        assert "model overloaded" in exc_info.value.message
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_error_status_with_html_body(self, settings, pdf_document):
        client = make_client(settings, lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

        with pytest.raises(TransportError) as exc_info:
            await client.submit(pdf_document)

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "OCR API returned error 502"

    @pytest.mark.asyncio
    async def test_non_json_success_body_is_response_format_error(self, settings, pdf_document):
        client = make_client(
            settings,
            lambda request: httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"}),
        )

        with pytest.raises(ResponseFormatError) as exc_info:
            await client.submit(pdf_document)

        assert any("text/html" in detail for detail in exc_info.value.details)

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self, settings, pdf_document):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(settings, handler)

        with pytest.raises(TransportError) as exc_info:
            await client.submit(pdf_document)

        assert not exc_info.value.timed_out
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_read_timeout_is_flagged(self, settings, pdf_document):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(settings, handler)

        with pytest.raises(TransportError) as exc_info:
            await client.submit(pdf_document)

        assert exc_info.value.timed_out

    @pytest.mark.asyncio
    async def test_unconfigured_endpoint_makes_no_call(self, settings, pdf_document):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        client = make_client(settings.model_copy(update={"ocr_api_base_url": ""}), handler)

        with pytest.raises(TransportError):
            await client.submit(pdf_document)

        assert calls == []


class TestOcrApiClientReady:
    """Test cases for OcrApiClient.check_ready."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, expected", [(200, True), (503, False), (500, False)])
    async def test_status_codes(self, settings, status, expected):
        def handler(request):
            assert str(request.url) == "https://ocr.test/health/ready"
            return httpx.Response(status, json={"status": "ok"})

        client = make_client(settings, handler)

        assert await client.check_ready() is expected

    @pytest.mark.asyncio
    async def test_network_failure_is_not_ready(self, settings):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert await make_client(settings, handler).check_ready() is False

    @pytest.mark.asyncio
    async def test_aclose_resets_client(self, settings):
        client = make_client(settings, lambda request: httpx.Response(200))
        first = client.client

        await client.aclose()

        assert first.is_closed
        assert client.client is not first

        await client.aclose()


class TestMockExtractionClient:
    @pytest.mark.asyncio
    async def test_returns_payload_and_counts_calls(self, pdf_document, expense_payload):
        client = MockExtractionClient(payload=expense_payload)
        hints = ExtractionHints(document_type_hint="boleto")

        assert await client.submit(pdf_document, hints) == expense_payload
        assert client.call_count == 1
        assert client.last_hints == hints

    @pytest.mark.asyncio
    async def test_raises_configured_error(self, pdf_document):
        client = MockExtractionClient(error=TransportError("down"))

        with pytest.raises(TransportError):
            await client.submit(pdf_document)
