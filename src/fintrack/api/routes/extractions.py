"""Document extraction endpoint."""

import io
import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Header, Request, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ...config import get_settings
from ...core.errors import ValidationError
from ...core.models import ExtractionHints, ExtractionRequest
from ...core.pipeline import ExtractionPipeline
from ...exporters import CSVExporter
from ...utils.file_handlers import FileHandler

logger = logging.getLogger(__name__)
router = APIRouter(tags=["extractions"])

OUTPUT_FORMATS = ("json", "csv")


class ExtractionResponse(BaseModel):
    """Response for a successful extraction."""

    status: str = "ok"
    record: dict  # Normalized record, camelCase keys
    warnings: list[str]
    processing_time_ms: int


def get_pipeline(request: Request) -> ExtractionPipeline:
    """Shared pipeline created at startup."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = ExtractionPipeline(settings=get_settings())
        request.app.state.pipeline = pipeline
    return pipeline


@router.post("/extractions", response_model=ExtractionResponse)
async def create_extraction(
    pipeline: Annotated[ExtractionPipeline, Depends(get_pipeline)],
    file: Annotated[UploadFile, File(description="Financial document to extract")],
    document_type_hint: Annotated[str | None, Form()] = None,
    language_hint: Annotated[str | None, Form()] = None,
    output_format: Annotated[str, Form()] = "json",
    x_user_id: Annotated[str | None, Header()] = None,
):
    """
    Upload a bill, invoice or card statement and get a normalized record back.

    The record is tagged with the caller identity from the ``X-User-Id``
    header. Failures are returned with the status of their error class.
    """
    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Unsupported output format: {output_format}",
            details=[f"supported: {', '.join(OUTPUT_FORMATS)}"],
            field="output_format",
        )

    file_handler = FileHandler(pipeline.settings.max_file_size_bytes)
    document = await file_handler.read_upload(file)

    outcome = await pipeline.extract(
        ExtractionRequest(
            document=document,
            user_id=x_user_id or "",
            hints=ExtractionHints(
                document_type_hint=document_type_hint,
                language_hint=language_hint,
            ),
        )
    )
    record = outcome.unwrap()

    if output_format == "csv":
        exporter = CSVExporter()
        content = exporter.export(record)
        stem = Path(document.filename).stem or "extraction"
        return StreamingResponse(
            io.BytesIO(content.encode("utf-8")),
            media_type=exporter.mime_type,
            headers={
                "Content-Disposition": f'attachment; filename="{stem}{exporter.file_extension}"'
            },
        )

    return ExtractionResponse(
        record=record.model_dump(mode="json", by_alias=True),
        warnings=outcome.warnings,
        processing_time_ms=outcome.processing_time_ms,
    )
