"""Document extraction pipeline."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError as SchemaError

from ..config import Settings, get_settings
from ..extractors import BaseExtractionClient, OcrApiClient
from ..normalizers import RecordNormalizer
from ..validators import RequestValidator
from .errors import ExtractionError, ResponseFormatError, TransportError
from .models import (
    ExtractionRequest,
    NormalizedCardBill,
    NormalizedExpense,
    RawExtractionResult,
)

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Stages an extraction moves through."""

    RECEIVED = "received"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    AWAITING_RESPONSE = "awaiting_response"
    VALIDATING_RESPONSE = "validating_response"
    NORMALIZING = "normalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ExtractionOutcome:
    """
    Result of one extraction: either a record or a classified error.

    ``failed_stage`` names the stage that produced ``error``.
    """

    record: NormalizedExpense | NormalizedCardBill | None = None
    error: ExtractionError | None = None
    stage: PipelineStage = PipelineStage.DONE
    failed_stage: PipelineStage | None = None
    processing_time_ms: int = 0
    transitions: list[PipelineStage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.record is not None

    @property
    def warnings(self) -> list[str]:
        return list(self.record.warnings) if self.record is not None else []

    def unwrap(self) -> NormalizedExpense | NormalizedCardBill:
        """Return the record or raise the error."""
        if self.error is not None:
            raise self.error
        assert self.record is not None
        return self.record


class ExtractionPipeline:
    """
    Main extraction pipeline.

    Orchestrates: Validation -> Submission -> Response validation -> Normalization -> Tagging

    Each call is independent: the pipeline keeps no per-request state, so one
    instance can serve any number of concurrent extractions. Exactly one call
    is made to the extraction client per request that passes local validation;
    retries are left to the caller.
    """

    def __init__(
        self,
        client: BaseExtractionClient | None = None,
        normalizer: RecordNormalizer | None = None,
        request_validator: RequestValidator | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize pipeline with its collaborators.

        If not provided, creates default instances.
        """
        self.settings = settings or get_settings()
        self.client = client or OcrApiClient(self.settings)
        self.normalizer = normalizer or RecordNormalizer(self.settings)
        self.request_validator = request_validator or RequestValidator(self.settings)

    @property
    def timeout_seconds(self) -> float:
        return self.settings.ocr_request_timeout_seconds

    async def extract(self, request: ExtractionRequest | dict[str, Any]) -> ExtractionOutcome:
        """
        Run a request through every stage.

        Args:
            request: The upload plus its owner identity

        Returns:
            ExtractionOutcome holding the normalized record or the classified
            error of the first failing stage. Cancellation of the calling task
            is not an outcome: it propagates and aborts the in-flight call.
        """
        start_time = time.monotonic()
        outcome = ExtractionOutcome(transitions=[PipelineStage.RECEIVED])

        def enter(stage: PipelineStage) -> None:
            outcome.transitions.append(stage)
            logger.debug(f"Extraction stage -> {stage.value}")

        try:
            enter(PipelineStage.VALIDATING)
            request = self.request_validator.validate(request)
            document = request.document
            logger.info(f"Extracting {document.filename} ({document.media_type}, {document.size} bytes)")

            enter(PipelineStage.SUBMITTING)
            payload = await self._submit(request, enter)

            enter(PipelineStage.VALIDATING_RESPONSE)
            raw = self._validate_response(payload)

            enter(PipelineStage.NORMALIZING)
            record = self.normalizer.normalize(
                raw,
                user_id=request.user_id,
                source_file=document.filename or None,
            )
        except ExtractionError as e:
            outcome.failed_stage = outcome.transitions[-1]
            outcome.error = e
            outcome.stage = PipelineStage.FAILED
            outcome.transitions.append(PipelineStage.FAILED)
            outcome.processing_time_ms = int((time.monotonic() - start_time) * 1000)
            logger.warning(
                f"Extraction failed at {outcome.failed_stage.value}: {e.kind.value} {e.message}"
            )
            return outcome

        enter(PipelineStage.DONE)
        outcome.record = record
        outcome.stage = PipelineStage.DONE
        outcome.processing_time_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"Extraction done: {record.record_type} in {outcome.processing_time_ms} ms "
            f"({len(record.warnings)} warnings)"
        )
        return outcome

    async def _submit(self, request: ExtractionRequest, enter) -> Any:
        """Single bounded call to the extraction client."""
        enter(PipelineStage.AWAITING_RESPONSE)
        try:
            # wait_for cancels the inner call on timeout, closing its connection
            return await asyncio.wait_for(
                self.client.submit(request.document, request.hints),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"OCR API did not respond within {self.timeout_seconds:g}s",
                timed_out=True,
            ) from e
        except ExtractionError:
            raise
        except OSError as e:
            raise TransportError(f"Network error talking to the OCR API: {e}") from e

    def _validate_response(self, payload: Any) -> RawExtractionResult:
        """Schema-validate the untrusted body before any field is read."""
        if not isinstance(payload, dict):
            raise ResponseFormatError(
                "OCR API response is not a JSON object",
                details=[f"got {type(payload).__name__}"],
            )
        try:
            raw = RawExtractionResult.model_validate(payload)
        except SchemaError as e:
            raise ResponseFormatError(
                "OCR API response does not match the expected schema",
                details=[
                    f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                    for err in e.errors()
                ],
            ) from None

        if not raw.success:
            raise TransportError(f"OCR API reported a failed extraction: {raw.remote_error}")
        return raw
