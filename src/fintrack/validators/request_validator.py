"""Local validation of extraction requests, before any network I/O."""

import logging
from typing import Any

from pydantic import ValidationError as SchemaError

from ..config import Settings, get_settings
from ..core.errors import ValidationError
from ..core.models import ExtractionRequest
from ..utils.file_handlers import resolve_media_type

logger = logging.getLogger(__name__)


class RequestValidator:
    """
    Check an upload against the configured limits.

    Checks, in order: request shape, owner identity, empty payload, size limit
    and media type allow-list. The first failure is raised as a
    ``ValidationError`` carrying a machine-readable ``reason``.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def validate(self, request: ExtractionRequest | dict[str, Any]) -> ExtractionRequest:
        """
        Validate a request and return it in model form.

        Args:
            request: ExtractionRequest, or a plain mapping with the same shape

        Returns:
            The validated ExtractionRequest with its media type resolved

        Raises:
            ValidationError: On the first failed check
        """
        try:
            request = ExtractionRequest.model_validate(request)
        except SchemaError as e:
            raise ValidationError(
                "Malformed extraction request",
                details=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
                ],
                reason="invalid",
            ) from None

        if not request.user_id.strip():
            raise ValidationError(
                "Owner identity is required", field="user_id", reason="missing_identity"
            )

        document = request.document
        if document.size == 0:
            raise ValidationError("Uploaded file is empty", field="document.content", reason="empty")

        max_bytes = self.settings.max_file_size_bytes
        if document.size > max_bytes:
            raise ValidationError(
                f"File size {document.size} bytes exceeds maximum {max_bytes} bytes",
                field="document.content",
                reason="too_large",
            )

        media_type = resolve_media_type(document.media_type, document.filename)
        allowed = self.settings.allowed_media_types
        if media_type not in allowed:
            raise ValidationError(
                f"Unsupported media type {media_type or 'unknown'}",
                details=[f"Accepted types: {', '.join(allowed) or 'none'}"],
                field="document.media_type",
                reason="unsupported_media_type",
            )

        if media_type != document.media_type:
            logger.debug(f"Resolved media type {document.media_type!r} -> {media_type!r}")
            request = request.model_copy(
                update={"document": document.model_copy(update={"media_type": media_type})}
            )

        return request
