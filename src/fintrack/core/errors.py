"""Classified failures of the extraction pipeline."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure classes surfaced to callers."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    RESPONSE_FORMAT = "response_format"
    NORMALIZATION = "normalization"


class ExtractionError(Exception):
    """Base class for every failure the pipeline returns."""

    kind: ErrorKind
    retryable: bool = False

    def __init__(
        self,
        message: str,
        details: list[str] | None = None,
        field: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or []
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used by the HTTP layer."""
        return {
            "error": self.kind.value,
            "detail": self.message,
            "details": self.details,
            "field": self.field,
            "retryable": self.retryable,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, field={self.field!r})"


class ValidationError(ExtractionError):
    """Malformed, oversized or unsupported request. Never retried."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        details: list[str] | None = None,
        field: str | None = None,
        reason: str = "invalid",
    ):
        super().__init__(message, details, field)
        # "too_large", "unsupported_media_type", "empty", "missing_identity", "invalid"
        self.reason = reason


class TransportError(ExtractionError):
    """Network failure, timeout or non-success answer from the OCR API."""

    kind = ErrorKind.TRANSPORT
    retryable = True

    def __init__(
        self,
        message: str,
        details: list[str] | None = None,
        status_code: int | None = None,
        timed_out: bool = False,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.timed_out = timed_out

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["timed_out"] = self.timed_out
        return data


class ResponseFormatError(ExtractionError):
    """OCR API answered with a body that does not match the expected schema."""

    kind = ErrorKind.RESPONSE_FORMAT


class NormalizationError(ExtractionError):
    """A structurally valid field could not be coerced to its semantic type."""

    kind = ErrorKind.NORMALIZATION

    def __init__(self, message: str, field: str, value: Any = None):
        super().__init__(message, field=field)
        self.value = value
