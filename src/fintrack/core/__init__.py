"""Core module - models, errors and pipeline."""

from .errors import (
    ErrorKind,
    ExtractionError,
    NormalizationError,
    ResponseFormatError,
    TransportError,
    ValidationError,
)
from .models import (
    CardBillItem,
    CardOption,
    ExpenseCategory,
    ExpenseStatus,
    ExtractionHints,
    ExtractionRequest,
    NormalizedCardBill,
    NormalizedExpense,
    NormalizedRecord,
    PersonDivision,
    RawExtractionResult,
    RecordType,
    SourceDocument,
)

__all__ = [
    "CardBillItem",
    "CardOption",
    "ErrorKind",
    "ExpenseCategory",
    "ExpenseStatus",
    "ExtractionError",
    "ExtractionHints",
    "ExtractionRequest",
    "NormalizationError",
    "NormalizedCardBill",
    "NormalizedExpense",
    "NormalizedRecord",
    "PersonDivision",
    "RawExtractionResult",
    "RecordType",
    "ResponseFormatError",
    "SourceDocument",
    "TransportError",
    "ValidationError",
]
