"""Normalizers - OCR output to application records."""

from .amounts import parse_amount
from .categories import categorize_description, map_card, map_category
from .dates import parse_date
from .record_normalizer import RecordNormalizer

__all__ = [
    "RecordNormalizer",
    "categorize_description",
    "map_card",
    "map_category",
    "parse_amount",
    "parse_date",
]
