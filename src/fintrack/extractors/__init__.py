"""Extraction clients for remote document services."""

from .base import BaseExtractionClient
from .mock import MockExtractionClient
from .ocr_api import OcrApiClient

__all__ = ["BaseExtractionClient", "MockExtractionClient", "OcrApiClient"]
