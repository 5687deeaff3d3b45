"""Validators for requests and normalized records."""

from .division_validator import DivisionValidator
from .request_validator import RequestValidator
from .result import ValidationResult

__all__ = ["DivisionValidator", "RequestValidator", "ValidationResult"]
