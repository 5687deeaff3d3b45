"""Utility modules."""

from .file_handlers import FileHandler, resolve_media_type

__all__ = ["FileHandler", "resolve_media_type"]
