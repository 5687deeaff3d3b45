"""API middleware."""

from .error_handler import error_handler_middleware, setup_error_handlers, status_code_for

__all__ = ["error_handler_middleware", "setup_error_handlers", "status_code_for"]
