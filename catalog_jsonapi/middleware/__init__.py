"""ASGI middleware for JSON:API responses."""

from .error_handler import ErrorHandlerMiddleware
from .response_formatter import JSONAPIResponseMiddleware

__all__ = ["ErrorHandlerMiddleware", "JSONAPIResponseMiddleware"]
