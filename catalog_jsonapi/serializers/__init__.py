"""Model serializers for JSON:API."""

from .base import JSONAPISerializer

__all__ = ["JSONAPISerializer"]
