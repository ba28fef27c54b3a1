"""SQLAlchemy-backed resolver for JSON:API inclusion."""

from .resolver import SQLAlchemyResolver

__all__ = ["SQLAlchemyResolver"]
