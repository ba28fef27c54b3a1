"""Resolvers backing relationship inclusion."""

from .base import Resolver
from .memory import InMemoryResolver

__all__ = ["InMemoryResolver", "Resolver"]
