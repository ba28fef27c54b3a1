"""Mapping-backed resolver."""

from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping

from .base import Resolver


class InMemoryResolver(Resolver):
    """Resolve resources from an in-process store keyed by ``(type, id)``."""

    def __init__(self, resources: Iterable[Mapping[str, Any]] = ()) -> None:
        self._store: dict[tuple[str, str], dict[str, Any]] = {}
        for resource in resources:
            self.set(resource)

    def set(self, resource: Mapping[str, Any]) -> None:
        """Store or replace a resource object."""
        key = (str(resource["type"]), str(resource["id"]))
        self._store[key] = copy.deepcopy(dict(resource))

    def remove(self, resource_type: str, resource_id: str) -> None:
        """Forget a stored resource; later lookups of it are misses."""
        self._store.pop((resource_type, resource_id), None)

    async def resolve(self, resource_type: str, resource_id: str) -> dict[str, Any] | None:
        """Return a copy of the stored resource, or ``None``."""
        resource = self._store.get((str(resource_type), str(resource_id)))
        return copy.deepcopy(resource) if resource is not None else None
