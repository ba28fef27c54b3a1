"""Relationship inclusion with tolerance for broken references."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Iterator, Mapping

from catalog_jsonapi.resolvers.base import Resolver

from .errors import ResolverError

logger = logging.getLogger(__name__)

ResourceKey = tuple[str, str]


def resource_key(resource: Mapping[str, Any]) -> ResourceKey:
    return (str(resource.get("type", "")), str(resource.get("id", "")))


def _identifier_key(identifier: Any) -> ResourceKey | None:
    if not isinstance(identifier, Mapping):
        return None
    if identifier.get("type") is None or identifier.get("id") is None:
        return None
    return resource_key(identifier)


class RelationshipIncluder:
    """Resolve requested relationships into a deduplicated ``included`` list.

    Identifiers the resolver cannot find are removed from the relationship
    data of the resource that referenced them, so no linkage is left pointing
    at a resource missing from the document.
    """

    def __init__(self, resolver: Resolver) -> None:
        self.resolver = resolver

    async def include(
        self,
        resources: list[dict[str, Any]],
        include_tree: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        """Return included resources in first-seen order.

        ``resources`` are the primary resource objects; their relationship
        data is pruned in place. Nested include paths are resolved one level
        at a time.
        """
        primary = {resource_key(resource): resource for resource in resources}
        included: dict[ResourceKey, dict[str, Any]] = {}
        known: dict[ResourceKey, dict[str, Any] | None] = {}

        level = [(resource, include_tree) for resource in resources]
        while level:
            pending = [
                key
                for key in self._requested_keys(level)
                if key not in primary and key not in known
            ]
            known.update(await self._resolve_all(pending))

            next_level: list[tuple[dict[str, Any], Mapping[str, Any]]] = []
            for resource, tree in level:
                for name, entry in self._requested_relationships(resource, tree):
                    subtree = tree[name]
                    for key in self._prune(entry, primary, known):
                        if key in primary:
                            target = primary[key]
                        else:
                            target = included.setdefault(key, known[key])
                        if subtree:
                            next_level.append((target, subtree))
            level = next_level

        return list(included.values())

    def _requested_relationships(
        self, resource: Mapping[str, Any], tree: Mapping[str, Any]
    ) -> Iterator[tuple[str, dict[str, Any]]]:
        relationships = resource.get("relationships")
        if not isinstance(relationships, Mapping):
            return
        for name, entry in relationships.items():
            if name in tree and isinstance(entry, dict) and "data" in entry:
                yield name, entry

    def _requested_keys(
        self, level: list[tuple[dict[str, Any], Mapping[str, Any]]]
    ) -> list[ResourceKey]:
        keys: dict[ResourceKey, None] = {}
        for resource, tree in level:
            for _, entry in self._requested_relationships(resource, tree):
                data = entry["data"]
                identifiers = data if isinstance(data, list) else [data]
                for identifier in identifiers:
                    key = _identifier_key(identifier)
                    if key is not None:
                        keys.setdefault(key, None)
        return list(keys)

    def _prune(
        self,
        entry: dict[str, Any],
        primary: Mapping[ResourceKey, Any],
        known: Mapping[ResourceKey, Any],
    ) -> list[ResourceKey]:
        """Drop unresolved identifiers from ``entry`` and return the kept keys."""

        def resolvable(identifier: Any) -> ResourceKey | None:
            key = _identifier_key(identifier)
            if key is None:
                return None
            if key in primary or known.get(key) is not None:
                return key
            return None

        data = entry["data"]
        if isinstance(data, list):
            kept = [(item, resolvable(item)) for item in data]
            entry["data"] = [item for item, key in kept if key is not None]
            return [key for _, key in kept if key is not None]
        if data is None:
            return []
        key = resolvable(data)
        if key is None:
            entry["data"] = None
            return []
        return [key]

    async def _resolve_all(
        self, keys: list[ResourceKey]
    ) -> dict[ResourceKey, dict[str, Any] | None]:
        if not keys:
            return {}
        results = await asyncio.gather(
            *(self._resolve_one(*key) for key in keys), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return dict(zip(keys, results))

    async def _resolve_one(
        self, resource_type: str, resource_id: str
    ) -> dict[str, Any] | None:
        try:
            resource = await self.resolver.resolve(resource_type, resource_id)
        except ResolverError:
            raise
        except Exception as exc:
            raise ResolverError(resource_type, resource_id, str(exc)) from exc
        if resource is None:
            logger.debug("Dropping unresolved relationship %s/%s", resource_type, resource_id)
            return None
        if not isinstance(resource, Mapping):
            raise ResolverError(
                resource_type, resource_id, f"expected a resource object, got {type(resource).__name__}"
            )
        return copy.deepcopy(dict(resource))
