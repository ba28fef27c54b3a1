"""Relationship inclusion: ordering, dedup, broken references, resolver faults."""

import asyncio

import pytest

from catalog_jsonapi.core.errors import ResolverError
from catalog_jsonapi.core.includes import RelationshipIncluder
from catalog_jsonapi.resolvers import InMemoryResolver, Resolver


def _ids(resources):
    return [(resource["type"], resource["id"]) for resource in resources]


class RecordingResolver(Resolver):
    """Resolve from a store, finishing later calls first, and record every call."""

    def __init__(self, resources):
        self.store = InMemoryResolver(resources)
        self.calls = []

    async def resolve(self, resource_type, resource_id):
        self.calls.append((resource_type, resource_id))
        await asyncio.sleep(0.01 / len(self.calls))
        return await self.store.resolve(resource_type, resource_id)


class FailingResolver(Resolver):
    async def resolve(self, resource_type, resource_id):
        raise ConnectionError("store unreachable")


@pytest.mark.asyncio
async def test_includes_requested_relationship_in_data_order(resolver, collection):
    included = await RelationshipIncluder(resolver).include([collection], {"entities": {}})
    assert _ids(included) == [("video", "1111-0"), ("video", "1111-1"), ("video", "1111-2")]
    assert len(collection["relationships"]["entities"]["data"]) == 3


@pytest.mark.asyncio
async def test_unrequested_relationships_are_left_alone(resolver, collection):
    collection["relationships"]["featured"] = {"data": {"type": "video", "id": "missing"}}
    included = await RelationshipIncluder(resolver).include([collection], {"entities": {}})
    assert len(included) == 3
    assert collection["relationships"]["featured"]["data"] == {"type": "video", "id": "missing"}


@pytest.mark.asyncio
async def test_unmatched_include_names_yield_empty_list(resolver, collection):
    included = await RelationshipIncluder(resolver).include([collection], {"video": {}})
    assert included == []


@pytest.mark.asyncio
async def test_broken_references_are_dropped(resolver, broken_collection):
    included = await RelationshipIncluder(resolver).include(
        [broken_collection], {"entities": {}}
    )
    assert included == []
    assert broken_collection["relationships"]["entities"]["data"] == []


@pytest.mark.asyncio
async def test_partially_broken_references_keep_resolvable_ones(resolver, collection):
    entities = collection["relationships"]["entities"]["data"]
    entities.insert(1, {"type": "video", "id": "gone"})
    entities.append({"type": "video"})
    included = await RelationshipIncluder(resolver).include([collection], {"entities": {}})
    assert len(included) < 5
    remaining = collection["relationships"]["entities"]["data"]
    assert _ids(remaining) == _ids(included)


@pytest.mark.asyncio
async def test_single_valued_miss_becomes_null(resolver, collection):
    collection["relationships"]["poster"] = {"data": {"type": "image", "id": "nope"}}
    included = await RelationshipIncluder(resolver).include([collection], {"poster": {}})
    assert included == []
    assert collection["relationships"]["poster"]["data"] is None


@pytest.mark.asyncio
async def test_collection_is_deduplicated_in_first_seen_order(videos, collection):
    second = {
        "type": "collection",
        "id": "collection-1",
        "relationships": {
            "entities": {
                "data": [
                    {"type": "video", "id": "1111-2"},
                    {"type": "video", "id": "1111-0"},
                ]
            },
            "pinned": {"data": {"type": "video", "id": "1111-1"}},
        },
    }
    first = {
        "type": "collection",
        "id": "collection-0",
        "relationships": {"entities": {"data": [{"type": "video", "id": "1111-1"}]}},
    }
    resolver = RecordingResolver(videos)
    included = await RelationshipIncluder(resolver).include(
        [first, second], {"entities": {}, "pinned": {}}
    )
    assert _ids(included) == [("video", "1111-1"), ("video", "1111-2"), ("video", "1111-0")]
    assert sorted(resolver.calls) == [("video", "1111-0"), ("video", "1111-1"), ("video", "1111-2")]


@pytest.mark.asyncio
async def test_primary_resources_are_never_included(videos):
    primary = [
        {
            "type": "video",
            "id": "1111-0",
            "relationships": {"related": {"data": [{"type": "video", "id": "1111-1"}]}},
        },
        {
            "type": "video",
            "id": "1111-1",
            "relationships": {"related": {"data": [{"type": "video", "id": "1111-0"}]}},
        },
    ]
    included = await RelationshipIncluder(InMemoryResolver(videos)).include(
        primary, {"related": {}}
    )
    assert included == []
    assert primary[0]["relationships"]["related"]["data"] == [{"type": "video", "id": "1111-1"}]


@pytest.mark.asyncio
async def test_nested_include_paths_resolve_level_by_level(videos, collection):
    people = [{"type": "person", "id": "p-1", "attributes": {"name": "Ann"}}]
    videos[0]["relationships"] = {
        "director": {"data": {"type": "person", "id": "p-1"}},
    }
    videos[1]["relationships"] = {
        "director": {"data": {"type": "person", "id": "p-404"}},
    }
    resolver = InMemoryResolver([*videos, *people])
    included = await RelationshipIncluder(resolver).include(
        [collection], {"entities": {"director": {}}}
    )
    assert _ids(included) == [
        ("video", "1111-0"),
        ("video", "1111-1"),
        ("video", "1111-2"),
        ("person", "p-1"),
    ]
    assert included[1]["relationships"]["director"]["data"] is None


@pytest.mark.asyncio
async def test_included_resources_are_copies(resolver, collection):
    included = await RelationshipIncluder(resolver).include([collection], {"entities": {}})
    included[0]["attributes"]["title"] = "changed"
    stored = await resolver.resolve("video", "1111-0")
    assert stored["attributes"]["title"] == "Episode 1"


@pytest.mark.asyncio
async def test_resolver_fault_propagates(collection):
    with pytest.raises(ResolverError) as excinfo:
        await RelationshipIncluder(FailingResolver()).include([collection], {"entities": {}})
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert excinfo.value.resource_type == "video"


@pytest.mark.asyncio
async def test_resolver_returning_non_object_is_a_fault(collection):
    class BadResolver(Resolver):
        async def resolve(self, resource_type, resource_id):
            return "not a resource"

    with pytest.raises(ResolverError):
        await RelationshipIncluder(BadResolver()).include([collection], {"entities": {}})
