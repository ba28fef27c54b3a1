"""Mapping-backed resolver."""

import pytest

from catalog_jsonapi.resolvers import InMemoryResolver


@pytest.mark.asyncio
async def test_remove_turns_lookups_into_misses(videos):
    resolver = InMemoryResolver(videos)
    resolver.remove("video", "1111-0")
    assert await resolver.resolve("video", "1111-0") is None
    assert (await resolver.resolve("video", "1111-1"))["id"] == "1111-1"


def test_remove_unknown_resource_is_a_noop(videos):
    InMemoryResolver(videos).remove("video", "unknown")


@pytest.mark.asyncio
async def test_set_replaces_and_stores_a_copy(videos):
    resolver = InMemoryResolver()
    resolver.set(videos[0])
    videos[0]["attributes"]["title"] = "changed"
    assert (await resolver.resolve("video", "1111-0"))["attributes"]["title"] == "Episode 1"
