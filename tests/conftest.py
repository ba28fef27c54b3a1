"""Shared fixtures: a collection referencing three videos and an https request."""

import copy

import pytest

from catalog_jsonapi.core.context import RequestInput
from catalog_jsonapi.resolvers import InMemoryResolver

VIDEOS = [
    {
        "type": "video",
        "id": f"1111-{index}",
        "attributes": {"title": f"Episode {index + 1}", "duration": 1200 + index},
    }
    for index in range(3)
]

COLLECTION = {
    "type": "collection",
    "id": "collection-0",
    "attributes": {"title": "Featured"},
    "relationships": {
        "entities": {
            "data": [{"type": "video", "id": video["id"]} for video in VIDEOS],
        },
    },
}

IDENTITY = {
    "channel": {"id": "channel-id"},
    "platform": {"id": "platform-id", "platformType": "APPLE_TV"},
}


@pytest.fixture
def videos():
    return copy.deepcopy(VIDEOS)


@pytest.fixture
def collection():
    return copy.deepcopy(COLLECTION)


@pytest.fixture
def broken_collection():
    broken = copy.deepcopy(COLLECTION)
    broken["id"] = "broken-collection-1"
    for identifier in broken["relationships"]["entities"]["data"]:
        identifier["id"] = f"xxx-{identifier['id']}"
    return broken


@pytest.fixture
def resolver(videos, collection):
    return InMemoryResolver([*videos, collection])


@pytest.fixture
def request_input():
    return RequestInput(
        protocol="https",
        hostname="example.com",
        port=3000,
        url="/collections/collection-0",
        identity=copy.deepcopy(IDENTITY),
    )
