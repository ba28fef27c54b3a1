"""JSON:API document assembly."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from catalog_jsonapi.resolvers.base import Resolver
from catalog_jsonapi.schemas.resource import JSONAPIResource

from .context import RequestContext, RequestInput, build_request_context
from .errors import InvalidPayloadError
from .includes import RelationshipIncluder
from .links import LinkBuilder
from .meta import build_meta

logger = logging.getLogger(__name__)


class JSONAPIDocumentBuilder:
    """Build JSON:API v1.1 documents from resource objects."""

    def build_single(
        self,
        resource: Mapping[str, Any],
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a single resource object."""
        document: dict[str, Any] = {"data": dict(resource)}
        return self._finish(document, included=included, links=links, meta=meta)

    def build_collection(
        self,
        resources: Iterable[Mapping[str, Any]],
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a collection of resources."""
        document: dict[str, Any] = {"data": [dict(item) for item in resources]}
        return self._finish(document, included=included, links=links, meta=meta)

    def _finish(
        self,
        document: dict[str, Any],
        *,
        included: Iterable[Mapping[str, Any]] | None,
        links: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        # An empty included list is kept: inclusion was requested.
        if included is not None:
            document["included"] = [dict(item) for item in included]
        if links:
            document["links"] = dict(links)
        if meta is not None:
            document["meta"] = dict(meta)
        return document


def _primary_resources(payload: Any) -> list[dict[str, Any]]:
    items = payload if isinstance(payload, list) else [payload]
    resources: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise InvalidPayloadError(
                f"Item {index} is a {type(item).__name__}, not a resource object."
            )
        item = dict(item)
        # Numeric ids from stores become JSON:API string ids.
        if isinstance(item.get("id"), int) and not isinstance(item["id"], bool):
            item["id"] = str(item["id"])
        try:
            JSONAPIResource.model_validate(item)
        except ValidationError as exc:
            raise InvalidPayloadError(f"Item {index} is not a resource object: {exc}") from exc
        resources.append(copy.deepcopy(item))
    return resources


async def build_document(
    context: RequestContext,
    payload: Any,
    resolver: Resolver,
    *,
    links_queries: Mapping[str, Any] | None = None,
    link_builder: LinkBuilder | None = None,
    document_builder: JSONAPIDocumentBuilder | None = None,
) -> dict[str, Any]:
    """Assemble a JSON:API document from an already-fetched payload.

    A list payload is a collection (``links_queries`` carries its pagination
    hints), a mapping is a single resource. The payload itself is left
    untouched. Raises ``InvalidPayloadError`` for any other shape and
    ``ResolverError`` when the resolver fails.
    """
    if not isinstance(payload, (list, Mapping)):
        raise InvalidPayloadError(
            f"Expected a resource object or an array, got {type(payload).__name__}."
        )
    link_builder = link_builder or LinkBuilder()
    document_builder = document_builder or JSONAPIDocumentBuilder()
    resources = _primary_resources(payload)

    included = None
    if context.include_paths:
        included = await RelationshipIncluder(resolver).include(
            resources, context.include_tree
        )
        for resource in included:
            link_builder.add_resource_links(context, resource)

    for resource in resources:
        link_builder.add_resource_links(context, resource)
    meta = build_meta(context.identity)

    if isinstance(payload, list):
        logger.debug("Formatting collection of %d resources", len(resources))
        return document_builder.build_collection(
            resources,
            included=included,
            links=link_builder.collection_links(context, links_queries),
            meta=meta,
        )
    return document_builder.build_single(
        resources[0],
        included=included,
        links=link_builder.single_links(context, resources[0]),
        meta=meta,
    )


class ResponseFormatter:
    """Bundle a resolver with link configuration and format payloads."""

    def __init__(
        self,
        resolver: Resolver,
        *,
        base_url_prefix: str | None = None,
        exclude_port_from_links: bool = False,
        type_paths: Mapping[str, str] | None = None,
    ) -> None:
        self.resolver = resolver
        self.base_url_prefix = base_url_prefix
        self.exclude_port_from_links = exclude_port_from_links
        self.link_builder = LinkBuilder(type_paths)
        self.document_builder = JSONAPIDocumentBuilder()

    def build_context(self, request_input: RequestInput) -> RequestContext:
        return build_request_context(
            request_input,
            base_url_prefix=self.base_url_prefix,
            exclude_port_from_links=self.exclude_port_from_links,
        )

    async def format(
        self,
        request_input: RequestInput,
        payload: Any,
        *,
        links_queries: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the JSON:API document for ``payload`` answering ``request_input``."""
        return await build_document(
            self.build_context(request_input),
            payload,
            self.resolver,
            links_queries=links_queries,
            link_builder=self.link_builder,
            document_builder=self.document_builder,
        )
