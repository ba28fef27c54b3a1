"""Self and pagination link construction."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from catalog_jsonapi.pagination import PaginationBase, StandardPagination
from catalog_jsonapi.pagination.standard import with_query

from .context import RequestContext


class LinkBuilder:
    """Build absolute ``links`` objects for resources and collections."""

    def __init__(
        self,
        type_paths: Mapping[str, str] | None = None,
        pagination: PaginationBase | None = None,
    ) -> None:
        self.type_paths = dict(type_paths or {})
        self.pagination = pagination or StandardPagination()

    def type_path(self, resource_type: str) -> str:
        """Return the URL collection segment for a resource type (``video`` -> ``videos``)."""
        mapped = self.type_paths.get(resource_type)
        if mapped:
            return mapped.strip("/")
        if resource_type.endswith("s"):
            return resource_type
        return f"{resource_type}s"

    def resource_url(self, context: RequestContext, resource: Mapping[str, Any]) -> str:
        resource_type = str(resource.get("type", ""))
        resource_id = quote(str(resource.get("id", "")), safe="")
        return f"{context.base_url}/{self.type_path(resource_type)}/{resource_id}"

    def single_links(
        self, context: RequestContext, resource: Mapping[str, Any]
    ) -> dict[str, str]:
        """Return top-level links for a single-resource document."""
        return {"self": self.resource_url(context, resource)}

    def request_url(self, context: RequestContext) -> str:
        path = quote(context.path.lstrip("/"), safe="/%:@!$&'()*+,;=~")
        return f"{context.base_url}/{path}" if path else context.base_url

    def collection_links(
        self,
        context: RequestContext,
        links_queries: Mapping[str, Any] | None = None,
    ) -> dict[str, str]:
        """Return ``self`` plus one link per pagination hint for a collection document."""
        url = self.request_url(context)
        query = list(context.query)
        links = {"self": with_query(url, query)}
        page_links = self.pagination.get_links(url=url, query=query, hints=links_queries)
        page_links.pop("self", None)
        links.update(page_links)
        return links

    def add_resource_links(
        self, context: RequestContext, resource: dict[str, Any]
    ) -> dict[str, Any]:
        """Set ``links.self`` on a resource object in place and return it."""
        links = dict(resource.get("links") or {})
        links["self"] = self.resource_url(context, resource)
        resource["links"] = links
        return resource
