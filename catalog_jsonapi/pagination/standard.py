"""Standard page[offset]/page[limit] pagination links."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote, urlencode

from catalog_jsonapi.utils.query_params import PAGE_LIMIT, PAGE_OFFSET

from .base import PaginationBase

PAGE_KEYS = (PAGE_LIMIT, PAGE_OFFSET)


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """Percent-encode query pairs in order (``[`` becomes ``%5B``, space ``%20``)."""
    return urlencode(pairs, safe="", quote_via=quote)


def with_query(url: str, pairs: list[tuple[str, str]]) -> str:
    query = encode_query(pairs)
    return f"{url}?{query}" if query else url


class StandardPagination(PaginationBase):
    """Build links from page hints supplied alongside a collection.

    Each hint replaces only ``page[limit]`` and ``page[offset]`` in a copy of
    the original query; every other parameter is kept in place.
    """

    def get_links(
        self,
        *,
        url: str,
        query: list[tuple[str, str]],
        hints: Mapping[str, Any] | None,
    ) -> dict[str, str]:
        """Build one link per hint that is not ``None``."""
        links: dict[str, str] = {}
        if not isinstance(hints, Mapping):
            return links
        for name, hint in hints.items():
            page = self.normalize_hint(hint)
            if page is None:
                continue
            links[str(name)] = with_query(url, self.merge_page(query, page))
        return links

    def normalize_hint(self, hint: Any) -> dict[str, str] | None:
        """Return ``{"page[limit]": ..., "page[offset]": ...}`` from a flat or nested hint.

        ``None`` when the hint carries neither value.
        """
        if not isinstance(hint, Mapping):
            return None
        page: dict[str, str] = {}
        nested = hint.get("page")
        if isinstance(nested, Mapping):
            for key in ("limit", "offset"):
                if nested.get(key) is not None:
                    page[f"page[{key}]"] = str(nested[key])
        for key in PAGE_KEYS:
            if hint.get(key) is not None:
                page[key] = str(hint[key])
        return page or None

    def merge_page(
        self, query: list[tuple[str, str]], page: Mapping[str, str]
    ) -> list[tuple[str, str]]:
        merged: list[tuple[str, str]] = []
        written: set[str] = set()
        for key, value in query:
            if key in page:
                if key not in written:
                    merged.append((key, page[key]))
                    written.add(key)
                continue
            merged.append((key, value))
        for key in PAGE_KEYS:
            if key in page and key not in written:
                merged.append((key, page[key]))
        return merged
