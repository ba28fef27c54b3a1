"""Pagination base class for JSON:API links."""

from typing import Any, Mapping


class PaginationBase:
    """Define the pagination link API for JSON:API collections."""

    def get_links(
        self,
        *,
        url: str,
        query: list[tuple[str, str]],
        hints: Mapping[str, Any] | None,
    ) -> dict[str, str]:
        """Return pagination links (``next``, ``prev``, ...) for a collection."""
        raise NotImplementedError
