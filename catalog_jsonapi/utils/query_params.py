"""Helpers for JSON:API query parameter parsing."""

from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl

PAGE_LIMIT = "page[limit]"
PAGE_OFFSET = "page[offset]"


def _split_csv(value: str) -> list[str]:
    return [item for item in (part.strip() for part in value.split(",")) if item]


def _parse_non_negative_int(value: Any) -> int | None:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def query_pairs(query: Mapping[str, Any] | str | None) -> list[tuple[str, str]]:
    """Return ordered key/value pairs from a query mapping or raw query string.

    Sequence values in a mapping expand into repeated keys, ``None`` values are
    skipped.
    """
    if not query:
        return []
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    if not isinstance(query, Mapping):
        return []
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), str(item)) for item in value if item is not None)
        else:
            pairs.append((str(key), str(value)))
    return pairs


def parse_query_params(pairs: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Normalize the include and page query parameter families.

    Malformed values degrade to empty defaults instead of raising.
    """
    normalized: dict[str, Any] = {
        "include": [],
        "page": {"limit": None, "offset": None},
    }

    for key, raw_value in pairs:
        if key == "include":
            for path in _split_csv(raw_value):
                if path not in normalized["include"]:
                    normalized["include"].append(path)
        elif key.startswith("page[") and key.endswith("]"):
            page_key = key[len("page[") : -1]
            if page_key in normalized["page"]:
                normalized["page"][page_key] = _parse_non_negative_int(raw_value)

    return normalized


def build_include_tree(include_paths: Iterable[str]) -> dict[str, Any]:
    """Turn dotted include paths into a nested mapping of relationship names.

    ``["entities", "entities.author", "video"]`` becomes
    ``{"entities": {"author": {}}, "video": {}}``.
    """
    tree: dict[str, Any] = {}
    for path in include_paths:
        node = tree
        for part in (segment.strip() for segment in path.split(".")):
            if not part:
                break
            node = node.setdefault(part, {})
    return tree
