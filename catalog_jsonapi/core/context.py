"""Per-request context: base URL, include paths, pagination and identity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlsplit

from catalog_jsonapi.utils.query_params import (
    build_include_tree,
    parse_query_params,
    query_pairs,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Channel and platform identity attached to the request."""

    channel_id: Any = None
    platform_id: Any = None
    platform_type: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Identity":
        """Read ``{channel: {id}, platform: {id, platformType}}`` from a mapping or object.

        Missing parts become ``None``; the shape is never validated.
        """
        channel = _lookup(raw, "channel")
        platform = _lookup(raw, "platform")
        platform_type = _lookup(platform, "platformType")
        if platform_type is None:
            platform_type = _lookup(platform, "platform_type")
        return cls(
            channel_id=_lookup(channel, "id"),
            platform_id=_lookup(platform, "id"),
            platform_type=platform_type,
        )


@dataclass(frozen=True)
class Pagination:
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True)
class RequestInput:
    """The request fields the formatter reads, independent of any framework."""

    protocol: str = "http"
    hostname: str = "localhost"
    port: int | str | None = None
    url: str = "/"
    query: Mapping[str, Any] | str | None = None
    identity: Any = None

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "RequestInput":
        """Derive request fields from an ASGI HTTP scope."""
        headers = {
            key.decode("latin-1").lower(): value.decode("latin-1")
            for key, value in scope.get("headers", [])
        }
        server = scope.get("server")
        hostname = _strip_port(headers.get("host", ""))
        if not hostname and server:
            hostname = str(server[0])
        port = server[1] if server and len(server) > 1 else None

        raw_path = scope.get("raw_path")
        if isinstance(raw_path, bytes) and raw_path:
            url = raw_path.decode("latin-1").split("?", 1)[0]
        else:
            url = scope.get("path") or "/"
        query_string = scope.get("query_string", b"")
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        if query_string:
            url = f"{url}?{query_string}"

        state = scope.get("state") or {}
        return cls(
            protocol=scope.get("scheme", "http"),
            hostname=hostname or "localhost",
            port=port,
            url=url,
            identity=state.get("identity"),
        )


@dataclass(frozen=True)
class RequestContext:
    """Immutable per-request values used to assemble a document."""

    base_url: str
    path: str = "/"
    query: tuple[tuple[str, str], ...] = ()
    include_paths: frozenset[str] = frozenset()
    pagination: Pagination = field(default_factory=Pagination)
    identity: Identity = field(default_factory=Identity)

    @property
    def include_tree(self) -> dict[str, Any]:
        return build_include_tree(self.include_paths)


def compose_base_url(
    protocol: str | None,
    hostname: str | None,
    port: int | str | None = None,
    *,
    base_url_prefix: str | None = None,
    exclude_port_from_links: bool = False,
) -> str:
    """Return ``protocol://hostname[:port][/prefix]`` without a trailing slash."""
    scheme = (protocol or "http").split(":", 1)[0].lower() or "http"
    host = hostname or "localhost"
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    port_number = _parse_port(port)
    if port_number is not None and not exclude_port_from_links:
        host = f"{host}:{port_number}"
    base_url = f"{scheme}://{host}"
    prefix = (base_url_prefix or "").strip().strip("/")
    if prefix:
        base_url = f"{base_url}/{prefix}"
    return base_url


def build_request_context(
    request_input: RequestInput,
    *,
    base_url_prefix: str | None = None,
    exclude_port_from_links: bool = False,
) -> RequestContext:
    """Build the RequestContext for one request. Never raises on malformed input."""
    split = urlsplit(request_input.url or "/")
    url_pairs = query_pairs(split.query)
    link_pairs = url_pairs or query_pairs(request_input.query)
    param_pairs = query_pairs(request_input.query) or url_pairs
    params = parse_query_params(param_pairs)

    context = RequestContext(
        base_url=compose_base_url(
            request_input.protocol,
            request_input.hostname,
            request_input.port,
            base_url_prefix=base_url_prefix,
            exclude_port_from_links=exclude_port_from_links,
        ),
        path=split.path or "/",
        query=tuple(link_pairs),
        include_paths=frozenset(params["include"]),
        pagination=Pagination(**params["page"]),
        identity=Identity.from_raw(request_input.identity),
    )
    logger.debug(
        "Built request context base_url=%s include=%s",
        context.base_url,
        sorted(context.include_paths),
    )
    return context


def _lookup(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _strip_port(host: str) -> str:
    host = host.strip()
    if host.startswith("["):
        return host[1 : host.find("]")] if "]" in host else host[1:]
    return host.rsplit(":", 1)[0] if ":" in host else host


def _parse_port(port: int | str | None) -> int | None:
    if port is None or port == "":
        return None
    try:
        number = int(port)
    except (TypeError, ValueError):
        return None
    return number if 0 < number < 65536 else None
