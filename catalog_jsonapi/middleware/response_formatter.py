"""ASGI middleware that rewrites JSON response bodies into JSON:API documents."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from starlette.responses import JSONResponse

from catalog_jsonapi.config import Settings, get_settings
from catalog_jsonapi.core.context import RequestInput
from catalog_jsonapi.core.document import ResponseFormatter
from catalog_jsonapi.resolvers.base import Resolver

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JSONAPIResponseMiddleware:
    """Format resource payloads returned by downstream routes.

    Successful ``application/json`` responses whose body is an object or an
    array are replaced by the assembled document. Pagination hints for
    collections are read from ``request.state.links_queries`` and the
    requesting identity from ``request.state.identity``. Every other
    response passes through untouched. Formatting failures propagate to the
    outer error handler; nothing is sent in that case.
    """

    def __init__(
        self,
        app: Any,
        resolver: Resolver,
        *,
        base_url_prefix: str | None = None,
        exclude_port_from_links: bool | None = None,
        type_paths: Mapping[str, str] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Store the ASGI app and build the formatter from arguments and settings."""
        settings = settings or get_settings()
        self.app = app
        self.formatter = ResponseFormatter(
            resolver,
            base_url_prefix=(
                base_url_prefix if base_url_prefix is not None else settings.base_url_prefix
            ),
            exclude_port_from_links=(
                exclude_port_from_links
                if exclude_port_from_links is not None
                else settings.exclude_port_from_links
            ),
            type_paths=type_paths if type_paths is not None else settings.type_paths,
        )

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Buffer the downstream response and format it before sending."""
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        start: dict[str, Any] | None = None
        chunks: list[bytes] = []
        messages: list[dict[str, Any]] = []

        async def capture(message: dict[str, Any]) -> None:
            nonlocal start
            messages.append(message)
            if message["type"] == "http.response.start":
                start = message
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))

        await self.app(scope, receive, capture)
        if start is None:
            for message in messages:
                await send(message)
            return

        body = b"".join(chunks)
        # Trailers, pathsend and other extensions are replayed untouched, in order.
        plain = all(
            message["type"] in ("http.response.start", "http.response.body")
            for message in messages
        )
        payload = self._formattable_payload(start, body) if plain else None
        if payload is None:
            for message in messages:
                await send(message)
            return

        document = await self.formatter.format(
            RequestInput.from_scope(scope),
            payload,
            links_queries=state.get("links_queries"),
        )
        response = JSONResponse(
            document, status_code=start["status"], media_type=JSONAPI_MEDIA_TYPE
        )
        response.raw_headers.extend(
            (key, value)
            for key, value in start.get("headers", [])
            if key.lower() not in (b"content-length", b"content-type")
        )
        await response(scope, receive, send)

    def _formattable_payload(self, start: Mapping[str, Any], body: bytes) -> Any:
        status = start.get("status", 200)
        if not 200 <= status < 300 or not body:
            return None
        headers = {
            key.decode("latin-1").lower(): value.decode("latin-1")
            for key, value in start.get("headers", [])
        }
        media_type = headers.get("content-type", "").split(";", 1)[0].strip().lower()
        if media_type != "application/json":
            return None
        try:
            payload = json.loads(body)
        except ValueError:
            logger.warning("Leaving undecodable JSON response body unformatted")
            return None
        if not isinstance(payload, (dict, list)):
            return None
        return payload
