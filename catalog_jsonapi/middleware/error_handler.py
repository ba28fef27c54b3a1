"""JSON:API error handling middleware."""

import logging
from typing import Any

from starlette.responses import JSONResponse

from catalog_jsonapi.core.errors import JSONAPIErrorBuilder

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware:
    """Convert exceptions into JSON:API error documents."""

    def __init__(self, app: Any) -> None:
        """Store the ASGI app for middleware chaining."""
        self.app = app
        self.error_builder = JSONAPIErrorBuilder()

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Handle exceptions and serialize JSON:API error documents."""
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception as exc:
            logger.exception("Unhandled error while serving %s", scope.get("path"))
            if response_started:
                raise
            error = self.error_builder.from_exception(exc)
            response = JSONResponse(
                self.error_builder.error_document([error]),
                status_code=int(error["status"]),
                media_type="application/vnd.api+json",
            )
            await response(scope, receive, send)
