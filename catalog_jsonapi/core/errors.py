"""JSON:API exceptions and error object builders."""

from typing import Any


class JSONAPIFormatError(Exception):
    """Base class for failures while formatting a JSON:API response."""

    status: str = "500"
    title: str = "Internal Server Error"


class ResolverError(JSONAPIFormatError):
    """The resolver backing relationship inclusion failed."""

    status = "502"
    title = "Bad Gateway"

    def __init__(self, resource_type: str, resource_id: str, message: str) -> None:
        super().__init__(f"Resolving {resource_type}/{resource_id} failed: {message}")
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidPayloadError(JSONAPIFormatError):
    """The upstream body is not a resource object or an array of them."""


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def error_object(
        self,
        *,
        status: str | None = None,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object."""
        error: dict[str, Any] = {}
        if status is not None:
            error["status"] = status
        if code is not None:
            error["code"] = code
        if title is not None:
            error["title"] = title
        if detail is not None:
            error["detail"] = detail
        if source is not None:
            error["source"] = source
        if meta is not None:
            error["meta"] = meta
        if not error:
            raise ValueError("Error object must include at least one field.")
        return error

    def from_exception(self, exc: Exception) -> dict[str, Any]:
        """Return a JSON:API error object describing ``exc``."""
        if isinstance(exc, JSONAPIFormatError):
            return self.error_object(
                status=exc.status,
                code=type(exc).__name__,
                title=exc.title,
                detail=str(exc),
            )
        return self.error_object(
            status="500", title="Internal Server Error", detail=str(exc)
        )

    def error_document(self, errors: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API document with an errors array."""
        return {"errors": errors}
