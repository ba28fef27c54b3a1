"""Core JSON:API formatting engine."""

from .context import Identity, RequestContext, RequestInput, build_request_context
from .document import JSONAPIDocumentBuilder, ResponseFormatter, build_document
from .errors import InvalidPayloadError, JSONAPIErrorBuilder, JSONAPIFormatError, ResolverError
from .includes import RelationshipIncluder
from .links import LinkBuilder
from .meta import build_meta

__all__ = [
    "Identity",
    "InvalidPayloadError",
    "JSONAPIDocumentBuilder",
    "JSONAPIErrorBuilder",
    "JSONAPIFormatError",
    "LinkBuilder",
    "RelationshipIncluder",
    "RequestContext",
    "RequestInput",
    "ResolverError",
    "ResponseFormatter",
    "build_document",
    "build_meta",
    "build_request_context",
]
