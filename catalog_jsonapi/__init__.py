"""Format content-catalog resources into JSON:API v1.1 documents."""

from .core.context import RequestContext, RequestInput, build_request_context
from .core.document import JSONAPIDocumentBuilder, ResponseFormatter, build_document
from .core.errors import InvalidPayloadError, JSONAPIErrorBuilder, ResolverError
from .middleware import ErrorHandlerMiddleware, JSONAPIResponseMiddleware
from .resolvers import InMemoryResolver, Resolver

__all__ = [
    "ErrorHandlerMiddleware",
    "InMemoryResolver",
    "InvalidPayloadError",
    "JSONAPIDocumentBuilder",
    "JSONAPIErrorBuilder",
    "JSONAPIResponseMiddleware",
    "RequestContext",
    "RequestInput",
    "ResolverError",
    "Resolver",
    "ResponseFormatter",
    "build_document",
    "build_request_context",
]
