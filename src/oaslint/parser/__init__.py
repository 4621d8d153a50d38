"""OpenAPI document parsing."""

from .document import (
    HTTP_METHODS,
    OpenApiDocument,
    Operation,
    Parameter,
    SourceMap,
    parse_document,
)

__all__ = [
    "HTTP_METHODS",
    "OpenApiDocument",
    "Operation",
    "Parameter",
    "SourceMap",
    "parse_document",
]
