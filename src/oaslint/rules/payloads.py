"""Request and response body encapsulation rules.

JSON bodies must be objects at the top level so fields can be added later
without breaking clients.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from ..diagnostics import Diagnostic
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument
from ..parser.document import PathKey
from .base import RuleParams, parse_params, report, success_responses

_OBJECT_KEYWORDS = ("properties", "additionalProperties", "allOf", "oneOf", "anyOf")


def _json_schemas(document: OpenApiDocument, body: Any, base: PathKey) -> Iterator[tuple[PathKey, Any]]:
    body = document.resolve_ref(body)
    if not isinstance(body, Mapping):
        return
    content = body.get("content")
    if not isinstance(content, Mapping):
        return
    for media_type, media in content.items():
        if "json" not in str(media_type).lower() or not isinstance(media, Mapping):
            continue
        if "schema" in media:
            yield base + ("content", media_type, "schema"), document.resolve_ref(media["schema"])


def _non_object_type(schema: Any) -> str | None:
    """The offending type of a non-object schema, or None when it is an object."""
    if not isinstance(schema, Mapping):
        return "invalid schema"
    if "$ref" in schema:
        return None  # external reference, cannot be checked here
    schema_type = schema.get("type")
    if schema_type == "object":
        return None
    if schema_type is None:
        if any(keyword in schema for keyword in _OBJECT_KEYWORDS):
            return None
        return "untyped schema"
    return str(schema_type)


def check_request_encapsulation(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """JSON request bodies must be objects."""
    parse_params(RuleParams, rule)
    diagnostics = []

    for operation in document.iter_operations():
        base = operation.location + ("requestBody",)
        for path, schema in _json_schemas(document, operation.data.get("requestBody"), base):
            found = _non_object_type(schema)
            if found is not None:
                diagnostics.append(report(
                    document, rule, path,
                    f"{operation.label} request body must be a JSON object, got {found}",
                ))

    return diagnostics


def check_response_encapsulation(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """JSON success responses must be objects."""
    parse_params(RuleParams, rule)
    diagnostics = []

    for operation in document.iter_operations():
        for code, response in success_responses(operation):
            base = operation.location + ("responses", code)
            for path, schema in _json_schemas(document, response, base):
                found = _non_object_type(schema)
                if found is not None:
                    diagnostics.append(report(
                        document, rule, path,
                        f"{operation.label} response {code} must be a JSON object, got {found}",
                    ))

    return diagnostics
