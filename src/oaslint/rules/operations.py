"""Rules about HTTP methods, paths and responses of operations."""

import re
from collections.abc import Mapping

from pydantic import Field, field_validator

from ..diagnostics import Diagnostic
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument
from .base import RuleParams, lowercase_all, parse_params, report, success_responses

DEFAULT_ALLOWED_METHODS = ["get", "post", "put", "patch", "delete"]

DEFAULT_CRUD_VERBS = [
    "get", "create", "read", "update", "delete", "remove", "add",
    "fetch", "list", "insert", "modify", "set", "retrieve", "save",
]

_WORD = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")


class AllowedMethodsParams(RuleParams):
    methods: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_METHODS), min_length=1)

    @field_validator("methods")
    @classmethod
    def normalize_methods(cls, v):
        return lowercase_all(v)


class CrudParams(RuleParams):
    verbs: list[str] = Field(default_factory=lambda: list(DEFAULT_CRUD_VERBS))

    @field_validator("verbs")
    @classmethod
    def normalize_verbs(cls, v):
        return lowercase_all(v)


def check_allowed_methods(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Operations may only use the configured HTTP methods."""
    params = parse_params(AllowedMethodsParams, rule)
    allowed = ", ".join(m.upper() for m in params.methods)
    return [
        report(
            document, rule, operation.location,
            f"HTTP method {operation.method.upper()} is not allowed on {operation.path}; allowed: {allowed}",
            key=True,
        )
        for operation in document.iter_operations()
        if operation.method.lower() not in params.methods
    ]


def check_crud(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Paths name resources; the HTTP method carries the CRUD action."""
    params = parse_params(CrudParams, rule)
    diagnostics = []

    for path in document.paths:
        for segment in str(path).split("/"):
            if not segment or segment.startswith("{"):
                continue
            words = _WORD.findall(segment)
            if words and words[0].lower() in params.verbs:
                diagnostics.append(report(
                    document, rule, ("paths", path),
                    f"Path segment '{segment}' starts with the verb '{words[0].lower()}'; "
                    f"use the HTTP method to express the action",
                    key=True,
                ))
                break

    return diagnostics


def check_success_response(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Every operation declares at least one 2xx response."""
    parse_params(RuleParams, rule)
    return [
        report(
            document, rule, operation.location + ("responses",),
            f"{operation.label} does not declare a success (2xx) response",
            key=True,
        )
        for operation in document.iter_operations()
        if not any(True for _ in success_responses(operation))
    ]


def check_get_idempotency(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """GET operations must be safe: no request body."""
    parse_params(RuleParams, rule)
    return [
        report(
            document, rule, operation.location + ("requestBody",),
            f"{operation.label} must not declare a request body",
            key=True,
        )
        for operation in document.iter_operations()
        if operation.method.lower() == "get" and "requestBody" in operation.data
    ]


def check_get_return_object(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """GET success responses must describe the body they return."""
    parse_params(RuleParams, rule)
    diagnostics = []

    for operation in document.iter_operations():
        if operation.method.lower() != "get":
            continue
        for code, raw_response in success_responses(operation):
            if code == "204":
                continue
            response = document.resolve_ref(raw_response)
            if isinstance(response, Mapping) and _has_body_schema(response):
                continue
            diagnostics.append(report(
                document, rule, operation.location + ("responses", code),
                f"{operation.label} response {code} does not define a response body schema",
                key=True,
            ))

    return diagnostics


def _has_body_schema(response: Mapping) -> bool:
    if "$ref" in response or "schema" in response:
        return True
    content = response.get("content")
    if not isinstance(content, Mapping):
        return False
    return any(isinstance(media, Mapping) and "schema" in media for media in content.values())
