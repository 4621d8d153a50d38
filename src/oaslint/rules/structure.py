"""Document structure rules: schema conformance and OpenAPI version."""

import logging
from collections.abc import Mapping
from typing import Any

from jsonschema import Draft202012Validator
from pydantic import Field

from ..diagnostics import Diagnostic
from ..linter.descriptors import RuleDescriptor
from ..parser import HTTP_METHODS, OpenApiDocument
from .base import RuleParams, parse_params, report

logger = logging.getLogger(__name__)

# Structural subset of the OpenAPI 3.x schema: required fields and shapes
# that rules and tooling rely on, not every constraint of the standard.
OPENAPI_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["openapi", "info", "paths"],
    "properties": {
        "openapi": {"type": "string", "pattern": r"^3\.\d+(\.\d+)?$"},
        "info": {
            "type": "object",
            "required": ["title", "version"],
            "properties": {
                "title": {"type": "string", "minLength": 1},
                "version": {"type": "string"},
                "description": {"type": "string"},
            },
        },
        "servers": {"type": "array", "items": {"$ref": "#/$defs/server"}},
        "paths": {
            "type": "object",
            "patternProperties": {
                "^/": {"$ref": "#/$defs/pathItem"},
                "^x-": {},
            },
            "additionalProperties": False,
        },
        "components": {"type": "object"},
        "tags": {
            "type": "array",
            "items": {"type": "object", "required": ["name"], "properties": {"name": {"type": "string"}}},
        },
    },
    "$defs": {
        "server": {
            "type": "object",
            "required": ["url"],
            "properties": {"url": {"type": "string"}},
        },
        "parameter": {
            "type": "object",
            "if": {"required": ["$ref"]},
            "then": {"properties": {"$ref": {"type": "string"}}},
            "else": {
                "required": ["name", "in"],
                "properties": {
                    "name": {"type": "string"},
                    "in": {"enum": ["query", "header", "path", "cookie"]},
                },
            },
        },
        "operation": {
            "type": "object",
            "required": ["responses"],
            "properties": {
                "operationId": {"type": "string"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "parameters": {"type": "array", "items": {"$ref": "#/$defs/parameter"}},
                "responses": {"type": "object", "minProperties": 1},
            },
        },
        "pathItem": {
            "type": "object",
            "properties": {
                "parameters": {"type": "array", "items": {"$ref": "#/$defs/parameter"}},
                "servers": {"type": "array", "items": {"$ref": "#/$defs/server"}},
                **{method: {"$ref": "#/$defs/operation"} for method in HTTP_METHODS},
            },
        },
    },
}

_validator = Draft202012Validator(OPENAPI_SCHEMA)


class OASVersionParams(RuleParams):
    versions: list[str] = Field(default_factory=lambda: ["3.0", "3.1"], min_length=1)


def _with_string_keys(value: Any) -> Any:
    # YAML allows non-string keys (e.g. unquoted status codes); JSON Schema does not
    if isinstance(value, Mapping):
        return {str(k): _with_string_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_with_string_keys(v) for v in value]
    return value


def _json_path(path) -> str:
    return "$" + "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in path)


def check_oas_spec(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """The document must match the structural OpenAPI 3 schema."""
    parse_params(RuleParams, rule)
    errors = sorted(
        _validator.iter_errors(_with_string_keys(document.data)),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    logger.debug(f"Schema validation found {len(errors)} errors")
    return [
        report(
            document, rule, tuple(error.absolute_path),
            f"{_json_path(error.absolute_path)}: {error.message}",
        )
        for error in errors
    ]


def check_oas_version(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """The ``openapi`` field must declare one of the supported versions."""
    params = parse_params(OASVersionParams, rule)
    supported = ", ".join(params.versions)

    root = document.root
    if "openapi" not in root:
        if "swagger" in root:
            return [report(
                document, rule, ("swagger",),
                f"Swagger {root['swagger']} documents are not supported; use OpenAPI {supported}",
            )]
        return [report(document, rule, (), f"Missing 'openapi' version field; expected one of {supported}")]

    version = str(root["openapi"])
    if any(version == v or version.startswith(v + ".") for v in params.versions):
        return []
    return [report(
        document, rule, ("openapi",),
        f"OpenAPI version {version} is not supported; expected one of {supported}",
    )]
