"""Server URL rules."""

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import Field

from ..diagnostics import Diagnostic
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument
from ..parser.document import PathKey
from .base import RuleParams, parse_params, report


class HttpsServersParams(RuleParams):
    allow_relative: bool = Field(alias="allowRelative", default=True)


def _server_lists(document: OpenApiDocument) -> Iterator[tuple[PathKey, Any]]:
    yield ("servers",), document.root.get("servers")
    for path, path_item in document.paths.items():
        if isinstance(path_item, Mapping):
            yield ("paths", path, "servers"), path_item.get("servers")
    for operation in document.iter_operations():
        yield operation.location + ("servers",), operation.data.get("servers")


def check_https_servers(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Every declared server URL must use HTTPS."""
    params = parse_params(HttpsServersParams, rule)
    diagnostics = []

    for base, servers in _server_lists(document):
        if not isinstance(servers, list):
            continue
        for index, server in enumerate(servers):
            url = server.get("url") if isinstance(server, Mapping) else None
            if not isinstance(url, str) or url.lower().startswith("https://"):
                continue
            if params.allow_relative and "://" not in url:
                continue
            diagnostics.append(report(
                document, rule, base + (index, "url"),
                f"Server URL must use HTTPS: {url}",
            ))

    return diagnostics
