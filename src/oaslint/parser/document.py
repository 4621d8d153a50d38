"""OpenAPI document parsing with a source map back to text offsets.

The text is composed into a YAML node graph exactly once. The same graph is
constructed into plain Python data for the rules and walked to record the
character span of every mapping value and key, so rules can report findings
at the node they concern.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from ..errors import DocumentParseError

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

PathKey = tuple[str | int, ...]
Span = tuple[int, int]

_MAX_REF_DEPTH = 20


@dataclass
class SourceMap:
    """Character spans of the nodes in a parsed document, keyed by path."""
    length: int
    values: dict[PathKey, Span] = field(default_factory=dict)
    keys: dict[PathKey, Span] = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: yaml.Node | None, length: int) -> "SourceMap":
        source_map = cls(length)
        if node is not None:
            source_map._walk(node, (), set())
        return source_map

    def _walk(self, node: yaml.Node, path: PathKey, ancestors: set[int]) -> None:
        if id(node) in ancestors:
            return  # recursive alias
        self.values[path] = (node.start_mark.index, node.end_mark.index)

        if isinstance(node, yaml.MappingNode):
            ancestors = ancestors | {id(node)}
            for key_node, value_node in node.value:
                if not isinstance(key_node, yaml.ScalarNode):
                    continue
                child = path + (key_node.value,)
                self.keys[child] = (key_node.start_mark.index, key_node.end_mark.index)
                self._walk(value_node, child, ancestors)
        elif isinstance(node, yaml.SequenceNode):
            ancestors = ancestors | {id(node)}
            for index, item in enumerate(node.value):
                self._walk(item, path + (index,), ancestors)

    def span(self, path: PathKey, key: bool = False) -> Span:
        """Span of the node at ``path``, or of its nearest known ancestor.

        With ``key=True`` the span of the mapping key is returned when known.
        """
        normalized = tuple(p if isinstance(p, int) else str(p) for p in path)
        if key and normalized in self.keys:
            return self.keys[normalized]
        while normalized:
            if normalized in self.values:
                return self.values[normalized]
            normalized = normalized[:-1]
        return (0, self.length)


@dataclass(frozen=True)
class Operation:
    """One HTTP operation under ``paths``."""
    path: str
    method: str
    data: Mapping[str, Any]

    @property
    def location(self) -> PathKey:
        return ("paths", self.path, self.method)

    @property
    def label(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class Parameter:
    """A parameter in effect for an operation, with where it was declared."""
    name: str
    location: str
    data: Mapping[str, Any]
    declared_at: PathKey


@dataclass
class OpenApiDocument:
    """A parsed OpenAPI document. Rules must treat it as read-only.

    ``data`` is whatever the text parsed to. Rules normally go through
    ``root``, which is empty unless the document is a mapping.
    """
    text: str
    data: Any
    source_map: SourceMap

    @property
    def root(self) -> Mapping[str, Any]:
        return self.data if isinstance(self.data, Mapping) else {}

    @property
    def title(self) -> str | None:
        info = self.root.get("info")
        if isinstance(info, Mapping):
            title = info.get("title")
            if isinstance(title, str):
                return title
        return None

    @property
    def version(self) -> str | None:
        """The declared ``openapi`` (or Swagger 2 ``swagger``) version."""
        for key in ("openapi", "swagger"):
            value = self.root.get(key)
            if value is not None:
                return str(value)
        return None

    @property
    def paths(self) -> Mapping[str, Any]:
        paths = self.root.get("paths")
        return paths if isinstance(paths, Mapping) else {}

    def iter_operations(self) -> Iterator[Operation]:
        for path, path_item in self.paths.items():
            if not isinstance(path_item, Mapping):
                continue
            for method, operation in path_item.items():
                if str(method).lower() in HTTP_METHODS and isinstance(operation, Mapping):
                    yield Operation(str(path), str(method), operation)

    def parameters_for(self, operation: Operation) -> list[Parameter]:
        """Path-level and operation-level parameters, operation-level winning."""
        merged: dict[tuple[str, str], Parameter] = {}
        path_item = self.paths.get(operation.path, {})
        sources = [
            (path_item.get("parameters"), ("paths", operation.path, "parameters")),
            (operation.data.get("parameters"), operation.location + ("parameters",)),
        ]
        for params, base in sources:
            if not isinstance(params, list):
                continue
            for index, raw in enumerate(params):
                param = self.resolve_ref(raw)
                if not isinstance(param, Mapping) or "name" not in param:
                    continue
                parameter = Parameter(
                    name=str(param["name"]),
                    location=str(param.get("in", "")),
                    data=param,
                    declared_at=base + (index,),
                )
                merged[(parameter.name, parameter.location)] = parameter
        return list(merged.values())

    def resolve_ref(self, obj: Any) -> Any:
        """Follow local ``#/...`` references.

        External or broken references are returned unchanged.
        """
        current = obj
        for _ in range(_MAX_REF_DEPTH):
            if not isinstance(current, Mapping):
                return current
            ref = current.get("$ref")
            if not isinstance(ref, str) or not ref.startswith("#/"):
                return current
            target = self._lookup_pointer(ref)
            if target is None:
                logger.debug(f"Unresolvable reference: {ref}")
                return current
            current = target
        return current

    def _lookup_pointer(self, ref: str) -> Any:
        node: Any = self.data
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(node, Mapping) and token in node:
                node = node[token]
            elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
                node = node[int(token)]
            else:
                return None
        return node

    def span(self, path: PathKey, key: bool = False) -> Span:
        return self.source_map.span(path, key=key)


def parse_document(text: str) -> OpenApiDocument:
    """Parse YAML or JSON text into an OpenApiDocument.

    Raises:
        DocumentParseError: If the text is not well-formed YAML or JSON
    """
    try:
        loader = yaml.SafeLoader(text)
    except yaml.YAMLError as e:
        raise DocumentParseError(str(e)) from e

    try:
        node = loader.get_single_node()
        data = loader.construct_document(node) if node is not None else None
    except yaml.YAMLError as e:
        raise DocumentParseError(str(e)) from e
    finally:
        loader.dispose()

    return OpenApiDocument(text=text, data=data, source_map=SourceMap.from_node(node, len(text)))
