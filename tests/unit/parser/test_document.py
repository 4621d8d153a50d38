"""Tests for OpenAPI document parsing and the source map."""

import pytest

from oaslint.errors import DocumentParseError
from oaslint.parser import parse_document

SMALL_SPEC = """\
openapi: 3.0.0
info:
  title: Pets
paths:
  /pets:
    parameters:
      - name: limit
        in: query
    get:
      parameters:
        - name: limit
          in: query
          required: true
        - $ref: '#/components/parameters/Trace'
      responses:
        200:
          description: ok
    x-internal: true
components:
  parameters:
    Trace:
      name: X-Trace
      in: header
"""


@pytest.fixture
def document():
    return parse_document(SMALL_SPEC)


class TestParseDocument:
    """Test parse_document."""

    def test_parses_yaml(self, document):
        assert document.title == "Pets"
        assert document.version == "3.0.0"
        assert document.text == SMALL_SPEC
        assert "/pets" in document.paths

    @pytest.mark.parametrize("text", ["info: [", "a: b: c", "key: 'unterminated"])
    def test_malformed_text(self, text):
        with pytest.raises(DocumentParseError):
            parse_document(text)

    @pytest.mark.parametrize("text,data", [
        ("", None),
        ("# only a comment\n", None),
        ("~", None),
        ("- a\n- b\n", ["a", "b"]),
        ("plain scalar", "plain scalar"),
    ])
    def test_non_mapping_root_parses(self, text, data):
        document = parse_document(text)

        assert document.data == data
        assert document.root == {}
        assert document.title is None
        assert document.paths == {}
        assert list(document.iter_operations()) == []

    def test_malformed_text_is_parse_error(self):
        with pytest.raises(DocumentParseError):
            parse_document(":: not valid ::")

    def test_multiple_documents_rejected(self):
        with pytest.raises(DocumentParseError):
            parse_document("a: 1\n---\nb: 2\n")

    def test_duplicate_keys_last_wins(self):
        document = parse_document("info:\n  title: First\ninfo:\n  title: Second\n")
        assert document.title == "Second"

    def test_swagger_version(self):
        assert parse_document("swagger: '2.0'\n").version == "2.0"

    def test_merge_keys(self):
        text = "base: &base\n  title: Shared\ninfo:\n  <<: *base\n  version: '1'\n"
        document = parse_document(text)

        assert document.title == "Shared"
        start, end = document.span(("info", "version"))
        assert text[start:end] == "'1'"


class TestSourceMap:
    """Test source spans."""

    def test_value_span(self, document):
        start, end = document.span(("info", "title"))
        assert SMALL_SPEC[start:end] == "Pets"

    def test_key_span(self, document):
        start, end = document.span(("paths", "/pets", "get"), key=True)
        assert SMALL_SPEC[start:end] == "get"

    def test_sequence_index_span(self, document):
        start, end = document.span(("paths", "/pets", "get", "parameters", 0, "name"))
        assert SMALL_SPEC[start:end] == "limit"

    def test_integer_key_lookup(self, document):
        start, end = document.span(("paths", "/pets", "get", "responses", 200), key=True)
        assert SMALL_SPEC[start:end] == "200"

    def test_unknown_path_falls_back_to_ancestor(self, document):
        assert document.span(("info", "missing", "deeper")) == document.span(("info",))

    def test_missing_key_span_falls_back_to_value(self, document):
        assert document.span(("info", "missing"), key=True) == document.span(("info",))

    def test_root_spans_whole_text(self, document):
        assert document.span(()) == (0, len(SMALL_SPEC))

    def test_recursive_alias_does_not_loop(self):
        document = parse_document("a: &node\n  - *node\n")
        assert document.span(("a", 0)) is not None


class TestOperations:
    """Test operation and parameter helpers."""

    def test_iter_operations_skips_extensions(self, document):
        operations = list(document.iter_operations())

        assert [(op.path, op.method) for op in operations] == [("/pets", "get")]
        assert operations[0].label == "GET /pets"
        assert operations[0].location == ("paths", "/pets", "get")

    def test_parameters_merge_with_operation_precedence(self, document):
        operation = next(document.iter_operations())
        parameters = {(p.name, p.location): p for p in document.parameters_for(operation)}

        assert set(parameters) == {("limit", "query"), ("X-Trace", "header")}
        assert parameters[("limit", "query")].data.get("required") is True
        assert parameters[("limit", "query")].declared_at == ("paths", "/pets", "get", "parameters", 0)

    def test_resolve_local_ref(self, document):
        resolved = document.resolve_ref({"$ref": "#/components/parameters/Trace"})
        assert resolved["name"] == "X-Trace"

    def test_resolve_broken_or_external_ref_unchanged(self, document):
        broken = {"$ref": "#/components/parameters/Missing"}
        external = {"$ref": "other.yaml#/Thing"}

        assert document.resolve_ref(broken) is broken
        assert document.resolve_ref(external) is external

    def test_resolve_ref_cycle_terminates(self):
        document = parse_document("a:\n  $ref: '#/b'\nb:\n  $ref: '#/a'\n")
        resolved = document.resolve_ref({"$ref": "#/a"})
        assert "$ref" in resolved
