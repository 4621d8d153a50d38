"""End-to-end lint runs with the built-in rules."""

import asyncio

import pytest

from oaslint import run_linter
from oaslint.diagnostics import Severity
from oaslint.linter import LintEngine, load_rules
from oaslint.rules import BUILTIN_RULE_IDENTIFIERS

RULE_PARAMS = {
    "checkParamElementPresence": {"name": "X-Request-ID", "in": "header"},
    "checkParamElementAbsence": {"names": ["api_key"]},
}

MESSY_SPEC = """\
openapi: 3.0.3
info:
  title: Messy API
  version: '1'
servers:
  - url: http://messy.example.com
paths:
  /getWidgets:
    get:
      parameters:
        - name: api_key
          in: query
      responses:
        '200':
          description: ok
          content:
            application/json:
              schema:
                type: array
    trace:
      responses:
        '500':
          description: failed
"""

RULES_YAML = """\
rules:
  - id: https
    severity: error
    call:
      function: checkHttpsServers
  - id: no-verbs
    call:
      function: checkCRUD
  - id: future-rule
    call:
      function: checkSomethingNew
"""


@pytest.fixture
def all_rules(clean_spec):
    rules = [
        {"id": identifier, "call": {"function": identifier, "functionParams": RULE_PARAMS.get(identifier, {})}}
        for identifier in BUILTIN_RULE_IDENTIFIERS
    ]
    for rule in rules:
        if rule["id"] == "checkCompatibility":
            rule["call"]["functionParams"] = {"baseline": clean_spec}
    return rules


class TestLintWorkflow:
    """Lint whole documents with every built-in rule."""

    def test_clean_document_has_no_diagnostics(self, clean_spec, all_rules):
        result = asyncio.run(run_linter(clean_spec, all_rules))

        assert result.diagnostics == []
        assert result.title == "Orders API"
        assert result.exit_code == 0

    def test_messy_document(self, all_rules):
        result = asyncio.run(run_linter(MESSY_SPEC, all_rules))
        sources = {d.source for d in result.diagnostics}

        assert result.title == "Messy API"
        assert {
            "checkHttpsServers",
            "checkCRUD",
            "checkAllowedMethods",
            "checkSuccessResponse",
            "checkParamElementAbsence",
            "checkElementSensitiveData",
            "checkResponseEncapsulation",
            "checkCompatibility",
        } <= sources
        assert all(0 <= d.start <= d.end <= len(MESSY_SPEC) for d in result.diagnostics)

    def test_diagnostics_grouped_in_rule_order(self, all_rules):
        result = asyncio.run(run_linter(MESSY_SPEC, all_rules))

        order = [d.source for d in result.diagnostics]
        positions = [BUILTIN_RULE_IDENTIFIERS.index(source) for source in order]
        assert positions == sorted(positions)

    def test_rules_file_with_unknown_function(self, tmp_path, http_server_spec):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text(RULES_YAML, encoding="utf-8")

        result = LintEngine().run_sync(http_server_spec, load_rules(rules_file))

        # unknown functions are skipped without failing the run
        assert [(d.source, d.severity) for d in result.diagnostics] == [("https", Severity.ERROR)]
        assert result.exit_code == 1

    def test_unparseable_document(self, all_rules):
        result = asyncio.run(run_linter("openapi: 3.0.0\ninfo: [unclosed", all_rules))

        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].source == "parser"
        assert result.title is None
