"""Unit tests for diagnostic records and run results."""

import pytest

from oaslint.diagnostics import Diagnostic, RunResult, Severity, full_span, offset_to_line_col


class TestDiagnostic:
    """Test Diagnostic model."""

    def test_str(self):
        diagnostic = Diagnostic(3, 9, Severity.WARNING, "Server URL must use HTTPS", "https")
        assert str(diagnostic) == "[WARNING] https: Server URL must use HTTPS (3-9)"

    def test_to_dict(self):
        diagnostic = Diagnostic(0, 4, Severity.ERROR, "broken", "parser")
        assert diagnostic.to_dict() == {
            "start": 0,
            "end": 4,
            "severity": "error",
            "message": "broken",
            "source": "parser",
        }

    @pytest.mark.parametrize("start,end,expected", [
        (2, 5, (2, 5)),
        (-4, 5, (0, 5)),
        (2, 50, (2, 10)),
        (30, 50, (10, 10)),
        (6, 3, (6, 6)),
    ])
    def test_clamped(self, start, end, expected):
        clamped = Diagnostic(start, end, Severity.INFO, "m", "s").clamped(10)
        assert (clamped.start, clamped.end) == expected

    def test_clamped_returns_same_instance_when_in_bounds(self):
        diagnostic = Diagnostic(1, 2, Severity.INFO, "m", "s")
        assert diagnostic.clamped(10) is diagnostic

    def test_full_span(self):
        diagnostic = full_span("abc", Severity.ERROR, "failed", "checkCRUD")
        assert (diagnostic.start, diagnostic.end) == (0, 3)


class TestRunResult:
    """Test RunResult model."""

    def test_empty_result(self):
        result = RunResult()
        assert result.diagnostics == []
        assert result.title is None
        assert result.exit_code == 0

    def test_exit_code_only_for_errors(self):
        warnings = RunResult([Diagnostic(0, 1, Severity.WARNING, "w", "s")], "API")
        errors = RunResult([Diagnostic(0, 1, Severity.ERROR, "e", "s")], "API")

        assert warnings.exit_code == 0
        assert errors.has_errors
        assert errors.exit_code == 1

    def test_to_dict(self):
        result = RunResult(
            [
                Diagnostic(0, 1, Severity.ERROR, "e", "s"),
                Diagnostic(1, 2, Severity.INFO, "i", "s"),
                Diagnostic(2, 3, Severity.INFO, "i", "s"),
            ],
            "Orders API",
        )

        data = result.to_dict()
        assert data["title"] == "Orders API"
        assert data["counts"] == {"error": 1, "warning": 0, "info": 2}
        assert [d["message"] for d in data["diagnostics"]] == ["e", "i", "i"]


class TestOffsetToLineCol:
    """Test offset translation."""

    @pytest.mark.parametrize("offset,expected", [
        (0, (1, 1)),
        (3, (1, 4)),
        (4, (2, 1)),
        (6, (2, 3)),
        (-5, (1, 1)),
        (100, (2, 3)),
    ])
    def test_offsets(self, offset, expected):
        assert offset_to_line_col("abc\nde", offset) == expected
