"""Diagnostic records produced by lint runs."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

PARSER_SOURCE = "parser"


class Severity(str, Enum):
    """Diagnostic severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A located finding in the document text.

    ``start`` and ``end`` are character offsets into the raw document text.
    ``source`` names the rule (or ``"parser"``) that produced the finding.
    """
    start: int
    end: int
    severity: Severity
    message: str
    source: str

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.source}: {self.message} ({self.start}-{self.end})"

    def clamped(self, length: int) -> "Diagnostic":
        """Return a copy whose span lies within ``[0, length]``."""
        start = min(max(self.start, 0), length)
        end = min(max(self.end, start), length)
        if (start, end) == (self.start, self.end):
            return self
        return replace(self, start=start, end=end)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "start": self.start,
            "end": self.end,
            "severity": self.severity.value,
            "message": self.message,
            "source": self.source,
        }


def full_span(text: str, severity: Severity, message: str, source: str) -> Diagnostic:
    """Build a diagnostic covering the whole text."""
    return Diagnostic(0, len(text), severity, message, source)


@dataclass
class RunResult:
    """Output of one lint run: ordered diagnostics plus the document title."""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    title: str | None = None

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 1 when any error was reported."""
        return 1 if self.has_errors else 0

    def counts_by_severity(self) -> dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for diagnostic in self.diagnostics:
            counts[diagnostic.severity.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "title": self.title,
            "counts": self.counts_by_severity(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """Translate a character offset into 1-based (line, column)."""
    offset = min(max(offset, 0), len(text))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1
