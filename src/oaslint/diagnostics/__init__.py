"""Diagnostic records and run results for oaslint."""

from .models import (
    PARSER_SOURCE,
    Diagnostic,
    RunResult,
    Severity,
    full_span,
    offset_to_line_col,
)

__all__ = [
    "PARSER_SOURCE",
    "Diagnostic",
    "RunResult",
    "Severity",
    "full_span",
    "offset_to_line_col",
]
