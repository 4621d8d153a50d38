"""oaslint - Pluggable rule engine for OpenAPI documents.

oaslint parses an OpenAPI document once, runs a caller-selected set of rules
against it concurrently and reports every finding as an offset-addressed
diagnostic for editors and CI reports.
"""

__version__ = "0.1.0"
__description__ = "Pluggable rule engine for linting OpenAPI documents"

from oaslint.config import OaslintConfig
from oaslint.diagnostics import Diagnostic, RunResult, Severity
from oaslint.linter import LintEngine, run_linter

__all__ = [
    "__version__",
    "__description__",
    "OaslintConfig",
    "Diagnostic",
    "RunResult",
    "Severity",
    "LintEngine",
    "run_linter",
]
