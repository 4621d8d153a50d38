"""Rule dispatch engine, registry and rule descriptors."""

from .descriptors import RuleCall, RuleDescriptor, load_rules, select_rules
from .engine import LintEngine, run_linter
from .registry import CheckFunction, RuleRegistry, create_default_registry

__all__ = [
    "CheckFunction",
    "LintEngine",
    "RuleCall",
    "RuleDescriptor",
    "RuleRegistry",
    "create_default_registry",
    "load_rules",
    "run_linter",
    "select_rules",
]
