"""Registry mapping rule function identifiers to check functions."""

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Union

from ..diagnostics import Diagnostic
from ..errors import RegistryError
from ..parser import OpenApiDocument
from .descriptors import RuleDescriptor

logger = logging.getLogger(__name__)

CheckResult = Union[Sequence[Diagnostic], Awaitable[Sequence[Diagnostic]]]
CheckFunction = Callable[[OpenApiDocument, str, RuleDescriptor], CheckResult]


class RuleRegistry:
    """Lookup table from function identifier to check function.

    Registration rejects duplicates so that every identifier has exactly one
    implementation; lookups never fail, a miss simply returns None.
    """

    def __init__(self):
        self._checks: dict[str, CheckFunction] = {}

    def register(self, identifier: str, check: CheckFunction) -> None:
        """Register a check function under ``identifier``."""
        if not isinstance(identifier, str) or not identifier:
            raise RegistryError(f"Rule identifier must be a non-empty string, got: {identifier!r}")
        if not callable(check):
            raise RegistryError(f"Check for {identifier} is not callable")
        if identifier in self._checks:
            raise RegistryError(f"Duplicate rule identifier: {identifier}")
        self._checks[identifier] = check
        logger.debug(f"Registered rule function: {identifier}")

    def rule(self, identifier: str) -> Callable[[CheckFunction], CheckFunction]:
        """Decorator form of :meth:`register`."""
        def decorator(check: CheckFunction) -> CheckFunction:
            self.register(identifier, check)
            return check
        return decorator

    def resolve(self, identifier: str) -> CheckFunction | None:
        return self._checks.get(identifier)

    def require(self, identifiers: Iterable[str]) -> None:
        """Fail if any expected identifier has no implementation."""
        missing = [name for name in identifiers if name not in self._checks]
        if missing:
            raise RegistryError(f"No implementation registered for: {', '.join(missing)}")

    def identifiers(self) -> list[str]:
        return list(self._checks)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._checks

    def __len__(self) -> int:
        return len(self._checks)


def create_default_registry() -> RuleRegistry:
    """Registry holding the built-in rule set."""
    from ..rules import BUILTIN_RULE_IDENTIFIERS, BUILTIN_RULES

    registry = RuleRegistry()
    for identifier, check in BUILTIN_RULES.items():
        registry.register(identifier, check)
    registry.require(BUILTIN_RULE_IDENTIFIERS)
    return registry
