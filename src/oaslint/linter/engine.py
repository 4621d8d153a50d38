"""Rule dispatch and diagnostic aggregation.

A run parses the document once, resolves the selected rules against the
registry, executes every resolved rule concurrently and flattens their
diagnostics in resolution order. Every failure mode is reported as a
diagnostic; ``LintEngine.run`` never raises.
"""

import asyncio
import inspect
import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple

from ..config import EngineConfig
from ..diagnostics import PARSER_SOURCE, Diagnostic, RunResult, Severity, full_span
from ..errors import DocumentParseError
from ..parser import OpenApiDocument, parse_document
from .descriptors import RuleDescriptor, descriptor_function, validate_descriptor
from .registry import CheckFunction, RuleRegistry, create_default_registry

logger = logging.getLogger(__name__)


class ResolvedRule(NamedTuple):
    """A selected rule whose function identifier resolved in the registry."""
    function: str
    check: CheckFunction
    descriptor: Any


class LintEngine:
    """Runs selected rules against OpenAPI document text."""

    def __init__(self, registry: RuleRegistry | None = None, config: EngineConfig | None = None):
        self.registry = registry if registry is not None else create_default_registry()
        self.config = config or EngineConfig()

    async def run(self, raw_text: str, selected_rules: Any) -> RunResult:
        """Lint ``raw_text`` with ``selected_rules``.

        Args:
            raw_text: Document text (YAML or JSON)
            selected_rules: Sequence of RuleDescriptor instances or raw mappings

        Returns:
            RunResult with the flattened diagnostics and the document title
        """
        try:
            document = parse_document(raw_text)
        except DocumentParseError as e:
            return self._parse_failure(raw_text, str(e))
        except Exception as e:
            logger.exception("Unexpected error while parsing document")
            return self._parse_failure(raw_text, str(e) or type(e).__name__)

        title = document.title

        if not _is_rule_sequence(selected_rules) or len(selected_rules) == 0:
            logger.debug("No rules selected")
            return RunResult(diagnostics=[], title=title)

        runnable = self.resolve(selected_rules)
        logger.info(f"Running {len(runnable)} of {len(selected_rules)} selected rules")

        results = await asyncio.gather(
            *(self._run_rule(resolved, document, raw_text) for resolved in runnable)
        )

        diagnostics = [
            diagnostic.clamped(len(raw_text))
            for rule_diagnostics in results
            for diagnostic in rule_diagnostics
        ]
        logger.info(f"Lint run completed with {len(diagnostics)} diagnostics")
        return RunResult(diagnostics=diagnostics, title=title)

    def run_sync(self, raw_text: str, selected_rules: Any) -> RunResult:
        """Blocking wrapper around :meth:`run` for callers without an event loop."""
        return asyncio.run(self.run(raw_text, selected_rules))

    def resolve(self, selected_rules: Sequence[Any]) -> list[ResolvedRule]:
        """Pair each selected rule with its check function, in selection order.

        Only ``call.function`` decides; the rest of the descriptor is
        validated when the rule runs.
        """
        runnable = []
        for raw in selected_rules:
            function = descriptor_function(raw)
            check = self.registry.resolve(function) if function else None
            if check is None:
                logger.debug(f"Rule function not available, skipping: {function}")
                continue
            runnable.append(ResolvedRule(function, check, raw))
        return runnable

    async def _run_rule(self, resolved: ResolvedRule, document: OpenApiDocument, raw_text: str) -> list[Diagnostic]:
        function = resolved.function
        timeout = self.config.rule_timeout_seconds
        logger.debug(f"Executing rule: {function}")
        deadline = None
        try:
            rule = validate_descriptor(resolved.descriptor)
            async with asyncio.timeout(timeout) as deadline:
                output = await _invoke(resolved.check, document, raw_text, rule)
        except Exception as e:
            # a TimeoutError raised by the rule itself is an ordinary failure
            if isinstance(e, TimeoutError) and deadline is not None and deadline.expired():
                logger.warning(f"Rule {function} timed out after {timeout} seconds")
                return [full_span(
                    raw_text,
                    Severity.ERROR,
                    f'Rule "{function}" timed out after {timeout:g} seconds',
                    function,
                )]
            logger.error(f"Rule {function} failed with error: {e}")
            return [full_span(
                raw_text,
                Severity.ERROR,
                f'Rule "{function}" execution failed: {str(e) or type(e).__name__}',
                function,
            )]

        return _collect_diagnostics(function, output)

    def _parse_failure(self, raw_text: str, detail: str) -> RunResult:
        logger.info(f"Specification parsing failed: {detail}")
        diagnostic = full_span(
            raw_text,
            Severity.ERROR,
            f"Specification parsing error: {detail}",
            PARSER_SOURCE,
        )
        return RunResult(diagnostics=[diagnostic], title=None)


async def _invoke(check: CheckFunction, document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> Any:
    if inspect.iscoroutinefunction(check):
        return await check(document, raw_text, rule)
    output = await _run_in_thread(rule.function, check, document, raw_text, rule)
    if inspect.isawaitable(output):
        output = await output
    return output


def _run_in_thread(function: str, check: CheckFunction, *args: Any) -> asyncio.Future:
    """Run a plain-function rule on its own daemon thread.

    A rule that outlives its timeout cannot be interrupted; its thread keeps
    running detached and never blocks interpreter exit or later runs.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def deliver(outcome: Any, failed: bool) -> None:
        if future.done():
            return  # timed out or cancelled
        if failed:
            future.set_exception(outcome)
        else:
            future.set_result(outcome)

    def target() -> None:
        try:
            outcome, failed = check(*args), False
        except Exception as e:
            outcome, failed = e, True
        try:
            loop.call_soon_threadsafe(deliver, outcome, failed)
        except RuntimeError:
            logger.debug(f"Rule {function} finished after its run had ended")

    threading.Thread(target=target, name=f"oaslint-rule-{function}", daemon=True).start()
    return future


def _is_rule_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray, Mapping))


def _collect_diagnostics(function: str, output: Any) -> list[Diagnostic]:
    if not _is_rule_sequence(output):
        if output is not None:
            logger.warning(f"Rule {function} returned {type(output).__name__}, expected a list")
        return []
    diagnostics = [item for item in output if isinstance(item, Diagnostic)]
    if len(diagnostics) != len(output):
        logger.warning(f"Rule {function} returned {len(output) - len(diagnostics)} non-diagnostic items")
    return diagnostics


async def run_linter(
    content: str,
    selected_rules: Any,
    *,
    registry: RuleRegistry | None = None,
    config: EngineConfig | None = None,
) -> RunResult:
    """Lint ``content`` with ``selected_rules`` using a one-off engine."""
    return await LintEngine(registry, config).run(content, selected_rules)
