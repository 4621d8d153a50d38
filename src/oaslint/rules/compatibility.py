"""Backward compatibility against a baseline version of the document."""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import Field, model_validator

from ..config import PortalConfig
from ..diagnostics import Diagnostic
from ..errors import DocumentParseError, OaslintError
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument, parse_document
from ..utils.portal import fetch_spec_from_portal
from .base import RuleParams, parse_params, report

logger = logging.getLogger(__name__)


class CompatibilityParams(RuleParams):
    baseline: str | None = None
    baseline_path: str | None = Field(alias="baselinePath", default=None)
    repo: str | None = None
    path: str | None = None
    portal_url: str | None = Field(alias="portalUrl", default=None)

    @model_validator(mode="after")
    def validate_single_source(self):
        sources = [self.baseline is not None, self.baseline_path is not None, self.repo is not None]
        if sum(sources) != 1:
            raise ValueError("exactly one of baseline, baselinePath or repo must be given")
        if self.repo is not None and not self.path:
            raise ValueError("path is required when repo is given")
        return self


async def _load_baseline_text(params: CompatibilityParams) -> str:
    if params.baseline is not None:
        return params.baseline

    if params.baseline_path is not None:
        try:
            return await asyncio.to_thread(Path(params.baseline_path).read_text, encoding="utf-8")
        except OSError as e:
            raise OaslintError(f"Cannot read baseline {params.baseline_path}: {e}")

    portal = PortalConfig(base_url=params.portal_url) if params.portal_url else PortalConfig()
    fetched = await asyncio.to_thread(fetch_spec_from_portal, params.repo, params.path, portal)
    if fetched is None:
        raise OaslintError(f"Baseline {params.path} could not be retrieved from {params.repo}")
    if isinstance(fetched, str):
        return fetched
    return yaml.safe_dump(fetched, sort_keys=False)


async def check_compatibility(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Removed paths, removed operations and new required parameters break clients."""
    params = parse_params(CompatibilityParams, rule)
    try:
        baseline = parse_document(await _load_baseline_text(params))
    except DocumentParseError as e:
        raise OaslintError(f"Baseline document is invalid: {e}") from e
    if not isinstance(baseline.data, Mapping):
        raise OaslintError(f"Baseline document is invalid: root is {type(baseline.data).__name__}, not a mapping")

    diagnostics = []
    current_paths = {str(p) for p in document.paths}

    for path in baseline.paths:
        if str(path) not in current_paths:
            diagnostics.append(report(
                document, rule, ("paths",),
                f"Breaking change: path {path} was removed",
                key=True,
            ))

    current_operations = {(op.path, op.method.lower()): op for op in document.iter_operations()}
    for old in baseline.iter_operations():
        if old.path not in current_paths:
            continue
        operation = current_operations.get((old.path, old.method.lower()))
        if operation is None:
            diagnostics.append(report(
                document, rule, ("paths", old.path),
                f"Breaking change: {old.label} was removed",
                key=True,
            ))
            continue

        old_parameters = {(p.name, p.location) for p in baseline.parameters_for(old)}
        for parameter in document.parameters_for(operation):
            if parameter.data.get("required") is True and (parameter.name, parameter.location) not in old_parameters:
                diagnostics.append(report(
                    document, rule, parameter.declared_at,
                    f"Breaking change: {operation.label} adds the required "
                    f"{parameter.location} parameter '{parameter.name}'",
                ))

    logger.debug(f"Compatibility check found {len(diagnostics)} breaking changes")
    return diagnostics
