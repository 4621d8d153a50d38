"""Rule descriptors and rule-set files.

A descriptor names the check function to call and carries the parameters
passed through to it untouched::

    - id: https-only
      severity: error
      call:
        function: checkHttpsServers
        functionParams:
          allowRelative: false
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..diagnostics import Severity
from ..errors import RuleDescriptorError, RulesFileError

logger = logging.getLogger(__name__)


class RuleCall(BaseModel):
    """Which check function to run, and with what parameters."""
    function: str
    function_params: dict[str, Any] = Field(alias="functionParams", default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RuleDescriptor(BaseModel):
    """A caller-selected rule."""
    id: str | None = None
    description: str | None = None
    message: str | None = None
    severity: Severity = Severity.WARNING
    call: RuleCall

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    @property
    def function(self) -> str:
        return self.call.function

    @property
    def params(self) -> dict[str, Any]:
        return self.call.function_params

    @property
    def source(self) -> str:
        """Source tag for diagnostics reported by this rule."""
        return self.id or self.call.function


def descriptor_function(raw: Any) -> str | None:
    """The ``call.function`` identifier of a caller-supplied rule, if any.

    Only this field decides whether a rule can run; the rest of the
    descriptor is validated once its function has resolved.
    """
    if isinstance(raw, RuleDescriptor):
        return raw.function
    if isinstance(raw, Mapping):
        call = raw.get("call")
        if isinstance(call, Mapping) and isinstance(call.get("function"), str):
            return call["function"]
    return None


def validate_descriptor(raw: Any) -> RuleDescriptor:
    """Validate a caller-supplied rule into a descriptor.

    Raises:
        RuleDescriptorError: If any field of the descriptor is invalid
    """
    if isinstance(raw, RuleDescriptor):
        return raw
    try:
        return RuleDescriptor.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'rule'}: {err['msg']}"
            for err in e.errors()
        )
        raise RuleDescriptorError(descriptor_function(raw) or "unknown", errors) from e


def load_rules(rules_path: str | Path) -> list[RuleDescriptor]:
    """Load rule descriptors from a YAML or JSON rule-set file.

    The file holds either a list of descriptors or a mapping with a
    ``rules`` list.

    Raises:
        RulesFileError: If the file cannot be read or is malformed
    """
    rules_path = Path(rules_path)
    try:
        with open(rules_path, encoding="utf-8") as f:
            if rules_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise RulesFileError(f"Cannot read rules file {rules_path}: {e}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RulesFileError(f"Invalid rules file {rules_path}: {e}")

    if isinstance(data, dict):
        data = data.get("rules")
    if not isinstance(data, list):
        raise RulesFileError(f"Rules file {rules_path} must contain a list of rules")

    rules = []
    for index, raw in enumerate(data):
        try:
            rules.append(RuleDescriptor.model_validate(raw))
        except ValidationError as e:
            raise RulesFileError(f"Invalid rule #{index} in {rules_path}: {e}")

    logger.debug(f"Loaded {len(rules)} rules from {rules_path}")
    return rules


def select_rules(rules: Iterable[RuleDescriptor], ids: Iterable[str]) -> list[RuleDescriptor]:
    """Keep rules whose id or function name is in ``ids``, preserving order."""
    wanted = set(ids)
    return [rule for rule in rules if rule.id in wanted or rule.function in wanted]
