"""Shared helpers for the built-in rules."""

import re
from collections.abc import Iterator, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..diagnostics import Diagnostic
from ..errors import RuleParamsError
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument, Operation
from ..parser.document import PathKey

ParamsT = TypeVar("ParamsT", bound="RuleParams")

SUCCESS_CODE = re.compile(r"^2(\d\d|XX)$", re.IGNORECASE)


class RuleParams(BaseModel):
    """Base model for ``functionParams`` of a rule."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


def parse_params(model: type[ParamsT], rule: RuleDescriptor) -> ParamsT:
    """Validate the rule's function parameters against ``model``.

    Raises:
        RuleParamsError: If the parameters do not fit the model
    """
    try:
        return model.model_validate(rule.params)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'functionParams'}: {err['msg']}"
            for err in e.errors()
        )
        raise RuleParamsError(rule.function, errors) from e


def report(
    document: OpenApiDocument,
    rule: RuleDescriptor,
    path: PathKey,
    message: str,
    key: bool = False,
) -> Diagnostic:
    """Diagnostic located at the node under ``path``.

    The rule's own ``message`` replaces the default text when configured.
    """
    start, end = document.span(path, key=key)
    return Diagnostic(start, end, rule.severity, rule.message or message, rule.source)


def success_responses(operation: Operation) -> Iterator[tuple[str, Any]]:
    """(status code, response) pairs for the 2xx responses of an operation."""
    responses = operation.data.get("responses")
    if not isinstance(responses, Mapping):
        return
    for code, response in responses.items():
        if SUCCESS_CODE.match(str(code)):
            yield str(code), response


def lowercase_all(values: list[str]) -> list[str]:
    return [value.lower() for value in values]
