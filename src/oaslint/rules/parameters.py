"""Parameter rules: required, forbidden and sensitive parameters."""

import re
from typing import Literal

from pydantic import Field, field_validator

from ..diagnostics import Diagnostic
from ..linter.descriptors import RuleDescriptor
from ..parser import OpenApiDocument, Parameter
from .base import RuleParams, lowercase_all, parse_params, report

ParameterLocation = Literal["query", "header", "path", "cookie"]

DEFAULT_SENSITIVE_PATTERNS = [
    r"pass(word|wd)?",
    r"secret",
    r"token",
    r"api[-_]?key",
    r"ssn",
    r"credit[-_]?card",
    r"card[-_]?number",
]


class ParamPresenceParams(RuleParams):
    name: str = Field(min_length=1)
    location: ParameterLocation = Field(alias="in", default="header")
    methods: list[str] | None = None

    @field_validator("methods")
    @classmethod
    def normalize_methods(cls, v):
        return lowercase_all(v) if v is not None else v


class ParamAbsenceParams(RuleParams):
    names: list[str] = Field(min_length=1)
    location: ParameterLocation | None = Field(alias="in", default=None)


class SensitiveDataParams(RuleParams):
    patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_SENSITIVE_PATTERNS), min_length=1)
    locations: list[ParameterLocation] = Field(default_factory=lambda: ["query", "path"])

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v):
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid pattern {pattern!r}: {e}")
        return v


def _same_name(parameter: Parameter, name: str) -> bool:
    # header names are case-insensitive
    if parameter.location == "header":
        return parameter.name.lower() == name.lower()
    return parameter.name == name


def check_param_element_presence(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Every (selected) operation must accept a given parameter."""
    params = parse_params(ParamPresenceParams, rule)
    diagnostics = []

    for operation in document.iter_operations():
        if params.methods is not None and operation.method.lower() not in params.methods:
            continue
        present = any(
            p.location == params.location and _same_name(p, params.name)
            for p in document.parameters_for(operation)
        )
        if not present:
            diagnostics.append(report(
                document, rule, operation.location,
                f"{operation.label} is missing the required {params.location} parameter '{params.name}'",
                key=True,
            ))

    return diagnostics


def check_param_element_absence(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """No operation may accept any of the forbidden parameters."""
    params = parse_params(ParamAbsenceParams, rule)
    diagnostics = []
    reported = set()

    for operation in document.iter_operations():
        for parameter in document.parameters_for(operation):
            if parameter.declared_at in reported:
                continue
            if params.location is not None and parameter.location != params.location:
                continue
            if not any(_same_name(parameter, name) for name in params.names):
                continue
            reported.add(parameter.declared_at)
            diagnostics.append(report(
                document, rule, parameter.declared_at + ("name",),
                f"Parameter '{parameter.name}' in {parameter.location or 'unknown location'} "
                f"must not be used ({operation.label})",
            ))

    return diagnostics


def check_element_sensitive_data(document: OpenApiDocument, raw_text: str, rule: RuleDescriptor) -> list[Diagnostic]:
    """Sensitive values must not travel in URLs (query or path parameters)."""
    params = parse_params(SensitiveDataParams, rule)
    patterns = [re.compile(p, re.IGNORECASE) for p in params.patterns]
    diagnostics = []
    reported = set()

    for operation in document.iter_operations():
        for parameter in document.parameters_for(operation):
            if parameter.declared_at in reported or parameter.location not in params.locations:
                continue
            if not any(p.search(parameter.name) for p in patterns):
                continue
            reported.add(parameter.declared_at)
            diagnostics.append(report(
                document, rule, parameter.declared_at + ("name",),
                f"Sensitive data must not be sent as a {parameter.location} parameter: "
                f"'{parameter.name}' ({operation.label})",
            ))

    return diagnostics
