"""Exception types raised at the edges of oaslint.

The lint engine itself never raises to its caller; these types exist for the
boundaries around it (registration, rule parameters, files, network).
"""


class OaslintError(Exception):
    """Base class for oaslint errors."""


class DocumentParseError(OaslintError):
    """The document text is not well-formed YAML or JSON."""


class RegistryError(OaslintError):
    """A rule registry was built with a duplicate, missing or invalid entry."""


class RuleParamsError(OaslintError):
    """A rule received function parameters it cannot use."""

    def __init__(self, function: str, detail: str):
        self.function = function
        self.detail = detail
        super().__init__(f"invalid functionParams for {function}: {detail}")


class RuleDescriptorError(OaslintError):
    """A selected rule resolved to a check function but its descriptor is invalid."""

    def __init__(self, function: str, detail: str):
        self.function = function
        self.detail = detail
        super().__init__(f"invalid rule descriptor for {function}: {detail}")


class RulesFileError(OaslintError):
    """A rule-set file is missing or malformed."""


class FetchError(OaslintError):
    """A remote resource could not be retrieved."""

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"failed to fetch {url}: {detail}")
