"""Built-in rule set.

Each check takes ``(document, raw_text, rule)`` and returns a list of
diagnostics; ``checkCompatibility`` is a coroutine because it may fetch its
baseline over the network.
"""

from .compatibility import check_compatibility
from .operations import (
    check_allowed_methods,
    check_crud,
    check_get_idempotency,
    check_get_return_object,
    check_success_response,
)
from .parameters import (
    check_element_sensitive_data,
    check_param_element_absence,
    check_param_element_presence,
)
from .payloads import check_request_encapsulation, check_response_encapsulation
from .servers import check_https_servers
from .structure import check_oas_spec, check_oas_version

BUILTIN_RULE_IDENTIFIERS = (
    "checkHttpsServers",
    "checkParamElementPresence",
    "checkElementSensitiveData",
    "checkAllowedMethods",
    "checkOASSpec",
    "checkOASVersion",
    "checkCRUD",
    "checkSuccessResponse",
    "checkGetIdempotency",
    "checkGetReturnObject",
    "checkParamElementAbsence",
    "checkRequestEncapsulation",
    "checkResponseEncapsulation",
    "checkCompatibility",
)

BUILTIN_RULES = {
    "checkHttpsServers": check_https_servers,
    "checkParamElementPresence": check_param_element_presence,
    "checkElementSensitiveData": check_element_sensitive_data,
    "checkAllowedMethods": check_allowed_methods,
    "checkOASSpec": check_oas_spec,
    "checkOASVersion": check_oas_version,
    "checkCRUD": check_crud,
    "checkSuccessResponse": check_success_response,
    "checkGetIdempotency": check_get_idempotency,
    "checkGetReturnObject": check_get_return_object,
    "checkParamElementAbsence": check_param_element_absence,
    "checkRequestEncapsulation": check_request_encapsulation,
    "checkResponseEncapsulation": check_response_encapsulation,
    "checkCompatibility": check_compatibility,
}

__all__ = [
    "BUILTIN_RULES",
    "BUILTIN_RULE_IDENTIFIERS",
    "check_allowed_methods",
    "check_compatibility",
    "check_crud",
    "check_element_sensitive_data",
    "check_get_idempotency",
    "check_get_return_object",
    "check_https_servers",
    "check_oas_spec",
    "check_oas_version",
    "check_param_element_absence",
    "check_param_element_presence",
    "check_request_encapsulation",
    "check_response_encapsulation",
    "check_success_response",
]
