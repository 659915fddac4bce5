"""
Rule evaluator functions

FUNCTIONS is the closed registry of evaluators a ruleset.yaml may name.
Unknown names are rejected while the rule set is loaded.
"""

from typing import Dict, Optional

from .base import MISSING, FunctionContext, FunctionResult, RuleFunction
from .consistent_casing import consistent_casing, count_casing_styles, evaluate_casing, CasingStats
from .core import (
    alphabetical,
    casing,
    defined,
    enumeration,
    falsy,
    length,
    oas_op_success_response,
    pattern,
    schema,
    truthy,
    undefined,
    unreferenced_reusable_object,
    xor,
)


FUNCTIONS: Dict[str, RuleFunction] = {
    "truthy": truthy,
    "falsy": falsy,
    "defined": defined,
    "undefined": undefined,
    "pattern": pattern,
    "schema": schema,
    "enumeration": enumeration,
    "length": length,
    "alphabetical": alphabetical,
    "casing": casing,
    "xor": xor,
    "unreferencedReusableObject": unreferenced_reusable_object,
    "unreferenced-reusable-object": unreferenced_reusable_object,
    "oasOpSuccessResponse": oas_op_success_response,
    # Custom functions
    "consistentCasing": consistent_casing,
    "consistent-casing": consistent_casing,
}

# These inspect presence itself, so they also run when the targeted field is absent
PRESENCE_FUNCTIONS = frozenset([truthy, falsy, defined, undefined])


def get_function(name: str) -> Optional[RuleFunction]:
    """Look up an evaluator by the name used in ruleset.yaml"""
    return FUNCTIONS.get(name)


__all__ = [
    "FUNCTIONS",
    "PRESENCE_FUNCTIONS",
    "MISSING",
    "FunctionContext",
    "FunctionResult",
    "RuleFunction",
    "CasingStats",
    "consistent_casing",
    "count_casing_styles",
    "evaluate_casing",
    "get_function",
]
