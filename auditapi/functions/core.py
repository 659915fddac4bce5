"""
Core rule evaluator functions

Declarative rules in ruleset.yaml refer to these by name (``truthy``,
``pattern``, ``schema``...). Each takes the targeted value, the clause's
``functionOptions`` and a FunctionContext, and returns a list of results.
An empty list means the value passed.
"""

import re
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator, validators

from .base import MISSING, FunctionContext, FunctionResult, stringify_keys


# Casing patterns; {d} is replaced by "0-9" unless digits are disallowed
CASING_PATTERNS = {
    "flat": r"^[a-z][a-z{d}]*$",
    "camel": r"^[a-z][a-z{d}]*(?:[A-Z{d}](?:[a-z{d}]+|$))*$",
    "pascal": r"^[A-Z][a-z{d}]*(?:[A-Z{d}](?:[a-z{d}]+|$))*$",
    "kebab": r"^[a-z][a-z{d}]*(?:-[a-z{d}]+)*$",
    "cobol": r"^[A-Z][A-Z{d}]*(?:-[A-Z{d}]+)*$",
    "snake": r"^[a-z][a-z{d}]*(?:_[a-z{d}]+)*$",
    "macro": r"^[A-Z][A-Z{d}]*(?:_[A-Z{d}]+)*$",
}

SUCCESS_RESPONSE_PATTERN = re.compile(r"^[23](?:\d\d|XX)$")

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def _options(options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return options or {}


def _is_truthy(value: Any) -> bool:
    # Empty objects and arrays count as truthy, as in the rule file format
    if value is MISSING or value is None:
        return False
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def compile_pattern(pattern: str) -> "re.Pattern":
    """Compile a plain regex or a ``/regex/flags`` literal."""
    if len(pattern) > 1 and pattern.startswith("/"):
        end = pattern.rfind("/")
        if end > 0:
            flags = 0
            for char in pattern[end + 1:]:
                flags |= _REGEX_FLAGS.get(char, 0)
            return re.compile(pattern[1:end], flags)
    return re.compile(pattern)


def truthy(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if not _is_truthy(target):
        return [{"message": f"{context.subject()} must be truthy"}]
    return []


def falsy(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if _is_truthy(target):
        return [{"message": f"{context.subject()} must be falsy"}]
    return []


def defined(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if target is MISSING:
        return [{"message": f"{context.subject()} must be defined"}]
    return []


def undefined(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if target is not MISSING:
        return [{"message": f"{context.subject()} must be undefined"}]
    return []


def pattern(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if not isinstance(target, str):
        return []

    opts = _options(options)
    results = []

    if "match" in opts and not compile_pattern(opts["match"]).search(target):
        results.append({"message": f'"{target}" must match the pattern "{opts["match"]}"'})

    if "notMatch" in opts and compile_pattern(opts["notMatch"]).search(target):
        results.append({"message": f'"{target}" must not match the pattern "{opts["notMatch"]}"'})

    return results


def enumeration(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    values = _options(options).get("values", [])
    if isinstance(target, (dict, list)) or target in values:
        return []
    allowed = ", ".join(str(v) for v in values)
    return [{"message": f'"{target}" must be equal to one of the allowed values: {allowed}'}]


def length(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    opts = _options(options)

    if isinstance(target, (str, list, dict)):
        size = len(target)
    elif isinstance(target, (int, float)) and not isinstance(target, bool):
        size = target
    else:
        return []

    results = []
    if "min" in opts and size < opts["min"]:
        results.append({"message": f"{context.subject()} must not be shorter than {opts['min']}"})
    if "max" in opts and size > opts["max"]:
        results.append({"message": f"{context.subject()} must not be longer than {opts['max']}"})
    return results


def _sort_key(value: Any):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value))


def alphabetical(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    keyed_by = _options(options).get("keyedBy")

    if isinstance(target, dict):
        values = list(target.keys())
    elif isinstance(target, list):
        if keyed_by:
            values = [item.get(keyed_by) for item in target if isinstance(item, dict)]
        else:
            values = list(target)
    else:
        return []

    for index, (current, following) in enumerate(zip(values, values[1:])):
        if _sort_key(current) > _sort_key(following):
            return [{
                "message": f"{context.subject()} must be sorted in ascending order: "
                           f'"{current}" should be placed after "{following}"',
                "path": context.path + (index,) if isinstance(target, list) else context.path,
            }]
    return []


def casing(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if not isinstance(target, str) or not target:
        return []

    opts = _options(options)
    case_type = opts.get("type")
    if case_type not in CASING_PATTERNS:
        raise ValueError(f"Unknown casing type: {case_type}")

    digits = "" if opts.get("disallowDigits") else "0-9"
    regex = CASING_PATTERNS[case_type].format(d=digits)
    if not re.match(regex, target):
        return [{"message": f'"{target}" must be {case_type} case'}]
    return []


def xor(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if not isinstance(target, dict):
        return []

    properties = _options(options).get("properties", [])
    present = [name for name in properties if name in target]
    if len(present) != 1:
        names = " and ".join(f'"{name}"' for name in properties)
        return [{"message": f"{names} must not be both defined or both undefined"}]
    return []


def schema(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    """Validate the target against a JSON Schema given in ``functionOptions.schema``."""
    json_schema = _options(options).get("schema")
    if json_schema is None:
        raise ValueError("schema function requires a 'schema' option")

    validator_cls = validators.validator_for(json_schema, default=Draft7Validator)
    validator = validator_cls(json_schema)
    instance = stringify_keys(target)

    results = []
    for error in sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path]):
        results.append({
            "message": error.message,
            "path": context.path + tuple(error.absolute_path),
        })
    return results


def _collect_refs(node: Any, refs: set) -> set:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                refs.add(value)
            else:
                _collect_refs(value, refs)
    elif isinstance(node, list):
        for item in node:
            _collect_refs(item, refs)
    return refs


def _escape_pointer(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def unreferenced_reusable_object(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    """Report entries of a reusable-objects map that no local ``$ref`` points to."""
    if not isinstance(target, dict):
        return []

    location = _options(options).get("reusableObjectsLocation")
    if not isinstance(location, str) or not location.startswith("#"):
        raise ValueError("reusableObjectsLocation must be a local JSON pointer such as '#/components/schemas'")

    refs = _collect_refs(context.document, set())
    # Only the fragment matters; "other.yaml#/..." points elsewhere
    local_refs = {ref for ref in refs if ref.startswith("#")}

    results = []
    for name in target:
        pointer = f"{location}/{_escape_pointer(str(name))}"
        if pointer not in local_refs:
            results.append({
                "message": "Potentially unused component has been detected",
                "path": context.path + (name,),
            })
    return results


def oas_op_success_response(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    if not isinstance(target, dict):
        return []
    if any(SUCCESS_RESPONSE_PATTERN.match(str(code)) for code in target):
        return []
    return [{"message": "Operation must define at least a single 2xx or 3xx response"}]
