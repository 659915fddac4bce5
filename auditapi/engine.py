"""
Rule Engine

Runs a resolved rule set over a parsed document. Each rule's ``given``
selectors are JSONPath expressions (evaluated by jsonpath-ng); each match is
handed to the rule's ``then`` evaluators. Produces raw findings:

    {"code": rule_id, "severity": 0-3, "message": str,
     "path": [segments], "range": {"start": {"line", "character"}}}

Severity: 0=error, 1=warn, 2=info, 3=hint. ``range`` is present only when
the position of the path is known.
"""

import logging
import math
from typing import Any, Dict, Iterator, List, Optional, Tuple

from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpath_ng.jsonpath import Fields, Index

from auditapi.config import SEVERITY_LEVELS
from auditapi.document import Locations
from auditapi.functions import MISSING, PRESENCE_FUNCTIONS, FunctionContext
from auditapi.models import Ruleset

logger = logging.getLogger(__name__)

KEY_FIELD = "@key"


def path_segments(match) -> Tuple[Any, ...]:
    """Turn a jsonpath-ng match into the tuple of keys/indexes leading to it"""
    segments = []
    datum = match
    while datum is not None:
        path = datum.path
        if isinstance(path, Fields):
            segments.extend(reversed(path.fields))
        elif isinstance(path, Index):
            # jsonpath-ng >= 1.6 stores indices as a tuple
            indices = getattr(path, "indices", None)
            segments.append(indices[0] if indices else path.index)
        datum = datum.context
    return tuple(reversed(segments))


def _field_target(value: Any, field: str, base_path: Tuple[Any, ...]) -> Tuple[Any, Tuple[Any, ...]]:
    """Follow a dotted ``field`` below ``value``; MISSING if any step is absent"""
    current = value
    path = base_path
    for part in field.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
            path = path + (part,)
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
            path = path + (int(part),)
        else:
            return MISSING, path + (part,)
    return current, path


def _targets(value: Any, base_path: Tuple[Any, ...], field: Optional[str]) -> Iterator[Tuple[Any, Tuple[Any, ...]]]:
    if field is None:
        yield value, base_path
    elif field == KEY_FIELD:
        if isinstance(value, dict):
            for key in value:
                yield key, base_path + (key,)
    else:
        yield _field_target(value, field, base_path)


def _locate(locations: Optional[Locations], path: Tuple[Any, ...]) -> Optional[Tuple[int, int]]:
    if not locations:
        return None
    for end in range(len(path), 0, -1):
        position = locations.get(path[:end])
        if position is not None:
            return position
    return None


def format_message(rule: Dict[str, Any], error: str, path: Tuple[Any, ...], target: Any) -> str:
    """
    Render the rule's message template.

    Placeholders: {{error}}, {{description}}, {{path}}, {{property}}, {{value}}.
    Without a template the evaluator's message is used, then the description.
    """
    description = rule.get("description", "")
    template = rule.get("message") or "{{error}}"
    replacements = {
        "{{error}}": error or description,
        "{{description}}": description,
        "{{path}}": ".".join(str(segment) for segment in path),
        "{{property}}": str(path[-1]) if path else "",
        "{{value}}": "" if target is MISSING else str(target),
    }
    message = template
    for placeholder, replacement in replacements.items():
        message = message.replace(placeholder, replacement)
    return message.strip() or description


class RuleEngine:
    """Evaluates resolved rule sets against documents"""

    def __init__(self):
        self._selectors = {}

    def _compile(self, expression: str):
        compiled = self._selectors.get(expression)
        if compiled is None:
            compiled = parse_jsonpath(expression)
            self._selectors[expression] = compiled
        return compiled

    def run(self, document: Any, ruleset: Ruleset, locations: Optional[Locations] = None) -> List[Dict[str, Any]]:
        """
        Run every enabled rule against ``document``.

        Args:
            document: Parsed OpenAPI document
            ruleset: Rule set whose ``then`` functions are already resolved
            locations: Optional path -> (line, column) index for ``range``

        Returns:
            Findings ordered by source position, then path and rule id
        """
        findings = []
        seen = set()

        for rule_id, rule in ruleset.rules.items():
            if rule.get("enabled", True) is False:
                logger.debug(f"Skipping disabled rule {rule_id}")
                continue

            given, then = rule.get("given"), rule.get("then")
            if given is None or not then:
                continue

            severity = SEVERITY_LEVELS[rule["severity"]]
            selectors = given if isinstance(given, list) else [given]
            clauses = then if isinstance(then, list) else [then]

            for selector in selectors:
                for match in self._compile(selector).find(document):
                    base_path = path_segments(match)
                    for clause in clauses:
                        function = clause.get("function")
                        if not callable(function):
                            raise TypeError(f"Rule {rule_id} has an unresolved function: {function!r}")

                        for target, target_path in _targets(match.value, base_path, clause.get("field")):
                            if target is MISSING and function not in PRESENCE_FUNCTIONS:
                                continue

                            context = FunctionContext(document=document, path=target_path, rule_id=rule_id)
                            for result in function(target, clause.get("functionOptions"), context) or []:
                                path = tuple(result.get("path", target_path))
                                message = format_message(rule, result.get("message", ""), path, target)

                                key = (rule_id, path, message)
                                if key in seen:
                                    continue
                                seen.add(key)

                                finding = {
                                    "code": rule_id,
                                    "severity": severity,
                                    "message": message,
                                    "path": list(path),
                                }
                                position = _locate(locations, path)
                                if position is not None:
                                    finding["range"] = {"start": {"line": position[0], "character": position[1]}}
                                findings.append(finding)

        findings.sort(key=_finding_order)
        logger.debug(f"Rule engine produced {len(findings)} findings")
        return findings


def _finding_order(finding: Dict[str, Any]):
    start = finding.get("range", {}).get("start", {})
    return (
        start.get("line", math.inf),
        start.get("character", math.inf),
        [str(segment) for segment in finding["path"]],
        finding["code"],
        finding["message"],
    )
