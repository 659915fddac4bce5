"""
Rule set resolution

Binds the function names used in rule ``then`` clauses to evaluator
callables, and merges the baseline OAS rules with custom rules.
"""

import logging
from typing import Any, Dict

from auditapi.config import BASELINE_RULESET_NAME, RULESET_FILE_NAME
from auditapi.errors import ConfigLoadError
from auditapi.functions import get_function
from auditapi.models import Ruleset
from auditapi.oas_rules import OAS_RULESET

logger = logging.getLogger(__name__)


def _resolve_clause(rule_id: str, clause: Any, config_path: str) -> Dict[str, Any]:
    if not isinstance(clause, dict):
        raise ConfigLoadError(f"Rule {rule_id} then clauses must be objects", config_path)

    function = clause.get("function")
    if callable(function):
        return clause
    if not isinstance(function, str):
        raise ConfigLoadError(f"Rule {rule_id} then clause is missing a function name", config_path)

    resolved = get_function(function)
    if resolved is None:
        raise ConfigLoadError(
            f"Unknown rule function: {function} in rule {rule_id}",
            config_path,
        )
    return {**clause, "function": resolved}


def resolve_rule_functions(ruleset: Ruleset, config_path: str = RULESET_FILE_NAME) -> Ruleset:
    """
    Replace function names in every rule's ``then`` with the bound evaluator.

    ``then`` may be a single clause or a list; the resolved rule keeps the
    same shape. The input rule set is not modified.

    Raises:
        ConfigLoadError: if a clause has no function name or names one that
            is not registered
    """
    resolved_rules = {}

    for rule_id, rule in ruleset.rules.items():
        resolved_rules[rule_id] = dict(rule)

        then = rule.get("then")
        if then:
            clauses = then if isinstance(then, list) else [then]
            resolved_then = [_resolve_clause(rule_id, clause, config_path) for clause in clauses]
            resolved_rules[rule_id]["then"] = resolved_then if isinstance(then, list) else resolved_then[0]

    logger.debug(f"Resolved functions for {len(resolved_rules)} rules from {config_path}")
    return Ruleset(rules=resolved_rules, extends=ruleset.extends)


BASELINE_RULESET = resolve_rule_functions(Ruleset.from_dict(OAS_RULESET), BASELINE_RULESET_NAME)


def build_ruleset(custom_ruleset: Ruleset, baseline: Ruleset = BASELINE_RULESET) -> Ruleset:
    """
    Merge the baseline rules with custom rules.

    Custom rules win on id collision; the whole definition is replaced,
    never merged field by field.
    """
    overridden = sorted(set(baseline.rules) & set(custom_ruleset.rules))
    if overridden:
        logger.info(f"Custom rules override baseline rules: {', '.join(overridden)}")

    return Ruleset(
        rules={**baseline.rules, **custom_ruleset.rules},
        extends=custom_ruleset.extends,
    )
