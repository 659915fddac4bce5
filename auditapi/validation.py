"""
Configuration validation

Pure functions that check scoring.yaml and ruleset.yaml contents for
internal consistency. Each returns a ValidationResult carrying either the
strongly-shaped config or every error found, so a user sees all problems
in one pass. Malformed-but-parseable input never raises.
"""

import math
from typing import Any, Dict, List

from auditapi.config import GRADES, REQUIRED_CATEGORIES, SEVERITIES, WEIGHT_TOLERANCE
from auditapi.models import Ruleset, ScoringConfig, ValidationResult


def _is_number(value: Any) -> bool:
    """True for finite ints/floats. YAML booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_weights(weights: Dict[str, Any]) -> List[str]:
    """Check that all categories are weighted and the weights sum to 1.0"""
    errors = []

    numeric = True
    for category, weight in weights.items():
        if not _is_number(weight) or weight < 0:
            errors.append(f"Weight for {category} must be a non-negative number, got {weight!r}")
            numeric = False

    if numeric:
        total = sum(weights.values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            errors.append(f"Category weights must sum to 1.0, got {round(total, 6)}")

    for category in REQUIRED_CATEGORIES:
        if category not in weights:
            errors.append(f"Missing required weight category: {category}")

    return errors


def validate_penalties(penalties: Dict[str, Any]) -> List[str]:
    errors = []
    for rule_id, penalty in penalties.items():
        if not isinstance(penalty, dict):
            errors.append(f"Penalty for {rule_id} must be an object")
            continue
        points = penalty.get("points")
        if not _is_number(points) or points < 0:
            errors.append(f"Penalty for {rule_id} must have non-negative numeric points, got {points!r}")
        if "fatal" in penalty and not isinstance(penalty["fatal"], bool):
            errors.append(f"Penalty for {rule_id} has non-boolean fatal flag: {penalty['fatal']!r}")
    return errors


def validate_grading_scale(scale: Dict[str, Any]) -> List[str]:
    """
    Check every grade's range and that the ranges tile without gaps or overlaps.

    Grades are sorted by their ``max`` bound; each adjacent pair must satisfy
    ``previous.max + 1 == next.min``.
    """
    errors = []
    bounds = []

    for grade in GRADES:
        if grade not in scale:
            errors.append(f"Missing grade threshold for {grade}")
            continue

        entry = scale[grade]
        if not isinstance(entry, dict):
            errors.append(f"Grade {grade} must be an object with min and max")
            continue

        low, high = entry.get("min"), entry.get("max")
        if not _is_integer(low) or not _is_integer(high):
            errors.append(f"Grade {grade} must have integer min and max, got min={low!r} max={high!r}")
            continue

        if low > high:
            errors.append(f"Grade {grade} has invalid range: min ({low}) > max ({high})")
        bounds.append((grade, int(low), int(high)))

    bounds.sort(key=lambda item: item[2])
    for (grade, _, current_max), (next_grade, next_min, _) in zip(bounds, bounds[1:]):
        if current_max + 1 != next_min:
            errors.append(
                f"Gap/overlap between grades {grade} and {next_grade} at {current_max} and {next_min}"
            )

    return errors


def validate_scoring_config(config: Any) -> ValidationResult:
    """Validate a parsed scoring.yaml document"""
    if not isinstance(config, dict):
        return ValidationResult.failed(["Configuration must be an object"])

    errors = []

    base_score = config.get("base_score")
    if not _is_number(base_score) or base_score < 0 or base_score > 100:
        errors.append("base_score must be a number between 0 and 100")

    weights = config.get("weights")
    if not isinstance(weights, dict):
        errors.append("weights must be an object")
    else:
        errors.extend(validate_weights(weights))

    penalties = config.get("penalties")
    if not isinstance(penalties, dict):
        errors.append("penalties must be an object")
    else:
        errors.extend(validate_penalties(penalties))

    scale = config.get("grading_scale")
    if not isinstance(scale, dict):
        errors.append("grading_scale must be an object")
    else:
        errors.extend(validate_grading_scale(scale))

    if errors:
        return ValidationResult.failed(errors)

    return ValidationResult.ok(ScoringConfig.from_dict(config))


def _validate_rule(rule_id: str, rule: Any) -> List[str]:
    if not isinstance(rule, dict):
        return [f"Rule {rule_id} must be an object"]

    errors = []

    description = rule.get("description")
    if not isinstance(description, str) or not description.strip():
        errors.append(f"Rule {rule_id} missing required field: description")

    severity = rule.get("severity")
    if severity not in SEVERITIES:
        errors.append(f"Rule {rule_id} has invalid severity: {severity}")

    given = rule.get("given")
    if given is not None:
        selectors = given if isinstance(given, list) else [given]
        if not selectors or not all(isinstance(s, str) for s in selectors):
            errors.append(f"Rule {rule_id} given must be a selector string or a list of them")

    then = rule.get("then")
    if then is not None:
        clauses = then if isinstance(then, list) else [then]
        if not all(isinstance(c, dict) for c in clauses):
            errors.append(f"Rule {rule_id} then clauses must be objects")

    tags = rule.get("tags")
    if tags is not None and not (isinstance(tags, list) and all(isinstance(t, str) for t in tags)):
        errors.append(f"Rule {rule_id} tags must be an array of strings")

    return errors


def validate_ruleset(config: Any) -> ValidationResult:
    """Validate a parsed ruleset.yaml document"""
    if not isinstance(config, dict):
        return ValidationResult.failed(["Ruleset must be an object"])

    errors = []

    # extends is optional; the baseline rule set is merged by the auditor
    extends = config.get("extends")
    if extends is not None and not isinstance(extends, list):
        errors.append("extends must be an array of strings if provided")

    rules = config.get("rules")
    if not isinstance(rules, dict):
        errors.append("rules must be an object")
    else:
        for rule_id, rule in rules.items():
            errors.extend(_validate_rule(rule_id, rule))

    if errors:
        return ValidationResult.failed(errors)

    return ValidationResult.ok(Ruleset.from_dict(config))
