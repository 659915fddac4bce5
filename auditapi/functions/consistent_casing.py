"""
Consistent casing detector

Structural rules catch a single badly named property. This evaluator looks
at a whole namespace instead: it walks a schema subtree, counts camelCase and
snake_case keys, and reports once when the minority style is too common.

Logic:
1. Recursively visit every key except schema keywords (but still descend
   into ``properties`` and ``items``, which hold user-defined names)
2. Classify each key as camelCase, snake_case, or neither
3. Report if more than 5 keys were seen AND the minority share is above 20%

Keys that are neither style still count toward the total but never toward
the ratio.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from auditapi.config import CASING_CONFIG

from .base import FunctionContext, FunctionResult


CAMEL_CASE_PATTERN = re.compile(r"^[a-z][a-zA-Z0-9]*$")
SNAKE_CASE_PATTERN = re.compile(r"^[a-z][a-z0-9]*(_[a-z][a-z0-9]*)*$")

IGNORED_KEYS = frozenset(CASING_CONFIG["ignored_keys"])
DESCEND_KEYS = frozenset(CASING_CONFIG["descend_keys"])


@dataclass
class CasingStats:
    """Key counts accumulated over one subtree."""
    camel_case: int = 0
    snake_case: int = 0
    total: int = 0


def is_camel_case(key: str) -> bool:
    return bool(CAMEL_CASE_PATTERN.match(key)) and "_" not in key


def is_snake_case(key: str) -> bool:
    return bool(SNAKE_CASE_PATTERN.match(key)) and "_" in key


def _children(node: Any):
    """Yield (key, value) pairs; arrays are keyed by their string indices."""
    if isinstance(node, dict):
        for key, value in node.items():
            yield str(key), value
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield str(index), value


def count_casing_styles(node: Any, stats: Optional[CasingStats] = None) -> CasingStats:
    """Recursively count casing styles of the keys below ``node``."""
    if stats is None:
        stats = CasingStats()

    for key, value in _children(node):
        if key in IGNORED_KEYS:
            if key in DESCEND_KEYS and isinstance(value, (dict, list)):
                count_casing_styles(value, stats)
            continue

        stats.total += 1

        if is_camel_case(key):
            stats.camel_case += 1
        elif is_snake_case(key):
            stats.snake_case += 1

        if isinstance(value, (dict, list)):
            count_casing_styles(value, stats)

    return stats


def evaluate_casing(stats: CasingStats,
                    min_keys: int = CASING_CONFIG["min_keys"],
                    max_ratio: float = CASING_CONFIG["max_minority_ratio"]) -> Optional[str]:
    """Return the finding message for ``stats``, or None when naming is consistent."""
    if stats.total <= min_keys:
        return None

    majority = max(stats.camel_case, stats.snake_case)
    minority = min(stats.camel_case, stats.snake_case)

    # Only one style in use
    if minority == 0:
        return None

    ratio = minority / (majority + minority)
    if ratio <= max_ratio:
        return None

    if stats.camel_case > stats.snake_case:
        majority_style, minority_style = "camelCase", "snake_case"
    else:
        majority_style, minority_style = "snake_case", "camelCase"

    return (
        f"Inconsistent Property Casing detected. Found {stats.camel_case} camelCase "
        f"and {stats.snake_case} snake_case keys. Majority style is {majority_style} "
        f"but {minority_style} represents {ratio * 100:.1f}% of keys."
    )


def consistent_casing(target: Any, options: Optional[Dict], context: FunctionContext) -> List[FunctionResult]:
    """Rule function: at most one finding per checked subtree."""
    stats = count_casing_styles(target)
    message = evaluate_casing(stats)
    if message is None:
        return []
    return [{"message": message}]
