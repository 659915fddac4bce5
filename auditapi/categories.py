"""Rule categorization for weighted scoring"""

from typing import List, Optional

from auditapi.config import CATEGORY_PREFIXES, CATEGORY_TAG_PRIORITY, DEFAULT_CATEGORY


def classify(rule_id: str, tags: Optional[List[str]] = None) -> str:
    """
    Determine the scoring category of a rule.

    Explicit tags win (security, completeness, structure, consistency, in
    that order), then the rule id prefix (sec-, com-, str-, cns-).
    Anything else counts as completeness.
    """
    if tags:
        for category in CATEGORY_TAG_PRIORITY:
            if category in tags:
                return category

    for prefix, category in CATEGORY_PREFIXES.items():
        if str(rule_id).startswith(prefix):
            return category

    return DEFAULT_CATEGORY
