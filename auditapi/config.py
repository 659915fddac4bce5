"""Configuration for AuditAPI"""

from pathlib import Path
from typing import Dict, Any

# Base paths
PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_DIR = PACKAGE_DIR / "defaults"

SCORING_FILE_NAME = "scoring.yaml"
RULESET_FILE_NAME = "ruleset.yaml"

# ===========================================
# Categories
# ===========================================
# Every scoring.yaml must weight all five categories. Only the first four
# receive violations; "architecture" is weighted but never classified into.

REQUIRED_CATEGORIES = ["security", "completeness", "structure", "consistency", "architecture"]

SCORED_CATEGORIES = ["security", "completeness", "structure", "consistency"]

# Tag checked first wins
CATEGORY_TAG_PRIORITY = ["security", "completeness", "structure", "consistency"]

CATEGORY_PREFIXES = {
    "sec-": "security",
    "com-": "completeness",
    "str-": "structure",
    "cns-": "consistency",
}

DEFAULT_CATEGORY = "completeness"

# Category weights must sum to 1.0 within this tolerance
WEIGHT_TOLERANCE = 0.001

# ===========================================
# Severities
# ===========================================

SEVERITIES = ["error", "warn", "info", "hint"]

# Rule engine numeric severity -> name
SEVERITY_NAMES = {
    0: "error",
    1: "warn",
    2: "info",
    3: "hint",
}

SEVERITY_LEVELS = {name: level for level, name in SEVERITY_NAMES.items()}

# Points deducted when a rule has no explicit penalty in scoring.yaml
DEFAULT_SEVERITY_PENALTIES = {
    "error": 10,
    "warn": 5,
}
DEFAULT_OTHER_PENALTY = 2

# ===========================================
# Grades
# ===========================================

# Best to worst
GRADES = ["A", "B", "C", "D", "F"]

# Higher is better, used for --fail-on comparisons
GRADE_ORDER = {
    "A": 5,
    "B": 4,
    "C": 3,
    "D": 2,
    "F": 1,
}

FAILING_GRADE = "F"

# ===========================================
# Consistent casing heuristic
# ===========================================

CASING_CONFIG = {
    # Sample must be larger than this to be judged
    "min_keys": 5,
    # Minority share above this is reported
    "max_minority_ratio": 0.20,
    # Schema keywords that are not user-defined property names
    "ignored_keys": [
        "type", "format", "properties", "items",
        "required", "description", "example", "examples",
    ],
    # Ignored keys whose values still hold property names
    "descend_keys": ["properties", "items"],
}

# ===========================================
# Audit notes
# ===========================================

RESOLUTION_FAILED_NOTE = (
    "Warning: OpenAPI validation failed. File may contain structural errors "
    "that prevent full dereferencing. Audit results may be incomplete."
)

BASELINE_RULESET_NAME = "spectral:oas"


def get_config() -> Dict[str, Any]:
    """Get full configuration dictionary"""
    return {
        "package_dir": str(PACKAGE_DIR),
        "default_config_dir": str(DEFAULT_CONFIG_DIR),
        "scoring_file": SCORING_FILE_NAME,
        "ruleset_file": RULESET_FILE_NAME,
        "required_categories": REQUIRED_CATEGORIES,
        "scored_categories": SCORED_CATEGORIES,
        "category_prefixes": CATEGORY_PREFIXES,
        "severities": SEVERITIES,
        "default_severity_penalties": DEFAULT_SEVERITY_PENALTIES,
        "grades": GRADES,
        "casing": CASING_CONFIG,
    }
