"""
AuditAPI - OpenAPI specification auditing with quality scoring
"""

__version__ = "1.0.0"

from auditapi.auditor import Auditor
from auditapi.errors import AuditAPIError, AuditError, ConfigLoadError
from auditapi.loader import ConfigLoader, create_config_loader, load_config
from auditapi.models import (
    AuditConfig,
    AuditResult,
    AuditSummary,
    CategoryScore,
    GradeThreshold,
    PenaltyRule,
    Ruleset,
    ScoringConfig,
    ValidationResult,
    Violation,
)

__all__ = [
    "__version__",
    "Auditor",
    "AuditAPIError",
    "AuditError",
    "ConfigLoadError",
    "ConfigLoader",
    "create_config_loader",
    "load_config",
    "AuditConfig",
    "AuditResult",
    "AuditSummary",
    "CategoryScore",
    "GradeThreshold",
    "PenaltyRule",
    "Ruleset",
    "ScoringConfig",
    "ValidationResult",
    "Violation",
]
