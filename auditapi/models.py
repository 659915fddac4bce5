"""
Data model for AuditAPI

Scoring configuration, rule sets, violations and audit results.
Everything here is immutable once built; an AuditResult is derived
fresh for every audit run.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


# =============================================================================
# Scoring configuration (scoring.yaml)
# =============================================================================

@dataclass(frozen=True)
class PenaltyRule:
    """Penalty for violating a single rule."""
    points: float
    fatal: bool = False


@dataclass(frozen=True)
class GradeThreshold:
    """Inclusive score range for a grade."""
    min: int
    max: int


@dataclass(frozen=True)
class ScoringConfig:
    """Validated contents of scoring.yaml."""
    base_score: float
    weights: Dict[str, float]
    penalties: Dict[str, PenaltyRule]
    grading_scale: Dict[str, GradeThreshold]

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ScoringConfig":
        """Build from an already validated mapping."""
        return cls(
            base_score=raw["base_score"],
            weights={name: float(weight) for name, weight in raw["weights"].items()},
            penalties={
                rule_id: PenaltyRule(points=entry["points"], fatal=entry.get("fatal", False))
                for rule_id, entry in raw["penalties"].items()
            },
            grading_scale={
                grade: GradeThreshold(min=bounds["min"], max=bounds["max"])
                for grade, bounds in raw["grading_scale"].items()
            },
        )

    def penalty_for(self, rule_id: str) -> Optional[PenaltyRule]:
        return self.penalties.get(rule_id)

    def is_fatal(self, rule_id: str) -> bool:
        penalty = self.penalties.get(rule_id)
        return penalty is not None and penalty.fatal is True


# =============================================================================
# Rule set (ruleset.yaml)
# =============================================================================

@dataclass(frozen=True)
class Ruleset:
    """
    Rule definitions keyed by rule id.

    Rules keep the mapping shape they were written in: ``given`` may be a
    string or list, ``then`` a single clause or a list of clauses. After
    resolution each clause's ``function`` is a callable instead of a name.
    """
    rules: Dict[str, Dict[str, Any]]
    extends: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Ruleset":
        extends = raw.get("extends")
        return cls(
            rules=dict(raw["rules"]),
            extends=list(extends) if extends is not None else None,
        )

    def tags_for(self, rule_id: str) -> Optional[List[str]]:
        rule = self.rules.get(rule_id)
        if not rule:
            return None
        return rule.get("tags")


@dataclass(frozen=True)
class AuditConfig:
    """Both validated configurations, loaded together."""
    scoring: ScoringConfig
    ruleset: Ruleset
    config_dir: Optional[Path] = None

    def __iter__(self) -> Iterator[Any]:
        # Allows ``scoring, ruleset = loader.load_all()``
        yield self.scoring
        yield self.ruleset


@dataclass
class ValidationResult:
    """Outcome of validating a raw configuration value: data or errors, never both."""
    success: bool
    data: Any = None
    errors: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, errors: List[str]) -> "ValidationResult":
        return cls(success=False, errors=list(errors))


# =============================================================================
# Audit results
# =============================================================================

@dataclass(frozen=True)
class Violation:
    """A single rule-check failure against the audited document."""
    rule_id: str
    severity: str
    message: str
    path: str
    line: Optional[int] = None
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "ruleId": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "path": self.path,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass(frozen=True)
class CategoryScore:
    """Penalty points collected by one scoring category."""
    category: str
    weight: float
    points_deducted: float
    violations: List[Violation] = field(default_factory=list)

    @property
    def weighted_penalty(self) -> float:
        return self.points_deducted * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "weight": self.weight,
            "pointsDeducted": self.points_deducted,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass(frozen=True)
class AuditSummary:
    """Violation counts by severity."""
    total_violations: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    fatal_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalViolations": self.total_violations,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
            "fatalCount": self.fatal_count,
        }


@dataclass(frozen=True)
class AuditResult:
    """Complete result of auditing one document."""
    file_path: str
    final_score: int
    grade: str
    passed: bool
    has_fatal_errors: bool
    violations: List[Violation]
    category_breakdown: List[CategoryScore]
    summary: AuditSummary
    timestamp: str
    duration: int                       # milliseconds
    notes: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the flat JSON document consumed by CI annotations and PR comments."""
        data = {
            "filePath": self.file_path,
            "finalScore": self.final_score,
            "grade": self.grade,
            "passed": self.passed,
            "hasFatalErrors": self.has_fatal_errors,
            "violations": [v.to_dict() for v in self.violations],
            "categoryBreakdown": [c.to_dict() for c in self.category_breakdown],
            "summary": self.summary.to_dict(),
            "timestamp": self.timestamp,
            "duration": self.duration,
        }
        if self.notes:
            data["notes"] = list(self.notes)
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
