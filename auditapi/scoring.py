"""
Scoring Engine

Converts categorized violations into a 0-100 score and a letter grade.

Formula:
    Score = max(0, base_score - sum(category_points x category_weight))

Any violation of a rule configured with ``fatal: true`` forces the score to
0 and skips the weighted computation entirely.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from auditapi.categories import classify
from auditapi.config import (
    DEFAULT_OTHER_PENALTY,
    DEFAULT_SEVERITY_PENALTIES,
    FAILING_GRADE,
    GRADES,
    SCORED_CATEGORIES,
)
from auditapi.models import (
    AuditSummary,
    CategoryScore,
    GradeThreshold,
    Ruleset,
    ScoringConfig,
    Violation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreOutcome:
    """Unrounded final score and whether a fatal rule fired."""
    final_score: float
    has_fatal_errors: bool


def round_score(score: float) -> int:
    """Round half up (92.5 -> 93) for reporting."""
    return int(math.floor(score + 0.5))


def calculate_grade(score: float, scale: Dict[str, GradeThreshold]) -> str:
    """Return the best grade whose minimum the score meets, else F"""
    for grade in GRADES:
        if grade == FAILING_GRADE:
            break
        if score >= scale[grade].min:
            return grade
    return FAILING_GRADE


def is_passed(grade: str, has_fatal_errors: bool) -> bool:
    return grade != FAILING_GRADE and not has_fatal_errors


class ScoringEngine:
    """
    Scores one audit's violations against a validated ScoringConfig.

    The ruleset supplies rule tags for categorization; without it every
    rule is categorized by its id prefix alone.
    """

    def __init__(self, scoring_config: ScoringConfig, ruleset: Optional[Ruleset] = None):
        self.config = scoring_config
        self.ruleset = ruleset

    def categorize(self, violation: Violation) -> str:
        tags = self.ruleset.tags_for(violation.rule_id) if self.ruleset else None
        return classify(violation.rule_id, tags)

    def penalty_points(self, violation: Violation) -> float:
        """Configured penalty for the rule, or the default for its severity"""
        penalty = self.config.penalty_for(violation.rule_id)
        if penalty is not None:
            return penalty.points
        return DEFAULT_SEVERITY_PENALTIES.get(violation.severity, DEFAULT_OTHER_PENALTY)

    def is_fatal(self, violation: Violation) -> bool:
        return self.config.is_fatal(violation.rule_id)

    def calculate_category_scores(self, violations: List[Violation]) -> List[CategoryScore]:
        """Group violations into the scored categories and total their penalty points"""
        grouped = {category: [] for category in SCORED_CATEGORIES}
        for violation in violations:
            category = self.categorize(violation)
            if category in grouped:
                grouped[category].append(violation)

        scores = []
        for category in SCORED_CATEGORIES:
            category_violations = grouped[category]
            scores.append(CategoryScore(
                category=category,
                weight=self.config.weights[category],
                points_deducted=sum(self.penalty_points(v) for v in category_violations),
                violations=category_violations,
            ))
        return scores

    def calculate_score(
        self,
        violations: List[Violation],
        category_scores: Optional[List[CategoryScore]] = None
    ) -> ScoreOutcome:
        """
        Calculate the final score.

        Args:
            violations: All violations of the audit run
            category_scores: Breakdown from calculate_category_scores(), computed if omitted

        Returns:
            ScoreOutcome; score 0 with has_fatal_errors=True if any fatal rule fired
        """
        fatal_rules = sorted({v.rule_id for v in violations if self.is_fatal(v)}, key=str)
        if fatal_rules:
            logger.warning(f"Fatal violations detected: {fatal_rules}")
            logger.warning("Score = 0 due to fatal violations")
            return ScoreOutcome(final_score=0.0, has_fatal_errors=True)

        if category_scores is None:
            category_scores = self.calculate_category_scores(violations)

        total_penalty = sum(category.weighted_penalty for category in category_scores)
        final_score = max(0.0, self.config.base_score - total_penalty)

        logger.debug(f"Score: {final_score:.2f} (base={self.config.base_score}, penalty={total_penalty:.2f})")
        return ScoreOutcome(final_score=final_score, has_fatal_errors=False)

    def calculate_grade(self, score: float) -> str:
        return calculate_grade(score, self.config.grading_scale)

    def summarize(self, violations: List[Violation]) -> AuditSummary:
        """Count violations by severity"""
        return AuditSummary(
            total_violations=len(violations),
            error_count=sum(1 for v in violations if v.severity == "error"),
            warning_count=sum(1 for v in violations if v.severity == "warn"),
            info_count=sum(1 for v in violations if v.severity == "info"),
            fatal_count=sum(1 for v in violations if self.is_fatal(v)),
        )
