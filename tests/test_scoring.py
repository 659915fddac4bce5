"""
Scoring Engine tests

Score = max(0, base - sum(category_points x weight)), with fatal rules
forcing 0. Grades are taken from the unrounded score.
"""

import pytest

from auditapi.models import Ruleset, Violation
from auditapi.scoring import ScoringEngine, calculate_grade, is_passed, round_score


def violation(rule_id, severity="warn"):
    return Violation(rule_id=rule_id, severity=severity, message="m", path="paths")


class TestRounding:
    """round_score()"""

    @pytest.mark.parametrize("score, expected", [
        (92.5, 93),
        (92.4999, 92),
        (0.5, 1),
        (2.5, 3),
        (100.0, 100),
        (0.0, 0),
    ])
    def test_half_up(self, score, expected):
        assert round_score(score) == expected


class TestGrades:
    """calculate_grade() / is_passed()"""

    @pytest.mark.parametrize("score, expected", [
        (100, "A"), (90, "A"), (89.99, "B"), (80, "B"),
        (79.5, "C"), (70, "C"), (60, "D"), (59.9, "F"), (0, "F"),
    ])
    def test_standard_scale(self, scoring_config, score, expected):
        assert calculate_grade(score, scoring_config.grading_scale) == expected

    def test_grade_uses_unrounded_score(self, scoring_config):
        # Reported as 90 but graded as 89.6
        assert round_score(89.6) == 90
        assert calculate_grade(89.6, scoring_config.grading_scale) == "B"

    def test_grades_are_monotonic(self, scoring_config):
        order = {"F": 0, "D": 1, "C": 2, "B": 3, "A": 4}
        scores = [x / 4 for x in range(0, 401)]
        grades = [calculate_grade(s, scoring_config.grading_scale) for s in scores]

        assert all(order[a] <= order[b] for a, b in zip(grades, grades[1:]))

    def test_passed(self):
        assert is_passed("D", False)
        assert not is_passed("F", False)
        assert not is_passed("A", True)


class TestScoringEngine:
    """ScoringEngine"""

    def test_no_violations_scores_base(self, scoring_config):
        engine = ScoringEngine(scoring_config)

        outcome = engine.calculate_score([])

        assert outcome.final_score == 100
        assert outcome.has_fatal_errors is False
        assert engine.calculate_grade(outcome.final_score) == "A"

    def test_weighted_penalty(self, scoring_config):
        engine = ScoringEngine(scoring_config)

        # com-summary: 30 points x 0.25 completeness
        outcome = engine.calculate_score([violation("com-summary")])

        assert outcome.final_score == pytest.approx(92.5)
        assert round_score(outcome.final_score) == 93
        assert engine.calculate_grade(outcome.final_score) == "A"

    @pytest.mark.parametrize("severity, points", [
        ("error", 10), ("warn", 5), ("info", 2), ("hint", 2),
    ])
    def test_default_penalty_by_severity(self, scoring_config, severity, points):
        engine = ScoringEngine(scoring_config)

        assert engine.penalty_points(violation("str-unlisted", severity)) == points

    def test_configured_penalty_overrides_severity(self, scoring_config):
        engine = ScoringEngine(scoring_config)

        assert engine.penalty_points(violation("com-summary", "info")) == 30

    def test_fatal_violation_forces_zero(self, scoring_config):
        engine = ScoringEngine(scoring_config)

        outcome = engine.calculate_score([violation("sec-api-key-in-query", "error")])

        assert outcome.final_score == 0
        assert outcome.has_fatal_errors is True
        assert engine.calculate_grade(outcome.final_score) == "F"

    def test_fatal_wins_over_clean_categories(self, scoring_config):
        engine = ScoringEngine(scoring_config)
        violations = [violation("sec-api-key-in-query", "error"), violation("cns-x", "info")]

        breakdown = engine.calculate_category_scores(violations)
        outcome = engine.calculate_score(violations, breakdown)

        assert outcome.final_score == 0
        assert outcome.has_fatal_errors

    def test_score_is_clamped_at_zero(self, scoring_config):
        engine = ScoringEngine(scoring_config)
        violations = [violation("com-summary")] * 20

        outcome = engine.calculate_score(violations)

        assert outcome.final_score == 0
        assert not outcome.has_fatal_errors

    def test_additional_violations_never_raise_the_score(self, scoring_config):
        engine = ScoringEngine(scoring_config)
        violations = []
        previous = engine.calculate_score(violations).final_score

        for rule_id in ["sec-a", "com-b", "str-c", "cns-d", "other", "com-summary"]:
            violations.append(violation(rule_id, "error"))
            score = engine.calculate_score(violations).final_score
            assert score <= previous
            previous = score

    def test_category_breakdown(self, scoring_config):
        engine = ScoringEngine(scoring_config)
        violations = [
            violation("sec-https-only", "error"),
            violation("com-summary"),
            violation("info-contact"),
            violation("cns-consistent-casing"),
        ]

        breakdown = engine.calculate_category_scores(violations)

        assert [c.category for c in breakdown] == ["security", "completeness", "structure", "consistency"]
        by_name = {c.category: c for c in breakdown}
        assert by_name["security"].points_deducted == 10
        assert by_name["completeness"].points_deducted == 35
        assert len(by_name["completeness"].violations) == 2
        assert by_name["structure"].points_deducted == 0
        assert by_name["structure"].violations == []
        assert by_name["consistency"].weight == 0.15

    def test_rule_tags_drive_categories(self, scoring_config):
        ruleset = Ruleset(rules={"oas-strict": {"description": "d", "severity": "warn", "tags": ["structure"]}})
        engine = ScoringEngine(scoring_config, ruleset)

        breakdown = engine.calculate_category_scores([violation("oas-strict")])

        by_name = {c.category: c for c in breakdown}
        assert by_name["structure"].points_deducted == 5
        assert by_name["completeness"].points_deducted == 0

    def test_summary_counts(self, scoring_config):
        engine = ScoringEngine(scoring_config)
        violations = [
            violation("sec-api-key-in-query", "error"),
            violation("com-summary", "warn"),
            violation("com-other", "warn"),
            violation("str-x", "info"),
            violation("str-y", "hint"),
        ]

        summary = engine.summarize(violations)

        assert summary.total_violations == 5
        assert summary.error_count == 1
        assert summary.warning_count == 2
        assert summary.info_count == 1
        assert summary.fatal_count == 1
