"""
Auditor Core - Main auditing engine

Runs the rule engine over a document and scores the findings against the
scoring configuration.

Pipeline:
    pre-resolution (may fail, recorded as a note)
    -> rule engine -> violations -> categories -> score -> grade
"""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from auditapi.config import RESOLUTION_FAILED_NOTE, SEVERITY_NAMES
from auditapi.document import load_document, resolve_document
from auditapi.engine import RuleEngine
from auditapi.errors import AuditError
from auditapi.loader import ConfigLoader
from auditapi.models import AuditConfig, AuditResult, Violation
from auditapi.ruleset import build_ruleset
from auditapi.scoring import ScoringEngine, is_passed, round_score

logger = logging.getLogger(__name__)


def convert_results(findings: List[Dict[str, Any]]) -> List[Violation]:
    """Convert raw rule engine findings to violations"""
    violations = []
    for finding in findings:
        start = (finding.get("range") or {}).get("start") or {}
        violations.append(Violation(
            rule_id=finding["code"],
            severity=SEVERITY_NAMES.get(finding["severity"], "hint"),
            message=finding["message"],
            path=".".join(str(segment) for segment in finding["path"]),
            line=start.get("line"),
            column=start.get("character"),
        ))
    return violations


class Auditor:
    """
    Audits OpenAPI documents.

    Configuration is read once at construction and never mutated, so a
    single Auditor can run any number of audits.
    """

    def __init__(
        self,
        config: Union[ConfigLoader, AuditConfig],
        engine: Optional[RuleEngine] = None,
        resolver: Callable[[Path], Optional[Any]] = resolve_document,
    ):
        if isinstance(config, ConfigLoader):
            config = config.load_all()

        self.scoring_config = config.scoring
        self.ruleset_config = config.ruleset
        self.ruleset = build_ruleset(self.ruleset_config)
        self.engine = engine or RuleEngine()
        self.resolver = resolver
        self.scoring = ScoringEngine(self.scoring_config, self.ruleset)

    def audit(self, file_path: Union[str, Path]) -> AuditResult:
        """
        Audit a single document.

        Raises:
            AuditError: if the file is missing or evaluation fails
        """
        start_time = time.monotonic()

        try:
            path = Path(file_path)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {file_path}")

            # Resolution may fail; evaluation continues on the raw document
            resolved = self.resolver(path)
            has_resolution_errors = resolved is None

            document = load_document(path)
            findings = self.engine.run(document.data, self.ruleset, document.locations)
            violations = convert_results(findings)

            category_breakdown = self.scoring.calculate_category_scores(violations)
            outcome = self.scoring.calculate_score(violations, category_breakdown)
            grade = self.scoring.calculate_grade(outcome.final_score)
            summary = self.scoring.summarize(violations)

            duration = int((time.monotonic() - start_time) * 1000)

            result = AuditResult(
                file_path=str(path.resolve()),
                final_score=round_score(outcome.final_score),
                grade=grade,
                passed=is_passed(grade, outcome.has_fatal_errors),
                has_fatal_errors=outcome.has_fatal_errors,
                violations=violations,
                category_breakdown=category_breakdown,
                summary=summary,
                timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                duration=duration,
                notes=[RESOLUTION_FAILED_NOTE] if has_resolution_errors else None,
            )

            logger.info(
                f"Audited {path}: score={result.final_score} grade={grade} "
                f"violations={summary.total_violations} ({duration}ms)"
            )
            return result

        except Exception as e:
            raise AuditError(f"Audit failed for {file_path}: {e}", str(file_path), e) from e
