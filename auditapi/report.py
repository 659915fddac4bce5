"""Human-readable rendering of audit results"""

from typing import List

import click

from auditapi.models import AuditResult, Violation

GRADE_COLORS = {
    "A": "green",
    "B": "blue",
    "C": "yellow",
    "D": "magenta",
    "F": "red",
}

SEVERITY_ICONS = {
    "error": "✗",
    "warn": "!",
}


def filter_violations(violations: List[Violation], show_all: bool) -> List[Violation]:
    """Errors only, unless show_all"""
    if show_all:
        return list(violations)
    return [v for v in violations if v.severity == "error"]


def format_result(result: AuditResult, verbose: bool = False) -> str:
    """Format an audit result for CLI output"""
    color = GRADE_COLORS.get(result.grade, "red")
    status = click.style("✓ PASSED", fg="green") if result.passed else click.style("✗ FAILED", fg="red")

    lines = [
        "═" * 60,
        click.style("AUDITAPI REPORT", fg=color, bold=True),
        "═" * 60,
        "",
        f"File:     {result.file_path}",
        f"Duration: {result.duration}ms",
        f"Time:     {result.timestamp}",
        "",
        click.style("─" * 60, fg=color),
        click.style(f"FINAL GRADE: {result.grade}", fg=color, bold=True),
        click.style(f"SCORE: {result.final_score}/100", fg=color, bold=True),
        click.style("─" * 60, fg=color),
        "",
        "Category Breakdown:",
    ]

    for category in result.category_breakdown:
        mark = "✓" if category.points_deducted == 0 else "!"
        lines.append(
            f"  {mark} {category.category:<15} Weight: {category.weight:.2f}  "
            f"Penalty: {category.points_deducted:g}"
        )

    summary = result.summary
    lines.extend([
        "",
        "Summary:",
        f"  Total Violations: {summary.total_violations}",
        f"  Errors:           {summary.error_count}",
        f"  Warnings:         {summary.warning_count}",
        f"  Info:             {summary.info_count}",
    ])
    if summary.fatal_count > 0:
        lines.append(f"  Fatal:            {summary.fatal_count}")

    if result.notes:
        lines.append("")
        lines.append("Notes:")
        for note in result.notes:
            lines.append(f"  ! {note}")

    if result.has_fatal_errors:
        lines.append("")
        lines.append(click.style("FATAL ERRORS DETECTED - Grade automatically set to F", fg="red", bold=True))

    lines.append("")
    lines.append(status)

    shown = filter_violations(result.violations, verbose)
    hidden = len(result.violations) - len(shown)

    if shown:
        lines.append("")
        lines.append("Detailed Violations:")
        lines.append("─" * 60)
        for v in shown:
            icon = SEVERITY_ICONS.get(v.severity, "i")
            lines.append("")
            lines.append(f"{icon} [{v.rule_id}] {v.severity.upper()}")
            lines.append(f"   {v.message}")
            lines.append(f"   Path: {v.path}")
            if v.line is not None:
                # Positions are 0-based
                position = f"{v.line + 1}:{v.column + 1}" if v.column is not None else f"{v.line + 1}"
                lines.append(f"   Line: {position}")

    if not verbose and hidden > 0:
        word = "violation" if hidden == 1 else "violations"
        lines.append("")
        lines.append(f"Run with --verbose to see {hidden} more {word}...")

    return "\n".join(lines)
