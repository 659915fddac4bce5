"""CLI interface for AuditAPI"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from auditapi import __version__
from auditapi.auditor import Auditor
from auditapi.config import DEFAULT_CONFIG_DIR, GRADE_ORDER, GRADES
from auditapi.errors import AuditError, ConfigLoadError
from auditapi.loader import create_config_loader
from auditapi.report import format_result

logger = logging.getLogger(__name__)


def meets_minimum_grade(actual_grade: str, minimum_grade: str) -> bool:
    """Check if a grade meets the --fail-on requirement"""
    return GRADE_ORDER[actual_grade] >= GRADE_ORDER[minimum_grade]


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
def main(debug: bool):
    """AuditAPI - Audit OpenAPI specifications with quality scoring"""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


@main.command()
@click.argument("file", type=click.Path())
@click.option("-c", "--config", "config_dir", default=str(DEFAULT_CONFIG_DIR), envvar="AUDITAPI_CONFIG_DIR",
              show_default=True, help="Path to config directory")
@click.option("-j", "--json", "as_json", is_flag=True, default=False, help="Output results as JSON")
@click.option("-o", "--output", type=click.Path(), help="Write output to file")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Show all violations including warnings and info")
@click.option("--fail-on", default="D", show_default=True,
              help="Minimum passing grade. Exits with 1 if below.")
def audit(file: str, config_dir: str, as_json: bool, output: Optional[str], verbose: bool, fail_on: str):
    """Audit an OpenAPI specification file (YAML or JSON)"""
    minimum_grade = fail_on.upper()
    if minimum_grade not in GRADES:
        click.echo(f"[ERROR] Invalid grade '{fail_on}'. Must be one of: {', '.join(GRADES)}", err=True)
        sys.exit(1)

    file_path = Path(file).resolve()
    if not file_path.exists():
        click.echo(f"[ERROR] File not found: {file}", err=True)
        sys.exit(1)

    config_path = Path(config_dir).resolve()
    if not config_path.is_dir():
        click.echo(f"[ERROR] Config directory not found: {config_dir}", err=True)
        sys.exit(1)

    loader = create_config_loader(config_path)
    try:
        loader.load_all()
    except ConfigLoadError as e:
        click.echo(f"[ERROR] Error loading configuration: {e}", err=True)
        sys.exit(1)

    try:
        result = Auditor(loader).audit(file_path)
    except AuditError as e:
        click.echo(f"[ERROR] {e}", err=True)
        logger.debug("Audit failure", exc_info=e.original_error)
        sys.exit(1)

    text = result.to_json() if as_json else format_result(result, verbose)

    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"[OK] Results written to: {output}")
    else:
        click.echo(text)

    if not meets_minimum_grade(result.grade, minimum_grade):
        sys.exit(1)


@main.command("validate-config")
@click.option("-c", "--config", "config_dir", default=str(DEFAULT_CONFIG_DIR), envvar="AUDITAPI_CONFIG_DIR",
              show_default=True, help="Path to config directory")
def validate_config(config_dir: str):
    """Validate scoring.yaml and ruleset.yaml"""
    config_path = Path(config_dir).resolve()
    if not config_path.is_dir():
        click.echo(f"[ERROR] Config directory not found: {config_dir}", err=True)
        sys.exit(1)

    try:
        scoring, ruleset = create_config_loader(config_path).load_all()
    except ConfigLoadError as e:
        click.echo(f"[ERROR] Configuration validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("[OK] Configuration files are valid")

    click.echo("\nScoring Configuration:")
    click.echo(f"  Base Score: {scoring.base_score}")
    click.echo(f"  Categories: {', '.join(scoring.weights)}")
    click.echo(f"  Penalties: {len(scoring.penalties)} rules defined")

    extends = ", ".join(ruleset.extends) if ruleset.extends else "none (using default OAS rules)"
    click.echo("\nRuleset Configuration:")
    click.echo(f"  Extends: {extends}")
    click.echo(f"  Custom Rules: {len(ruleset.rules)} rules defined")


if __name__ == "__main__":
    main()
