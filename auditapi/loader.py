"""
Configuration loading

Reads scoring.yaml and ruleset.yaml from a config directory, validates
both, and resolves rule functions. The result is an immutable AuditConfig.
ConfigLoader caches that value; reload() builds a new one instead of
mutating the cached value.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from auditapi.config import DEFAULT_CONFIG_DIR, RULESET_FILE_NAME, SCORING_FILE_NAME
from auditapi.errors import ConfigLoadError
from auditapi.models import AuditConfig, Ruleset, ScoringConfig
from auditapi.ruleset import resolve_rule_functions
from auditapi.validation import validate_ruleset, validate_scoring_config

logger = logging.getLogger(__name__)


def load_yaml_file(file_path: Path) -> Any:
    """Load and parse a YAML file"""
    if not file_path.exists():
        raise ConfigLoadError(f"Configuration file not found: {file_path}", str(file_path))

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"Failed to parse YAML: {e}", str(file_path), e) from e


def load_scoring_config(config_dir: Path) -> ScoringConfig:
    """Load and validate scoring.yaml"""
    file_path = Path(config_dir) / SCORING_FILE_NAME
    raw = load_yaml_file(file_path)

    validation = validate_scoring_config(raw)
    if not validation.success:
        raise ConfigLoadError(
            f"Invalid scoring configuration: {', '.join(validation.errors)}",
            str(file_path),
        )

    logger.debug(f"Loaded scoring configuration from {file_path}")
    return validation.data


def load_ruleset_config(config_dir: Path) -> Ruleset:
    """Load, validate and resolve ruleset.yaml"""
    file_path = Path(config_dir) / RULESET_FILE_NAME
    raw = load_yaml_file(file_path)

    validation = validate_ruleset(raw)
    if not validation.success:
        raise ConfigLoadError(
            f"Invalid ruleset configuration: {', '.join(validation.errors)}",
            str(file_path),
        )

    ruleset = resolve_rule_functions(validation.data, str(file_path))
    logger.debug(f"Loaded {len(ruleset.rules)} custom rules from {file_path}")
    return ruleset


def load_config(config_dir: Union[str, Path] = DEFAULT_CONFIG_DIR) -> AuditConfig:
    """Load both configuration files from ``config_dir`` (uncached)"""
    config_dir = Path(config_dir).resolve()
    config = AuditConfig(
        scoring=load_scoring_config(config_dir),
        ruleset=load_ruleset_config(config_dir),
        config_dir=config_dir,
    )
    logger.info(f"Configuration loaded from {config_dir}")
    return config


class ConfigLoader:
    """
    Caching front for load_config().

    The cached AuditConfig is immutable, so one loader may be shared by
    any number of auditors.
    """

    def __init__(self, config_dir: Union[str, Path] = DEFAULT_CONFIG_DIR):
        self.config_dir = Path(config_dir).resolve()
        self._config: Optional[AuditConfig] = None

    def load_all(self) -> AuditConfig:
        """Load both configurations, reusing the cached value if present"""
        if self._config is None:
            self._config = load_config(self.config_dir)
        return self._config

    def load_scoring_config(self) -> ScoringConfig:
        return self.load_all().scoring

    def load_ruleset_config(self) -> Ruleset:
        return self.load_all().ruleset

    def reload(self) -> AuditConfig:
        """Read the files again and cache the new value"""
        self._config = load_config(self.config_dir)
        return self._config

    def clear_cache(self) -> None:
        self._config = None


def create_config_loader(config_dir: Optional[Union[str, Path]] = None) -> ConfigLoader:
    """Factory for a loader on ``config_dir`` (defaults to the bundled config)"""
    return ConfigLoader(config_dir if config_dir is not None else DEFAULT_CONFIG_DIR)
