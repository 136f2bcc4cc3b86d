"""
Configuration - global options and per-check override policy

Options come from a YAML file (``.repolinter.yaml`` by default) and can be
overridden by command line flags.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from repo_linter.errors import ConfigError

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_FILE = ".repolinter.yaml"


@dataclass
class CheckerConfiguration:
    """
    Override policy entry for one check.

    Attributes:
        name: name of the check the entry applies to
        allowed_to_fail: downgrade a red result to yellow
    """
    name: str
    allowed_to_fail: bool = False


@dataclass
class GlobalConfiguration:
    """
    Global lint options.

    Attributes:
        truncate_output: shorten long check output in the report
        truncate_threshold: number of lines a check may render before truncation
        truncate_head: lines kept from the start of a truncated check
        truncate_tail: lines kept from the end of a truncated check
        gitignore_enabled: honour .gitignore files
        cleanup: delete cloned repositories after linting (local paths are never deleted)
        clone_directory: where to clone repositories, a temp dir when unset
        clone_timeout: low-speed timeout for git clone, in seconds
        clone_retries: retries for failed clones
        jobs: number of checks run in parallel
        trufflehog_path: secret scanner executable
        secret_scan_timeout: scanner timeout in seconds
        forbidden_strings: strings that must not appear in the repository
        checks: override policy entries
    """
    truncate_output: bool = True
    truncate_threshold: int = 10
    truncate_head: int = 5
    truncate_tail: int = 5
    gitignore_enabled: bool = True
    cleanup: bool = True
    clone_directory: Optional[Path] = None
    clone_timeout: int = 60
    clone_retries: int = 2
    jobs: int = 4
    trufflehog_path: str = "trufflehog"
    secret_scan_timeout: int = 300
    forbidden_strings: list[str] = field(default_factory=list)
    checks: list[CheckerConfiguration] = field(default_factory=list)


_SCALAR_TYPES: dict[str, type] = {
    "truncate_output": bool,
    "truncate_threshold": int,
    "truncate_head": int,
    "truncate_tail": int,
    "gitignore_enabled": bool,
    "cleanup": bool,
    "clone_timeout": int,
    "clone_retries": int,
    "jobs": int,
    "trufflehog_path": str,
    "secret_scan_timeout": int,
}


def _parse_checks(raw: Any) -> list[CheckerConfiguration]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'checks' must be a list of {name, allowed_to_fail} entries")

    entries: list[CheckerConfiguration] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str) or not item["name"]:
            raise ConfigError(f"Invalid check entry: {item!r} (a non-empty 'name' is required)")
        unknown = set(item) - {"name", "allowed_to_fail"}
        if unknown:
            raise ConfigError(f"Unknown keys in check entry '{item['name']}': {', '.join(sorted(unknown))}")
        allowed = item.get("allowed_to_fail", False)
        if not isinstance(allowed, bool):
            raise ConfigError(f"'allowed_to_fail' of check '{item['name']}' must be true or false")
        if item["name"] in seen:
            raise ConfigError(f"Duplicate check entry: {item['name']}")
        seen.add(item["name"])
        entries.append(CheckerConfiguration(name=item["name"], allowed_to_fail=allowed))
    return entries


def config_from_dict(data: dict[str, Any]) -> GlobalConfiguration:
    """
    Build a configuration from a parsed mapping.

    Raises:
        ConfigError: unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(GlobalConfiguration)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    config = GlobalConfiguration()

    for key, expected in _SCALAR_TYPES.items():
        if key not in data:
            continue
        value = data[key]
        # bool is a subclass of int, don't let `jobs: true` through
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"'{key}' must be of type {expected.__name__}, got {value!r}")
        setattr(config, key, value)

    if config.jobs < 1:
        raise ConfigError("'jobs' must be at least 1")
    if config.truncate_head < 0 or config.truncate_tail < 0:
        raise ConfigError("'truncate_head' and 'truncate_tail' must not be negative")

    if data.get("clone_directory") is not None:
        config.clone_directory = Path(str(data["clone_directory"])).expanduser()

    forbidden = data.get("forbidden_strings") or []
    if not isinstance(forbidden, list) or not all(isinstance(s, str) and s for s in forbidden):
        raise ConfigError("'forbidden_strings' must be a list of non-empty strings")
    config.forbidden_strings = list(forbidden)

    config.checks = _parse_checks(data.get("checks"))
    return config


def load_config(path: Optional[Path] = None) -> GlobalConfiguration:
    """
    Load the configuration file.

    Without an explicit path, ``.repolinter.yaml`` in the current directory is
    used when present; otherwise the defaults apply.

    Raises:
        ConfigError: the file cannot be read or is invalid
    """
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILE
        if not candidate.is_file():
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
            return GlobalConfiguration()
        path = candidate

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    logger.info("Loaded configuration from %s", path)
    return config_from_dict(data)
