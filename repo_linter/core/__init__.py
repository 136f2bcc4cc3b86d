"""
Core Layer - status lattice, exit codes and configuration.
"""

from repo_linter.core.status import CheckStatus, STATUS_ICONS, STATUS_STYLES
from repo_linter.core.exit_codes import ExitCode
from repo_linter.core.config import (
    CheckerConfiguration,
    GlobalConfiguration,
    config_from_dict,
    load_config,
    DEFAULT_CONFIG_FILE,
)

__all__ = [
    # status
    "CheckStatus",
    "STATUS_ICONS",
    "STATUS_STYLES",
    # exit codes
    "ExitCode",
    # config
    "CheckerConfiguration",
    "GlobalConfiguration",
    "config_from_dict",
    "load_config",
    "DEFAULT_CONFIG_FILE",
]
