"""
CLI Layer - command line interface.
"""

from repo_linter.cli.app import app, lint_target, lint_batch, read_batch_file

__all__ = [
    "app",
    "lint_target",
    "lint_batch",
    "read_batch_file",
]
