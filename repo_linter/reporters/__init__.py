"""
Reporters Layer

Rich terminal reporter and JSON reporter.
"""

from repo_linter.reporters.base import Reporter
from repo_linter.reporters.rich_reporter import RichReporter
from repo_linter.reporters.json_reporter import JsonReporter

__all__ = [
    "Reporter",
    "RichReporter",
    "JsonReporter",
]
