"""
JSON reporter - machine readable lint results

A single target prints one JSON object. In batch mode the reports are
collected and ``flush()`` prints them as one JSON array.
"""

import json
import sys
from typing import Any, Optional, TextIO

from repo_linter.linter import Linter


class JsonReporter:
    """JSON reporter"""

    def __init__(self, output: TextIO | None = None, batch: bool = False):
        self.output = output or sys.stdout
        self.batch = batch
        self.reports: list[dict[str, Any]] = []

    def build(self, linter: Linter, error: Optional[str] = None) -> dict[str, Any]:
        repo = linter.repo
        return {
            "repository": {
                "name": repo.name,
                "path": str(repo.path),
                "source_url": repo.source_url,
                "commit_count": repo.commit_count,
                "contributors": repo.contributors,
            },
            "checks": [
                {
                    "name": check.name,
                    "description": check.description,
                    "tip_to_fix": check.tip_to_fix,
                    "status": check.status.value,
                    "details": check.details,
                }
                for check in linter.checks
            ],
            "summary": linter.summary(),
            "error": error,
        }

    def _emit(self, data: dict[str, Any]) -> None:
        if self.batch:
            self.reports.append(data)
        else:
            self._print(data)

    def _print(self, data: Any) -> None:
        json_str = json.dumps(data, indent=2, ensure_ascii=False)
        print(json_str, file=self.output)

    def report(self, linter: Linter, error: Optional[str] = None) -> None:
        """Print the JSON report"""
        self._emit(self.build(linter, error))

    def report_failure(self, target: str, error: str) -> None:
        """Report a target that could not be linted at all"""
        self._emit({
            "repository": {"target": target},
            "checks": [],
            "summary": None,
            "error": error,
        })

    def flush(self) -> None:
        """Print the collected batch reports as one JSON array"""
        if self.batch:
            self._print(self.reports)
            self.reports = []
