"""
Rich terminal reporter - coloured lint report
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from repo_linter.core.status import CheckStatus, STATUS_STYLES
from repo_linter.linter import Linter


class RichReporter:
    """Rich terminal reporter"""

    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def report(self, linter: Linter, error: Optional[str] = None) -> None:
        """Print the report"""
        self._print_header(linter)

        for check in linter.checks:
            self._print_check(linter, check)

        self._print_summary(linter, error)

    def report_failure(self, target: str, error: str) -> None:
        """Print why a target could not be linted"""
        self.err_console.print(f"[red]Error:[/red] Failed to lint {escape(target)}: {escape(error)}")

    def _print_header(self, linter: Linter) -> None:
        repo = linter.repo

        content = Text()
        content.append("Commits: ", style="bold")
        content.append(f"{repo.commit_count}\n")
        if repo.source_url:
            content.append("Source: ", style="bold")
            content.append(f"{repo.source_url}\n")
        content.append("Contributors: ", style="bold")
        if repo.contributors:
            content.append("\n")
            for contributor in repo.contributors:
                content.append(f"  {contributor}\n", style="dim")
        else:
            content.append("none\n", style="dim")
        content.rstrip()

        self.console.print(Panel(
            content,
            title=f"[bold]Report for {escape(repo.name)}[/bold]",
            border_style="cyan",
        ))

    def _print_check(self, linter: Linter, check) -> None:
        style = STATUS_STYLES[check.status]
        lines = linter.render_check(check)

        first, rest = lines[0], lines[1:]
        self.console.print(Text(first, style=f"bold {style}"))
        for line in rest:
            self.console.print(Text(f"    {line}", style="dim"))
        if rest:
            self.console.print()

    def _print_summary(self, linter: Linter, error: Optional[str]) -> None:
        counts = linter.summary()

        summary = Text()
        for status in (CheckStatus.GREEN, CheckStatus.YELLOW, CheckStatus.RED, CheckStatus.GRAY):
            count = counts[status.value]
            if count == 0 and status is CheckStatus.GRAY:
                continue
            summary.append(f"{status.icon} {count} {status.value}  ", style=STATUS_STYLES[status])

        self.console.print()
        self.console.print(summary)

        if error:
            self.console.print(f"[red]Error:[/red] {escape(error)}")
        elif any(check.status.is_failing for check in linter.checks):
            self.console.print("[red]Some checks failed.[/red]")
        else:
            self.console.print("[green]All checks passed.[/green]")
        self.console.print()
