"""
CLI entry point - command line interface built with Typer

Run modes:
1. lint TARGET    detect whether TARGET is a URL, a directory or a batch file
2. url URL        clone and lint a remote repository
3. path PATH      lint a local working copy
4. batch FILE     lint every path or URL listed in FILE

Exit codes: 0 all checks passed, 100 checks failed, 1 tool failure.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from repo_linter.core import ExitCode, GlobalConfiguration, load_config
from repo_linter.errors import ConfigError, RepositoryError, ToolError, ToolFailureError
from repo_linter.repo import is_url, open_repository
from repo_linter.reporters import JsonReporter, Reporter, RichReporter
from repo_linter.runner import LintRunner

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="repo-linter",
    help="repo-linter: lint git repositories for READMEs, licenses, workflows and leaked secrets.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Options shared by all commands."""
    config: GlobalConfiguration = field(default_factory=GlobalConfiguration)
    output_format: str = "rich"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _make_reporter(state: CliState, batch: bool = False) -> Reporter:
    if state.output_format == "json":
        return JsonReporter(batch=batch)
    return RichReporter(console, err_console)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def lint_target(
    target: str,
    state: CliState,
    clone_directory: Optional[Path] = None,
    reporter: Optional[Reporter] = None,
) -> ExitCode:
    """
    Lint a single path or URL and print its report.

    Args:
        target: local path or URL
        state: shared CLI options
        clone_directory: where to clone a URL target
        reporter: reporter shared across a batch, a new one when omitted

    Returns:
        ExitCode for this target
    """
    config = state.config
    reporter = reporter or _make_reporter(state)

    try:
        with open_repository(target, config, clone_directory) as repo:
            runner = LintRunner(config)
            linter = runner.build_linter(repo)
            try:
                code = runner.execute(linter)
            except ToolFailureError as e:
                reporter.report(linter, error=str(e))
                for name, error in e.failures:
                    _fail(f"{name}: {error}")
                return ExitCode.TOOL_FAILURE
            reporter.report(linter)
            return ExitCode(code)
    except (RepositoryError, ToolError) as e:
        reporter.report_failure(target, str(e))
        return ExitCode.TOOL_FAILURE


def read_batch_file(path: Path) -> list[str]:
    """Targets listed in a batch file, skipping blank lines and # comments."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def lint_batch(path: Path, state: CliState) -> ExitCode:
    """
    Lint every target in a batch file.

    A tool failure on any target takes precedence over failed checks, since
    the overall verdict is then unknown.
    """
    try:
        targets = read_batch_file(path)
    except OSError as e:
        _fail(f"Cannot read batch file {path}: {e}")
        return ExitCode.TOOL_FAILURE

    reporter = _make_reporter(state, batch=True)
    codes: list[ExitCode] = []
    for index, target in enumerate(targets):
        if isinstance(reporter, RichReporter):
            console.rule(f"[bold]{escape(target)}[/bold]")
        codes.append(lint_target(target, state, reporter=reporter))
        if index < len(targets) - 1 and isinstance(reporter, RichReporter):
            console.print()

    if isinstance(reporter, JsonReporter):
        reporter.flush()

    if ExitCode.TOOL_FAILURE in codes:
        return ExitCode.TOOL_FAILURE
    if ExitCode.CHECKS_FAILED in codes:
        return ExitCode.CHECKS_FAILED
    return ExitCode.SUCCESS


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show verbose output",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (defaults to .repolinter.yaml in the current directory)",
    ),
    ignore_gitignore: bool = typer.Option(
        False,
        "--ignore-gitignore",
        help="Do not honour .gitignore files",
    ),
    disable_truncate: bool = typer.Option(
        False,
        "--disable-truncate",
        help="Show the full output of every check",
    ),
    disable_cleanup: bool = typer.Option(
        False,
        "--disable-cleanup",
        help="Do not delete cloned repositories",
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of checks to run in parallel",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default) or json",
    ),
) -> None:
    """Lint git repositories."""
    _setup_logging(verbose)

    if output_format not in ("rich", "json"):
        _fail(f"Unknown output format: {output_format}")
        raise typer.Exit(ExitCode.TOOL_FAILURE)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        _fail(str(e))
        raise typer.Exit(ExitCode.TOOL_FAILURE)

    if ignore_gitignore:
        config.gitignore_enabled = False
    if disable_truncate:
        config.truncate_output = False
    if disable_cleanup:
        config.cleanup = False
    if jobs is not None:
        config.jobs = jobs

    ctx.obj = CliState(config=config, output_format=output_format)


@app.command()
def lint(
    ctx: typer.Context,
    target: str = typer.Argument(
        ...,
        help="URL, path to a local repository, or a file listing paths and URLs",
    ),
) -> None:
    """
    Lint a URL, a local path or a batch file.

    Examples:
        repo-linter lint ./my-project
        repo-linter lint https://github.com/user/repo
        repo-linter lint repos.txt
    """
    state: CliState = ctx.obj

    if is_url(target):
        code = lint_target(target, state)
    elif Path(target).is_dir():
        code = lint_target(target, state)
    elif Path(target).is_file():
        code = lint_batch(Path(target), state)
    else:
        _fail(f"Invalid argument: {target}. See --help for more information.")
        code = ExitCode.TOOL_FAILURE

    raise typer.Exit(int(code))


@app.command("url")
def lint_url(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to lint"),
    path_to_save: Optional[Path] = typer.Argument(
        None,
        help="Directory to clone the repository into. A temporary directory is used when omitted.",
    ),
) -> None:
    """Clone and lint a remote repository."""
    if not is_url(url):
        _fail(f"Invalid URL: {url}")
        raise typer.Exit(int(ExitCode.TOOL_FAILURE))

    raise typer.Exit(int(lint_target(url, ctx.obj, clone_directory=path_to_save)))


@app.command("path")
def lint_path(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to a local repository"),
) -> None:
    """Lint a local repository."""
    if not path.is_dir():
        _fail(f"Invalid path: {path}")
        raise typer.Exit(int(ExitCode.TOOL_FAILURE))

    raise typer.Exit(int(lint_target(str(path), ctx.obj)))


@app.command("batch")
def lint_batch_file(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="File with one path or URL per line"),
) -> None:
    """Lint every repository listed in a file."""
    if not file.is_file():
        _fail(f"File does not exist: {file}")
        raise typer.Exit(int(ExitCode.TOOL_FAILURE))

    raise typer.Exit(int(lint_batch(file, ctx.obj)))


@app.command()
def version() -> None:
    """Show the version of repo-linter."""
    from repo_linter import __version__
    console.print(f"[bold]repo-linter[/bold] v{__version__}")


if __name__ == "__main__":
    app()
