"""Trufflehog secret scanner adapter.

Runs ``trufflehog filesystem`` against a repository snapshot, decodes its
line-delimited JSON output into findings and translates its exit code into a
check status:

- ``0``   no secrets, green
- ``183`` secrets found (``--fail``), red
- other   scanner failure, raised as SecretScanError
"""

import json
import logging
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from repo_linter.core.status import CheckStatus
from repo_linter.errors import SecretScanError

logger = logging.getLogger(__name__)


# Exit code trufflehog uses with --fail when results were found
FINDINGS_EXIT_CODE = 183

SCAN_ARGUMENTS = ["--json", "--results=verified,unknown", "--fail"]


@dataclass(frozen=True)
class SecretFinding:
    """A secret reported by the scanner."""
    file: str
    line: int
    detector_description: str

    def __str__(self) -> str:
        return f"{self.detector_description} Found in {self.file} at line {self.line}"


@dataclass
class SecretScanResult:
    """Outcome of one scanner run."""
    status: CheckStatus
    findings: list[SecretFinding] = field(default_factory=list)
    exit_code: int = 0
    duration_ms: int = 0
    skipped_lines: int = 0


def _normalize_file(file: str, root: Path) -> str:
    """Make a reported path relative to the snapshot root, in posix form."""
    path = Path(file)
    if path.is_absolute():
        try:
            path = path.relative_to(root)
        except ValueError:
            return path.as_posix()
    relative = PurePosixPath(str(path).replace("\\", "/")).as_posix()
    while relative.startswith("./"):
        relative = relative[2:]
    return relative


def parse_finding(record: Any, root: Path) -> Optional[SecretFinding]:
    """
    Decode one trufflehog JSON record.

    Returns None when the record doesn't have the expected shape:
    ``SourceMetadata.Data.Filesystem.{file,line}`` and a detector description
    (falling back to the detector name).
    """
    if not isinstance(record, dict):
        return None

    try:
        filesystem = record["SourceMetadata"]["Data"]["Filesystem"]
        file = filesystem["file"]
    except (KeyError, TypeError):
        return None
    if not isinstance(file, str) or not file:
        return None

    line = filesystem.get("line", 0)
    if isinstance(line, bool) or not isinstance(line, int):
        try:
            line = int(line)
        except (TypeError, ValueError):
            return None

    description = record.get("DetectorDescription") or record.get("DetectorName")
    if not isinstance(description, str) or not description:
        return None

    return SecretFinding(
        file=_normalize_file(file, root),
        line=line,
        detector_description=description,
    )


def parse_output(stdout: str, root: Path) -> tuple[list[SecretFinding], int]:
    """
    Parse line-delimited JSON scanner output.

    Returns the findings and the number of non-empty lines that were skipped
    because they were not valid findings (log lines, partial writes, ...).
    """
    findings: list[SecretFinding] = []
    skipped = 0
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            skipped += 1
            continue
        finding = parse_finding(record, root)
        if finding is None:
            skipped += 1
            continue
        if finding not in findings:
            findings.append(finding)
    return findings, skipped


class TrufflehogScanner:
    """Runs the external trufflehog process, one fresh process per scan."""

    def __init__(self, executable: str = "trufflehog", timeout: int = 300):
        self.executable = executable
        self.timeout = timeout

    def build_command(self) -> list[str]:
        # the scan runs inside the snapshot root so reported paths are relative to it
        return [self.executable, "filesystem", ".", *SCAN_ARGUMENTS]

    def scan(self, root: Path) -> SecretScanResult:
        """
        Scan a repository snapshot.

        Args:
            root: snapshot root directory

        Returns:
            SecretScanResult, green without findings or red with findings

        Raises:
            SecretScanError: the scanner could not be started, timed out or
                exited with an undocumented exit code
        """
        command = self.build_command()
        logger.info("Running secret scanner: %s (in %s)", " ".join(command), root)

        start_time = time.time()
        try:
            result = subprocess.run(
                command,
                cwd=root,
                capture_output=True,
                # undecodable bytes are replaced with U+FFFD
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SecretScanError(f"Secret scanner timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise SecretScanError(f"Failed to start secret scanner '{self.executable}': {e}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug("Secret scanner exited with %d after %d ms", result.returncode, duration_ms)

        if result.returncode == 0:
            return SecretScanResult(
                status=CheckStatus.GREEN,
                exit_code=0,
                duration_ms=duration_ms,
            )

        if result.returncode == FINDINGS_EXIT_CODE:
            findings, skipped = parse_output(result.stdout or "", root)
            if skipped:
                logger.warning("Skipped %d unparseable lines of secret scanner output", skipped)
            return SecretScanResult(
                status=CheckStatus.RED,
                findings=findings,
                exit_code=result.returncode,
                duration_ms=duration_ms,
                skipped_lines=skipped,
            )

        stderr = (result.stderr or "").strip()
        raise SecretScanError(
            f"Secret scanner exited with unexpected code {result.returncode}"
            + (f": {stderr[:500]}" if stderr else ""),
            exit_code=result.returncode,
            stderr=stderr,
        )
