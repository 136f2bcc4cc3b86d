"""
Secret scanning - adapter around the external trufflehog scanner.
"""

from repo_linter.secrets.trufflehog import (
    TrufflehogScanner,
    SecretFinding,
    SecretScanResult,
    parse_finding,
    parse_output,
    FINDINGS_EXIT_CODE,
)

__all__ = [
    "TrufflehogScanner",
    "SecretFinding",
    "SecretScanResult",
    "parse_finding",
    "parse_output",
    "FINDINGS_EXIT_CODE",
]
