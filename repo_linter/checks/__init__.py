"""
Checks - the rules a repository is linted against.
"""

from repo_linter.checks.base import Checker
from repo_linter.checks.file_exists import FileExistsCheck
from repo_linter.checks.directory_exists import DirectoryExistsCheck
from repo_linter.checks.search_string import SearchForStringCheck, file_contains
from repo_linter.checks.path_contains import FilePathContainsStringCheck
from repo_linter.checks.license_file import LicenseFileCheck
from repo_linter.checks.secrets import SecretsCheck

__all__ = [
    "Checker",
    "FileExistsCheck",
    "DirectoryExistsCheck",
    "SearchForStringCheck",
    "file_contains",
    "FilePathContainsStringCheck",
    "LicenseFileCheck",
    "SecretsCheck",
]
