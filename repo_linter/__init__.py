"""
repo-linter - lint git repositories against a set of compliance checks.
"""

__version__ = "0.1.0"
