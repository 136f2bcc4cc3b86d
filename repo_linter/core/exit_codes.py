"""Exit-code contract shared by the linter and the CLI.

Code  Meaning
----  -------
  0   All checks passed (after the override policy)
  1   Tool or infrastructure failure, the verdict is unknown
 100  At least one check is red
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    TOOL_FAILURE = 1
    CHECKS_FAILED = 100
