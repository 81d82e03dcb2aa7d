"""Process exit codes.

Every failure of a release run maps to the same non-zero status: callers
scripting relbump only need to distinguish success from failure.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    FAILURE = 1
