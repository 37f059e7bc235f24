"""Process exit codes.

Invalid input always exits with USER_ERROR. Failures of git or gh propagate
that command's own exit status when it has one; the remaining codes cover
failures that carry no status (missing tools, timeouts, lookup deadlines).
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the shipit command.

    - 0: Success
    - 1: User error (bad bump kind, bad arguments)
    - 2: Environment error (git/gh missing, gh not authenticated, not a repo)
    - 3: Release error (tag creation or push failed)
    - 4: Network error (workflow dispatch, run lookup or watch failed)
    - 5: I/O error (config file unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    RELEASE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
