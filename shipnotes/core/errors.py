"""Error codes for CLI exit status.

Every failure surfaced by `shipnotes` ends the process with one of these codes.
The numeric values follow common conventions:
- 0: Success
- 1: User error (unknown repository, bad version string)
- 2: Environment error (missing gh, missing checkout)
- 3: Data error (a pull request body that cannot be turned into a link)
- 4: Network error (GitHub API unreachable or rejecting a call)
- 5: I/O error (changelog unreadable, git failures)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    DATA_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
