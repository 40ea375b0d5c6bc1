"""Process exit codes.

A failed tagging run exits with one of these codes so that cron jobs and CI
pipelines can tell what went wrong without parsing output:
- 0: Success (marker created and pushed, or already present)
- 1: User error (bad config, missing options)
- 2: Auth error (key unreadable or invalid, remote rejected credentials)
- 3: Network error (remote unreachable, timeout)
- 4: Repository error (path conflict, unreadable tags, no HEAD, tag creation)
- 5: Publish error (remote rejected a tag)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    USER_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3
    REPO_ERROR = 4
    PUBLISH_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
