"""Classification of remote (clone/push) failures.

git reports every transport problem as exit code 128 with a free-form
message; the text is the only way to tell a refused key from an unreachable
host.
"""

from __future__ import annotations

from typing import Literal

from reltag.git.repository import GitError

__all__ = ["RemoteFailure", "classify_remote_failure", "is_destination_conflict"]

RemoteFailure = Literal["auth", "network"]

_AUTH_MARKERS = (
    "permission denied (publickey",
    "permission denied, please try again",
    "authentication failed",
    "host key verification failed",
    "could not read username",
    "could not read password",
    "invalid username or password",
    "no supported authentication methods",
    "load key",
    "access denied",
)

_DESTINATION_MARKERS = (
    "already exists and is not an empty directory",
    "already exists",
)


def classify_remote_failure(error: GitError) -> RemoteFailure:
    """Return "auth" if git's message shows the remote refused our identity.

    Everything else (DNS, refused connections, timeouts, missing repository)
    is "network".
    """
    if error.timed_out:
        return "network"
    message = error.message.lower()
    if any(marker in message for marker in _AUTH_MARKERS):
        return "auth"
    return "network"


def is_destination_conflict(error: GitError) -> bool:
    """True if a clone failed because the destination path is occupied."""
    if error.command != "clone":
        return False
    message = error.message.lower()
    return "destination path" in message and any(m in message for m in _DESTINATION_MARKERS)
