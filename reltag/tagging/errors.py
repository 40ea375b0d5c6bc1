from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from reltag.core.errors import ErrorCode
from reltag.git.credentials import CredentialError
from reltag.git.repository import GitError
from reltag.git.transport import classify_remote_failure

TaggingErrorKind = Literal[
    "key_unreadable",
    "key_invalid",
    "network_failure",
    "auth_failure",
    "path_conflict",
    "enumeration_failure",
    "head_unresolvable",
    "creation_failure",
    "push_rejected",
]

_EXIT_CODES: dict[TaggingErrorKind, ErrorCode] = {
    "key_unreadable": ErrorCode.AUTH_ERROR,
    "key_invalid": ErrorCode.AUTH_ERROR,
    "auth_failure": ErrorCode.AUTH_ERROR,
    "network_failure": ErrorCode.NETWORK_ERROR,
    "path_conflict": ErrorCode.REPO_ERROR,
    "enumeration_failure": ErrorCode.REPO_ERROR,
    "head_unresolvable": ErrorCode.REPO_ERROR,
    "creation_failure": ErrorCode.REPO_ERROR,
    "push_rejected": ErrorCode.PUBLISH_ERROR,
}


@dataclass(frozen=True, slots=True)
class TaggingError:
    kind: TaggingErrorKind
    message: str
    hint: str | None = None

    @property
    def exit_code(self) -> ErrorCode:
        return _EXIT_CODES[self.kind]


def from_credential_error(error: CredentialError) -> TaggingError:
    return TaggingError(kind=error.kind, message=error.message, hint=error.hint)


def from_remote_error(error: GitError, *, action: str) -> TaggingError:
    """Map a failed clone/push into auth_failure or network_failure."""
    if classify_remote_failure(error) == "auth":
        return TaggingError(
            kind="auth_failure",
            message=f"{action}: remote rejected the SSH key",
            hint=error.message or None,
        )
    return TaggingError(
        kind="network_failure",
        message=f"{action}: {'timed out' if error.timed_out else 'remote unreachable'}",
        hint=error.message or None,
    )
