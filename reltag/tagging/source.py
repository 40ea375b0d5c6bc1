from __future__ import annotations

import os
from pathlib import Path

from reltag.core.result import Err, Ok, Result
from reltag.git.credentials import SshCredential
from reltag.git.repository import Repository, clone
from reltag.git.transport import is_destination_conflict
from reltag.output.console import ConsoleProtocol, Style
from reltag.tagging.errors import TaggingError, from_remote_error
from reltag.tagging.model import ObtainedRepository


def obtain_repository(
    *,
    remote_url: str,
    local_path: Path,
    credential: SshCredential,
    remote_name: str,
    console: ConsoleProtocol,
) -> Result[ObtainedRepository, TaggingError]:
    """Clone `remote_url` into `local_path`, or reuse the working copy already there.

    Reuse is a success, not an error, so the tool can be run repeatedly
    against the same path.
    """
    repository = Repository(local_path)

    if local_path.exists() and not local_path.is_dir():
        return Err(
            TaggingError(
                kind="path_conflict",
                message=f"working copy path is a file: {local_path}",
            )
        )

    if repository.exists():
        return _reuse(repository, remote_url=remote_url, remote_name=remote_name, console=console)

    conflict = _occupied(local_path)
    if conflict is not None:
        return Err(conflict)

    console.info(f"cloning {remote_url} into {local_path}")
    console.print(f"git clone {remote_url} {local_path}", Style.DIM)
    cloned = clone(
        remote_url,
        local_path,
        env=credential.git_env(os.environ),
        on_progress=lambda line: console.print(line, Style.DIM),
    )
    match cloned:
        case Err(e):
            if is_destination_conflict(e):
                return Err(
                    TaggingError(
                        kind="path_conflict",
                        message=f"clone destination is occupied: {local_path}",
                        hint=e.message,
                    )
                )
            return Err(from_remote_error(e, action=f"clone {remote_url}"))
        case Ok(repo):
            return Ok(ObtainedRepository(repository=repo, outcome="fetched"))


def _reuse(
    repository: Repository,
    *,
    remote_url: str,
    remote_name: str,
    console: ConsoleProtocol,
) -> Result[ObtainedRepository, TaggingError]:
    url = repository.remote_url(remote_name)
    if url is None:
        return Err(
            TaggingError(
                kind="path_conflict",
                message=f"existing working copy has no remote '{remote_name}': {repository.path}",
                hint="Remove the directory or point --path somewhere else.",
            )
        )
    if url != remote_url:
        return Err(
            TaggingError(
                kind="path_conflict",
                message=f"existing working copy tracks a different remote: {url}",
                hint=f"Expected {remote_url}; remove {repository.path} or use another --path.",
            )
        )

    console.info(f"repository already cloned at {repository.path}")
    return Ok(ObtainedRepository(repository=repository, outcome="reused"))


def _occupied(path: Path) -> TaggingError | None:
    """path_conflict if `path` is a non-empty directory that is not a working copy."""
    if not path.is_dir():
        return None
    try:
        has_entries = any(path.iterdir())
    except OSError as e:
        return TaggingError(kind="path_conflict", message=f"cannot inspect {path}: {e}")
    if has_entries:
        return TaggingError(
            kind="path_conflict",
            message=f"path exists and is not a git working copy: {path}",
            hint="Remove the directory or point --path somewhere else.",
        )
    return None
