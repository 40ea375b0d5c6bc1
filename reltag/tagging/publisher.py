from __future__ import annotations

import os

from reltag.core.result import Err, Ok, Result
from reltag.git.credentials import SshCredential
from reltag.git.repository import Repository
from reltag.output.console import ConsoleProtocol, Style
from reltag.tagging.errors import TaggingError, from_remote_error
from reltag.tagging.model import TAGS_REFSPEC, PublishOutcome


def publish_markers(
    repository: Repository,
    credential: SshCredential,
    *,
    remote_name: str,
    console: ConsoleProtocol,
) -> Result[PublishOutcome, TaggingError]:
    """Push every local tag to the same name on `remote_name`.

    A remote that already has every tag is a success ("up_to_date").
    """
    console.print(f"git push {remote_name} {TAGS_REFSPEC}", Style.DIM)

    pushed = repository.push(
        remote_name,
        [TAGS_REFSPEC],
        env=credential.git_env(os.environ),
        on_progress=lambda line: console.print(line, Style.DIM),
    )
    match pushed:
        case Err(e):
            if e.rejected_refs:
                return Err(
                    TaggingError(
                        kind="push_rejected",
                        message=f"remote rejected: {', '.join(e.rejected_refs)}",
                        hint=e.message,
                    )
                )
            return Err(from_remote_error(e, action=f"push to {remote_name}"))
        case Ok(report):
            if report.is_up_to_date:
                console.info(f"{remote_name} was up to date, nothing pushed")
                return Ok("up_to_date")
            for ref in report.transmitted:
                console.print(f"{ref.destination} {ref.summary}".rstrip(), Style.DIM)
            return Ok("pushed")
