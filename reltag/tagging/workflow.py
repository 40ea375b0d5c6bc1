"""The tagging run: credential -> working copy -> lookup -> create -> push.

    START -> credential_loaded -> repo_ready -> marker_exists (END)
                                             -> marker_created -> pushed (END)

Any error stops the run where it happened. Nothing is retried or rolled
back. A tag created before a failed push stays in the local working copy
only: the next run finds it there and stops at marker_exists, so it is not
pushed again automatically.
"""

from __future__ import annotations

from reltag.core.config import TaggerConfig
from reltag.core.result import Err, Ok, Result
from reltag.git.credentials import load_credential
from reltag.git.repository import Signature
from reltag.output.console import ConsoleProtocol, Style
from reltag.tagging.errors import TaggingError, from_credential_error
from reltag.tagging.markers import create_marker_if_absent, marker_exists
from reltag.tagging.model import TAGS_REFSPEC, TaggingReport
from reltag.tagging.publisher import publish_markers
from reltag.tagging.source import obtain_repository


def run_tagging(
    config: TaggerConfig,
    *,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[TaggingReport, TaggingError]:
    """Ensure `config.marker_name` exists locally and on the remote.

    With `dry_run`, the credential is loaded and the working copy is cloned or
    reused so the lookup is real, but no tag is created and nothing is pushed.
    """
    name = config.marker_name
    console.header(f"Ensure tag {name}")

    credential = load_credential(config.key_path, config.principal)
    if isinstance(credential, Err):
        return Err(from_credential_error(credential.error))
    console.print(f"ssh key: {config.key_path} ({credential.value.key_type})", Style.DIM)

    obtained = obtain_repository(
        remote_url=config.remote_url,
        local_path=config.local_path,
        credential=credential.value,
        remote_name=config.remote_name,
        console=console,
    )
    if isinstance(obtained, Err):
        return obtained
    repository = obtained.value.repository
    obtain = obtained.value.outcome

    exists = marker_exists(repository, name)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        console.success(f"tag {name} already exists, nothing to do")
        return Ok(
            TaggingReport(
                stage="marker_exists",
                marker=name,
                obtain=obtain,
                marker_existed=True,
                created=False,
                dry_run=dry_run,
            )
        )

    if dry_run:
        console.info(
            f"dry run: would tag HEAD as {name} and push {TAGS_REFSPEC} to {config.remote_name}"
        )
        return Ok(
            TaggingReport(
                stage="repo_ready",
                marker=name,
                obtain=obtain,
                marker_existed=False,
                created=False,
                dry_run=True,
            )
        )

    signer = Signature.now(config.signer_name, config.signer_email)
    created = create_marker_if_absent(
        repository, name, signer, config.marker_message, console=console
    )
    if isinstance(created, Err):
        return created
    if not created.value:
        # Appeared between lookup and creation.
        return Ok(
            TaggingReport(
                stage="marker_exists",
                marker=name,
                obtain=obtain,
                marker_existed=True,
                created=False,
            )
        )
    console.success(f"created tag {name} ({signer.name} <{signer.email}>)")

    published = publish_markers(
        repository,
        credential.value,
        remote_name=config.remote_name,
        console=console,
    )
    if isinstance(published, Err):
        return published

    if published.value == "pushed":
        console.success(f"pushed tags to {config.remote_name}")

    return Ok(
        TaggingReport(
            stage="pushed",
            marker=name,
            obtain=obtain,
            marker_existed=False,
            created=True,
            published=published.value,
        )
    )
