from __future__ import annotations

from reltag.core.result import Err, Ok, Result
from reltag.git.repository import Repository, Signature
from reltag.output.console import ConsoleProtocol, Style
from reltag.tagging.errors import TaggingError


def marker_exists(repository: Repository, name: str) -> Result[bool, TaggingError]:
    """Membership test: is there a tag called exactly `name`?

    Annotated and lightweight tags both count. Read-only. A failure to list
    tags is reported, never treated as "not found".
    """
    listed = repository.list_tags()
    if isinstance(listed, Err):
        e = listed.error
        return Err(
            TaggingError(
                kind="enumeration_failure",
                message=f"failed to list tags in {repository.path}",
                hint=e.message,
            )
        )

    return Ok(any(tag.name == name for tag in listed.value))


def create_marker_if_absent(
    repository: Repository,
    name: str,
    signer: Signature,
    message: str,
    *,
    console: ConsoleProtocol | None = None,
) -> Result[bool, TaggingError]:
    """Create annotated tag `name` at HEAD unless it already exists.

    Returns Ok(True) if the tag was created, Ok(False) if it was already there.
    Existence is re-checked here even when the caller just looked.
    """
    exists = marker_exists(repository, name)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        if console is not None:
            console.info(f"tag {name} already exists")
        return Ok(False)

    head = repository.head_commit()
    if isinstance(head, Err):
        return Err(
            TaggingError(
                kind="head_unresolvable",
                message=f"cannot resolve HEAD in {repository.path}",
                hint=head.error.message,
            )
        )

    target = head.value
    if console is not None:
        console.print(f"git tag --annotate {name} {target[:12]}", Style.DIM)

    created = repository.create_annotated_tag(name, target, signer, message)
    if isinstance(created, Err):
        return Err(
            TaggingError(
                kind="creation_failure",
                message=f"failed to create tag {name}",
                hint=created.error.message,
            )
        )

    return Ok(True)
