"""Git repository abstraction.

`Repository` wraps the handful of git commands the tagging workflow needs:
reading HEAD, enumerating tags, creating an annotated tag and pushing tag
refs. `clone` creates a working copy. Every operation returns a Result.

Usage:
    repo = Repository(Path("/tmp/project"))

    match repo.list_tags():
        case Ok(tags):
            names = {t.name for t in tags}
        case Err(e):
            print(f"{e.command}: {e.message}")
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from reltag.core.result import Err, Ok, Result
from reltag.platform.process import ProcessError
from reltag.platform.process import run as run_process
from reltag.platform.process import run_streaming

_GIT_TIMEOUT_SECONDS = 30.0
_NETWORK_COMMANDS = frozenset({"clone", "fetch", "pull", "push", "ls-remote"})

_TAGS_PREFIX = "refs/tags/"

# Receives one completed line of git progress output (stderr).
ProgressCallback = Callable[[str], None]

__all__ = [
    "GitError",
    "ProgressCallback",
    "PushReport",
    "PushedRef",
    "Repository",
    "Signature",
    "TagRef",
    "clone",
    "parse_push_porcelain",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "push")
        message: git's diagnostic output, or a fallback description
        returncode: Process return code (-1 if git never completed)
        timed_out: True if the command hit its timeout
        rejected_refs: For push, remote refs the server refused
    """

    command: str
    message: str
    returncode: int = 1
    timed_out: bool = False
    rejected_refs: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Signature:
    """Tagger identity recorded on an annotated tag."""

    name: str
    email: str
    when: datetime

    @classmethod
    def now(cls, name: str, email: str) -> Signature:
        """Identity stamped with the current local time (timezone-aware)."""
        return cls(name=name, email=email, when=datetime.now().astimezone())

    def git_date(self) -> str:
        """Date in git's internal format: "@<epoch seconds> <+hhmm>"."""
        when = self.when if self.when.tzinfo else self.when.astimezone()
        return f"@{int(when.timestamp())} {when.strftime('%z')}"

    def committer_env(self) -> dict[str, str]:
        """Environment variables git reads the tagger identity from."""
        return {
            "GIT_COMMITTER_NAME": self.name,
            "GIT_COMMITTER_EMAIL": self.email,
            "GIT_COMMITTER_DATE": self.git_date(),
        }


@dataclass(frozen=True, slots=True)
class TagRef:
    """A tag ref under refs/tags.

    Attributes:
        name: Tag name without the refs/tags/ prefix
        object_type: "tag" for annotated tags, usually "commit" for lightweight ones
    """

    name: str
    object_type: str

    @property
    def is_annotated(self) -> bool:
        return self.object_type == "tag"


@dataclass(frozen=True, slots=True)
class PushedRef:
    """One line of `git push --porcelain` output.

    Flags: "*" new ref, " " fast-forward, "+" forced, "-" deleted,
    "=" up to date, "!" rejected.
    """

    flag: str
    source: str
    destination: str
    summary: str

    @property
    def transmitted(self) -> bool:
        return self.flag in {"*", " ", "+", "-"}

    @property
    def rejected(self) -> bool:
        return self.flag == "!"


@dataclass(frozen=True, slots=True)
class PushReport:
    """Parsed result of a push."""

    refs: tuple[PushedRef, ...] = field(default_factory=tuple)

    @property
    def transmitted(self) -> list[PushedRef]:
        return [r for r in self.refs if r.transmitted]

    @property
    def rejected(self) -> list[PushedRef]:
        return [r for r in self.refs if r.rejected]

    @property
    def is_up_to_date(self) -> bool:
        """True if the remote already had everything (nothing was sent)."""
        return not self.transmitted and not self.rejected


def parse_push_porcelain(output: str) -> PushReport:
    """Parse `git push --porcelain` stdout.

    Ref lines are "<flag>\\t<src>:<dst>\\t<summary>"; the "To <url>" header and
    the trailing "Done" are skipped.
    """
    refs: list[PushedRef] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or len(parts[0]) != 1:
            continue
        source, _, destination = parts[1].partition(":")
        summary = parts[2].strip() if len(parts) > 2 else ""
        refs.append(
            PushedRef(flag=parts[0], source=source, destination=destination, summary=summary)
        )
    return PushReport(refs=tuple(refs))


class Repository:
    """A local git working copy.

    Attributes:
        path: Path to the working copy root (containing .git)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a git working copy (.git directory or gitfile)."""
        return (self.path / ".git").exists()

    def remote_url(self, name: str) -> str | None:
        """URL of remote `name`, or None if it is not configured."""
        result = self._run(["config", "--get", f"remote.{name}.url"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def head_commit(self) -> Result[str, GitError]:
        """Resolve HEAD to a commit SHA.

        Fails on an empty repository (unborn branch) or a broken HEAD.
        """
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, "HEAD does not point to a commit"))
            case Ok(stdout):
                sha = stdout.strip()
                if not sha:
                    return Err(GitError(command="rev-parse", message="HEAD resolved to nothing"))
                return Ok(sha)

    def list_tags(self) -> Result[list[TagRef], GitError]:
        """Enumerate all tags (annotated and lightweight), in no particular order."""
        result = self._run(
            ["for-each-ref", "--format=%(objecttype) %(refname)", _TAGS_PREFIX.rstrip("/")]
        )
        match result:
            case Err(e):
                return Err(_git_error("for-each-ref", e, "failed to list tags"))
            case Ok(stdout):
                return Ok(_parse_tag_refs(stdout))

    def create_annotated_tag(
        self,
        name: str,
        target: str,
        tagger: Signature,
        message: str,
    ) -> Result[None, GitError]:
        """Create annotated tag `name` at `target`. Signing is always disabled."""
        env = {**os.environ, **tagger.committer_env()}
        result = self._run(
            ["-c", "tag.gpgSign=false", "tag", "--annotate", "--message", message, name, target],
            env=env,
        )
        match result:
            case Err(e):
                return Err(_git_error("tag", e, f"failed to create tag {name}"))
            case Ok(_):
                return Ok(None)

    def push(
        self,
        remote: str,
        refspecs: list[str],
        env: Mapping[str, str] | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> Result[PushReport, GitError]:
        """Push `refspecs` to `remote` and report what was sent.

        Runs without a timeout. With `on_progress`, git's progress lines are
        relayed as they arrive. A rejected ref fails the push; the rejected
        destinations are listed in GitError.rejected_refs.
        """
        args = ["push", "--porcelain", remote, *refspecs]
        if on_progress is None:
            result = self._run(args, env=env)
        else:
            args.insert(1, "--progress")
            result = run_streaming(
                ["git", "-C", str(self.path), *args],
                cwd=self.path,
                env=env,
                on_stderr=on_progress,
            )
        match result:
            case Err(e):
                report = parse_push_porcelain(e.stdout)
                rejected = tuple(r.destination for r in report.rejected)
                error = _git_error("push", e, "push failed")
                return Err(
                    GitError(
                        command=error.command,
                        message=error.message,
                        returncode=error.returncode,
                        timed_out=error.timed_out,
                        rejected_refs=rejected,
                    )
                )
            case Ok(stdout):
                return Ok(parse_push_porcelain(stdout))

    def _run(
        self, args: list[str], env: Mapping[str, str] | None = None
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository.

        Local commands are bounded; network commands run to completion.
        """
        timeout = None if _subcommand(args) in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, env=env, timeout=timeout
        )


def clone(
    url: str,
    dest: Path,
    env: Mapping[str, str] | None = None,
    *,
    on_progress: ProgressCallback | None = None,
) -> Result[Repository, GitError]:
    """Clone `url` into `dest` (which must be absent or an empty directory).

    The parent directory is created if needed. Runs without a timeout; a
    failed clone is cleaned up by git itself. With `on_progress`, git's
    progress lines are relayed as they arrive.
    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(GitError(command="clone", message=f"cannot create {dest.parent}: {e}"))

    if on_progress is None:
        result = run_process(
            ["git", "clone", "--", url, str(dest)],
            cwd=dest.parent,
            env=env,
            timeout=None,
        )
    else:
        result = run_streaming(
            ["git", "clone", "--progress", "--", url, str(dest)],
            cwd=dest.parent,
            env=env,
            on_stderr=on_progress,
        )
    match result:
        case Err(e):
            return Err(_git_error("clone", e, f"failed to clone {url}"))
        case Ok(_):
            return Ok(Repository(dest))


def _subcommand(args: list[str]) -> str:
    """First argument that is not a `-c key=value` option."""
    i = 0
    while i < len(args):
        if args[i] == "-c":
            i += 2
            continue
        return args[i]
    return ""


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.output or fallback,
        returncode=e.returncode,
        timed_out=e.timed_out,
    )


def _parse_tag_refs(output: str) -> list[TagRef]:
    tags: list[TagRef] = []
    for line in output.splitlines():
        object_type, _, refname = line.strip().partition(" ")
        if not refname.startswith(_TAGS_PREFIX):
            continue
        tags.append(TagRef(name=refname[len(_TAGS_PREFIX) :], object_type=object_type))
    return tags
