"""Tests for tagging/publisher.py."""

from __future__ import annotations

from typing import Any

from reltag.core.result import Err, Ok
from reltag.git.repository import GitError, PushedRef, PushReport
from reltag.output.console import MockConsole, Style
from reltag.tagging.model import TAGS_REFSPEC
from reltag.tagging.publisher import publish_markers
from reltag.test.tagging._fakes import FakeRepository, credential


def _publish(repo: Any, console: MockConsole | None = None) -> Any:
    return publish_markers(
        repo, credential(), remote_name="origin", console=console or MockConsole()
    )


def test_pushes_all_tags() -> None:
    report = PushReport(
        refs=(PushedRef("*", "refs/tags/v0.1.0", "refs/tags/v0.1.0", "[new tag]"),)
    )
    repo = FakeRepository(push_result=Ok(report))
    console = MockConsole()

    result = _publish(repo, console)

    assert result == Ok("pushed")
    assert repo.pushes == [("origin", [TAGS_REFSPEC])]
    assert console.find("refs/tags/v0.1.0 [new tag]")


def test_up_to_date_is_success() -> None:
    report = PushReport(
        refs=(PushedRef("=", "refs/tags/v0.1.0", "refs/tags/v0.1.0", "[up to date]"),)
    )
    repo = FakeRepository(push_result=Ok(report))
    console = MockConsole()

    result = _publish(repo, console)

    assert result == Ok("up_to_date")
    assert console.find("up to date")


def test_rejected_refs() -> None:
    error = GitError(
        command="push",
        message="error: failed to push some refs",
        rejected_refs=("refs/tags/v0.1.0",),
    )
    repo = FakeRepository(push_result=Err(error))

    result = _publish(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "push_rejected"
    assert "refs/tags/v0.1.0" in result.error.message


def test_auth_failure() -> None:
    error = GitError(
        command="push",
        message="git@github.com: Permission denied (publickey).",
        returncode=128,
    )
    repo = FakeRepository(push_result=Err(error))

    result = _publish(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "auth_failure"
    assert result.error.hint == error.message


def test_network_failure() -> None:
    error = GitError(
        command="push",
        message="ssh: connect to host github.com port 22: Network is unreachable",
        returncode=128,
    )
    repo = FakeRepository(push_result=Err(error))

    result = _publish(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "network_failure"
    assert result.error.message == "push to origin: remote unreachable"


def test_timeout_is_network_failure() -> None:
    error = GitError(command="push", message="timed out", returncode=-1, timed_out=True)
    repo = FakeRepository(push_result=Err(error))

    result = _publish(repo)

    assert isinstance(result, Err)
    assert result.error.kind == "network_failure"
    assert result.error.message == "push to origin: timed out"


def test_relays_push_progress_dimmed() -> None:
    repo = FakeRepository(push_progress=["Writing objects: 100% (1/1), 160 bytes, done."])
    console = MockConsole()

    _publish(repo, console)

    [message] = console.find("Writing objects: 100%")
    assert message.style == Style.DIM
