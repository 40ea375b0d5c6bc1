"""Tests for tagging/workflow.py with git replaced by in-memory fakes."""

from __future__ import annotations

from pathlib import Path
from typing import Any, get_args

import pytest

from reltag.core.config import TaggerConfig
from reltag.core.result import Err, Ok
from reltag.git.repository import GitError, PushedRef, PushReport
from reltag.output.console import MockConsole
from reltag.tagging import workflow
from reltag.tagging.model import ObtainedRepository, Stage
from reltag.tagging.workflow import run_tagging
from reltag.test.tagging._fakes import FakeRepository, tags


def _config(key_path: Path, local_path: Path) -> TaggerConfig:
    return TaggerConfig.from_values(
        {
            "remote_url": "git@github.com:lcostea/sample-controller-workshop.git",
            "local_path": local_path,
            "signer_name": "Jane Doe",
            "signer_email": "jane@example.com",
            "marker_name": "v0.1.0",
            "key_path": key_path,
        }
    ).unwrap()


class Harness:
    """Replaces repository acquisition with a FakeRepository."""

    def __init__(self, repo: FakeRepository, outcome: str = "fetched") -> None:
        self.repo = repo
        self.outcome = outcome
        self.obtain_calls: list[dict[str, Any]] = []

    def obtain(self, **kwargs: Any) -> Any:
        self.obtain_calls.append(kwargs)
        return Ok(ObtainedRepository(repository=self.repo, outcome=self.outcome))  # type: ignore[arg-type]


@pytest.fixture
def harness(monkeypatch: pytest.MonkeyPatch) -> Harness:
    new_tag = PushedRef("*", "refs/tags/v0.1.0", "refs/tags/v0.1.0", "[new tag]")
    h = Harness(FakeRepository(tags=tags("v0.0.9"), push_result=Ok(PushReport(refs=(new_tag,)))))
    monkeypatch.setattr(workflow, "obtain_repository", h.obtain)
    return h


def test_creates_and_pushes(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    console = MockConsole()

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=console)

    assert isinstance(result, Ok)
    report = result.value
    assert report.stage == "pushed"
    assert report.created is True
    assert report.marker_existed is False
    assert report.published == "pushed"
    assert report.obtain == "fetched"
    created = harness.repo.created[0]
    assert created.name == "v0.1.0"
    assert created.message == "v0.1.0"
    assert (created.tagger.name, created.tagger.email) == ("Jane Doe", "jane@example.com")
    assert harness.repo.pushes == [("origin", ["refs/tags/*:refs/tags/*"])]
    assert console.find("created tag v0.1.0")


def test_existing_tag_stops_without_push(
    ssh_key: Path, tmp_path: Path, harness: Harness
) -> None:
    harness.repo.tags = tags("v0.1.0")
    harness.outcome = "reused"
    console = MockConsole()

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=console)

    assert isinstance(result, Ok)
    assert result.value.stage == "marker_exists"
    assert result.value.marker_existed is True
    assert result.value.created is False
    assert result.value.obtain == "reused"
    assert harness.repo.created == []
    assert harness.repo.pushes == []


def test_missing_key_halts_before_clone(tmp_path: Path, harness: Harness) -> None:
    result = run_tagging(_config(tmp_path / "absent", tmp_path / "wc"), console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "key_unreadable"
    assert harness.obtain_calls == []
    assert harness.repo.pushes == []


def test_dry_run_creates_nothing(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    console = MockConsole()

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=console, dry_run=True)

    assert isinstance(result, Ok)
    assert result.value.stage == "repo_ready"
    assert result.value.dry_run is True
    assert harness.repo.created == []
    assert harness.repo.pushes == []
    assert console.find("dry run")


def test_obtain_failure_propagates(
    ssh_key: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from reltag.tagging.errors import TaggingError

    error = TaggingError(kind="network_failure", message="clone x: remote unreachable")
    monkeypatch.setattr(workflow, "obtain_repository", lambda **_: Err(error))

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=MockConsole())

    assert result == Err(error)


def test_creation_failure_skips_push(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    harness.repo.create_error = GitError(command="tag", message="fatal: cannot lock ref")

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "creation_failure"
    assert harness.repo.pushes == []


def test_push_failure_keeps_local_tag(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    harness.repo.push_result = Err(
        GitError(command="push", message="Permission denied (publickey).", returncode=128)
    )

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "auth_failure"
    assert [t.name for t in harness.repo.tags] == ["v0.0.9", "v0.1.0"]


def test_rerun_after_push_failure_stops_at_existing_tag(
    ssh_key: Path, tmp_path: Path, harness: Harness
) -> None:
    harness.repo.push_result = Err(
        GitError(command="push", message="Permission denied (publickey).", returncode=128)
    )
    config = _config(ssh_key, tmp_path / "wc")
    first = run_tagging(config, console=MockConsole())
    assert isinstance(first, Err)

    harness.repo.push_result = Ok(PushReport())
    second = run_tagging(config, console=MockConsole())

    # the local tag is found again; nothing retries the push
    assert isinstance(second, Ok)
    assert second.value.stage == "marker_exists"
    assert len(harness.repo.pushes) == 1
    assert len(harness.repo.created) == 1


def test_up_to_date_remote(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    harness.repo.push_result = Ok(PushReport())

    result = run_tagging(_config(ssh_key, tmp_path / "wc"), console=MockConsole())

    assert isinstance(result, Ok)
    assert result.value.published == "up_to_date"


def test_stages_reported(ssh_key: Path, tmp_path: Path, harness: Harness) -> None:
    config = _config(ssh_key, tmp_path / "wc")

    dry = run_tagging(config, console=MockConsole(), dry_run=True).unwrap()
    pushed = run_tagging(config, console=MockConsole()).unwrap()
    existing = run_tagging(config, console=MockConsole()).unwrap()

    assert (dry.stage, existing.stage, pushed.stage) == (
        "repo_ready",
        "marker_exists",
        "pushed",
    )
    assert set(get_args(Stage)) == {dry.stage, existing.stage, pushed.stage}
