"""Tests for tagging/markers.py."""

from __future__ import annotations

from typing import Any

from reltag.core.result import Err, Ok
from reltag.git.repository import GitError, Signature, TagRef
from reltag.output.console import MockConsole
from reltag.tagging.markers import create_marker_if_absent, marker_exists
from reltag.test.tagging._fakes import FakeRepository, tags

SIGNER = Signature.now("Jane Doe", "jane@example.com")


def _repo(**kwargs: Any) -> Any:
    return FakeRepository(**kwargs)


class TestMarkerExists:
    def test_absent(self) -> None:
        assert marker_exists(_repo(tags=tags("v0.0.9")), "v0.1.0") == Ok(False)

    def test_present(self) -> None:
        assert marker_exists(_repo(tags=tags("v0.0.9", "v0.1.0")), "v0.1.0") == Ok(True)

    def test_no_tags(self) -> None:
        assert marker_exists(_repo(), "v0.1.0") == Ok(False)

    def test_exact_match_only(self) -> None:
        repo = _repo(tags=tags("v0.1.0-rc1", "release/v0.1.0", "V0.1.0"))
        assert marker_exists(repo, "v0.1.0") == Ok(False)

    def test_lightweight_tag_counts(self) -> None:
        repo = _repo(tags=[TagRef(name="v0.1.0", object_type="commit")])
        assert marker_exists(repo, "v0.1.0") == Ok(True)

    def test_enumeration_failure(self) -> None:
        repo = _repo(list_error=GitError(command="for-each-ref", message="fatal: bad object"))

        result = marker_exists(repo, "v0.1.0")

        assert isinstance(result, Err)
        assert result.error.kind == "enumeration_failure"
        assert result.error.hint == "fatal: bad object"


class TestCreateMarkerIfAbsent:
    def test_creates_at_head(self) -> None:
        repo = _repo(tags=tags("v0.0.9"))
        console = MockConsole()

        result = create_marker_if_absent(repo, "v0.1.0", SIGNER, "v0.1.0", console=console)

        assert result == Ok(True)
        assert len(repo.created) == 1
        created = repo.created[0]
        assert created.name == "v0.1.0"
        assert created.target == repo.head
        assert created.tagger == SIGNER
        assert created.message == "v0.1.0"
        assert console.find("git tag --annotate v0.1.0 0123456789ab")

    def test_already_present_is_not_an_error(self) -> None:
        repo = _repo(tags=tags("v0.1.0"))
        console = MockConsole()

        result = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m", console=console)

        assert result == Ok(False)
        assert repo.created == []
        assert console.find("already exists")

    def test_rechecks_existence(self) -> None:
        repo = _repo()

        create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")

        assert repo.list_calls == 1

    def test_second_call_is_a_no_op(self) -> None:
        repo = _repo()

        first = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")
        second = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")

        assert first == Ok(True)
        assert second == Ok(False)
        assert len(repo.created) == 1

    def test_head_unresolvable(self) -> None:
        repo = _repo(head=None)

        result = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")

        assert isinstance(result, Err)
        assert result.error.kind == "head_unresolvable"
        assert repo.created == []

    def test_creation_failure(self) -> None:
        repo = _repo(create_error=GitError(command="tag", message="fatal: cannot lock ref"))

        result = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")

        assert isinstance(result, Err)
        assert result.error.kind == "creation_failure"
        assert result.error.hint == "fatal: cannot lock ref"

    def test_enumeration_failure_propagates(self) -> None:
        repo = _repo(list_error=GitError(command="for-each-ref", message="boom"))

        result = create_marker_if_absent(repo, "v0.1.0", SIGNER, "m")

        assert isinstance(result, Err)
        assert result.error.kind == "enumeration_failure"
