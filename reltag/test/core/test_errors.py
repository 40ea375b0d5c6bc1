"""Tests for reltag.core.errors module."""

from __future__ import annotations

from reltag.core.errors import ErrorCode


class TestErrorCode:
    def test_values_are_stable(self) -> None:
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.AUTH_ERROR == 2
        assert ErrorCode.NETWORK_ERROR == 3
        assert ErrorCode.REPO_ERROR == 4
        assert ErrorCode.PUBLISH_ERROR == 5

    def test_str(self) -> None:
        assert str(ErrorCode.NETWORK_ERROR) == "network error"
        assert str(ErrorCode.OK) == "ok"

    def test_success_flags(self) -> None:
        assert ErrorCode.OK.is_success is True
        assert ErrorCode.OK.is_error is False
        assert ErrorCode.AUTH_ERROR.is_success is False
        assert ErrorCode.AUTH_ERROR.is_error is True
