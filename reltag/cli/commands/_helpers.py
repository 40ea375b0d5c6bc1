"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from reltag.core.config import TaggerConfig, load_config, resolve_config_path
from reltag.core.errors import ErrorCode
from reltag.core.result import Err, Result
from reltag.output.console import Style

if TYPE_CHECKING:
    from reltag.cli.context import CLIContext


T = TypeVar("T")
E = TypeVar("E")


def report_error(error: object, ctx: CLIContext) -> None:
    """Print `error: <message>` and a dimmed hint if the error has one.

    Expects error objects with a 'message' and optional 'hint' attribute.
    """
    message: str = getattr(error, "message", str(error))
    hint: str | None = getattr(error, "hint", None)
    ctx.console.error(message)
    if hint:
        ctx.console.print(f"hint: {hint}", Style.DIM)


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Report and exit with `error_code` if result is Err, otherwise return."""
    if isinstance(result, Err):
        report_error(result.error, ctx)
        raise typer.Exit(code=int(error_code))


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def load_tagger_config(
    ctx: CLIContext,
    *,
    config_path: Path | None,
    overrides: Mapping[str, object | None],
) -> TaggerConfig:
    """Resolve the config file, apply CLI overrides, exit with USER_ERROR if invalid."""
    path = resolve_config_path(config_path, cwd=ctx.cwd)
    if path is not None:
        ctx.console.print(f"config: {path}", Style.DIM)

    result = load_config(path, overrides)
    exit_on_error(result, ctx, ErrorCode.USER_ERROR)
    assert not isinstance(result, Err)
    return result.value
