"""Subprocess execution with Result-based error handling.

The only place in reltag that touches `subprocess`. Callers get the captured
stdout on success and a `ProcessError` (with stderr) on failure, so git's
diagnostics are available to classify auth and network problems.

Usage:
    match run(["git", "rev-parse", "HEAD"], cwd=repo_path):
        case Ok(stdout):
            sha = stdout.strip()
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import os
import re
import subprocess
import tempfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from reltag.core.result import Err, Ok, Result

__all__ = ["ProcessError", "TIMEOUT_RETURNCODE", "run", "run_streaming"]

# Return code reported when the process could not be started or timed out.
TIMEOUT_RETURNCODE = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process never completed.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
        timed_out: True if the process was killed after the timeout.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def output(self) -> str:
        """stderr if present, else stdout. git writes most diagnostics to stderr."""
        return self.stderr.strip() or self.stdout.strip()

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.timed_out:
            return f"{cmd_str} timed out"
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout or a ProcessError.

    Args:
        cmd: Command and arguments.
        cwd: Working directory for the command.
        env: Full environment for the child (inherits the current one if None).
        timeout: Maximum seconds to wait (None for no limit).
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=TIMEOUT_RETURNCODE,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
                timed_out=True,
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=TIMEOUT_RETURNCODE,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


_LINE_END = re.compile(rb"[\r\n]")


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    on_stderr: Callable[[str], None],
) -> Result[str, ProcessError]:
    """Execute a command, relaying its stderr line by line while it runs.

    Meant for long network commands (git clone/push with --progress) that run
    without a timeout. stdout is captured as with `run`. Carriage-return
    updates (progress counters) are not relayed; only completed lines are
    passed to `on_stderr` and kept in ProcessError.stderr.
    """
    try:
        with tempfile.TemporaryFile() as out:
            proc = subprocess.Popen(
                cmd,
                cwd=str(cwd),
                env=dict(env) if env is not None else None,
                stdout=out,
                stderr=subprocess.PIPE,
            )
            assert proc.stderr is not None
            with proc.stderr:
                stderr = _relay_lines(proc.stderr, on_stderr)
            returncode = proc.wait()
            out.seek(0)
            stdout = out.read().decode("utf-8", errors="replace")
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=TIMEOUT_RETURNCODE,
                stdout="",
                stderr=str(e),
            )
        )

    if returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=returncode,
                stdout=stdout,
                stderr=stderr,
            )
        )

    return Ok(stdout)


def _relay_lines(stream: IO[bytes], on_line: Callable[[str], None]) -> str:
    lines: list[str] = []
    pending = b""
    for chunk in iter(lambda: os.read(stream.fileno(), 4096), b""):
        pending += chunk
        while (match := _LINE_END.search(pending)) is not None:
            raw, terminator = pending[: match.start()], pending[match.start() : match.end()]
            pending = pending[match.end() :]
            if terminator == b"\r":
                continue
            line = raw.decode("utf-8", errors="replace").rstrip()
            if line:
                lines.append(line)
                on_line(line)
    tail = pending.decode("utf-8", errors="replace").strip()
    if tail:
        lines.append(tail)
        on_line(tail)
    return "\n".join(lines)
