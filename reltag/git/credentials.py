"""SSH key credentials for git transport.

`load_credential` reads a private key once and returns an `SshCredential`
handle. The handle does not hold the key material; it pins the ssh command
git uses for clone and push to that key file and a login name:

    match load_credential(Path("~/.ssh/github_rsa").expanduser()):
        case Ok(credential):
            env = credential.git_env(os.environ)
        case Err(e):
            print(e.kind, e.message)
"""

from __future__ import annotations

import base64
import binascii
import os
import re
import shlex
import struct
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from reltag.core.result import Err, Ok, Result

__all__ = [
    "CredentialError",
    "CredentialErrorKind",
    "SshCredential",
    "load_credential",
]

CredentialErrorKind = Literal["key_unreadable", "key_invalid"]

_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN ([A-Z0-9 ]*PRIVATE KEY)-----\s*(.*?)\s*-----END \1-----",
    re.DOTALL,
)
_OPENSSH_MAGIC = b"openssh-key-v1\x00"


@dataclass(frozen=True, slots=True)
class CredentialError:
    """Error loading an SSH private key.

    Attributes:
        kind: key_unreadable (cannot read the file) or key_invalid (bad content)
        message: What went wrong
        path: Key file involved
        hint: Optional remediation
    """

    kind: CredentialErrorKind
    message: str
    path: Path
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class SshCredential:
    """Authentication handle for git over SSH.

    Attributes:
        key_path: Private key file passed to ssh with -i
        principal: Login name on the remote host (e.g. "git")
        key_type: Key block type, e.g. "OPENSSH PRIVATE KEY"
    """

    key_path: Path
    principal: str
    key_type: str

    def ssh_command(self) -> str:
        """The GIT_SSH_COMMAND value: this key only, never prompt."""
        parts = [
            "ssh",
            "-i",
            str(self.key_path),
            "-l",
            self.principal,
            "-o",
            "IdentitiesOnly=yes",
            "-o",
            "BatchMode=yes",
        ]
        return " ".join(shlex.quote(p) for p in parts)

    def git_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """Environment for an authenticated git child process."""
        env = dict(base)
        env["GIT_SSH_COMMAND"] = self.ssh_command()
        env["GIT_TERMINAL_PROMPT"] = "0"
        return env


def load_credential(
    key_path: Path, principal: str = "git"
) -> Result[SshCredential, CredentialError]:
    """Read and validate a private key.

    Passphrase-protected keys are rejected: runs are non-interactive.

    Returns:
        Ok(SshCredential) on success
        Err(CredentialError) with kind key_unreadable or key_invalid
    """
    try:
        raw = key_path.read_bytes()
    except FileNotFoundError:
        return Err(
            CredentialError(
                kind="key_unreadable",
                message=f"SSH key not found: {key_path}",
                path=key_path,
                hint="Create a deploy key or point auth.key_path / --key at an existing one.",
            )
        )
    except IsADirectoryError:
        return Err(
            CredentialError(
                kind="key_unreadable",
                message=f"SSH key path is a directory: {key_path}",
                path=key_path,
            )
        )
    except PermissionError:
        return Err(
            CredentialError(
                kind="key_unreadable",
                message=f"Permission denied reading SSH key: {key_path}",
                path=key_path,
            )
        )
    except OSError as e:
        return Err(
            CredentialError(
                kind="key_unreadable",
                message=f"Error reading SSH key {key_path}: {e}",
                path=key_path,
            )
        )

    problem = _key_problem(raw)
    if problem is not None:
        message, hint = problem
        return Err(CredentialError(kind="key_invalid", message=message, path=key_path, hint=hint))

    if os.name == "posix" and key_path.stat().st_mode & 0o077:
        return Err(
            CredentialError(
                kind="key_invalid",
                message=f"SSH key is accessible by other users: {key_path}",
                path=key_path,
                hint=f"chmod 600 {key_path}",
            )
        )

    match = _PEM_BLOCK_RE.search(raw.decode("utf-8"))
    assert match is not None
    return Ok(SshCredential(key_path=key_path, principal=principal, key_type=match.group(1)))


def _key_problem(raw: bytes) -> tuple[str, str | None] | None:
    """Return (message, hint) describing why `raw` is unusable, or None."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return ("SSH key is not a text (PEM/OpenSSH) file", None)

    match = _PEM_BLOCK_RE.search(text)
    if match is None:
        return (
            "no private key block found in SSH key file",
            "Expected a '-----BEGIN ... PRIVATE KEY-----' block.",
        )

    key_type, body = match.group(1), match.group(2)
    no_passphrase = "Use a key without a passphrase (ssh-keygen -p -N '')."

    if key_type == "ENCRYPTED PRIVATE KEY" or "Proc-Type: 4,ENCRYPTED" in body:
        return ("SSH key is passphrase-protected", no_passphrase)

    if key_type != "OPENSSH PRIVATE KEY":
        return None

    try:
        payload = base64.b64decode("".join(body.split()), validate=True)
    except (binascii.Error, ValueError):
        return ("OpenSSH key payload is not valid base64", None)

    cipher = _openssh_cipher(payload)
    if cipher is None:
        return ("OpenSSH key payload is malformed", None)
    if cipher != "none":
        return ("SSH key is passphrase-protected", no_passphrase)
    return None


def _openssh_cipher(payload: bytes) -> str | None:
    """Cipher name from an openssh-key-v1 payload ("none" when unencrypted)."""
    if not payload.startswith(_OPENSSH_MAGIC):
        return None
    offset = len(_OPENSSH_MAGIC)
    if len(payload) < offset + 4:
        return None
    (length,) = struct.unpack(">I", payload[offset : offset + 4])
    name = payload[offset + 4 : offset + 4 + length]
    if len(name) != length:
        return None
    return name.decode("ascii", errors="replace")
