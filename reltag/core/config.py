"""Typed configuration for a tagging run.

Values come from an optional TOML file and from CLI overrides (which win).
The result is a frozen `TaggerConfig` passed explicitly into the workflow:

    [remote]
    url = "git@github.com:owner/repo.git"
    name = "origin"

    [checkout]
    path = "/tmp/repo"

    [signer]
    name = "Jane Doe"
    email = "jane@example.com"

    [marker]
    name = "v0.1.0"
    message = "v0.1.0"

    [auth]
    key_path = "~/.ssh/github_rsa"
    principal = "git"

    [run]
    exit_zero_on_error = false
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from reltag.platform.paths import default_checkout_dir, expand_user

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "DEFAULT_KEY_PATH",
    "DEFAULT_PRINCIPAL",
    "DEFAULT_REMOTE_NAME",
    "ConfigError",
    "TaggerConfig",
    "load_config",
    "resolve_config_path",
    "validate_tag_name",
]

CONFIG_ENV_VAR = "RELTAG_CONFIG"
CONFIG_FILE_NAME = "reltag.toml"

DEFAULT_REMOTE_NAME = "origin"
DEFAULT_KEY_PATH = "~/.ssh/github_rsa"
DEFAULT_PRINCIPAL = "git"

# (table, key) in the TOML file for each flat option name.
_FILE_KEYS: dict[str, tuple[str, str]] = {
    "remote_url": ("remote", "url"),
    "remote_name": ("remote", "name"),
    "local_path": ("checkout", "path"),
    "signer_name": ("signer", "name"),
    "signer_email": ("signer", "email"),
    "marker_name": ("marker", "name"),
    "marker_message": ("marker", "message"),
    "key_path": ("auth", "key_path"),
    "principal": ("auth", "principal"),
}

_REQUIRED = ("remote_url", "marker_name", "signer_name", "signer_email")

_TAG_FORBIDDEN = re.compile(r"[\x00-\x20\x7f~^:?*\[\\]")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or is incomplete."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TaggerConfig:
    """Everything a tagging run needs.

    Attributes:
        remote_url: Remote to clone from and push tags to.
        local_path: Working copy location (cloned if absent, reused otherwise).
        signer_name: Tagger name recorded on the annotated tag.
        signer_email: Tagger email recorded on the annotated tag.
        marker_name: Tag to ensure, e.g. "v0.1.0".
        marker_message: Annotation message (defaults to the tag name).
        remote_name: Remote the clone is registered under and pushed to.
        key_path: SSH private key used for clone and push.
        principal: SSH login name on the remote host.
        exit_zero_on_error: Report failures but exit 0 (cron-style runs).
    """

    remote_url: str
    local_path: Path
    signer_name: str
    signer_email: str
    marker_name: str
    marker_message: str
    remote_name: str = DEFAULT_REMOTE_NAME
    key_path: Path = Path(DEFAULT_KEY_PATH)
    principal: str = DEFAULT_PRINCIPAL
    exit_zero_on_error: bool = False

    @classmethod
    def from_values(
        cls, values: Mapping[str, object], *, path: Path | None = None
    ) -> Result[TaggerConfig, ConfigError]:
        """Build and validate a config from flat option values."""

        def text(key: str) -> str | None:
            value = values.get(key)
            if isinstance(value, Path):
                return str(value)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        missing = [key for key in _REQUIRED if text(key) is None]
        if missing:
            return Err(
                ConfigError(
                    f"missing required option(s): {', '.join(missing)}",
                    path=path,
                    hint="Set them in reltag.toml or pass them on the command line.",
                )
            )

        remote_url = text("remote_url") or ""
        marker_name = text("marker_name") or ""
        signer_email = text("signer_email") or ""

        problem = validate_tag_name(marker_name)
        if problem is not None:
            return Err(ConfigError(f"invalid marker name '{marker_name}': {problem}", path=path))

        if "@" not in signer_email:
            return Err(ConfigError(f"invalid signer email: {signer_email}", path=path))

        local = text("local_path")
        exit_zero = values.get("exit_zero_on_error")

        return Ok(
            cls(
                remote_url=remote_url,
                local_path=expand_user(local) if local else default_checkout_dir(remote_url),
                signer_name=text("signer_name") or "",
                signer_email=signer_email,
                marker_name=marker_name,
                marker_message=text("marker_message") or marker_name,
                remote_name=text("remote_name") or DEFAULT_REMOTE_NAME,
                key_path=expand_user(text("key_path") or DEFAULT_KEY_PATH),
                principal=text("principal") or DEFAULT_PRINCIPAL,
                exit_zero_on_error=exit_zero if isinstance(exit_zero, bool) else False,
            )
        )


def validate_tag_name(name: str) -> str | None:
    """Check `name` against git's ref naming rules.

    Returns a description of the first problem, or None if the name is usable
    as `refs/tags/<name>`.
    """
    if not name:
        return "empty"
    if name == "@":
        return "'@' alone is not allowed"
    if name.startswith("-"):
        return "must not start with '-'"
    if _TAG_FORBIDDEN.search(name):
        return "contains whitespace, a control character or one of ~^:?*[\\"
    if ".." in name:
        return "must not contain '..'"
    if "@{" in name:
        return "must not contain '@{'"
    if "//" in name or name.startswith("/") or name.endswith("/"):
        return "empty path component"
    if name.endswith("."):
        return "must not end with '.'"
    for component in name.split("/"):
        if component.startswith("."):
            return "path components must not start with '.'"
        if component.endswith(".lock"):
            return "path components must not end with '.lock'"
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, converting read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data = as_str_dict(tomllib.loads(content.decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except IsADirectoryError:
        return Err(ConfigError(f"Config path is a directory: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _flatten(data: StrDict) -> dict[str, object]:
    values: dict[str, object] = {}
    for option, (table_name, key) in _FILE_KEYS.items():
        table = get_table(data, table_name) or {}
        value = get_str(table, key)
        if value is not None:
            values[option] = value

    run_table = get_table(data, "run") or {}
    exit_zero = get_bool(run_table, "exit_zero_on_error")
    if exit_zero is not None:
        values["exit_zero_on_error"] = exit_zero
    return values


def resolve_config_path(explicit: Path | None, *, cwd: Path) -> Path | None:
    """Pick the config file: explicit path, then $RELTAG_CONFIG, then ./reltag.toml.

    Explicit and environment paths are returned even if missing so that loading
    reports them; the implicit ./reltag.toml is only used when it exists.
    """
    if explicit is not None:
        return expand_user(explicit)

    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return expand_user(env)

    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def load_config(
    path: Path | None,
    overrides: Mapping[str, object | None] | None = None,
) -> Result[TaggerConfig, ConfigError]:
    """Load a TaggerConfig from an optional TOML file plus overrides.

    Args:
        path: TOML file to read, or None to use overrides only.
        overrides: Flat option values (None entries are ignored).

    Returns:
        Ok(TaggerConfig) on success, Err(ConfigError) on failure
    """
    values: dict[str, object] = {}
    if path is not None:
        parsed = _parse_toml(path)
        if isinstance(parsed, Err):
            return parsed
        values.update(_flatten(parsed.value))

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    return TaggerConfig.from_values(values, path=path)
