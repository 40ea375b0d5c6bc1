"""User-level path helpers.

Resolves the home directory (for `~/.ssh/...` key paths) and the default
location of the working copy when none is configured.
"""

from __future__ import annotations

import os
import sys
import tempfile
from functools import lru_cache
from pathlib import Path

__all__ = [
    "clear_caches",
    "default_checkout_dir",
    "expand_user",
    "home",
    "repo_name_from_url",
]


@lru_cache(maxsize=1)
def home() -> Path:
    """Get the invoking user's home directory.

    Uses USERPROFILE on Windows, HOME elsewhere, then falls back to Path.home().
    """
    var = "USERPROFILE" if sys.platform == "win32" else "HOME"
    value = os.environ.get(var)
    if value:
        return Path(value)
    return Path.home()


def expand_user(path: str | Path) -> Path:
    """Expand a leading `~` against `home()` (not the process-wide cache of os.path)."""
    s = str(path)
    if s == "~":
        return home()
    if s.startswith("~/") or s.startswith("~\\"):
        return home() / s[2:]
    return Path(s)


def repo_name_from_url(url: str) -> str:
    """Last path component of a remote URL without the `.git` suffix.

    Handles scp-like (`git@host:owner/repo.git`), ssh:// and file paths.
    """
    s = url.strip().rstrip("/")
    if s.endswith(".git"):
        s = s[: -len(".git")]
    for sep in ("/", ":", "\\"):
        s = s.rsplit(sep, 1)[-1]
    return s or "repository"


def default_checkout_dir(url: str) -> Path:
    """Working copy location used when none is configured: <tmp>/<repo name>."""
    return Path(tempfile.gettempdir()) / repo_name_from_url(url)


def clear_caches() -> None:
    """Clear cached paths (tests change HOME)."""
    home.cache_clear()
