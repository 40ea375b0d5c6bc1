from __future__ import annotations

from pathlib import Path

import pytest

from reltag.platform.paths import clear_caches
from reltag.test._keys import openssh_key_text, write_key


@pytest.fixture
def ssh_key(tmp_path: Path) -> Path:
    """An unencrypted OpenSSH private key file with 0600 permissions."""
    return write_key(tmp_path / "id_test", openssh_key_text())


@pytest.fixture(autouse=True)
def _reset_path_caches() -> None:
    clear_caches()
