"""Platform abstraction layer: user paths and subprocess execution."""

from .paths import (
    default_checkout_dir,
    expand_user,
    home,
    repo_name_from_url,
)
from .process import (
    ProcessError,
    run,
)

__all__ = [
    # paths
    "default_checkout_dir",
    "expand_user",
    "home",
    "repo_name_from_url",
    # process
    "ProcessError",
    "run",
]
