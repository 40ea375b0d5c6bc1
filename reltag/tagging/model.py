from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from reltag.git.repository import Repository

# How the working copy was obtained: cloned now, or already on disk.
ObtainOutcome = Literal["fetched", "reused"]

# What the tag push did: sent new refs, or found the remote already current.
PublishOutcome = Literal["pushed", "up_to_date"]

# Where a successful run ended: repo_ready (dry run), marker_exists or pushed.
# Failed runs return a TaggingError instead.
Stage = Literal["repo_ready", "marker_exists", "pushed"]

TAGS_REFSPEC = "refs/tags/*:refs/tags/*"


@dataclass(frozen=True, slots=True)
class ObtainedRepository:
    repository: Repository
    outcome: ObtainOutcome

    @property
    def already_existed(self) -> bool:
        return self.outcome == "reused"


@dataclass(frozen=True, slots=True)
class TaggingReport:
    """Summary of a completed run."""

    stage: Stage
    marker: str
    obtain: ObtainOutcome
    marker_existed: bool
    created: bool
    published: PublishOutcome | None = None
    dry_run: bool = False
