"""Idempotent release tagging workflow."""

from reltag.tagging.errors import TaggingError, TaggingErrorKind
from reltag.tagging.markers import create_marker_if_absent, marker_exists
from reltag.tagging.model import (
    TAGS_REFSPEC,
    ObtainedRepository,
    ObtainOutcome,
    PublishOutcome,
    Stage,
    TaggingReport,
)
from reltag.tagging.publisher import publish_markers
from reltag.tagging.source import obtain_repository
from reltag.tagging.workflow import run_tagging

__all__ = [
    "TAGS_REFSPEC",
    "ObtainOutcome",
    "ObtainedRepository",
    "PublishOutcome",
    "Stage",
    "TaggingError",
    "TaggingErrorKind",
    "TaggingReport",
    "create_marker_if_absent",
    "marker_exists",
    "obtain_repository",
    "publish_markers",
    "run_tagging",
]
