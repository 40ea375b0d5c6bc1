"""reltag - idempotent release tagging for a single remote repository."""

__version__ = "0.1.0"
