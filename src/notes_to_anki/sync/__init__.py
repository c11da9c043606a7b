"""Note projection, tag filtering and the sync orchestrator."""

from .field_projector import format_property_value, project_fields, resolve_identity
from .orchestrator import NoteSyncOrchestrator
from .tag_filter import should_sync

__all__ = [
    "NoteSyncOrchestrator",
    "format_property_value",
    "project_fields",
    "resolve_identity",
    "should_sync",
]
