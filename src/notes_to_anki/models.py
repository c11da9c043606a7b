"""Data models shared by the sync components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Ordered field name -> field value; insertion order is the Anki field order.
FieldMapping = dict[str, str]


class SyncOutcome(str, Enum):
    """Which branch a single-note sync took."""

    CREATED = "created"
    UPDATED = "updated"


class EnsureOutcome(str, Enum):
    """Result of reconciling a deck or note type with Anki."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ProjectedFields:
    """Fields projected from one note plus the callouts that were not found."""

    fields: FieldMapping
    missing_callouts: list[str] = field(default_factory=list)


@dataclass
class BulkSyncResult:
    """Aggregate counts of a tag-filtered bulk sync."""

    matched: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    failed_notes: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.created + self.updated

    def record(self, outcome: SyncOutcome) -> None:
        if outcome is SyncOutcome.CREATED:
            self.created += 1
        else:
            self.updated += 1

    def summary(self) -> str:
        """Human-readable summary of the run."""
        if self.matched == 0:
            return "Sync complete. No notes matched the tag criteria."

        text = "Sync cancelled." if self.cancelled else "Sync complete."
        if self.created:
            text += f" Created {self.created} notes."
        if self.updated:
            text += f" Updated {self.updated} notes."
        if self.failed:
            text += f" Failed to sync {self.failed} notes."
        return text


@dataclass(frozen=True)
class PreparationReport:
    """Outcome of the checks run before a sync."""

    anki_connect_version: int | None
    model: EnsureOutcome
    deck: EnsureOutcome
