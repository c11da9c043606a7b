"""Single-note and tag-filtered bulk sync of notes into Anki."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from structlog import contextvars as structlog_contextvars

from notes_to_anki.anki.client import AnkiClient
from notes_to_anki.anki.services.anki_note_service import build_identity_query
from notes_to_anki.config_settings import SyncConfig
from notes_to_anki.exceptions import IdentityError, NotesToAnkiError
from notes_to_anki.models import (
    BulkSyncResult,
    PreparationReport,
    SyncOutcome,
)
from notes_to_anki.obsidian.callouts import CalloutRenderer, get_renderer
from notes_to_anki.obsidian.vault import VaultNote
from notes_to_anki.sync.field_projector import project_fields, resolve_identity
from notes_to_anki.sync.tag_filter import should_sync
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)


class NoteSyncOrchestrator:
    """Drives create-or-update of Anki notes from vault notes.

    Every AnkiConnect call is awaited before the next one is made, and notes
    in a bulk sync are processed one after another.
    """

    def __init__(
        self,
        anki: AnkiClient,
        config: SyncConfig,
        renderer: CalloutRenderer | None = None,
    ):
        """
        Initialize orchestrator.

        Args:
            anki: AnkiConnect client
            config: Configuration snapshot used for every operation of this instance
            renderer: Callout renderer; defaults to the one named by
                ``config.callout_format``
        """
        self.anki = anki
        self.config = config
        self.renderer = renderer or get_renderer(config.callout_format)

    async def prepare(self) -> PreparationReport:
        """Check AnkiConnect and reconcile the note type and deck."""
        version = await self.anki.get_version()
        model = await self.anki.ensure_model(
            self.config.note_type_name,
            self.config.desired_fields,
            self.config.create_note_type_if_not_found,
        )
        deck = await self.anki.ensure_deck(
            self.config.deck_name, self.config.create_deck_if_not_found
        )
        return PreparationReport(anki_connect_version=version, model=model, deck=deck)

    async def sync_one(self, note: VaultNote) -> SyncOutcome:
        """Create or update the Anki note matching this note's identity.

        Raises:
            IdentityError: The note has no identity value (nothing is sent to Anki)
            AnkiConnectError: An AnkiConnect call failed
        """
        config = self.config
        identity = resolve_identity(note, config)
        projected = project_fields(note, config, self.renderer)

        query = build_identity_query(config.deck_name, config.guid_property, identity)
        note_ids = await self.anki.find_notes(query)

        if note_ids:
            await self.anki.update_note_fields(note_ids[0], projected.fields)
            outcome = SyncOutcome.UPDATED
            logger.info(
                "note_synced",
                action="updated",
                file=str(note.path),
                note_id=note_ids[0],
                identity=identity,
            )
        else:
            note_id = await self.anki.add_note(
                config.deck_name,
                config.note_type_name,
                projected.fields,
                note.frontmatter_tags,
            )
            outcome = SyncOutcome.CREATED
            logger.info(
                "note_synced",
                action="created",
                file=str(note.path),
                note_id=note_id,
                identity=identity,
            )

        return outcome

    def select_notes(self, notes: Iterable[VaultNote]) -> list[VaultNote]:
        """Keep the notes that pass the include/exclude tag filter."""
        include_tags = self.config.include_tags
        exclude_tags = self.config.exclude_tags
        return [
            note
            for note in notes
            if should_sync(note.resolved_tags, include_tags, exclude_tags)
        ]

    async def sync_by_tags(
        self,
        notes: Iterable[VaultNote],
        should_cancel: Callable[[], bool] | None = None,
    ) -> BulkSyncResult:
        """Sync every note that passes the tag filter.

        Best effort: notes without identity are skipped, other per-note
        failures are counted and logged, and the loop always continues.

        Args:
            notes: Candidate notes
            should_cancel: Checked between notes; returning True stops the run

        Returns:
            Aggregate counts of the run
        """
        selected = self.select_notes(notes)
        result = BulkSyncResult(matched=len(selected))

        for index, note in enumerate(selected):
            if should_cancel is not None and should_cancel():
                result.cancelled = True
                logger.info("bulk_sync_cancelled", remaining=len(selected) - index)
                break

            structlog_contextvars.bind_contextvars(file=str(note.path))
            try:
                result.record(await self.sync_one(note))
            except IdentityError:
                result.skipped += 1
                logger.debug("note_skipped_without_identity")
            except NotesToAnkiError as e:
                result.failed += 1
                result.failed_notes.append(str(note.path))
                logger.error(
                    "note_sync_failed",
                    error=e.message,
                    error_code=e.error_code,
                    error_type=type(e).__name__,
                )
            except Exception as e:
                result.failed += 1
                result.failed_notes.append(str(note.path))
                logger.exception(
                    "note_sync_failed", error=str(e), error_type=type(e).__name__
                )
            finally:
                structlog_contextvars.unbind_contextvars("file")

        logger.info(
            "bulk_sync_completed",
            summary=result.summary(),
            matched=result.matched,
            created=result.created,
            updated=result.updated,
            failed=result.failed,
            skipped=result.skipped,
        )
        return result
