"""Sync command implementation logic."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape
from rich.table import Table

from notes_to_anki.anki.client import AnkiClient
from notes_to_anki.config import SyncConfig
from notes_to_anki.exceptions import NotesToAnkiError
from notes_to_anki.models import (
    BulkSyncResult,
    EnsureOutcome,
    PreparationReport,
    SyncOutcome,
)
from notes_to_anki.obsidian.frontmatter_writer import write_identity
from notes_to_anki.obsidian.vault import VaultNote, load_note, load_vault
from notes_to_anki.sync.field_projector import resolve_identity
from notes_to_anki.sync.orchestrator import NoteSyncOrchestrator
from notes_to_anki.utils.guid import new_guid

from .shared import InterruptFlag, console, exit_with_error


def _warn_skipped_targets(config: SyncConfig, report: PreparationReport) -> None:
    if report.model is EnsureOutcome.SKIPPED:
        console.print(
            f"[yellow]WARN[/yellow] Note type {escape(config.note_type_name)} "
            "not found and automatic creation is disabled"
        )
    if report.deck is EnsureOutcome.SKIPPED:
        console.print(
            f"[yellow]WARN[/yellow] Deck {escape(config.deck_name)} "
            "not found and automatic creation is disabled"
        )


def assign_identity(config: SyncConfig, note: VaultNote, logger: Any) -> VaultNote:
    """Give a note without identity a fresh token, written to its frontmatter."""
    if note.identity(config.guid_property) is not None:
        return note
    token = new_guid()
    write_identity(note.path, config.guid_property, token)
    logger.debug("identity_assigned", file=str(note.path), value=token)
    return load_note(note.path)


async def _sync_note(config: SyncConfig, note: VaultNote) -> SyncOutcome:
    async with AnkiClient.from_config(config) as anki:
        orchestrator = NoteSyncOrchestrator(anki, config)
        report = await orchestrator.prepare()
        _warn_skipped_targets(config, report)
        return await orchestrator.sync_one(note)


def run_sync_note(
    config: SyncConfig,
    logger: Any,
    note_path: Path,
    assign_guid: bool = False,
) -> None:
    """Sync a single note file.

    Raises:
        typer.Exit: When the note cannot be read, has no identity or fails to sync
    """
    try:
        note = load_note(note_path)
        if assign_guid:
            note = assign_identity(config, note, logger)
        # Fail on a missing identity before touching AnkiConnect
        resolve_identity(note, config)
        outcome = asyncio.run(_sync_note(config, note))
    except NotesToAnkiError as e:
        exit_with_error(e, logger)

    verb = "Created" if outcome is SyncOutcome.CREATED else "Updated"
    console.print(f"[green]{verb}[/green] Anki note for {escape(note.name)}")


async def _sync_tags(
    config: SyncConfig,
    notes: list[VaultNote],
    should_cancel: Callable[[], bool],
) -> BulkSyncResult:
    async with AnkiClient.from_config(config) as anki:
        orchestrator = NoteSyncOrchestrator(anki, config)
        report = await orchestrator.prepare()
        _warn_skipped_targets(config, report)
        return await orchestrator.sync_by_tags(notes, should_cancel=should_cancel)


def print_bulk_result(result: BulkSyncResult) -> None:
    table = Table(title="Sync Summary", show_header=True, header_style="bold magenta")
    table.add_column("Result", style="cyan")
    table.add_column("Count", style="green")
    table.add_row("Matched", str(result.matched))
    table.add_row("Created", str(result.created))
    table.add_row("Updated", str(result.updated))
    table.add_row("Skipped (no identity)", str(result.skipped))
    table.add_row("Failed", str(result.failed))
    console.print(table)

    for failed in result.failed_notes:
        console.print(f"  [red]FAILED[/red] {escape(failed)}")


def run_sync_tags(config: SyncConfig, logger: Any) -> None:
    """Sync every vault note passing the tag filter.

    Raises:
        typer.Exit: On setup failure, or with code 1 when any note failed
    """
    logger.info(
        "bulk_sync_started",
        vault=str(config.vault_path),
        include=config.include_tags,
        exclude=config.exclude_tags,
    )
    notes = load_vault(config.vault_path)
    interrupt = InterruptFlag()

    try:
        with interrupt.installed():
            result = asyncio.run(_sync_tags(config, notes, interrupt.is_set))
    except NotesToAnkiError as e:
        exit_with_error(e, logger)

    print_bulk_result(result)
    console.print(f"\n[bold]{escape(result.summary())}[/bold]")

    if result.failed:
        raise typer.Exit(code=1)
    if result.cancelled:
        raise typer.Exit(code=130)
