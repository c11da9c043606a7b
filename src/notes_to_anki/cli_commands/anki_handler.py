"""AnkiConnect command implementation logic."""

from __future__ import annotations

import asyncio
from typing import Any

from rich.markup import escape

from notes_to_anki.anki.client import AnkiClient
from notes_to_anki.config import SyncConfig
from notes_to_anki.exceptions import NotesToAnkiError
from notes_to_anki.models import EnsureOutcome

from .shared import console, exit_with_error

_OUTCOME_STYLES = {
    EnsureOutcome.CREATED: "green",
    EnsureOutcome.UPDATED: "cyan",
    EnsureOutcome.UNCHANGED: "dim",
    EnsureOutcome.SKIPPED: "yellow",
}


def print_outcome(kind: str, name: str, outcome: EnsureOutcome) -> None:
    style = _OUTCOME_STYLES[outcome]
    console.print(f"{kind} [bold]{escape(name)}[/bold]: [{style}]{outcome.value}[/{style}]")
    if outcome is EnsureOutcome.SKIPPED:
        console.print(
            f"  [dim]TIP: Create the {kind.lower()} in Anki or enable automatic creation.[/dim]"
        )


async def _check(config: SyncConfig) -> tuple[int, list[str], list[str]]:
    async with AnkiClient.from_config(config) as anki:
        version = await anki.get_version()
        decks = await anki.get_deck_names()
        models = await anki.get_model_names()
    return version, decks, models


def run_check(config: SyncConfig, logger: Any) -> None:
    """Check that AnkiConnect answers and report the configured targets."""
    logger.info("check_started", url=config.anki_connect_url)
    try:
        version, decks, models = asyncio.run(_check(config))
    except NotesToAnkiError as e:
        exit_with_error(e, logger)

    console.print(
        f"[green]PASS[/green] AnkiConnect at {config.anki_connect_url} "
        f"(API version {version})"
    )
    for kind, name, existing in (
        ("Deck", config.deck_name, decks),
        ("Note type", config.note_type_name, models),
    ):
        if name in existing:
            console.print(f"[green]PASS[/green] {kind} [bold]{escape(name)}[/bold] exists")
        else:
            console.print(
                f"[yellow]WARN[/yellow] {kind} [bold]{escape(name)}[/bold] does not exist yet"
            )


async def _ensure_deck(config: SyncConfig) -> EnsureOutcome:
    async with AnkiClient.from_config(config) as anki:
        return await anki.ensure_deck(
            config.deck_name, config.create_deck_if_not_found
        )


def run_ensure_deck(config: SyncConfig, logger: Any) -> None:
    """Create the configured deck when it is missing and creation is allowed."""
    try:
        outcome = asyncio.run(_ensure_deck(config))
    except NotesToAnkiError as e:
        exit_with_error(e, logger)
    print_outcome("Deck", config.deck_name, outcome)


async def _ensure_model(config: SyncConfig) -> EnsureOutcome:
    async with AnkiClient.from_config(config) as anki:
        return await anki.ensure_model(
            config.note_type_name,
            config.desired_fields,
            config.create_note_type_if_not_found,
        )


def run_ensure_model(config: SyncConfig, logger: Any) -> None:
    """Create the configured note type or converge its fields."""
    try:
        outcome = asyncio.run(_ensure_model(config))
    except NotesToAnkiError as e:
        exit_with_error(e, logger)
    print_outcome("Note type", config.note_type_name, outcome)
    console.print(f"  Fields: {', '.join(config.desired_fields)}", markup=False)
