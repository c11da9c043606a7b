"""Pytest configuration and fixtures for the test suite."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from notes_to_anki.anki.client import AnkiClient
from notes_to_anki.config import SyncConfig, reset_config
from notes_to_anki.obsidian.vault import VaultNote, load_note
from tests.fixtures import FakeAnkiConnect


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user settings out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("NOTES_TO_ANKI_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_anki():
    """Provide an empty in-memory AnkiConnect with the default deck."""
    return FakeAnkiConnect()


@pytest.fixture
def anki_client(fake_anki):
    """Provide an AnkiClient talking to the in-memory AnkiConnect."""
    return AnkiClient(fake_anki)


@pytest.fixture
def vault_dir(tmp_path) -> Path:
    """Provide an empty vault directory."""
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


@pytest.fixture
def sync_config(vault_dir) -> SyncConfig:
    """Provide the default configuration pointed at the test vault."""
    return SyncConfig(vault_path=vault_dir)


@pytest.fixture
def write_note(vault_dir) -> Callable[[str, str], VaultNote]:
    """Write a note into the vault and return it loaded."""

    def _write(name: str, content: str) -> VaultNote:
        path = vault_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return load_note(path)

    return _write


@pytest.fixture
def article_note(write_note) -> VaultNote:
    """Provide a fully populated article note."""
    return write_note(
        "paper-x.md",
        """---
citation key: abc123
title: Paper X
authors:
  - A
  - B
journal: Journal of Tests
year: 2021
tags: [papers, ML]
---

# Paper X

> [!summary] Key points
> First finding.
> Second finding.

Body text with #reading tag.
""",
    )
