"""Test fixtures package."""

from .fake_anki_connect import FakeAnkiConnect

__all__ = ["FakeAnkiConnect"]
