"""AnkiConnect client and services."""

from .client import AnkiClient

__all__ = ["AnkiClient"]
