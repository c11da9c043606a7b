"""Domain interfaces."""

from .anki_http_client import IAnkiHttpClient

__all__ = ["IAnkiHttpClient"]
