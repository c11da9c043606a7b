"""Interface for HTTP communication with AnkiConnect."""

from abc import ABC, abstractmethod
from typing import Any


class IAnkiHttpClient(ABC):
    """Interface for the AnkiConnect transport.

    Every call is one awaited round trip; a failed round trip of any kind
    surfaces as ``AnkiConnectError``.
    """

    @abstractmethod
    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """Invoke an AnkiConnect action.

        Args:
            action: Action name
            params: Action parameters

        Returns:
            Action result

        Raises:
            AnkiConnectError: If the action fails
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release transport resources."""
