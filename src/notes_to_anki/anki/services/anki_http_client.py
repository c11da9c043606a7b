"""HTTP client for AnkiConnect API communication."""

from types import TracebackType
from typing import Any, Literal

import httpx

from notes_to_anki.domain.interfaces.anki_http_client import IAnkiHttpClient
from notes_to_anki.error_codes import ErrorCode
from notes_to_anki.exceptions import AnkiConnectError
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)

ANKI_CONNECT_VERSION = 6


class AnkiHttpClient(IAnkiHttpClient):
    """HTTP client for communicating with AnkiConnect API.

    Each ``invoke`` is a single awaited POST. There are no retries: a
    transport failure, a non-success status, a malformed body or an error
    payload all raise ``AnkiConnectError`` and the caller decides what to do.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            url: AnkiConnect URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.debug("anki_http_client_initialized", url=url, timeout=timeout)

    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """
        Invoke AnkiConnect action.

        Args:
            action: Action name
            params: Action parameters

        Returns:
            Action result

        Raises:
            AnkiConnectError: If the action fails
        """
        payload = {
            "action": action,
            "version": ANKI_CONNECT_VERSION,
            "params": params or {},
        }

        logger.debug("anki_invoke", action=action)

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            msg = f"Connection error to AnkiConnect: {e}"
            raise AnkiConnectError(
                msg,
                suggestion=(
                    "Ensure Anki is running with the AnkiConnect addon enabled. "
                    f"Verify URL is correct: {self.url}."
                ),
                error_code=ErrorCode.ANK_CONNECTION_FAILED.value,
                context={"action": action, "url": self.url},
            ) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from AnkiConnect"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_HTTP_STATUS.value,
                context={"action": action, "status": e.response.status_code},
            ) from e
        except (httpx.InvalidURL, ValueError) as e:
            msg = f"Invalid AnkiConnect URL {self.url!r}: {e}"
            raise AnkiConnectError(
                msg,
                suggestion="Set anki_connect_url to a URL like http://127.0.0.1:8765.",
                error_code=ErrorCode.ANK_CONNECTION_FAILED.value,
                context={"action": action, "url": self.url},
            ) from e
        except httpx.HTTPError as e:
            msg = f"HTTP error calling AnkiConnect: {e}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_CONNECTION_FAILED.value,
                context={"action": action},
            ) from e

        try:
            result = response.json()
        except ValueError as e:
            msg = f"Invalid JSON response: {e}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_BAD_RESPONSE.value,
                context={"action": action},
            ) from e

        if not isinstance(result, dict):
            msg = f"Invalid response type: expected dict, got {type(result).__name__}"
            raise AnkiConnectError(
                msg,
                error_code=ErrorCode.ANK_BAD_RESPONSE.value,
                context={"action": action},
            )

        if "error" not in result and "result" not in result:
            msg = f"Malformed response: missing error/result fields in {result}"
            raise AnkiConnectError(
                msg,
                suggestion="Check that the URL points at AnkiConnect and not another service.",
                error_code=ErrorCode.ANK_BAD_RESPONSE.value,
                context={"action": action},
            )

        if result.get("error") is not None:
            error_msg = str(result["error"])
            raise AnkiConnectError(
                f"AnkiConnect error: {error_msg}",
                context={"action": action, "anki_error": error_msg},
            )

        return result.get("result")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("anki_http_client_closed", url=self.url)

    async def __aenter__(self) -> "AnkiHttpClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        """Async context manager exit with cleanup."""
        await self.aclose()
        return False
