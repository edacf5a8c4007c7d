"""API client for the support chat HTTP API."""

import logging

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class ChatAPIError(Exception):
    """The server answered with an error body or could not be reached."""


class ChatAPIClient:
    """Client for the ``/api/chat`` and conversation endpoints."""

    def __init__(self, config: CLIConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.client = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def send(self, message: str, conversation_id: str | None = None) -> dict:
        """Send one message; returns the camelCase reply body."""
        payload: dict[str, str] = {"message": message}
        if conversation_id:
            payload["conversationId"] = conversation_id
        logger.debug("POST %s %s", self.config.chat_url, payload)
        return await self._request("POST", self.config.chat_url, json=payload)

    async def history(self, conversation_id: str) -> list[dict]:
        """Full transcript of a conversation, oldest first."""
        return await self._request("GET", self.config.messages_url(conversation_id))

    async def _request(self, method: str, url: str, **kwargs):
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ChatAPIError("Request timed out.") from e
        except httpx.TransportError as e:
            raise ChatAPIError(f"Connection error: {e}") from e

        logger.debug("Response status: %s", response.status_code)
        if response.is_error:
            raise ChatAPIError(
                f"HTTP {response.status_code}: {_error_message(response)}"
            )
        return response.json()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.text
