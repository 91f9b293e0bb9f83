"""Messenger Send API client (outbound gateway)."""

from typing import Protocol

import httpx

from ..errors import DeliveryError
from ..logging_config import get_logger

logger = get_logger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"
GRAPH_API_VERSION = "v18.0"


class IMessengerClient(Protocol):
    """Deliver text to a Messenger user."""

    async def send_text(self, recipient_id: str, text: str) -> dict:
        """Send text to recipient_id, returning the platform's reply."""
        ...


class MessengerClient:
    """Sends text replies through the Messenger Send API. No retries."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        page_token: str,
        base_url: str = GRAPH_API_URL,
        api_version: str = GRAPH_API_VERSION,
    ):
        self._client = client
        self._page_token = page_token
        self._endpoint = f"{base_url.rstrip('/')}/{api_version}/me/messages"

    async def send_text(self, recipient_id: str, text: str) -> dict:
        """Send text to recipient_id.

        Raises:
            DeliveryError: transport failure, non-JSON reply or an error
                envelope in the reply.
        """
        payload = {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
        }

        try:
            response = await self._client.post(
                self._endpoint,
                params={"access_token": self._page_token},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"HTTP request failed: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise DeliveryError(
                f"Send API returned {response.status_code} with a non-JSON body"
            ) from e

        error = result.get("error") if isinstance(result, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise DeliveryError(message or f"Send API returned {response.status_code}")

        logger.info(
            "Message sent to %s",
            recipient_id,
            extra={"context": {"recipient_id": recipient_id, "message_id": result.get("message_id")}},
        )
        return result
