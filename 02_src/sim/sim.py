"""SIM implementation - scripted Messenger users for local testing."""

import asyncio
import json
import random
import time
from typing import Protocol

import httpx

from nestbot.logging_config import get_logger
from nestbot.messenger.security import sign

logger = get_logger(__name__)

VIRTUAL_USERS = ["sim_user_001", "sim_user_002", "sim_user_003"]

MESSAGES_PER_USER = [
    ["Hi!", "How's weather in Chicago?", "Thanks!"],
    ["Give me the top news", "Next one", "And the next"],
    ["What's on Hacker News?", "next", "Weather?"],
]


class ISim(Protocol):
    """Generate webhook traffic against a running server."""

    async def start(self) -> None:
        """Start scripted scenario."""
        ...

    @property
    def running(self) -> bool:
        """Whether a scenario is in progress."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


def build_payload(sender_id: str, text: str, page_id: str = "sim_page") -> dict:
    """Messenger webhook body carrying a single text message."""
    now = int(time.time() * 1000)
    return {
        "object": "page",
        "entry": [
            {
                "id": page_id,
                "time": now,
                "messaging": [
                    {
                        "sender": {"id": sender_id},
                        "recipient": {"id": page_id},
                        "timestamp": now,
                        "message": {"mid": f"mid.{now}.{sender_id}", "text": text},
                    }
                ],
            }
        ],
    }


class Sim:
    """Posts signed Messenger payloads to the webhook."""

    def __init__(
        self,
        api_url: str = "http://localhost:3000",
        app_secret: str | None = None,
        delay_range: tuple[float, float] = (1.0, 3.0),
    ):
        self._api_url = api_url
        self._app_secret = app_secret
        self._delay_range = delay_range
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start scripted scenario."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient()
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client:
            await self._client.aclose()
            self._client = None

    async def _run_scenario(self) -> None:
        try:
            rounds = max(len(m) for m in MESSAGES_PER_USER)
            for i in range(rounds):
                if not self._running:
                    break

                for user_id, messages in zip(VIRTUAL_USERS, MESSAGES_PER_USER):
                    if not self._running:
                        break
                    if i < len(messages):
                        await self.send_message(user_id, messages[i])
                        await asyncio.sleep(random.uniform(*self._delay_range))

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    async def send_message(self, user_id: str, text: str) -> int | None:
        """Post one signed text message; returns the HTTP status or None on failure."""
        if not self._client:
            return None

        body = json.dumps(build_payload(user_id, text)).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._app_secret:
            headers["X-Hub-Signature"] = sign(body, self._app_secret)

        try:
            response = await self._client.post(
                f"{self._api_url}/webhook",
                content=body,
                headers=headers,
                timeout=10.0,
            )
        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send message: %s", e)
            return None

        if response.status_code == 200:
            logger.info("SIM: %s -> %s", user_id, text)
        else:
            logger.error("SIM: Error sending message: %s", response.status_code)
        return response.status_code
