"""Wit.ai Bot Engine client."""

import httpx

from ..actions import ActionRegistry
from ..errors import EngineError
from ..logging_config import get_logger
from ..models import Context, EngineStep
from ..tracker import ITracker
from .base import DEFAULT_MAX_STEPS, BaseDialogueEngine, parse_step

logger = get_logger(__name__)

WIT_API_URL = "https://api.wit.ai"
WIT_API_VERSION = "20160526"


class WitEngine(BaseDialogueEngine):
    """Steps come from Wit.ai's /converse endpoint."""

    actor = "wit_engine"

    def __init__(
        self,
        access_token: str,
        actions: ActionRegistry,
        client: httpx.AsyncClient,
        tracker: ITracker | None = None,
        max_steps: int = DEFAULT_MAX_STEPS,
        base_url: str = WIT_API_URL,
        api_version: str = WIT_API_VERSION,
    ):
        if not access_token:
            raise ValueError("missing WIT_TOKEN")
        super().__init__(actions, tracker=tracker, max_steps=max_steps)
        self._access_token = access_token
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version

    async def converse(
        self,
        session_id: str,
        message: str | None,
        context: Context,
    ) -> EngineStep:
        params = {"v": self._api_version, "session_id": session_id}
        if message:
            params["q"] = message

        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": f"application/vnd.wit.{self._api_version}+json",
        }

        try:
            response = await self._client.post(
                f"{self._base_url}/converse",
                params=params,
                json=context.to_dict(),
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise EngineError(f"Wit.ai request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise EngineError(f"Wit.ai returned {response.status_code} with a non-JSON body") from e

        if response.status_code != 200 or (isinstance(payload, dict) and "error" in payload):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise EngineError(f"Wit.ai error ({response.status_code}): {error}")

        logger.debug("Wit.ai step for %s: %s", session_id, payload)
        return parse_step(payload)
