"""Shared pieces of the external data fetchers."""

from typing import Any, Protocol

import httpx

from ..errors import FetcherError
from ..logging_config import get_logger

logger = get_logger(__name__)


class IFetcher(Protocol):
    """Fetch data for a query and return a one-line summary."""

    async def fetch(self, query: Any) -> str:
        """Return a summary string for query."""
        ...


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET url and decode the JSON body.

    Raises:
        FetcherError: transport failure, non-200 status or invalid JSON.
    """
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        raise FetcherError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        logger.error(
            "Provider returned %s for %s",
            response.status_code,
            url,
            extra={"context": {"status_code": response.status_code, "body": response.text[:200]}},
        )
        raise FetcherError(f"{url} returned {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise FetcherError(f"{url} returned invalid JSON") from e
