"""NewsAPI fetcher: source listing and top headline per source."""

import httpx

from ..errors import FetcherError
from ..logging_config import get_logger
from .base import get_json

logger = get_logger(__name__)

NEWS_API_URL = "https://newsapi.org/v2"


class NewsFetcher:
    """Headline summaries from NewsAPI sources."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = NEWS_API_URL,
        language: str = "en",
    ):
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._language = language

    async def fetch(self, query: str) -> str:
        """Return "<description> - <url>" of the first article from source `query`."""
        data = await get_json(
            self._client,
            f"{self._base_url}/top-headlines",
            {"sources": query, "apiKey": self._api_key},
        )
        _raise_for_envelope(data)
        try:
            article = data["articles"][0]
            summary = f"{article['description']} - {article['url']}"
        except (KeyError, IndexError, TypeError) as e:
            raise FetcherError(f"No article for source {query}") from e
        logger.info("Got news: %s", summary)
        return summary

    async def fetch_source_ids(self) -> list[str]:
        """Return the ids of every available source."""
        data = await get_json(
            self._client,
            f"{self._base_url}/top-headlines/sources",
            {"language": self._language, "apiKey": self._api_key},
        )
        _raise_for_envelope(data)
        try:
            source_ids = [source["id"] for source in data["sources"]]
        except (KeyError, TypeError) as e:
            raise FetcherError("Malformed sources response") from e
        logger.info("Got %d news sources", len(source_ids))
        return source_ids


def _raise_for_envelope(data: object) -> None:
    if isinstance(data, dict) and data.get("status") == "error":
        raise FetcherError(data.get("message") or "NewsAPI error")
