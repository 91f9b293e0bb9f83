"""Hacker News top stories fetcher."""

import httpx

from ..errors import FeedExhaustedError, FetcherError
from ..logging_config import get_logger
from .base import get_json

logger = get_logger(__name__)

HACKER_NEWS_URL = "https://hacker-news.firebaseio.com/v0"
HACKER_NEWS_ITEM_URL = "https://news.ycombinator.com/item?id={id}"


class HackerNewsFetcher:
    """Top story at a given rank, formatted as "<title> - <url>"."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = HACKER_NEWS_URL):
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch(self, query: int) -> str:
        """Return the story at rank `query` (0-based).

        Raises:
            FeedExhaustedError: rank is past the end of the feed.
        """
        story_ids = await get_json(self._client, f"{self._base_url}/topstories.json")
        if not isinstance(story_ids, list):
            raise FetcherError("Top stories response is not a list")
        if query < 0 or query >= len(story_ids):
            raise FeedExhaustedError(
                f"No top story at rank {query}, feed has {len(story_ids)}"
            )

        story_id = story_ids[query]
        item = await get_json(self._client, f"{self._base_url}/item/{story_id}.json")
        if not isinstance(item, dict) or "title" not in item:
            raise FetcherError(f"Story {story_id} has no title")

        # Ask/Show HN posts have no external url
        url = item.get("url") or HACKER_NEWS_ITEM_URL.format(id=story_id)
        return f"{item['title']} - {url}"
