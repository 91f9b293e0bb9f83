"""Pytest configuration and fixtures."""

import random
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from nestbot.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from nestbot.tracker import Tracker

    return Tracker(storage)


@pytest.fixture
def session_store():
    from nestbot.sessions import SessionStore

    return SessionStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    from nestbot.cache import DerivedDataCache

    return DerivedDataCache(clock=clock)


@pytest.fixture
def mock_messenger():
    """Messenger client that records sends."""
    messenger = Mock()
    messenger.send_text = AsyncMock(return_value={"recipient_id": "u1", "message_id": "m1"})
    return messenger


@pytest.fixture
def weather_fetcher():
    fetcher = Mock()
    fetcher.fetch = AsyncMock(return_value="clear sky")
    return fetcher


@pytest.fixture
def hacker_news_fetcher():
    """Ranked feed of three stories."""
    stories = ["Story A - https://a.example", "Story B - https://b.example", "Story C - https://c.example"]

    async def fetch(rank):
        from nestbot.errors import FeedExhaustedError

        if rank >= len(stories):
            raise FeedExhaustedError(f"No top story at rank {rank}")
        return stories[rank]

    fetcher = Mock()
    fetcher.fetch = AsyncMock(side_effect=fetch)
    return fetcher


@pytest.fixture
def news_fetcher():
    fetcher = Mock()
    fetcher.fetch_source_ids = AsyncMock(return_value=["abc-news", "bbc-news", "cnn"])
    fetcher.fetch = AsyncMock(side_effect=lambda source: f"Top story from {source} - https://{source}.example")
    return fetcher


@pytest.fixture
def bot_actions(
    session_store,
    mock_messenger,
    weather_fetcher,
    hacker_news_fetcher,
    news_fetcher,
    cache,
    tracker,
):
    from nestbot.actions import BotActions

    return BotActions(
        sessions=session_store,
        messenger=mock_messenger,
        weather=weather_fetcher,
        hacker_news=hacker_news_fetcher,
        news=news_fetcher,
        cache=cache,
        tracker=tracker,
        rng=random.Random(7),
    )


@pytest.fixture
def registry(bot_actions):
    from nestbot.actions import ActionRegistry, register_bot_actions

    return register_bot_actions(ActionRegistry(), bot_actions)


@pytest.fixture
def settings():
    from nestbot.config import Settings

    return Settings(
        page_token="page_token",
        app_secret="app_secret",
        verify_token="verify_token",
        open_weather_api_key="weather_key",
        news_api_key="news_key",
        wit_token="wit_token",
    )


def make_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler(request)."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class ScriptedEngine:
    """Dialogue engine that replays a fixed list of converse steps."""

    def __init__(self, steps_per_turn):
        self._steps_per_turn = list(steps_per_turn)
        self.calls = []

    def factory(self, actions, tracker):
        from nestbot.engine import BaseDialogueEngine

        outer = self

        class _Engine(BaseDialogueEngine):
            async def converse(self, session_id, message, context):
                from nestbot.engine import parse_step

                outer.calls.append((session_id, message, context.to_dict()))
                return parse_step(outer._steps_per_turn.pop(0))

        return _Engine(actions, tracker=tracker)
