"""The bot's actions: replies, weather, and news."""

import random

from ..cache import IDerivedDataCache
from ..errors import DeliveryError, FetcherError, SessionNotFoundError
from ..fetchers import IFetcher, NewsFetcher
from ..logging_config import get_logger
from ..messenger.client import IMessengerClient
from ..models import ActionRequest, BotResponse, Context
from ..sessions import ISessionStore
from ..tracker import ITracker
from .registry import SEND_ACTION, ActionRegistry, first_entity_value

logger = get_logger(__name__)

NEWS_SOURCE_IDS = "news_source_ids"
NEWS_SOURCES_TTL = 24 * 60 * 60  # seconds
MISSING_LOCATION = "missingLocation"
FORECAST_HELP = (
    "Please ask something like, 'How's weather in Chicago?' or Weather in chicago? "
    "We currently get forecast only for present day."
)


class BotActions:
    """Handlers registered under the names the dialogue engine uses."""

    def __init__(
        self,
        sessions: ISessionStore,
        messenger: IMessengerClient,
        weather: IFetcher,
        hacker_news: IFetcher,
        news: NewsFetcher,
        cache: IDerivedDataCache,
        tracker: ITracker,
        news_sources_ttl: float = NEWS_SOURCES_TTL,
        rng: random.Random | None = None,
    ):
        self._sessions = sessions
        self._messenger = messenger
        self._weather = weather
        self._hacker_news = hacker_news
        self._news = news
        self._cache = cache
        self._tracker = tracker
        self._news_sources_ttl = news_sources_ttl
        self._rng = rng or random.Random()

    async def send(self, request: ActionRequest, response: BotResponse) -> None:
        """Forward the bot's reply to the session's user. Never raises."""
        try:
            recipient_id = self._sessions.get_user_id(request.session_id)
        except SessionNotFoundError:
            recipient_id = None

        if not recipient_id:
            logger.error("Couldn't find user for session: %s", request.session_id)
            return

        try:
            await self._messenger.send_text(recipient_id, response.text)
        except DeliveryError as e:
            logger.error(
                "An error occurred while forwarding the response to %s: %s",
                recipient_id,
                e,
            )
            await self._tracker.track(
                "delivery_failed",
                SEND_ACTION,
                {"session_id": request.session_id, "recipient_id": recipient_id, "error": str(e)},
            )
            return

        await self._tracker.track(
            "message_sent",
            SEND_ACTION,
            {"session_id": request.session_id, "recipient_id": recipient_id, "text": response.text},
        )

    async def get_forecast(self, request: ActionRequest) -> Context:
        context = request.context
        location = first_entity_value(request.entities, "location")
        logger.info("Forecast requested for location: %s", location)

        if location:
            description = await self._weather.fetch(location)
            context.forecast = f"{description} in {location}"
            context.extra.pop(MISSING_LOCATION, None)
        else:
            context.forecast = FORECAST_HELP
        return context

    async def get_next_top_news_only_from_hacker_news(self, request: ActionRequest) -> Context:
        context = request.context
        counter = context.cursor
        logger.info("Story # %d", counter)

        context.story = await self._hacker_news.fetch(counter)
        context.count = counter + 1
        return context

    async def get_next_top_news(self, request: ActionRequest) -> Context:
        """Top story from the source at the cursor, then jump to a random source.

        The cursor is re-drawn from [1, len(sources)] instead of incremented
        so repeated requests wander across sources.
        """
        context = request.context
        counter = context.cursor

        source_ids = await self._cache.get_or_load(
            NEWS_SOURCE_IDS,
            self._news.fetch_source_ids,
            self._news_sources_ttl,
        )
        if not source_ids:
            raise FetcherError("No news sources available")

        # The drawn cursor can equal len(source_ids); wrap instead of failing.
        source = source_ids[counter % len(source_ids)]
        logger.info("Source # %d: %s", counter, source)

        context.story = await self._news.fetch(source)
        context.count = self._rng.randint(1, len(source_ids))
        return context


def register_bot_actions(registry: ActionRegistry, actions: BotActions) -> ActionRegistry:
    """Register every bot action under its engine-facing name."""
    registry.register(SEND_ACTION, actions.send)
    registry.register("getForecast", actions.get_forecast)
    registry.register(
        "getNextTopNewsOnlyFromHackerNews",
        actions.get_next_top_news_only_from_hacker_news,
    )
    registry.register("getNextTopNews", actions.get_next_top_news)
    return registry
