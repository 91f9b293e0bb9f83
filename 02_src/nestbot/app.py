"""Application bootstrap and lifecycle management."""

import os
from typing import Callable, Protocol

import httpx

from .actions import ActionRegistry, BotActions, register_bot_actions
from .cache import DerivedDataCache
from .config import Settings, resolve_db_path
from .dialogue import ConversationDriver
from .engine import IDialogueEngine, LLMDialogueEngine, WitEngine
from .fetchers import HackerNewsFetcher, NewsFetcher, WeatherFetcher
from .llm import LLMProvider
from .logging_config import get_logger
from .messenger import MessengerClient
from .messenger.inbound import InboundGateway
from .sessions import SessionStore
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

logger = get_logger(__name__)

EngineFactory = Callable[[ActionRegistry, ITracker], IDialogueEngine]


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Drop sessions, cached data and trace events."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        db_path: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        engine_factory: EngineFactory | None = None,
    ):
        self._settings = settings
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        # Injected collaborators are not closed by stop()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._engine_factory = engine_factory or self._create_engine

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._cache: DerivedDataCache | None = None
        self._sessions: SessionStore | None = None
        self._messenger: MessengerClient | None = None
        self._actions: ActionRegistry | None = None
        self._engine: IDialogueEngine | None = None
        self._driver: ConversationDriver | None = None
        self._inbound: InboundGateway | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 0. Settings (fatal if credentials are missing)
        if self._settings is None:
            self._settings = Settings.from_env()
        settings = self._settings

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Tracker (depends on Storage)
        self._tracker = Tracker(self._storage)

        # 3. Shared HTTP client for every outbound call
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=settings.http_timeout)

        # 4. Fetchers, cache, sessions, messenger
        weather = WeatherFetcher(self._http_client, settings.open_weather_api_key)
        hacker_news = HackerNewsFetcher(self._http_client)
        news = NewsFetcher(self._http_client, settings.news_api_key)
        self._cache = DerivedDataCache()
        self._sessions = SessionStore()
        self._messenger = MessengerClient(self._http_client, settings.page_token)

        # 5. Actions, validated before anything can dispatch to them
        self._actions = register_bot_actions(
            ActionRegistry(),
            BotActions(
                sessions=self._sessions,
                messenger=self._messenger,
                weather=weather,
                hacker_news=hacker_news,
                news=news,
                cache=self._cache,
                tracker=self._tracker,
                news_sources_ttl=settings.news_sources_ttl,
            ),
        )
        self._actions.validate(settings.required_actions)
        logger.info("Registered actions: %s", ", ".join(self._actions.names()))

        # 6. Dialogue engine (depends on actions)
        self._engine = self._engine_factory(self._actions, self._tracker)
        logger.info("Dialogue engine initialized: %s", type(self._engine).__name__)

        # 7. Driver and inbound gateway
        self._driver = ConversationDriver(self._sessions, self._engine, self._tracker)
        self._inbound = InboundGateway(
            sessions=self._sessions,
            driver=self._driver,
            messenger=self._messenger,
            tracker=self._tracker,
        )
        logger.info("All components initialized successfully")

    def _create_engine(self, actions: ActionRegistry, tracker: ITracker) -> IDialogueEngine:
        settings = self.settings
        if settings.dialogue_engine == "llm":
            return LLMDialogueEngine(
                LLMProvider(api_key=settings.anthropic_api_key),
                actions,
                tracker=tracker,
            )
        return WitEngine(
            settings.wit_token or "",
            actions,
            self._http_client,
            tracker=tracker,
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._http_client and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        if self._storage is not None:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Drop sessions, cached data and trace events."""
        if self._sessions is not None:
            self._sessions.clear()
        if self._cache is not None:
            self._cache.clear()
        if self._storage is not None:
            await self._storage.clear()
        logger.info("Reset complete")

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise RuntimeError("Application not started")
        return self._settings

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if self._storage is None:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def sessions(self) -> SessionStore:
        """Get session store."""
        if self._sessions is None:
            raise RuntimeError("Application not started")
        return self._sessions

    @property
    def driver(self) -> ConversationDriver:
        """Get conversation driver."""
        if self._driver is None:
            raise RuntimeError("Application not started")
        return self._driver

    @property
    def inbound(self) -> InboundGateway:
        """Get inbound gateway."""
        if self._inbound is None:
            raise RuntimeError("Application not started")
        return self._inbound
