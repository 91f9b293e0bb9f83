"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "nestbot.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_ACTIONS = (
    "send",
    "getForecast",
    "getNextTopNewsOnlyFromHackerNews",
    "getNextTopNews",
)
ENGINES = ("wit", "llm")

PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"missing {name}")
    return value


@dataclass(frozen=True)
class Settings:
    """Credentials and tunables read from the environment."""

    page_token: str
    app_secret: str
    verify_token: str
    open_weather_api_key: str
    news_api_key: str
    dialogue_engine: str = "wit"
    wit_token: str | None = None
    anthropic_api_key: str | None = None
    http_timeout: float = 10.0
    news_sources_ttl: float = 86400.0
    required_actions: tuple[str, ...] = field(default=DEFAULT_ACTIONS)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build Settings from environment variables.

        Raises:
            ValueError: a required variable is missing or the engine
                name is not recognised.
        """
        engine = os.getenv("DIALOGUE_ENGINE", "wit").lower()
        if engine not in ENGINES:
            raise ValueError(f"unknown DIALOGUE_ENGINE: {engine}")

        actions = os.getenv("REQUIRED_ACTIONS")
        required_actions = (
            tuple(name.strip() for name in actions.split(",") if name.strip())
            if actions
            else DEFAULT_ACTIONS
        )

        return cls(
            page_token=_require("FB_PAGE_TOKEN"),
            app_secret=_require("FB_APP_SECRET"),
            verify_token=_require("FB_VERIFY_TOKEN"),
            open_weather_api_key=_require("OPEN_WEATHER_API_KEY"),
            news_api_key=_require("NEWS_API_KEY"),
            dialogue_engine=engine,
            wit_token=_require("WIT_TOKEN") if engine == "wit" else os.getenv("WIT_TOKEN"),
            anthropic_api_key=(
                _require("ANTHROPIC_API_KEY")
                if engine == "llm"
                else os.getenv("ANTHROPIC_API_KEY")
            ),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
            news_sources_ttl=float(os.getenv("NEWS_SOURCES_TTL", "86400")),
            required_actions=required_actions,
        )
