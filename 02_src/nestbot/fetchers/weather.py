"""OpenWeatherMap current weather fetcher."""

import httpx

from ..errors import FetcherError
from ..logging_config import get_logger
from .base import get_json

logger = get_logger(__name__)

OPEN_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class WeatherFetcher:
    """Current weather description for a city name."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = OPEN_WEATHER_URL,
    ):
        self._client = client
        self._api_key = api_key
        self._url = url

    async def fetch(self, query: str) -> str:
        """Return the weather description for a city, e.g. "clear sky"."""
        data = await get_json(self._client, self._url, {"q": query, "appid": self._api_key})
        return parse_weather(data)


def parse_weather(data: dict) -> str:
    """Extract the first weather description from an OpenWeatherMap reply."""
    try:
        forecast = data["weather"][0]["description"]
    except (KeyError, IndexError, TypeError) as e:
        raise FetcherError("Weather response has no description") from e
    logger.info("Got weather: %s", forecast)
    return forecast
