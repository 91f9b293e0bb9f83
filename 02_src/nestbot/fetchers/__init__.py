"""External data fetchers."""

from .base import IFetcher, get_json
from .hacker_news import HackerNewsFetcher
from .news import NewsFetcher
from .weather import WeatherFetcher

__all__ = [
    "IFetcher",
    "get_json",
    "HackerNewsFetcher",
    "NewsFetcher",
    "WeatherFetcher",
]
