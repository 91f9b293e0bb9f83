"""Actions module."""

from .registry import (
    SEND_ACTION,
    ActionHandler,
    ActionRegistry,
    SendHandler,
    first_entity_value,
)
from .bot_actions import (
    FORECAST_HELP,
    NEWS_SOURCE_IDS,
    BotActions,
    register_bot_actions,
)

__all__ = [
    "SEND_ACTION",
    "ActionHandler",
    "ActionRegistry",
    "SendHandler",
    "first_entity_value",
    "FORECAST_HELP",
    "NEWS_SOURCE_IDS",
    "BotActions",
    "register_bot_actions",
]
