"""Models exchanged between the dialogue engine and actions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .context import Context

# slot name -> candidate values, e.g. {"location": [{"value": "Chicago"}]}
Entities = dict[str, Any]


class StepType(str, Enum):
    """Kinds of step a dialogue engine can ask for."""

    ACTION = "action"
    MSG = "msg"
    STOP = "stop"
    ERROR = "error"


@dataclass
class ActionRequest:
    """What every action receives."""

    session_id: str
    context: Context
    text: str | None = None
    entities: Entities = field(default_factory=dict)


@dataclass
class BotResponse:
    """Text the bot wants delivered to the user."""

    text: str
    quickreplies: list[str] | None = None


@dataclass
class EngineStep:
    """One decision from the dialogue engine."""

    type: StepType
    action: str | None = None
    msg: str | None = None
    quickreplies: list[str] | None = None
    entities: Entities = field(default_factory=dict)
    confidence: float | None = None
