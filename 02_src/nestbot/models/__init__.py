"""Core data models for nestbot."""

from .actions import ActionRequest, BotResponse, EngineStep, Entities, StepType
from .context import Context
from .session import Session
from .tracing import TraceEvent

__all__ = [
    # Conversation
    "Context",
    "Session",
    # Engine / actions
    "ActionRequest",
    "BotResponse",
    "EngineStep",
    "Entities",
    "StepType",
    # Tracing
    "TraceEvent",
]
