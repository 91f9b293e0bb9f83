"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single observability event."""

    id: str
    event_type: str  # e.g. "turn_started", "action_executed"
    actor: str  # component that created this event
    data: dict  # self-contained, JSON-serializable payload
    timestamp: datetime
