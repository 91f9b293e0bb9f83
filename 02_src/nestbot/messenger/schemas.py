"""Messenger webhook payload models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Party(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str


class IncomingMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    mid: str | None = None
    text: str | None = None
    attachments: list[dict[str, Any]] | None = None
    is_echo: bool = False


class MessagingEvent(BaseModel):
    """One event in entry.messaging; only messages are acted on."""

    model_config = ConfigDict(extra="allow")

    sender: Party
    recipient: Party | None = None
    timestamp: int | None = None
    message: IncomingMessage | None = None


class Entry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    time: int | None = None
    messaging: list[MessagingEvent] = Field(default_factory=list)


class WebhookPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    object: str
    entry: list[Entry] = Field(default_factory=list)
