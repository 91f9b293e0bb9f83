"""Messenger Platform transport."""

from .client import IMessengerClient, MessengerClient
from .schemas import IncomingMessage, MessagingEvent, WebhookPayload
from .security import sign, verify_challenge, verify_signature

__all__ = [
    "IMessengerClient",
    "MessengerClient",
    "IncomingMessage",
    "MessagingEvent",
    "WebhookPayload",
    "sign",
    "verify_challenge",
    "verify_signature",
]
