"""Dialogue module."""

from .driver import ConversationDriver, IConversationDriver

__all__ = ["ConversationDriver", "IConversationDriver"]
