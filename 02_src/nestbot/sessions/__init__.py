"""Sessions module."""

from .store import ISessionStore, SessionStore

__all__ = ["ISessionStore", "SessionStore"]
