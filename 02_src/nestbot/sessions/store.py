"""In-memory SessionStore."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..errors import SessionNotFoundError
from ..logging_config import get_logger
from ..models import Context, Session

logger = get_logger(__name__)


class ISessionStore(Protocol):
    """Per-user conversation state, process lifetime."""

    def resolve_or_create(self, user_id: str) -> str:
        """Return the session id for user_id, creating a session if needed."""
        ...

    def has_user(self, user_id: str) -> bool:
        """Whether user_id already has a session."""
        ...

    def get(self, session_id: str) -> Context:
        """Return a copy of the session's context."""
        ...

    def put(self, session_id: str, context: Context) -> None:
        """Replace the session's context."""
        ...

    def get_user_id(self, session_id: str) -> str | None:
        """Return the user id the session belongs to."""
        ...

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serialising turns on that session."""
        ...


class SessionStore:
    """Sessions keyed by id with a direct user id index."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._by_user: dict[str, str] = {}  # user_id -> session_id
        self._locks: dict[str, asyncio.Lock] = {}

    def resolve_or_create(self, user_id: str) -> str:
        """Return the session id for user_id, creating a session if needed."""
        session_id = self._by_user.get(user_id)
        if session_id is not None:
            return session_id

        session_id = str(uuid.uuid4())
        self._sessions[session_id] = Session(
            id=session_id,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        self._by_user[user_id] = session_id
        self._locks[session_id] = asyncio.Lock()
        logger.info("Created session %s for user %s", session_id, user_id)
        return session_id

    def has_user(self, user_id: str) -> bool:
        return user_id in self._by_user

    def get(self, session_id: str) -> Context:
        return self._get_session(session_id).context.copy()

    def put(self, session_id: str, context: Context) -> None:
        # Stored value is a validated copy, never aliased to the caller's.
        self._get_session(session_id).context = context.copy()

    def get_user_id(self, session_id: str) -> str | None:
        return self._get_session(session_id).user_id or None

    def get_session(self, session_id: str) -> Session:
        return self._get_session(session_id)

    def lock(self, session_id: str) -> asyncio.Lock:
        self._get_session(session_id)
        return self._locks[session_id]

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def clear(self) -> None:
        """Drop every session."""
        self._sessions.clear()
        self._by_user.clear()
        self._locks.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _get_session(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session
