"""ConversationDriver implementation."""

from typing import Protocol

from ..engine import IDialogueEngine
from ..errors import TurnError
from ..logging_config import get_logger
from ..models import Context
from ..sessions import ISessionStore
from ..tracker import ITracker

logger = get_logger(__name__)


class IConversationDriver(Protocol):
    """Runs one turn per user utterance."""

    async def run_turn(self, session_id: str, text: str) -> Context:
        """Let the engine handle text and persist the resulting context."""
        ...


class ConversationDriver:
    """Runs turns through the dialogue engine and persists the result."""

    def __init__(
        self,
        sessions: ISessionStore,
        engine: IDialogueEngine,
        tracker: ITracker,
    ):
        self._sessions = sessions
        self._engine = engine
        self._tracker = tracker

    async def run_turn(self, session_id: str, text: str) -> Context:
        """Let the engine handle text and persist the resulting context.

        Turns on the same session run one at a time. The stored context is
        replaced wholesale on success and left untouched on failure.

        Raises:
            SessionNotFoundError: session_id is unknown.
            TurnError: the engine or one of its actions failed.
        """
        async with self._sessions.lock(session_id):
            context = self._sessions.get(session_id)

            await self._tracker.track(
                "turn_started",
                "conversation_driver",
                {"session_id": session_id, "text": text, "context": context.to_dict()},
            )
            logger.info("Turn started for session %s: %s", session_id, text[:100])

            try:
                new_context = await self._engine.run_actions(session_id, text, context)
            except Exception as e:
                await self._tracker.track(
                    "turn_failed",
                    "conversation_driver",
                    {"session_id": session_id, "error": f"{type(e).__name__}: {e}"},
                )
                raise TurnError(session_id, e) from e

            self._sessions.put(session_id, new_context)

            await self._tracker.track(
                "turn_completed",
                "conversation_driver",
                {"session_id": session_id, "context": new_context.to_dict()},
            )
            return new_context
