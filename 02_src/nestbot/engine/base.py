"""Dialogue engine contract and the shared converse loop."""

from typing import Any, Protocol

from ..actions import SEND_ACTION, ActionRegistry
from ..errors import EngineError
from ..logging_config import get_logger
from ..models import ActionRequest, BotResponse, Context, EngineStep, StepType
from ..tracker import ITracker, NullTracker

logger = get_logger(__name__)

DEFAULT_MAX_STEPS = 5


class IDialogueEngine(Protocol):
    """Runs every action the engine asks for until it has nothing left to do."""

    async def run_actions(self, session_id: str, message: str, context: Context) -> Context:
        """Drive one turn and return the resulting context."""
        ...


class BaseDialogueEngine:
    """Converse loop shared by every engine.

    Subclasses implement ``converse`` to decide the next step; this class
    executes those steps against the ActionRegistry one at a time.
    """

    actor = "dialogue_engine"

    def __init__(
        self,
        actions: ActionRegistry,
        tracker: ITracker | None = None,
        max_steps: int = DEFAULT_MAX_STEPS,
    ):
        actions.validate([SEND_ACTION])
        self._actions = actions
        self._tracker = tracker or NullTracker()
        self._max_steps = max_steps

    async def converse(
        self,
        session_id: str,
        message: str | None,
        context: Context,
    ) -> EngineStep:
        """Ask the engine for the next step. Message is only set on the first step."""
        raise NotImplementedError

    async def run_actions(self, session_id: str, message: str, context: Context) -> Context:
        """Drive one turn and return the resulting context.

        Raises:
            EngineError: the engine errored, returned an unknown step type,
                or did not stop within max_steps.
            UnknownActionError: the engine asked for an unregistered action.
        """
        next_message: str | None = message
        for _ in range(self._max_steps):
            step = await self.converse(session_id, next_message, context)
            next_message = None

            request = ActionRequest(
                session_id=session_id,
                context=context,
                text=message,
                entities=step.entities,
            )

            if step.type == StepType.STOP:
                return context

            if step.type == StepType.MSG:
                logger.debug("Engine says: %s", step.msg)
                await self._actions.send(
                    request, BotResponse(text=step.msg or "", quickreplies=step.quickreplies)
                )
            elif step.type == StepType.ACTION:
                if not step.action:
                    raise EngineError("Engine returned an action step without a name")
                context = await self._actions.run(step.action, request)
                await self._tracker.track(
                    "action_executed",
                    self.actor,
                    {
                        "session_id": session_id,
                        "action": step.action,
                        "context": context.to_dict(),
                    },
                )
            elif step.type == StepType.ERROR:
                raise EngineError("Oops, I don't know what to do.")
            else:
                raise EngineError(f"Unknown step type: {step.type}")

        raise EngineError("Max steps reached, stopping.")


def parse_step(payload: Any) -> EngineStep:
    """Build an EngineStep from a converse-style JSON object."""
    if not isinstance(payload, dict) or "type" not in payload:
        raise EngineError("Couldn't find type in engine response")

    try:
        step_type = StepType(payload["type"])
    except ValueError:
        raise EngineError(f"Unknown step type: {payload['type']}") from None

    entities = payload.get("entities") or {}
    if not isinstance(entities, dict):
        raise EngineError("Engine entities must be an object")

    return EngineStep(
        type=step_type,
        action=payload.get("action"),
        msg=payload.get("msg"),
        quickreplies=payload.get("quickreplies"),
        entities=entities,
        confidence=payload.get("confidence"),
    )
