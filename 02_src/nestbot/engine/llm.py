"""Dialogue engine backed by a Claude model."""

import json
import re

from ..actions import SEND_ACTION, ActionRegistry
from ..errors import EngineError
from ..llm import ILLMProvider
from ..logging_config import get_logger
from ..models import Context, EngineStep
from ..tracker import ITracker
from .base import DEFAULT_MAX_STEPS, BaseDialogueEngine, parse_step

logger = get_logger(__name__)

SYSTEM_PROMPT = """You drive a Messenger chat bot that answers questions about \
the weather and the news. For every request you decide the single next step \
and answer with exactly one JSON object and nothing else.

Steps:
- {{"type": "action", "action": "<name>", "entities": {{"<slot>": [{{"value": "<value>"}}]}}}}
  runs an action. Available actions: {actions}.
  getForecast reads the "location" slot (a city). The news actions take no slots.
- {{"type": "msg", "msg": "<text>"}} sends text to the user.
- {{"type": "stop"}} ends the turn.

Actions write their results into the context: getForecast sets "forecast", \
the news actions set "story". Run the action first, then send its result as a \
message, then stop. If the request is unrelated, reply briefly and stop."""

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class LLMDialogueEngine(BaseDialogueEngine):
    """Steps are chosen by an LLM from the registered action names."""

    actor = "llm_engine"

    def __init__(
        self,
        llm_provider: ILLMProvider,
        actions: ActionRegistry,
        tracker: ITracker | None = None,
        max_steps: int = DEFAULT_MAX_STEPS,
    ):
        super().__init__(actions, tracker=tracker, max_steps=max_steps)
        self._llm = llm_provider
        action_names = [name for name in actions.names() if name != SEND_ACTION]
        self._system = SYSTEM_PROMPT.format(actions=", ".join(action_names))
        # session_id -> transcript of the turn in progress
        self._transcripts: dict[str, list[dict]] = {}

    async def run_actions(self, session_id: str, message: str, context: Context) -> Context:
        try:
            return await super().run_actions(session_id, message, context)
        finally:
            # A transcript never outlives its turn, even when an action fails.
            self._transcripts.pop(session_id, None)

    async def converse(
        self,
        session_id: str,
        message: str | None,
        context: Context,
    ) -> EngineStep:
        if message is not None:
            self._transcripts[session_id] = [
                {"role": "user", "content": f"User message: {message}\nContext: {context.to_json()}"}
            ]
        transcript = self._transcripts.setdefault(session_id, [])
        if transcript and transcript[-1]["role"] == "assistant":
            transcript.append({"role": "user", "content": f"Context: {context.to_json()}"})

        try:
            raw = await self._llm.complete(
                messages=list(transcript), system=self._system, max_tokens=512
            )
        except RuntimeError as e:
            raise EngineError(str(e)) from e

        step = parse_step(_decode(raw))
        transcript.append({"role": "assistant", "content": raw})
        logger.debug("LLM step for %s: %s", session_id, step)
        return step


def _decode(raw: str) -> dict:
    text = _FENCE.sub("", raw.strip())
    try:
        return json.loads(text)
    except ValueError as e:
        raise EngineError(f"LLM returned a non-JSON step: {raw[:100]}") from e
