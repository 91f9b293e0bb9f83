"""ActionRegistry and entity helpers."""

from typing import Any, Awaitable, Callable, Iterable, Union

from ..errors import UnknownActionError
from ..models import ActionRequest, BotResponse, Context, Entities

SEND_ACTION = "send"

ActionHandler = Callable[[ActionRequest], Awaitable[Context | None]]
SendHandler = Callable[[ActionRequest, BotResponse], Awaitable[None]]
Handler = Union[ActionHandler, SendHandler]


def first_entity_value(entities: Entities | None, entity: str) -> Any:
    """Return the first usable value of a slot, or None.

    None when the slot is missing, not a list, empty, or its first
    candidate has a falsy "value". A dict value yields its own "value".
    """
    if not entities:
        return None
    candidates = entities.get(entity)
    if not isinstance(candidates, list) or not candidates:
        return None

    first = candidates[0]
    val = first.get("value") if isinstance(first, dict) else None
    if not val:
        return None
    return val.get("value") if isinstance(val, dict) else val


class ActionRegistry:
    """Named actions the dialogue engine may invoke.

    ``send`` has the signature (request, response) -> None; every other
    action takes (request) and returns the new Context.
    """

    def __init__(self):
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        """Register a handler under name."""
        if name in self._handlers:
            raise ValueError(f"Action already registered: {name}")
        self._handlers[name] = handler

    def get(self, name: str) -> Handler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownActionError([name]) from None

    def validate(self, required: Iterable[str]) -> None:
        """Fail fast if any required name is not registered."""
        missing = [name for name in required if name not in self._handlers]
        if missing:
            raise UnknownActionError(missing)

    def names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    async def send(self, request: ActionRequest, response: BotResponse) -> None:
        handler = self.get(SEND_ACTION)
        await handler(request, response)

    async def run(self, name: str, request: ActionRequest) -> Context:
        """Run a non-send action; a None result means an empty Context."""
        if name == SEND_ACTION:
            raise UnknownActionError([name])
        handler = self.get(name)
        context = await handler(request)
        return context if context is not None else Context()
