"""Conversation context model."""

import json
from dataclasses import dataclass, field
from typing import Any

from ..errors import ContextError

KNOWN_KEYS = ("count", "story", "forecast")


@dataclass
class Context:
    """State carried across turns and exchanged with the dialogue engine.

    Known keys are typed fields; anything else the engine or an action
    sets (control flags such as ``missingLocation``) lives in ``extra``.
    Serialises to one flat JSON object with unset fields omitted.
    """

    count: int | None = None
    story: str | None = None
    forecast: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Context":
        """Build a Context from the engine's JSON object."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ContextError(f"Context must be an object, got {type(data).__name__}")

        count = data.get("count")
        if count is not None and (isinstance(count, bool) or not isinstance(count, int)):
            raise ContextError(f"Context count must be an integer, got {count!r}")

        for key in ("story", "forecast"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ContextError(f"Context {key} must be a string, got {value!r}")

        extra = {k: v for k, v in data.items() if k not in KNOWN_KEYS}
        context = cls(
            count=count,
            story=data.get("story"),
            forecast=data.get("forecast"),
            extra=extra,
        )
        # Fail early on values the engine could not round-trip.
        context.to_json()
        return context

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-ready mapping, unset known fields omitted."""
        data = dict(self.extra)
        if self.count is not None:
            data["count"] = self.count
        if self.story is not None:
            data["story"] = self.story
        if self.forecast is not None:
            data["forecast"] = self.forecast
        return data

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_dict(), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise ContextError(f"Context is not JSON-serializable: {e}") from e

    def copy(self) -> "Context":
        """Deep, validated copy."""
        return Context.from_dict(json.loads(self.to_json()))

    @property
    def cursor(self) -> int:
        """Feed cursor; an unset count means the first item."""
        return self.count or 0
