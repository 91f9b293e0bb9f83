"""Tests for data models."""

import json
from datetime import datetime, timezone

import pytest

from nestbot.errors import ContextError
from nestbot.models import (
    ActionRequest,
    BotResponse,
    Context,
    EngineStep,
    Session,
    StepType,
    TraceEvent,
)


class TestContext:
    """Tests for Context."""

    def test_empty_context_serializes_to_empty_object(self):
        assert Context().to_dict() == {}
        assert Context().to_json() == "{}"

    def test_known_fields_and_extra_are_flattened(self):
        context = Context(count=2, story="s", forecast="f", extra={"missingLocation": True})
        assert context.to_dict() == {
            "count": 2,
            "story": "s",
            "forecast": "f",
            "missingLocation": True,
        }

    def test_from_dict_splits_known_and_extra_keys(self):
        context = Context.from_dict({"count": 3, "done": False, "nested": {"a": [1, 2]}})
        assert context.count == 3
        assert context.story is None
        assert context.extra == {"done": False, "nested": {"a": [1, 2]}}

    def test_from_none_is_empty(self):
        assert Context.from_dict(None) == Context()

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ContextError):
            Context.from_dict(["not", "an", "object"])

    def test_from_dict_rejects_non_integer_count(self):
        with pytest.raises(ContextError):
            Context.from_dict({"count": "2"})
        with pytest.raises(ContextError):
            Context.from_dict({"count": True})

    def test_from_dict_rejects_non_string_story(self):
        with pytest.raises(ContextError):
            Context.from_dict({"story": 42})

    def test_non_serializable_extra_is_rejected(self):
        context = Context(extra={"callback": lambda: None})
        with pytest.raises(ContextError):
            context.to_json()

    def test_copy_is_equal_but_independent(self):
        context = Context(count=1, extra={"flags": {"a": 1}})
        copied = context.copy()

        assert copied == context
        copied.extra["flags"]["a"] = 2
        assert context.extra["flags"]["a"] == 1

    def test_round_trip_through_json(self):
        context = Context(count=5, story="Story - https://x", extra={"k": [1, "two"]})
        assert Context.from_dict(json.loads(context.to_json())) == context

    def test_cursor_defaults_to_zero(self):
        assert Context().cursor == 0
        assert Context(count=4).cursor == 4


class TestSession:
    def test_session_starts_with_empty_context(self):
        session = Session(id="s1", user_id="u1", created_at=datetime.now(timezone.utc))
        assert session.context == Context()


class TestEngineModels:
    def test_step_type_values(self):
        assert StepType("action") is StepType.ACTION
        assert StepType.MSG.value == "msg"

    def test_engine_step_defaults(self):
        step = EngineStep(type=StepType.STOP)
        assert step.entities == {}
        assert step.action is None

    def test_action_request_defaults(self):
        request = ActionRequest(session_id="s1", context=Context())
        assert request.entities == {}
        assert request.text is None

    def test_bot_response(self):
        response = BotResponse(text="hi")
        assert response.quickreplies is None


class TestTraceEvent:
    def test_trace_event_fields(self):
        ts = datetime.now(timezone.utc)
        event = TraceEvent(id="t1", event_type="turn_started", actor="driver", data={}, timestamp=ts)
        assert event.timestamp == ts
