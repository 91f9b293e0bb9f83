"""Integration tests for the webhook to reply flow."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import ScriptedEngine, make_client
from nestbot.api import create_fastapi_app
from nestbot.app import Application
from nestbot.messenger import sign
from sim import build_payload

HN_ITEMS = {
    11: {"id": 11, "title": "Show HN: nestbot", "url": "https://nestbot.example"},
    22: {"id": 22, "title": "Ask HN: best weather API?"},
}


class Providers:
    """Stands in for the Graph API, Wit.ai and the news/weather providers."""

    def __init__(self, wit_steps):
        self.wit_steps = list(wit_steps)
        self.wit_requests = []
        self.sent = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        path = request.url.path
        if host == "graph.facebook.com":
            body = json.loads(request.content)
            self.sent.append((body["recipient"]["id"], body["message"]["text"]))
            return httpx.Response(200, json={"recipient_id": body["recipient"]["id"], "message_id": "mid"})
        if host == "api.wit.ai":
            self.wit_requests.append(request)
            return httpx.Response(200, json=self.wit_steps.pop(0))
        if host == "hacker-news.firebaseio.com":
            if path.endswith("/topstories.json"):
                return httpx.Response(200, json=list(HN_ITEMS))
            item_id = int(path.rsplit("/", 1)[1].split(".")[0])
            return httpx.Response(200, json=HN_ITEMS[item_id])
        if host == "api.openweathermap.org":
            return httpx.Response(200, json={"weather": [{"description": "light rain"}]})
        return httpx.Response(404, json={})


def post(client, sender, text):
    body = json.dumps(build_payload(sender, text)).encode("utf-8")
    return client.post("/webhook", content=body, headers={"X-Hub-Signature": sign(body, "app_secret")})


@pytest.fixture
def hacker_news_turns():
    step = [
        {"type": "action", "action": "getNextTopNewsOnlyFromHackerNews"},
        {"type": "msg", "msg": "Here you go"},
        {"type": "stop"},
    ]
    return step * 3


def test_wit_engine_full_flow(settings, hacker_news_turns):
    """Webhook -> Wit converse -> action -> Send API, over three turns."""
    providers = Providers(hacker_news_turns)
    application = Application(settings=settings, db_path=":memory:", http_client=make_client(providers))

    with TestClient(create_fastapi_app(application)) as client:
        assert post(client, "user1", "top stories").status_code == 200
        context = application.sessions.sessions()[0].context
        assert context.count == 1
        assert context.story == "Show HN: nestbot - https://nestbot.example"

        assert post(client, "user1", "next").status_code == 200
        context = application.sessions.sessions()[0].context
        assert context.count == 2
        assert context.story == "Ask HN: best weather API? - https://news.ycombinator.com/item?id=22"

        # past the end of the feed: turn fails, context stays put
        assert post(client, "user1", "next").status_code == 200
        assert application.sessions.sessions()[0].context.count == 2

        events = client.get("/api/trace-events", params={"event_type": "turn_failed"}).json()
        assert len(events) == 1

    assert providers.sent == [("user1", "Here you go"), ("user1", "Here you go")]
    # only the first converse call of a turn carries the user text
    queries = [r.url.params.get("q") for r in providers.wit_requests]
    assert queries[:3] == ["top stories", None, None]
    assert json.loads(providers.wit_requests[3].content) == {
        "count": 1,
        "story": "Show HN: nestbot - https://nestbot.example",
    }


def test_sessions_are_isolated(settings):
    scripted = ScriptedEngine(
        [
            {"type": "action", "action": "getForecast", "entities": {"location": [{"value": "Oslo"}]}},
            {"type": "stop"},
            {"type": "action", "action": "getForecast"},
            {"type": "stop"},
        ]
    )
    providers = Providers([])
    application = Application(
        settings=settings,
        db_path=":memory:",
        http_client=make_client(providers),
        engine_factory=scripted.factory,
    )

    with TestClient(create_fastapi_app(application)) as client:
        post(client, "alice", "weather in Oslo")
        post(client, "bob", "weather")

        by_user = {s["user_id"]: s["context"] for s in client.get("/api/sessions").json()}

    assert by_user["alice"] == {"forecast": "light rain in Oslo"}
    assert by_user["bob"]["forecast"].startswith("Please ask something like")
