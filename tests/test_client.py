import json

import httpx
import pytest

from daybot.client import AssistantClient, AssistantError
from daybot.models import PlanContext, Task
from daybot.planner import format_plan

CTX = PlanContext(date="2024-05-01", tasks=(Task(id="a", title="Write", time="09:00", duration_min=30),))


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr(AssistantClient._post.retry, "sleep", lambda seconds: None)


def _client(handler) -> AssistantClient:
    return AssistantClient("http://daybot.test/", transport=httpx.MockTransport(handler))


def test_ask_posts_message_and_context():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"reply": "server plan", "source": "llm"})

    with _client(handler) as client:
        assert client.ask("Plan my day", CTX) == "server plan"
    assert seen["url"] == "http://daybot.test/api/ai"
    assert seen["body"]["message"] == "Plan my day"
    assert seen["body"]["context"]["date"] == "2024-05-01"
    assert seen["body"]["context"]["tasks"][0]["durationMin"] == 30


def test_ask_falls_back_on_server_error():
    with _client(lambda request: httpx.Response(500, text="nope")) as client:
        assert client.ask("focus please", CTX) == format_plan("focus please", CTX)


def test_ask_falls_back_on_bad_json():
    with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        assert client.ask("Plan my day", CTX) == format_plan("Plan my day", CTX)


def test_ask_falls_back_on_missing_reply():
    with _client(lambda request: httpx.Response(200, json={"text": "x"})) as client:
        with pytest.raises(AssistantError):
            client.request_reply("Plan my day", CTX)
        assert client.ask("Plan my day", CTX) == format_plan("Plan my day", CTX)


def test_connection_errors_are_retried_then_fall_back():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    with _client(handler) as client:
        assert client.ask("Plan my day", CTX) == format_plan("Plan my day", CTX)
    assert len(attempts) == 3


def test_transient_error_then_success():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"reply": "second try"})

    with _client(handler) as client:
        assert client.ask("Plan my day", CTX) == "second try"
    assert len(attempts) == 2
