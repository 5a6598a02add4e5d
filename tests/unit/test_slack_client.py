"""
Unit tests for the Slack Web API client, actor resolver and notifier.
"""

import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from qa_relay.errors import SlackAPIError
from qa_relay.services.actor_resolver import ActorResolver
from qa_relay.services.notifier import ChatNotifier
from qa_relay.services.slack_client import SlackClient


def make_client(
    responses: List[Tuple[int, Any]],
) -> Tuple[SlackClient, List[httpx.Request]]:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, payload = responses[len(requests) - 1]
        if isinstance(payload, Exception):
            raise payload
        return httpx.Response(status_code=status, json=payload)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SlackClient("xoxb-test", http_client, base_url="https://slack.example.test/api"), requests


def body_of(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))


@pytest.mark.asyncio
async def test_call_posts_json_with_bearer_token():
    client, requests = make_client([(200, {"ok": True, "channel": "C1"})])

    data = await client.call("chat.postMessage", {"channel": "C1", "text": "hi"})

    assert data["channel"] == "C1"
    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/chat.postMessage"
    assert request.headers["Authorization"] == "Bearer xoxb-test"
    assert body_of(request) == {"channel": "C1", "text": "hi"}


@pytest.mark.asyncio
async def test_call_raises_on_http_status():
    client, _ = make_client([(503, {"ok": False})])

    with pytest.raises(SlackAPIError) as exc_info:
        await client.call("users.info", {"user": "U1"})

    assert exc_info.value.api_method == "users.info"
    assert exc_info.value.status_code == 503
    assert "users.info" in str(exc_info.value)


@pytest.mark.asyncio
async def test_call_raises_on_application_error():
    client, _ = make_client([(200, {"ok": False, "error": "channel_not_found"})])

    with pytest.raises(SlackAPIError) as exc_info:
        await client.call("chat.postMessage", {"channel": "C1"})

    assert exc_info.value.error == "channel_not_found"
    assert "channel_not_found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_parent_message_requests_single_inclusive_message():
    client, requests = make_client([
        (200, {"ok": True, "messages": [{"ts": "1.0", "text": "PR #1"}, {"ts": "2.0"}]}),
    ])

    parent = await client.fetch_parent_message("C1", "1.0")

    assert parent == {"ts": "1.0", "text": "PR #1"}
    assert requests[0].url.path == "/api/conversations.replies"
    assert body_of(requests[0]) == {"channel": "C1", "ts": "1.0", "limit": 1, "inclusive": True}


@pytest.mark.asyncio
async def test_fetch_parent_message_returns_none_when_empty():
    client, _ = make_client([(200, {"ok": True, "messages": []})])

    assert await client.fetch_parent_message("C1", "1.0") is None


@pytest.mark.asyncio
async def test_post_thread_message():
    client, requests = make_client([(200, {"ok": True})])

    await client.post_thread_message("C1", "1.0", "done")

    assert body_of(requests[0]) == {"channel": "C1", "thread_ts": "1.0", "text": "done"}


@pytest.mark.asyncio
async def test_actor_resolver_prefers_display_name():
    client, _ = make_client([
        (200, {"ok": True, "user": {"name": "alice.smith", "profile": {"display_name": "Alice"}}}),
    ])

    assert await ActorResolver(client).resolve("U1") == "Alice"


@pytest.mark.asyncio
async def test_actor_resolver_falls_back_to_name():
    client, _ = make_client([
        (200, {"ok": True, "user": {"name": "alice.smith", "profile": {"display_name": ""}}}),
    ])

    assert await ActorResolver(client).resolve("U1") == "alice.smith"


@pytest.mark.asyncio
async def test_actor_resolver_returns_id_on_api_error():
    client, _ = make_client([(200, {"ok": False, "error": "user_not_found"})])

    assert await ActorResolver(client).resolve("U404") == "U404"


@pytest.mark.asyncio
async def test_actor_resolver_returns_id_on_network_error():
    client, _ = make_client([(0, httpx.ConnectError("connection refused"))])

    assert await ActorResolver(client).resolve("U1") == "U1"


@pytest.mark.asyncio
async def test_actor_resolver_returns_id_on_malformed_payload():
    client, _ = make_client([(200, {"ok": True, "user": "not-an-object"})])

    assert await ActorResolver(client).resolve("U1") == "U1"


@pytest.mark.asyncio
async def test_actor_resolver_unknown_without_id():
    client, requests = make_client([])

    assert await ActorResolver(client).resolve("") == "unknown"
    assert requests == []


@pytest.mark.asyncio
async def test_notifier_posts_approval_into_thread():
    client, requests = make_client([(200, {"ok": True})])

    await ChatNotifier(client).approved("C1", "1.0", "Alice", 42)

    body = body_of(requests[0])
    assert body["channel"] == "C1"
    assert body["thread_ts"] == "1.0"
    assert "PR #42" in body["text"]
    assert "@Alice" in body["text"]


@pytest.mark.asyncio
async def test_notifier_prompts_use_reply_commands():
    client, requests = make_client([(200, {"ok": True}), (200, {"ok": True})])
    notifier = ChatNotifier(client)

    await notifier.changes_requested("C1", "1.0", "Bob")
    await notifier.bug_prompt("C1", "1.0", "Bob")

    assert "qa-feedback: <details>" in body_of(requests[0])["text"]
    assert "qa-bug: <bug description>" in body_of(requests[1])["text"]
