"""Tests for the visitor live chat endpoints and the SSE relay."""

import asyncio
import json
from typing import List

import httpx
import pytest
from httpx import AsyncClient

from sws_blog.core.models.io.live_chat import RealtimeEvent
from sws_blog.core.text import utc_now
from sws_blog.server.api.v1.live_chat import serialize_event, sse_event_name, stream_channel
from sws_blog.server.services.realtime import RealtimeBroker, conversation_channel

pytestmark = pytest.mark.asyncio

START = {"visitor_id": "visitor-1", "consent_given": True}


class FakeRequest:
    """Stands in for the Starlette request polled by the SSE generator."""

    def __init__(self) -> None:
        self.disconnected = False

    async def is_disconnected(self) -> bool:
        return self.disconnected


def _event(event: str, table=None, payload=None) -> RealtimeEvent:
    return RealtimeEvent(channel="c", event=event, table=table, payload=payload or {}, sent_at=utc_now())


async def test_start_creates_then_resumes(client: AsyncClient, sendgrid_requests: List[httpx.Request]):
    created = await client.post("/api/v1/live-chat/conversations", json=START)
    assert created.status_code == 201
    assert created.json()["status"] == "open"
    assert len(sendgrid_requests) == 1

    resumed = await client.post("/api/v1/live-chat/conversations", json=START)
    assert resumed.status_code == 200
    assert resumed.json()["id"] == created.json()["id"]
    assert len(sendgrid_requests) == 1


async def test_start_requires_consent(client: AsyncClient):
    response = await client.post("/api/v1/live-chat/conversations", json={"visitor_id": "visitor-1"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Privacy consent is required"}


async def test_start_unknown_post(client: AsyncClient):
    response = await client.post("/api/v1/live-chat/conversations", json={**START, "post_id": "missing"})
    assert response.status_code == 404


async def test_start_mentions_post_title_in_email(
    client: AsyncClient, make_author, make_category, make_post, sendgrid_requests: List[httpx.Request]
):
    post = await make_post(await make_author(), await make_category(), title="Why FastAPI")

    response = await client.post("/api/v1/live-chat/conversations", json={**START, "post_id": post.id})

    assert response.status_code == 201
    assert "New Live Chat: Why FastAPI" in sendgrid_requests[0].content.decode()


async def test_messages_and_history(client: AsyncClient):
    conversation = (await client.post("/api/v1/live-chat/conversations", json=START)).json()
    url = f"/api/v1/live-chat/conversations/{conversation['id']}"

    sent = await client.post(f"{url}/messages", json={"visitor_id": "visitor-1", "content": "  Hello  "})
    assert sent.status_code == 201
    assert sent.json()["content"] == "Hello"
    assert sent.json()["sender"] == "visitor"

    history = await client.get(url, params={"visitor_id": "visitor-1"})
    assert history.status_code == 200
    assert [m["content"] for m in history.json()["messages"]] == ["Hello"]


async def test_other_visitor_is_forbidden(client: AsyncClient):
    conversation = (await client.post("/api/v1/live-chat/conversations", json=START)).json()
    url = f"/api/v1/live-chat/conversations/{conversation['id']}"

    assert (await client.get(url, params={"visitor_id": "intruder"})).status_code == 403
    sent = await client.post(f"{url}/messages", json={"visitor_id": "intruder", "content": "hi"})
    assert sent.status_code == 403
    events = await client.get(f"{url}/events", params={"visitor_id": "intruder"})
    assert events.status_code == 403


async def test_unknown_conversation(client: AsyncClient):
    response = await client.get("/api/v1/live-chat/conversations/missing", params={"visitor_id": "visitor-1"})
    assert response.status_code == 404


async def test_empty_message_rejected(client: AsyncClient):
    conversation = (await client.post("/api/v1/live-chat/conversations", json=START)).json()

    response = await client.post(
        f"/api/v1/live-chat/conversations/{conversation['id']}/messages",
        json={"visitor_id": "visitor-1", "content": "   "},
    )

    assert response.status_code == 400


async def test_typing_signal(client: AsyncClient, broker: RealtimeBroker):
    conversation = (await client.post("/api/v1/live-chat/conversations", json=START)).json()

    async with broker.subscribe(conversation_channel(conversation["id"])) as subscription:
        response = await client.post(
            f"/api/v1/live-chat/conversations/{conversation['id']}/typing",
            json={"visitor_id": "visitor-1", "is_typing": True},
        )
        event = await subscription.get(timeout=1)

    assert response.status_code == 200
    assert response.json() == {"conversation_id": conversation["id"], "sender": "visitor", "is_typing": True}
    assert event.event == "typing"
    assert event.payload["is_typing"] is True


async def test_notify_requires_ids(client: AsyncClient):
    response = await client.post("/api/v1/live-chat/notify", json={"conversationId": "c1"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing required fields"}


async def test_notify_sends_email(client: AsyncClient, sendgrid_requests: List[httpx.Request]):
    response = await client.post(
        "/api/v1/live-chat/notify",
        json={"conversationId": "c1", "visitorId": "visitor-1", "isReopen": True},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert "Chat Reopened: Direct conversation" in sendgrid_requests[0].content.decode()


class TestSseHelpers:
    async def test_event_names(self):
        assert sse_event_name(_event("INSERT", table="chat_messages")) == "message"
        assert sse_event_name(_event("UPDATE", table="chat_conversations")) == "conversation"
        assert sse_event_name(_event("typing")) == "typing"

    async def test_serialize_event(self):
        serialized = serialize_event(_event("INSERT", table="chat_messages", payload={"content": "hi"}))

        assert serialized["event"] == "message"
        assert json.loads(serialized["data"]) == {"type": "INSERT", "payload": {"content": "hi"}}


async def test_stream_channel_relays_until_disconnect(broker: RealtimeBroker):
    request = FakeRequest()
    stream = stream_channel(request, broker, "conversation:c1")

    first = asyncio.create_task(stream.__anext__())
    await asyncio.sleep(0)
    assert broker.subscriber_count("conversation:c1") == 1
    broker.publish("conversation:c1", "INSERT", {"content": "hi"}, table="chat_messages")

    sent = await asyncio.wait_for(first, timeout=2)
    assert sent["event"] == "message"

    request.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()
    assert broker.subscriber_count("conversation:c1") == 0
