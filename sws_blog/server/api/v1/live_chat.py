"""
Live Chat Endpoints (visitor side).

The chat widget starts or resumes a conversation, posts messages and typing
signals, and follows the conversation over Server-Sent Events. The widget
identifies the visitor with an anonymous ``visitor_id`` kept in local storage.
"""

import json
from typing import AsyncIterator, Dict

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, Response, status
from sse_starlette.sse import EventSourceResponse

from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.live_chat import (
    ChatMessageRead,
    ConversationRead,
    ConversationStart,
    ConversationWithMessages,
    NotifyRequest,
    NotifyResponse,
    RealtimeEvent,
    TypingState,
    VisitorMessageCreate,
    VisitorTypingUpdate,
)
from sws_blog.server.services.deps import BrokerDep, LiveChatDep, NotifierDep
from sws_blog.server.services.live_chat import CONVERSATIONS_TABLE, MESSAGES_TABLE
from sws_blog.server.services.realtime import RealtimeBroker, conversation_channel

logger = get_logger(__name__)
router = APIRouter()

SSE_POLL_SECONDS = 1.0
SSE_PING_SECONDS = 15

_EVENT_NAMES = {MESSAGES_TABLE: "message", CONVERSATIONS_TABLE: "conversation"}


def sse_event_name(event: RealtimeEvent) -> str:
    """SSE event name for a realtime event: message, conversation or typing."""
    if event.table:
        return _EVENT_NAMES.get(event.table, event.table)
    return event.event


def serialize_event(event: RealtimeEvent) -> Dict[str, str]:
    return {
        "event": sse_event_name(event),
        "data": json.dumps({"type": event.event, "payload": event.payload}, default=str),
    }


async def stream_channel(request: Request, broker: RealtimeBroker, channel: str) -> AsyncIterator[Dict[str, str]]:
    """Relay a broker channel to an SSE client until it disconnects."""
    async with broker.subscribe(channel) as subscription:
        logger.info(f"SSE client subscribed to {channel}")
        while True:
            if await request.is_disconnected():
                logger.info(f"SSE client disconnected from {channel}")
                break
            event = await subscription.get(timeout=SSE_POLL_SECONDS)
            if event is not None:
                yield serialize_event(event)


@router.post(
    "/conversations",
    response_model=ConversationRead,
    summary="Start Conversation",
    description="Resume the visitor's open conversation, reopen their last closed one, or start a new one.",
    response_description="The conversation to use.",
    responses={
        200: {"description": "Existing or reopened conversation"},
        201: {"description": "New conversation created"},
        400: {"description": "Privacy consent not given"},
    },
)
async def start_conversation(
    payload: ConversationStart,
    response: Response,
    background_tasks: BackgroundTasks,
    live_chat: LiveChatDep,
    notifier: NotifierDep,
) -> ConversationRead:
    """
    Start or resume a conversation.

    - **visitor_id**: anonymous id kept by the widget
    - **consent_given**: must be true
    - **post_id** / **source_url**: where the chat was opened

    A new or reopened conversation triggers an email notification to the site
    owner after the response is sent. Archived conversations are never reopened.
    """
    result = await live_chat.start(payload)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    if result.needs_notification:
        background_tasks.add_task(
            notifier.notify,
            conversation_id=result.conversation.id,
            visitor_id=result.conversation.visitor_id,
            post_title=result.post_title,
            source_url=result.conversation.source_url,
            is_reopen=result.reopened,
        )
    return result.conversation


@router.get(
    "/conversations/{conversation_id}",
    response_model=ConversationWithMessages,
    summary="Get Conversation",
    responses={403: {"description": "Conversation belongs to another visitor"}, 404: {"description": "Not found"}},
)
async def get_conversation(conversation_id: str, visitor_id: str, live_chat: LiveChatDep) -> ConversationWithMessages:
    return await live_chat.get_for_visitor(conversation_id, visitor_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message (visitor)",
    responses={
        400: {"description": "Empty message"},
        403: {"description": "Conversation belongs to another visitor"},
        409: {"description": "Conversation is closed or archived"},
    },
)
async def send_message(
    conversation_id: str, payload: VisitorMessageCreate, live_chat: LiveChatDep
) -> ChatMessageRead:
    return await live_chat.visitor_message(conversation_id, payload.visitor_id, payload.content)


@router.post(
    "/conversations/{conversation_id}/typing",
    response_model=TypingState,
    summary="Typing Signal (visitor)",
    description="Report that the visitor started or stopped typing. Typing expires on its own after a few seconds.",
)
async def visitor_typing(conversation_id: str, payload: VisitorTypingUpdate, live_chat: LiveChatDep) -> TypingState:
    return await live_chat.visitor_typing(conversation_id, payload.visitor_id, payload.is_typing)


@router.get(
    "/conversations/{conversation_id}/events",
    summary="Conversation Events (SSE)",
    description="Server-Sent Events stream of new messages, conversation status changes and typing signals.",
    responses={403: {"description": "Conversation belongs to another visitor"}},
)
async def conversation_events(
    conversation_id: str, visitor_id: str, request: Request, live_chat: LiveChatDep, broker: BrokerDep
):
    await live_chat.ensure_visitor_access(conversation_id, visitor_id)
    return EventSourceResponse(
        stream_channel(request, broker, conversation_channel(conversation_id)), ping=SSE_PING_SECONDS
    )


@router.post(
    "/notify",
    response_model=NotifyResponse,
    summary="Notify New Chat",
    description="Email the site owner about a new or reopened conversation. Email failures are logged, not returned.",
    responses={400: {"description": "Missing required fields"}},
)
async def notify_new_chat(payload: NotifyRequest, notifier: NotifierDep) -> NotifyResponse:
    if not payload.conversation_id or not payload.visitor_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    await notifier.notify(
        conversation_id=payload.conversation_id,
        visitor_id=payload.visitor_id,
        post_title=payload.post_title,
        source_url=payload.source_url,
        is_reopen=payload.is_reopen,
    )
    return NotifyResponse(success=True)
