"""
Live Chat Endpoints (admin side).

Conversation inbox, replies, read receipts, close/archive, typing signals,
realtime streams and the new-chat notification with its favicon flash.
"""

import json
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status
from sse_starlette.sse import EventSourceResponse

from sws_blog.core.database.entities.live_chat import ConversationStatus
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.live_chat import (
    AdminMessageCreate,
    AdminTypingUpdate,
    ChatMessageRead,
    ConversationRead,
    ConversationSummary,
    ConversationWithMessages,
    PendingNotification,
    TypingState,
)
from sws_blog.server.core.config import settings
from sws_blog.server.services.deps import BrokerDep, LiveChatDep, NotificationCenterDep
from sws_blog.server.services.realtime import conversation_channel

from .live_chat import SSE_PING_SECONDS, stream_channel

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/conversations",
    response_model=List[ConversationSummary],
    summary="List Conversations",
    description="Conversations by latest activity with the number of unread visitor messages.",
)
async def list_conversations(
    live_chat: LiveChatDep,
    status_filter: Optional[ConversationStatus] = Query(None, alias="status"),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[ConversationSummary]:
    return await live_chat.list_for_admin(status_filter, limit, offset)


@router.get(
    "/conversations/{conversation_id}",
    response_model=ConversationWithMessages,
    summary="Get Conversation (admin)",
    responses={404: {"description": "Conversation not found"}},
)
async def get_conversation(conversation_id: str, live_chat: LiveChatDep) -> ConversationWithMessages:
    return await live_chat.get_for_admin(conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Reply",
    responses={
        400: {"description": "Empty message"},
        404: {"description": "Conversation not found"},
        409: {"description": "Conversation is closed or archived"},
    },
)
async def reply(conversation_id: str, payload: AdminMessageCreate, live_chat: LiveChatDep) -> ChatMessageRead:
    return await live_chat.admin_message(conversation_id, payload.content)


@router.post(
    "/conversations/{conversation_id}/read",
    summary="Mark Read",
    description="Mark the visitor's unread messages as read.",
)
async def mark_read(conversation_id: str, live_chat: LiveChatDep):
    return {"marked_read": await live_chat.mark_read(conversation_id)}


@router.post("/conversations/{conversation_id}/close", response_model=ConversationRead, summary="Close Conversation")
async def close_conversation(conversation_id: str, live_chat: LiveChatDep) -> ConversationRead:
    """
    Close a conversation.

    The visitor can no longer post to it; starting a chat again reopens it.
    """
    return await live_chat.close(conversation_id)


@router.post(
    "/conversations/{conversation_id}/archive", response_model=ConversationRead, summary="Archive Conversation"
)
async def archive_conversation(conversation_id: str, live_chat: LiveChatDep) -> ConversationRead:
    """
    Archive a conversation.

    Archived conversations are never reopened; the visitor gets a new one.
    """
    return await live_chat.archive(conversation_id)


@router.post("/conversations/{conversation_id}/typing", response_model=TypingState, summary="Typing Signal (admin)")
async def admin_typing(conversation_id: str, payload: AdminTypingUpdate, live_chat: LiveChatDep) -> TypingState:
    return await live_chat.admin_typing(conversation_id, payload.is_typing)


@router.get("/conversations/{conversation_id}/events", summary="Conversation Events (SSE, admin)")
async def conversation_events(conversation_id: str, request: Request, live_chat: LiveChatDep, broker: BrokerDep):
    await live_chat.ensure_exists(conversation_id)
    return EventSourceResponse(
        stream_channel(request, broker, conversation_channel(conversation_id)), ping=SSE_PING_SECONDS
    )


# =====================================================================
# New-chat notification
# =====================================================================


@router.get(
    "/notifications",
    response_model=PendingNotification,
    summary="Pending New Chat",
    description="The new conversation awaiting acknowledgement, if any.",
)
async def get_pending_notification(center: NotificationCenterDep) -> PendingNotification:
    return PendingNotification(conversation=center.pending)


@router.post(
    "/notifications/dismiss",
    response_model=PendingNotification,
    summary="Dismiss New Chat",
    description="Acknowledge the pending new chat. Only the first of concurrent dismissals receives the conversation.",
)
async def dismiss_notification(center: NotificationCenterDep) -> PendingNotification:
    return PendingNotification(conversation=center.dismiss())


@router.get(
    "/notifications/events",
    summary="New Chat Events (SSE)",
    description="`new_chat` events carry the conversation; `favicon` events carry the icon href to show.",
)
async def notification_events(request: Request, center: NotificationCenterDep):
    interval = settings.live_chat.favicon_flash_interval_seconds

    async def event_generator():
        async for kind, value in center.events(interval):
            if await request.is_disconnected():
                logger.info("Admin notification stream disconnected")
                break
            if kind == "new_chat":
                yield {"event": "new_chat", "data": value.model_dump_json()}
            else:
                yield {"event": "favicon", "data": json.dumps({"href": value})}

    return EventSourceResponse(event_generator(), ping=SSE_PING_SECONDS)
