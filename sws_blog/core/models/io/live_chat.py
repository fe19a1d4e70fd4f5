"""
Live chat I/O models for API requests and responses.

These schemas define the contract used by the visitor chat widget and the
admin live chat dashboard, including the realtime event payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sws_blog.core.database.entities.live_chat import ConversationStatus, MessageSender


class ConversationStart(BaseModel):
    """Visitor request to start (or resume) a conversation."""

    visitor_id: str = Field(min_length=1, description="Anonymous id kept by the widget")
    post_id: Optional[str] = Field(default=None, description="Post the chat was opened from")
    source_url: Optional[str] = Field(default=None, description="Page URL the chat was opened from")
    consent_given: bool = Field(default=False, description="Visitor accepted the privacy policy")


class VisitorMessageCreate(BaseModel):
    visitor_id: str = Field(min_length=1)
    content: str


class AdminMessageCreate(BaseModel):
    content: str


class VisitorTypingUpdate(BaseModel):
    visitor_id: str = Field(min_length=1)
    is_typing: bool


class AdminTypingUpdate(BaseModel):
    is_typing: bool


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    conversation_id: str
    sender: MessageSender
    content: str
    read_at: Optional[datetime] = None
    created_at: datetime


class ConversationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    visitor_id: str
    post_id: Optional[str] = None
    source_url: Optional[str] = None
    status: ConversationStatus
    consent_given_at: datetime
    last_message_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ConversationSummary(ConversationRead):
    """Admin list entry with the number of unread visitor messages."""

    unread_count: int = 0


class ConversationWithMessages(BaseModel):
    conversation: ConversationRead
    messages: List[ChatMessageRead]


class TypingState(BaseModel):
    """Whether a side of the conversation is currently typing."""

    conversation_id: str
    sender: MessageSender
    is_typing: bool


class RealtimeEvent(BaseModel):
    """Change event delivered to realtime subscribers.

    ``event`` follows database change-feed naming (INSERT, UPDATE) plus the
    ephemeral ``typing`` kind. ``table`` names the record type for change events.
    """

    channel: str
    event: str
    table: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    sent_at: datetime


class NotifyRequest(BaseModel):
    """Body of the new-chat notification endpoint (camelCase like the widget sends it)."""

    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(default="", alias="conversationId")
    visitor_id: str = Field(default="", alias="visitorId")
    post_title: Optional[str] = Field(default=None, alias="postTitle")
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    is_reopen: bool = Field(default=False, alias="isReopen")


class NotifyResponse(BaseModel):
    success: bool = True


class PendingNotification(BaseModel):
    """New chat awaiting acknowledgement in the admin dashboard."""

    conversation: Optional[ConversationRead] = None
