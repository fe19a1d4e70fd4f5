"""
Live chat entity models.

This module contains the database entities for visitor conversations and
their messages. A conversation is opened by a site visitor (identified by an
anonymous visitor id) and answered from the admin dashboard.

Table: chat_conversations, chat_messages
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from sws_blog.core.text import utc_now

from ..base import Base, new_id


class ConversationStatus(str, Enum):
    """Lifecycle of a conversation."""

    OPEN = "open"
    CLOSED = "closed"
    ARCHIVED = "archived"


class MessageSender(str, Enum):
    """Side that wrote a message."""

    VISITOR = "visitor"
    ADMIN = "admin"
    SYSTEM = "system"


class ChatConversation(Base, table=True):
    """A live chat thread between a visitor and an admin."""

    __tablename__ = "chat_conversations"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    visitor_id: str = Field(index=True, max_length=128)
    post_id: Optional[str] = Field(default=None, foreign_key="blog_posts.id", max_length=64)
    source_url: Optional[str] = Field(default=None)
    status: str = Field(default=ConversationStatus.OPEN.value, max_length=16, index=True)
    consent_given_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    last_message_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    closed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    @property
    def is_closed(self) -> bool:
        return self.status in (ConversationStatus.CLOSED.value, ConversationStatus.ARCHIVED.value)

    def __repr__(self) -> str:
        return f"ChatConversation(id={self.id}, visitor={self.visitor_id}, status={self.status})"


class ChatMessage(Base, table=True):
    """Individual message within a conversation."""

    __tablename__ = "chat_messages"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    conversation_id: str = Field(foreign_key="chat_conversations.id", index=True, max_length=64)
    sender: str = Field(max_length=16)
    content: str
    read_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"ChatMessage(id={self.id}, sender={self.sender}, conversation_id={self.conversation_id})"
