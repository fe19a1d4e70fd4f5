"""
Live chat repository.

Data access for conversations and messages, including the unread counters
shown in the admin dashboard.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, update
from sqlmodel import select

from ..entities.live_chat import ChatConversation, ChatMessage, ConversationStatus, MessageSender
from .base import AsyncBaseRepository, QueryBuilder


class ConversationRepository(AsyncBaseRepository[ChatConversation]):
    """Repository for chat conversations and their messages."""

    def __init__(self, session) -> None:
        super().__init__(session, ChatConversation)

    async def get_open_for_visitor(self, visitor_id: str) -> Optional[ChatConversation]:
        stmt = (
            select(ChatConversation)
            .where(
                ChatConversation.visitor_id == visitor_id,
                ChatConversation.status == ConversationStatus.OPEN.value,
            )
            .order_by(ChatConversation.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_latest_for_visitor(self, visitor_id: str) -> Optional[ChatConversation]:
        stmt = (
            select(ChatConversation)
            .where(ChatConversation.visitor_id == visitor_id)
            .order_by(ChatConversation.created_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_recent(
        self, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ChatConversation]:
        """Conversations by latest activity (last message, else creation) first."""
        activity = func.coalesce(ChatConversation.last_message_at, ChatConversation.created_at)
        stmt = QueryBuilder.apply_filters(select(ChatConversation), ChatConversation, {"status": status})
        stmt = stmt.order_by(activity.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def unread_counts(self, conversation_ids: List[str]) -> Dict[str, int]:
        """Number of unread visitor messages per conversation id."""
        if not conversation_ids:
            return {}
        stmt = (
            select(ChatMessage.conversation_id, func.count(ChatMessage.id))
            .where(
                ChatMessage.conversation_id.in_(conversation_ids),  # type: ignore[attr-defined]
                ChatMessage.sender == MessageSender.VISITOR.value,
                ChatMessage.read_at.is_(None),  # type: ignore[union-attr]
            )
            .group_by(ChatMessage.conversation_id)
        )
        result = await self.session.execute(stmt)
        return {conversation_id: int(count) for conversation_id, count in result.all()}

    async def list_messages(self, conversation_id: str) -> List[ChatMessage]:
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at, ChatMessage.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_message(self, conversation: ChatConversation, message: ChatMessage) -> ChatMessage:
        """Store a message and bump the conversation's last activity in one commit."""
        conversation.last_message_at = message.created_at
        self.session.add(message)
        self.session.add(conversation)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def mark_read(self, conversation_id: str, sender: MessageSender, read_at: datetime) -> int:
        """Mark unread messages from ``sender`` as read; returns how many changed."""
        stmt = (
            update(ChatMessage)
            .where(
                ChatMessage.conversation_id == conversation_id,
                ChatMessage.sender == sender.value,
                ChatMessage.read_at.is_(None),  # type: ignore[union-attr]
            )
            .values(read_at=read_at)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)
