"""
Live chat conversations.

Visitor and admin operations on conversations and messages. Every state
change is published to the realtime broker: conversation lifecycle events on
the admin notification channel and the conversation's own channel, messages
and typing signals on the conversation channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.entities.live_chat import (
    ChatConversation,
    ChatMessage,
    ConversationStatus,
    MessageSender,
)
from sws_blog.core.database.repositories import ConversationRepository, PostRepository
from sws_blog.core.errors import (
    ConversationClosedError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.live_chat import (
    ChatMessageRead,
    ConversationRead,
    ConversationStart,
    ConversationSummary,
    ConversationWithMessages,
    TypingState,
)
from sws_blog.core.monitoring import log_chat_event
from sws_blog.core.text import utc_now
from sws_blog.server.core.constant import ADMIN_NOTIFICATIONS_CHANNEL

from .realtime import RealtimeBroker, conversation_channel
from .typing_tracker import TypingTracker

logger = get_logger(__name__)

CONVERSATIONS_TABLE = "chat_conversations"
MESSAGES_TABLE = "chat_messages"
TYPING_EVENT = "typing"


@dataclass
class StartResult:
    """Outcome of a visitor starting a chat."""

    conversation: ConversationRead
    created: bool = False
    reopened: bool = False
    post_title: Optional[str] = None

    @property
    def needs_notification(self) -> bool:
        return self.created or self.reopened


class LiveChatService:
    """Conversation lifecycle, messaging and typing for one request."""

    def __init__(self, session: AsyncSession, broker: RealtimeBroker, typing: TypingTracker) -> None:
        self.session = session
        self.broker = broker
        self.typing = typing
        self.conversations = ConversationRepository(session)
        self.posts = PostRepository(session)

    # ------------------------------------------------------------------
    # Event publishing
    # ------------------------------------------------------------------

    def _publish_conversation(self, conversation: ChatConversation, event: str, admin: bool = False) -> None:
        payload = ConversationRead.model_validate(conversation).model_dump(mode="json")
        self.broker.publish(conversation_channel(conversation.id), event, payload, table=CONVERSATIONS_TABLE)
        if admin:
            self.broker.publish(ADMIN_NOTIFICATIONS_CHANNEL, event, payload, table=CONVERSATIONS_TABLE)

    def _publish_typing(self, conversation_id: str, sender: MessageSender, is_typing: bool) -> None:
        payload = TypingState(conversation_id=conversation_id, sender=sender, is_typing=is_typing)
        self.broker.publish(conversation_channel(conversation_id), TYPING_EVENT, payload.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _get(self, conversation_id: str) -> ChatConversation:
        conversation = await self.conversations.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", conversation_id)
        return conversation

    async def _get_for_visitor(self, conversation_id: str, visitor_id: str) -> ChatConversation:
        conversation = await self._get(conversation_id)
        if conversation.visitor_id != visitor_id:
            raise ForbiddenError("Conversation belongs to another visitor")
        return conversation

    async def _with_messages(self, conversation: ChatConversation) -> ConversationWithMessages:
        messages = await self.conversations.list_messages(conversation.id)
        return ConversationWithMessages(
            conversation=ConversationRead.model_validate(conversation),
            messages=[ChatMessageRead.model_validate(m) for m in messages],
        )

    async def _post_title(self, post_id: Optional[str]) -> Optional[str]:
        if not post_id:
            return None
        post = await self.posts.get_by_id(post_id)
        return post.title if post else None

    # ------------------------------------------------------------------
    # Visitor operations
    # ------------------------------------------------------------------

    async def start(self, payload: ConversationStart) -> StartResult:
        """Return the visitor's open conversation, reopen their last closed one, or create a new one.

        Archived conversations are never reopened.
        """
        if not payload.consent_given:
            raise ValidationFailedError("Privacy consent is required")

        existing = await self.conversations.get_open_for_visitor(payload.visitor_id)
        if existing is not None:
            return StartResult(conversation=ConversationRead.model_validate(existing))

        post_id = payload.post_id or None
        if post_id and await self.posts.get_by_id(post_id) is None:
            raise NotFoundError("Post", post_id)

        latest = await self.conversations.get_latest_for_visitor(payload.visitor_id)
        now = utc_now()
        if latest is not None and latest.status == ConversationStatus.CLOSED.value:
            latest.status = ConversationStatus.OPEN.value
            latest.closed_at = None
            latest.consent_given_at = now
            latest.updated_at = now
            conversation = await self.conversations.update(latest)
            self._publish_conversation(conversation, "UPDATE", admin=True)
            log_chat_event("reopened", conversation.id)
            logger.info(f"Reopened conversation {conversation.id} for visitor {payload.visitor_id}")
            return StartResult(
                conversation=ConversationRead.model_validate(conversation),
                reopened=True,
                post_title=await self._post_title(conversation.post_id),
            )

        conversation = await self.conversations.create(
            ChatConversation(
                visitor_id=payload.visitor_id,
                post_id=post_id,
                source_url=payload.source_url,
                consent_given_at=now,
            )
        )
        self._publish_conversation(conversation, "INSERT", admin=True)
        log_chat_event("started", conversation.id, post_id=post_id)
        logger.info(f"Created conversation {conversation.id} for visitor {payload.visitor_id}")
        return StartResult(
            conversation=ConversationRead.model_validate(conversation),
            created=True,
            post_title=await self._post_title(post_id),
        )

    async def get_for_visitor(self, conversation_id: str, visitor_id: str) -> ConversationWithMessages:
        return await self._with_messages(await self._get_for_visitor(conversation_id, visitor_id))

    async def ensure_visitor_access(self, conversation_id: str, visitor_id: str) -> None:
        await self._get_for_visitor(conversation_id, visitor_id)

    async def visitor_message(self, conversation_id: str, visitor_id: str, content: str) -> ChatMessageRead:
        conversation = await self._get_for_visitor(conversation_id, visitor_id)
        return await self._send(conversation, MessageSender.VISITOR, content)

    async def visitor_typing(self, conversation_id: str, visitor_id: str, is_typing: bool) -> TypingState:
        await self._get_for_visitor(conversation_id, visitor_id)
        return self._set_typing(conversation_id, MessageSender.VISITOR, is_typing)

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    async def list_for_admin(
        self, status: Optional[ConversationStatus] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ConversationSummary]:
        rows = await self.conversations.list_recent(status.value if status else None, limit, offset)
        unread = await self.conversations.unread_counts([c.id for c in rows])
        return [
            ConversationSummary.model_validate({**c.model_dump(), "unread_count": unread.get(c.id, 0)})
            for c in rows
        ]

    async def get_for_admin(self, conversation_id: str) -> ConversationWithMessages:
        return await self._with_messages(await self._get(conversation_id))

    async def ensure_exists(self, conversation_id: str) -> None:
        await self._get(conversation_id)

    async def admin_message(self, conversation_id: str, content: str) -> ChatMessageRead:
        conversation = await self._get(conversation_id)
        return await self._send(conversation, MessageSender.ADMIN, content)

    async def admin_typing(self, conversation_id: str, is_typing: bool) -> TypingState:
        await self._get(conversation_id)
        return self._set_typing(conversation_id, MessageSender.ADMIN, is_typing)

    async def mark_read(self, conversation_id: str) -> int:
        """Mark the visitor's unread messages as read by the admin."""
        await self._get(conversation_id)
        count = await self.conversations.mark_read(conversation_id, MessageSender.VISITOR, utc_now())
        logger.debug(f"Marked {count} message(s) read in conversation {conversation_id}")
        return count

    async def close(self, conversation_id: str) -> ConversationRead:
        return await self._set_status(conversation_id, ConversationStatus.CLOSED)

    async def archive(self, conversation_id: str) -> ConversationRead:
        return await self._set_status(conversation_id, ConversationStatus.ARCHIVED)

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    async def _send(self, conversation: ChatConversation, sender: MessageSender, content: str) -> ChatMessageRead:
        text = content.strip()
        if not text:
            raise ValidationFailedError("Message content is required")
        if conversation.is_closed:
            raise ConversationClosedError(conversation.id, conversation.status)

        message = await self.conversations.add_message(
            conversation,
            ChatMessage(conversation_id=conversation.id, sender=sender.value, content=text, created_at=utc_now()),
        )
        read = ChatMessageRead.model_validate(message)
        self.broker.publish(
            conversation_channel(conversation.id), "INSERT", read.model_dump(mode="json"), table=MESSAGES_TABLE
        )
        if self.typing.clear(conversation.id, sender):
            self._publish_typing(conversation.id, sender, False)
        return read

    def _set_typing(self, conversation_id: str, sender: MessageSender, is_typing: bool) -> TypingState:
        if self.typing.update(conversation_id, sender, is_typing):
            self._publish_typing(conversation_id, sender, is_typing)
        return TypingState(
            conversation_id=conversation_id,
            sender=sender,
            is_typing=self.typing.is_typing(conversation_id, sender),
        )

    async def _set_status(self, conversation_id: str, status: ConversationStatus) -> ConversationRead:
        conversation = await self._get(conversation_id)
        now = utc_now()
        if status == ConversationStatus.CLOSED and conversation.status == ConversationStatus.ARCHIVED.value:
            raise ConversationClosedError(conversation.id, conversation.status)
        if conversation.status != status.value:
            conversation.status = status.value
            if conversation.closed_at is None:
                conversation.closed_at = now
            conversation.updated_at = now
            conversation = await self.conversations.update(conversation)
            self.typing.forget_conversation(conversation.id)
            self._publish_conversation(conversation, "UPDATE", admin=True)
            log_chat_event(status.value, conversation.id)
            logger.info(f"Conversation {conversation.id} is now {status.value}")
        return ConversationRead.model_validate(conversation)
