"""
Admin new-chat notification center.

Holds the single "new chat" notification shown in the admin dashboard and
drives the favicon flash while it is pending. Dismissal is a test-and-set:
the pending conversation is handed to exactly one caller.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Optional, Tuple

from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.live_chat import ConversationRead
from sws_blog.server.core.constant import (
    ADMIN_NOTIFICATIONS_CHANNEL,
    ALERT_FAVICON,
    ORIGINAL_FAVICON,
)

from .realtime import RealtimeBroker

logger = get_logger(__name__)


class ChatNotificationCenter:
    """Pending new-chat notification plus change signalling for waiters."""

    def __init__(self) -> None:
        self._pending: Optional[ConversationRead] = None
        self._changed = asyncio.Event()

    @property
    def pending(self) -> Optional[ConversationRead]:
        return self._pending

    def _signal(self) -> None:
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def _wait_for_change(self, timeout: Optional[float] = None) -> bool:
        changed = self._changed
        try:
            await asyncio.wait_for(changed.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _hold_frame(self, interval: float) -> None:
        """Sleep for ``interval``; only a dismissal ends the frame early."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + interval
        while self._pending is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            await self._wait_for_change(remaining)

    def announce(self, conversation: ConversationRead) -> None:
        """Make ``conversation`` the pending notification; the latest announcement wins."""
        self._pending = conversation
        logger.info(f"New chat notification pending: {conversation.id}")
        self._signal()

    def dismiss(self) -> Optional[ConversationRead]:
        """Clear the pending notification and return what was pending.

        The read and the clear happen with no suspension point in between, so
        concurrent dismissals on the event loop observe a conversation at most once.
        """
        pending, self._pending = self._pending, None
        if pending is not None:
            logger.info(f"New chat notification dismissed: {pending.id}")
            self._signal()
        return pending

    async def favicon_frames(self, interval: float) -> AsyncIterator[str]:
        """Favicon hrefs to display, forever.

        While a notification is pending the alert and original icons alternate
        every ``interval`` seconds, alert first. After a dismissal the original
        icon is yielded once, then the generator waits for the next announcement.
        """
        while True:
            if self._pending is None:
                await self._wait_for_change()
                continue
            show_alert = True
            while self._pending is not None:
                yield ALERT_FAVICON if show_alert else ORIGINAL_FAVICON
                show_alert = not show_alert
                await self._hold_frame(interval)
            yield ORIGINAL_FAVICON

    async def events(self, interval: float) -> AsyncIterator[Tuple[str, Any]]:
        """``("new_chat", conversation)`` and ``("favicon", href)`` events for the dashboard stream."""
        last_seen: Optional[ConversationRead] = None
        async for href in self.favicon_frames(interval):
            pending = self._pending
            if pending is not None and pending is not last_seen:
                last_seen = pending
                yield "new_chat", pending
            yield "favicon", href

    async def follow(self, broker: RealtimeBroker) -> None:
        """Announce every conversation INSERT published on the admin notification channel.

        Runs until cancelled.
        """
        async with broker.subscribe(ADMIN_NOTIFICATIONS_CHANNEL) as subscription:
            async for event in subscription:
                if event.event != "INSERT":
                    continue
                try:
                    self.announce(ConversationRead.model_validate(event.payload))
                except ValueError as e:
                    logger.warning(f"Ignoring malformed conversation event: {e}")
