"""
In-process realtime broker.

Fans change events out to subscribers of named channels. Each subscriber owns
a bounded queue; a slow subscriber loses events instead of blocking the
publisher. Events are delivered in publish order per channel and subscriber,
with no replay for late subscribers.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, AsyncIterator, Dict, Optional, Set

from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.live_chat import RealtimeEvent
from sws_blog.core.text import utc_now

logger = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 100


def conversation_channel(conversation_id: str) -> str:
    return f"conversation:{conversation_id}"


class Subscription:
    """A live subscription to one channel.

    Use as an async context manager so it is always removed from the broker,
    and iterate it (or call :meth:`get`) to receive events.
    """

    def __init__(self, broker: "RealtimeBroker", channel: str, maxsize: int) -> None:
        self.broker = broker
        self.channel = channel
        self.queue: asyncio.Queue[RealtimeEvent] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    async def get(self, timeout: Optional[float] = None) -> Optional[RealtimeEvent]:
        """Next event, or ``None`` when ``timeout`` elapses first."""
        if timeout is None:
            return await self.queue.get()
        try:
            return await asyncio.wait_for(self.queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        self.broker.unsubscribe(self)

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    def __aiter__(self) -> AsyncIterator[RealtimeEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RealtimeEvent]:
        while True:
            yield await self.queue.get()


class RealtimeBroker:
    """Publish/subscribe hub keyed by channel name."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.queue_size = queue_size
        self._channels: Dict[str, Set[Subscription]] = defaultdict(set)

    def subscribe(self, channel: str) -> Subscription:
        subscription = Subscription(self, channel, self.queue_size)
        self._channels[channel].add(subscription)
        logger.debug(f"Subscribed to {channel} ({len(self._channels[channel])} subscribers)")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._channels.get(subscription.channel)
        if not subscribers:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._channels[subscription.channel]
        logger.debug(f"Unsubscribed from {subscription.channel}")

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    def publish(
        self, channel: str, event: str, payload: Dict[str, Any], table: Optional[str] = None
    ) -> RealtimeEvent:
        """Deliver an event to every current subscriber of ``channel``.

        Never blocks: when a subscriber's queue is full the event is dropped
        for that subscriber only.
        """
        message = RealtimeEvent(channel=channel, event=event, table=table, payload=payload, sent_at=utc_now())
        for subscription in list(self._channels.get(channel, ())):
            try:
                subscription.queue.put_nowait(message)
            except asyncio.QueueFull:
                subscription.dropped += 1
                logger.warning(f"Realtime queue full on {channel}; dropped {event} event")
        return message
