"""
Typing indicator state.

Tracks whether each side of a conversation is typing. A typing signal
expires on its own after ``timeout`` seconds, and repeated ``true`` signals
are only re-broadcast once per ``debounce`` window.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from sws_blog.core.database.entities.live_chat import MessageSender


@dataclass
class _TypingEntry:
    last_signal_at: float
    last_broadcast_at: float


class TypingTracker:
    """Per-process typing state keyed by (conversation id, sender side).

    Args:
        timeout: Seconds after the last ``true`` signal before typing expires
        debounce: Minimum seconds between two broadcasts of a repeated ``true`` signal
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        timeout: float = 3.0,
        debounce: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self.debounce = debounce
        self._clock = clock
        self._entries: Dict[Tuple[str, MessageSender], _TypingEntry] = {}

    def _live_entry(self, key: Tuple[str, MessageSender]) -> _TypingEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.last_signal_at >= self.timeout:
            del self._entries[key]
            return None
        return entry

    def is_typing(self, conversation_id: str, sender: MessageSender) -> bool:
        return self._live_entry((conversation_id, sender)) is not None

    def update(self, conversation_id: str, sender: MessageSender, is_typing: bool) -> bool:
        """Record a typing signal and report whether it should be broadcast.

        A ``true`` signal is broadcast when the side was not already typing or
        the previous broadcast is older than the debounce window. A ``false``
        signal is broadcast only when the side was typing.
        """
        key = (conversation_id, sender)
        now = self._clock()
        entry = self._live_entry(key)

        if not is_typing:
            if entry is None:
                return False
            del self._entries[key]
            return True

        if entry is None:
            self._entries[key] = _TypingEntry(last_signal_at=now, last_broadcast_at=now)
            return True

        entry.last_signal_at = now
        if now - entry.last_broadcast_at >= self.debounce:
            entry.last_broadcast_at = now
            return True
        return False

    def clear(self, conversation_id: str, sender: MessageSender) -> bool:
        """Drop typing state (e.g. after a message is sent); True when it was typing."""
        return self.update(conversation_id, sender, False)

    def forget_conversation(self, conversation_id: str) -> None:
        for key in [k for k in self._entries if k[0] == conversation_id]:
            del self._entries[key]
