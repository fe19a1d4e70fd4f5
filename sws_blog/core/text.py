"""Small text and time helpers shared by services and entities."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

WORDS_PER_MINUTE = 200

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def generate_slug(title: str) -> str:
    """Build a URL slug: lowercase, non-alphanumeric runs collapsed to '-'."""
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def count_words(content: str) -> int:
    return len(content.split())


def read_time_minutes(word_count: int) -> int:
    """Reading time at WORDS_PER_MINUTE, never below one minute."""
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def clean_list(values: Optional[Iterable[str]]) -> List[str]:
    """Strip entries and drop blanks."""
    if not values:
        return []
    return [v.strip() for v in values if v and v.strip()]


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))
