"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- blog: Authors, categories, tags, posts, FAQs and post links
- live_chat: Live chat conversations and messages
- submissions: Enquiries, contact submissions, newsletter subscribers, booking requests
"""

from . import blog, live_chat, submissions

__all__ = [
    "blog",
    "live_chat",
    "submissions",
]
