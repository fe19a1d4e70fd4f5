"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides typed async data access operations for its
corresponding SQLModel entity models.

Modules:
- base: AsyncBaseRepository and QueryBuilder utilities
- posts: Posts and their tag, FAQ and related-post links
- taxonomy: Categories, tags and authors
- live_chat: Conversations and messages
- submissions: Enquiries, contact messages, newsletter, surveys, bookings
"""

from .base import AsyncBaseRepository, QueryBuilder
from .live_chat import ConversationRepository
from .posts import PostRepository
from .submissions import (
    BookingRequestRepository,
    ContactSubmissionRepository,
    EnquiryRepository,
    NewsletterSubscriberRepository,
    SurveyRepository,
)
from .taxonomy import AuthorRepository, CategoryRepository, TagRepository

__all__ = [
    "AsyncBaseRepository",
    "AuthorRepository",
    "BookingRequestRepository",
    "CategoryRepository",
    "ContactSubmissionRepository",
    "ConversationRepository",
    "EnquiryRepository",
    "NewsletterSubscriberRepository",
    "PostRepository",
    "QueryBuilder",
    "SurveyRepository",
    "TagRepository",
]
