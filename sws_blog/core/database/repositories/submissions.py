"""
Form submission repositories: enquiries, contact messages, newsletter
subscribers, surveys and booking requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlmodel import select

from ..entities.blog import BlogPost
from ..entities.submissions import (
    BookingRequest,
    ContactSubmission,
    Enquiry,
    NewsletterSubscriber,
    Survey,
)
from .base import AsyncBaseRepository, QueryBuilder


class SurveyRepository(AsyncBaseRepository[Survey]):
    def __init__(self, session) -> None:
        super().__init__(session, Survey)

    async def names_by_id(self, survey_ids: Sequence[str]) -> Dict[str, str]:
        if not survey_ids:
            return {}
        result = await self.session.execute(
            select(Survey.id, Survey.name).where(Survey.id.in_(survey_ids))  # type: ignore[attr-defined]
        )
        return {survey_id: name for survey_id, name in result.all()}


class EnquiryRepository(AsyncBaseRepository[Enquiry]):
    """Repository for survey responses and leads."""

    def __init__(self, session) -> None:
        super().__init__(session, Enquiry)

    async def search(
        self,
        survey_id: Optional[str] = None,
        post_id: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Enquiry]:
        """Enquiries matching the filters, newest first. Date bounds are inclusive."""
        stmt = QueryBuilder.apply_filters(
            select(Enquiry), Enquiry, {"survey_id": survey_id, "post_id": post_id, "status": status}
        )
        if date_from is not None:
            stmt = stmt.where(Enquiry.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Enquiry.created_at <= date_to)
        stmt = stmt.order_by(Enquiry.created_at.desc())  # type: ignore[attr-defined]
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def post_titles_by_id(self, post_ids: Sequence[str]) -> Dict[str, str]:
        if not post_ids:
            return {}
        result = await self.session.execute(
            select(BlogPost.id, BlogPost.title).where(BlogPost.id.in_(post_ids))  # type: ignore[union-attr]
        )
        return {post_id: title for post_id, title in result.all()}


class ContactSubmissionRepository(AsyncBaseRepository[ContactSubmission]):
    def __init__(self, session) -> None:
        super().__init__(session, ContactSubmission)

    async def list_recent(
        self, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ContactSubmission]:
        stmt = QueryBuilder.apply_filters(select(ContactSubmission), ContactSubmission, {"status": status})
        stmt = stmt.order_by(ContactSubmission.created_at.desc())  # type: ignore[attr-defined]
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class NewsletterSubscriberRepository(AsyncBaseRepository[NewsletterSubscriber]):
    def __init__(self, session) -> None:
        super().__init__(session, NewsletterSubscriber)

    async def get_by_email(self, email: str) -> Optional[NewsletterSubscriber]:
        result = await self.session.execute(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))
        return result.scalars().first()


class BookingRequestRepository(AsyncBaseRepository[BookingRequest]):
    def __init__(self, session) -> None:
        super().__init__(session, BookingRequest)
