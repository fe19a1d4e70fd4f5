"""
Public form handling and the admin views of submitted forms.

Contact messages, newsletter sign-ups and enquiries only get presence and
format checks before they are stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.entities.submissions import (
    ContactStatus,
    ContactSubmission,
    Enquiry,
    EnquiryStatus,
    NewsletterSubscriber,
    SubscriberStatus,
)
from sws_blog.core.database.repositories import (
    ContactSubmissionRepository,
    EnquiryRepository,
    NewsletterSubscriberRepository,
    PostRepository,
    SurveyRepository,
)
from sws_blog.core.errors import NotFoundError, ValidationFailedError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.submissions import (
    ContactCreate,
    ContactRead,
    EnquiryCreate,
    EnquiryRead,
    NewsletterSubscribe,
    SubscriberRead,
)
from sws_blog.core.text import is_valid_email, to_naive_utc, utc_now

from .enquiry_export import enquiries_to_csv, export_filename

logger = get_logger(__name__)


def _require(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailedError(f"{label} is required")
    return value


def _require_email(value: Optional[str]) -> str:
    email = _require(value, "Email")
    if not is_valid_email(email):
        raise ValidationFailedError("Invalid email address")
    return email


class SubmissionService:
    """Stores public form submissions and serves them to the admin dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.contacts = ContactSubmissionRepository(session)
        self.subscribers = NewsletterSubscriberRepository(session)
        self.enquiries = EnquiryRepository(session)
        self.surveys = SurveyRepository(session)
        self.posts = PostRepository(session)

    # ------------------------------------------------------------------
    # Contact form
    # ------------------------------------------------------------------

    async def submit_contact(self, payload: ContactCreate) -> ContactRead:
        submission = ContactSubmission(
            name=_require(payload.name, "Name"),
            email=_require_email(payload.email),
            message=_require(payload.message, "Message"),
            company=(payload.company or "").strip() or None,
            phone=(payload.phone or "").strip() or None,
        )
        submission = await self.contacts.create(submission)
        logger.info(f"Contact submission stored: {submission.id}")
        return ContactRead.model_validate(submission)

    async def list_contacts(
        self, status: Optional[ContactStatus] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[ContactRead]:
        rows = await self.contacts.list_recent(status.value if status else None, limit, offset)
        return [ContactRead.model_validate(r) for r in rows]

    async def set_contact_status(self, submission_id: str, status: ContactStatus) -> ContactRead:
        submission = await self.contacts.get_by_id(submission_id)
        if submission is None:
            raise NotFoundError("Contact submission", submission_id)
        submission.status = status.value
        return ContactRead.model_validate(await self.contacts.update(submission))

    # ------------------------------------------------------------------
    # Newsletter
    # ------------------------------------------------------------------

    async def subscribe(self, payload: NewsletterSubscribe) -> SubscriberRead:
        """Add an email to the list; re-subscribes an unsubscribed (or bounced) address."""
        email = _require_email(payload.email).lower()
        subscriber = await self.subscribers.get_by_email(email)
        if subscriber is None:
            subscriber = await self.subscribers.create(
                NewsletterSubscriber(email=email, name=payload.name, source=payload.source)
            )
            logger.info(f"Newsletter subscriber added: {subscriber.id}")
        elif subscriber.status != SubscriberStatus.ACTIVE.value:
            subscriber.status = SubscriberStatus.ACTIVE.value
            subscriber.subscribed_at = utc_now()
            subscriber.unsubscribed_at = None
            if payload.name:
                subscriber.name = payload.name
            subscriber = await self.subscribers.update(subscriber)
            logger.info(f"Newsletter subscriber reactivated: {subscriber.id}")
        return SubscriberRead.model_validate(subscriber)

    async def unsubscribe(self, email: str) -> SubscriberRead:
        email = _require_email(email).lower()
        subscriber = await self.subscribers.get_by_email(email)
        if subscriber is None:
            raise NotFoundError("Subscriber", email)
        if subscriber.status != SubscriberStatus.UNSUBSCRIBED.value:
            subscriber.status = SubscriberStatus.UNSUBSCRIBED.value
            subscriber.unsubscribed_at = utc_now()
            subscriber = await self.subscribers.update(subscriber)
        return SubscriberRead.model_validate(subscriber)

    # ------------------------------------------------------------------
    # Enquiries
    # ------------------------------------------------------------------

    async def submit_enquiry(self, payload: EnquiryCreate) -> EnquiryRead:
        if payload.survey_id and await self.surveys.get_by_id(payload.survey_id) is None:
            raise NotFoundError("Survey", payload.survey_id)
        if payload.post_id and await self.posts.get_by_id(payload.post_id) is None:
            raise NotFoundError("Post", payload.post_id)
        email = (payload.respondent_email or "").strip() or None
        if email is not None and not is_valid_email(email):
            raise ValidationFailedError("Invalid email address")
        enquiry = Enquiry(
            survey_id=payload.survey_id or None,
            post_id=payload.post_id or None,
            respondent_name=(payload.respondent_name or "").strip() or None,
            respondent_email=email,
            response_data=payload.response_data,
        )
        enquiry = await self.enquiries.create(enquiry)
        logger.info(f"Enquiry stored: {enquiry.id}")
        return EnquiryRead.model_validate(enquiry)

    async def _search_enquiries(
        self,
        survey_id: Optional[str],
        post_id: Optional[str],
        status: Optional[EnquiryStatus],
        date_from: Optional[datetime],
        date_to: Optional[datetime],
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Enquiry]:
        return await self.enquiries.search(
            survey_id=survey_id or None,
            post_id=post_id or None,
            status=status.value if status else None,
            date_from=to_naive_utc(date_from),
            date_to=to_naive_utc(date_to),
            limit=limit,
            offset=offset,
        )

    async def list_enquiries(
        self,
        survey_id: Optional[str] = None,
        post_id: Optional[str] = None,
        status: Optional[EnquiryStatus] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[EnquiryRead]:
        rows = await self._search_enquiries(survey_id, post_id, status, date_from, date_to, limit, offset)
        return [EnquiryRead.model_validate(r) for r in rows]

    async def set_enquiry_status(self, enquiry_id: str, status: EnquiryStatus) -> EnquiryRead:
        enquiry = await self.enquiries.get_by_id(enquiry_id)
        if enquiry is None:
            raise NotFoundError("Enquiry", enquiry_id)
        enquiry.status = status.value
        return EnquiryRead.model_validate(await self.enquiries.update(enquiry))

    async def export_enquiries(
        self,
        survey_id: Optional[str] = None,
        post_id: Optional[str] = None,
        status: Optional[EnquiryStatus] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Tuple[str, str]:
        """CSV text and download filename for the filtered enquiries."""
        rows = await self._search_enquiries(survey_id, post_id, status, date_from, date_to)
        survey_names = await self.surveys.names_by_id(sorted({r.survey_id for r in rows if r.survey_id}))
        post_titles = await self.enquiries.post_titles_by_id(sorted({r.post_id for r in rows if r.post_id}))
        return enquiries_to_csv(rows, survey_names, post_titles), export_filename(utc_now().date())
