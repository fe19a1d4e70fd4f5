"""
Booking widget backend.

Proxies availability lookups to Calendly and turns a visitor's chosen slot
into a single-use, pre-filled scheduling link. Each booking is recorded.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.entities.submissions import BookingRequest
from sws_blog.core.database.repositories import BookingRequestRepository, PostRepository
from sws_blog.core.errors import NotFoundError, ValidationFailedError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.booking import AvailableTime, BookingCreate, BookingResponse
from sws_blog.core.text import is_valid_email, to_naive_utc

from .calendly import CalendlyClient, build_prefilled_url

logger = get_logger(__name__)


class BookingService:
    def __init__(self, session: AsyncSession, calendly: CalendlyClient) -> None:
        self.session = session
        self.calendly = calendly
        self.bookings = BookingRequestRepository(session)
        self.posts = PostRepository(session)

    async def available_times(
        self, event_type_uri: str, start_time: datetime, end_time: datetime
    ) -> List[AvailableTime]:
        if not event_type_uri.strip():
            raise ValidationFailedError("event_type_uri is required")
        return await self.calendly.list_available_times(event_type_uri, start_time, end_time)

    async def book(self, payload: BookingCreate) -> BookingResponse:
        name = payload.name.strip()
        email = payload.email.strip()
        if not name:
            raise ValidationFailedError("Name is required")
        if not email:
            raise ValidationFailedError("Email is required")
        if not is_valid_email(email):
            raise ValidationFailedError("Invalid email address")
        if payload.post_id and await self.posts.get_by_id(payload.post_id) is None:
            raise NotFoundError("Post", payload.post_id)

        booking_url = await self.calendly.create_scheduling_link(payload.event_type_uri)
        scheduling_url = build_prefilled_url(booking_url, payload)

        request = await self.bookings.create(
            BookingRequest(
                post_id=payload.post_id or None,
                event_type_uri=payload.event_type_uri,
                start_time=to_naive_utc(payload.start_time),
                name=name,
                email=email,
                phone=payload.phone,
                company=payload.company,
                message=payload.message,
                timezone=payload.timezone,
                scheduling_url=scheduling_url,
            )
        )
        logger.info(f"Booking request {request.id} created for event type {payload.event_type_uri}")
        return BookingResponse(scheduling_url=scheduling_url)
