"""
Form submission entity models.

Enquiries (survey responses), contact form submissions, newsletter
subscribers and booking requests. These records carry only presence/format
validation; everything else is plain storage.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field

from sws_blog.core.text import utc_now

from ..base import Base, new_id


class EnquiryStatus(str, Enum):
    NEW = "new"
    READ = "read"
    ARCHIVED = "archived"


class ContactStatus(str, Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class SubscriberStatus(str, Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"


class Survey(Base, table=True):
    """A questionnaire embedded in posts.

    Table: surveys
    """

    __tablename__ = "surveys"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class Enquiry(Base, table=True):
    """A survey response or lead captured from a post.

    Table: enquiries
    """

    __tablename__ = "enquiries"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    survey_id: Optional[str] = Field(default=None, foreign_key="surveys.id", index=True, max_length=64)
    post_id: Optional[str] = Field(default=None, foreign_key="blog_posts.id", index=True, max_length=64)
    respondent_name: Optional[str] = Field(default=None)
    respondent_email: Optional[str] = Field(default=None)
    status: str = Field(default=EnquiryStatus.NEW.value, max_length=16, index=True)
    response_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class ContactSubmission(Base, table=True):
    """A message sent through the contact form.

    Table: contact_submissions
    """

    __tablename__ = "contact_submissions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=200)
    email: str = Field(max_length=320)
    company: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None, max_length=64)
    message: str
    status: str = Field(default=ContactStatus.NEW.value, max_length=16)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)


class NewsletterSubscriber(Base, table=True):
    """A newsletter mailing list entry.

    Table: newsletter_subscribers
    """

    __tablename__ = "newsletter_subscribers"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=320, unique=True, index=True)
    name: Optional[str] = Field(default=None)
    status: str = Field(default=SubscriberStatus.ACTIVE.value, max_length=16)
    source: Optional[str] = Field(default=None)
    subscribed_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    unsubscribed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)


class BookingRequest(Base, table=True):
    """A meeting request forwarded to the scheduling provider.

    Table: booking_requests
    """

    __tablename__ = "booking_requests"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    post_id: Optional[str] = Field(default=None, foreign_key="blog_posts.id", max_length=64)
    event_type_uri: str
    start_time: datetime = Field(sa_type=DateTime)
    name: str = Field(max_length=200)
    email: str = Field(max_length=320)
    phone: Optional[str] = Field(default=None, max_length=64)
    company: Optional[str] = Field(default=None)
    message: Optional[str] = Field(default=None)
    timezone: Optional[str] = Field(default=None, max_length=64)
    scheduling_url: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
