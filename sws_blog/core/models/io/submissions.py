"""
Form submission I/O models: contact, newsletter, enquiries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from sws_blog.core.database.entities.submissions import ContactStatus, EnquiryStatus, SubscriberStatus


class ContactCreate(BaseModel):
    name: str = ""
    email: str = ""
    company: Optional[str] = None
    phone: Optional[str] = None
    message: str = ""


class ContactRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    company: Optional[str] = None
    phone: Optional[str] = None
    message: str
    status: ContactStatus
    created_at: datetime


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class NewsletterSubscribe(BaseModel):
    email: str = ""
    name: Optional[str] = None
    source: Optional[str] = None


class NewsletterUnsubscribe(BaseModel):
    email: str = ""


class SubscriberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    status: SubscriberStatus
    source: Optional[str] = None
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None


class EnquiryCreate(BaseModel):
    survey_id: Optional[str] = None
    post_id: Optional[str] = None
    respondent_name: Optional[str] = None
    respondent_email: Optional[str] = None
    response_data: Dict[str, Any] = Field(default_factory=dict)


class EnquiryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    survey_id: Optional[str] = None
    post_id: Optional[str] = None
    respondent_name: Optional[str] = None
    respondent_email: Optional[str] = None
    status: EnquiryStatus
    response_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class EnquiryStatusUpdate(BaseModel):
    status: EnquiryStatus
