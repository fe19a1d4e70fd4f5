"""
Public Form Endpoints.

Contact form, newsletter sign-up/unsubscribe and survey enquiries.
"""

from fastapi import APIRouter, status

from sws_blog.core.models.io.submissions import (
    ContactCreate,
    ContactRead,
    EnquiryCreate,
    EnquiryRead,
    NewsletterSubscribe,
    NewsletterUnsubscribe,
    SubscriberRead,
)
from sws_blog.server.services.deps import SubmissionsDep

router = APIRouter()


@router.post(
    "/contact",
    response_model=ContactRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Contact Form",
    responses={400: {"description": "Missing name, email or message, or malformed email"}},
)
async def submit_contact(payload: ContactCreate, submissions: SubmissionsDep) -> ContactRead:
    """
    Store a contact form message.

    - **name**: required
    - **email**: required, must look like an email address
    - **message**: required
    - **company** / **phone**: optional
    """
    return await submissions.submit_contact(payload)


@router.post(
    "/newsletter/subscribe",
    response_model=SubscriberRead,
    summary="Subscribe to Newsletter",
    description="Adds the email to the list, reactivating it when it was unsubscribed.",
    responses={400: {"description": "Missing or malformed email"}},
)
async def subscribe(payload: NewsletterSubscribe, submissions: SubmissionsDep) -> SubscriberRead:
    return await submissions.subscribe(payload)


@router.post(
    "/newsletter/unsubscribe",
    response_model=SubscriberRead,
    summary="Unsubscribe from Newsletter",
    responses={404: {"description": "Email is not on the list"}},
)
async def unsubscribe(payload: NewsletterUnsubscribe, submissions: SubmissionsDep) -> SubscriberRead:
    return await submissions.unsubscribe(payload.email)


@router.post(
    "/enquiries",
    response_model=EnquiryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Enquiry",
    description="Store a survey response or lead captured on a post.",
    responses={404: {"description": "Unknown survey or post"}},
)
async def submit_enquiry(payload: EnquiryCreate, submissions: SubmissionsDep) -> EnquiryRead:
    return await submissions.submit_enquiry(payload)
