"""
Admin Submission Endpoints.

Enquiry and contact-form inboxes for the admin dashboard, including the CSV
export of enquiries.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import Response

from sws_blog.core.database.entities.submissions import ContactStatus, EnquiryStatus
from sws_blog.core.models.io.submissions import (
    ContactRead,
    ContactStatusUpdate,
    EnquiryRead,
    EnquiryStatusUpdate,
)
from sws_blog.server.services.deps import SubmissionsDep

router = APIRouter()


@router.get(
    "/enquiries",
    response_model=List[EnquiryRead],
    summary="List Enquiries",
    description="Enquiries, newest first, filtered by survey, post, status and creation date range.",
)
async def list_enquiries(
    submissions: SubmissionsDep,
    survey_id: Optional[str] = None,
    post_id: Optional[str] = None,
    status: Optional[EnquiryStatus] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[EnquiryRead]:
    return await submissions.list_enquiries(survey_id, post_id, status, date_from, date_to, limit, offset)


@router.get(
    "/enquiries/export",
    summary="Export Enquiries",
    description="Download the filtered enquiries as CSV.",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "CSV attachment"}},
)
async def export_enquiries(
    submissions: SubmissionsDep,
    survey_id: Optional[str] = None,
    post_id: Optional[str] = None,
    status: Optional[EnquiryStatus] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> Response:
    """
    Export enquiries as CSV.

    Columns: ID, Survey, Post, Respondent Name, Respondent Email, Status,
    Created At, Response Data (JSON). Served as an attachment named
    `enquiries-export-YYYY-MM-DD.csv`.
    """
    content, filename = await submissions.export_enquiries(survey_id, post_id, status, date_from, date_to)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.patch(
    "/enquiries/{enquiry_id}",
    response_model=EnquiryRead,
    summary="Update Enquiry Status",
    responses={404: {"description": "Enquiry not found"}},
)
async def update_enquiry(enquiry_id: str, payload: EnquiryStatusUpdate, submissions: SubmissionsDep) -> EnquiryRead:
    return await submissions.set_enquiry_status(enquiry_id, payload.status)


@router.get("/contact-submissions", response_model=List[ContactRead], summary="List Contact Submissions")
async def list_contact_submissions(
    submissions: SubmissionsDep,
    status: Optional[ContactStatus] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[ContactRead]:
    return await submissions.list_contacts(status, limit, offset)


@router.patch(
    "/contact-submissions/{submission_id}",
    response_model=ContactRead,
    summary="Update Contact Submission Status",
    responses={404: {"description": "Submission not found"}},
)
async def update_contact_submission(
    submission_id: str, payload: ContactStatusUpdate, submissions: SubmissionsDep
) -> ContactRead:
    return await submissions.set_contact_status(submission_id, payload.status)
