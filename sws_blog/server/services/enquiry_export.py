"""CSV export of enquiries for the admin dashboard."""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime
from typing import Dict, Iterable

from sws_blog.core.database.entities.submissions import Enquiry

CSV_HEADERS = [
    "ID",
    "Survey",
    "Post",
    "Respondent Name",
    "Respondent Email",
    "Status",
    "Created At",
    "Response Data",
]


def iso_timestamp(value: datetime) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def export_filename(today: date) -> str:
    return f"enquiries-export-{today.isoformat()}.csv"


def enquiries_to_csv(
    enquiries: Iterable[Enquiry],
    survey_names: Dict[str, str],
    post_titles: Dict[str, str],
) -> str:
    """Render enquiries as CSV text.

    Rows are separated by ``\\n`` with no trailing newline; a cell is quoted
    (with embedded quotes doubled) only when it contains a comma, a quote or
    a line break.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for enquiry in enquiries:
        writer.writerow(
            [
                enquiry.id,
                survey_names.get(enquiry.survey_id or "", ""),
                post_titles.get(enquiry.post_id or "", ""),
                enquiry.respondent_name or "",
                enquiry.respondent_email or "",
                enquiry.status,
                iso_timestamp(enquiry.created_at),
                json.dumps(enquiry.response_data, separators=(",", ":"), ensure_ascii=False),
            ]
        )
    return buffer.getvalue().removesuffix("\n")
