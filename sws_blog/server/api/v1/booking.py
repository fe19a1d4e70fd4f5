"""
Booking Endpoints.

Thin proxy over the Calendly API: list open slots for an event type and turn
a visitor's chosen slot into a prefilled single-use scheduling link.
"""

from datetime import datetime

from fastapi import APIRouter, status

from sws_blog.core.models.io.booking import AvailableTimesResponse, BookingCreate, BookingResponse
from sws_blog.server.services.deps import BookingDep

router = APIRouter()


@router.get(
    "/available-times",
    response_model=AvailableTimesResponse,
    summary="Available Times",
    responses={
        400: {"description": "Missing or inverted time range"},
        502: {"description": "Calendly request failed"},
        503: {"description": "Calendly is not configured"},
    },
)
async def available_times(
    event_type_uri: str, start_time: datetime, end_time: datetime, booking: BookingDep
) -> AvailableTimesResponse:
    times = await booking.available_times(event_type_uri, start_time, end_time)
    return AvailableTimesResponse(available_times=times)


@router.post(
    "/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book Slot",
    responses={
        400: {"description": "Missing name or email, or malformed email"},
        502: {"description": "Calendly request failed"},
        503: {"description": "Calendly is not configured"},
    },
)
async def book(payload: BookingCreate, booking: BookingDep) -> BookingResponse:
    """
    Record a booking request and return the Calendly link that completes it.

    The link is prefilled with the visitor's details, the chosen month and
    date, and their message when one is given.
    """
    return await booking.book(payload)
