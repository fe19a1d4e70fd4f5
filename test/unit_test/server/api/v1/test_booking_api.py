"""Tests for the booking proxy endpoints."""

from typing import List
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.repositories import BookingRequestRepository

pytestmark = pytest.mark.asyncio

EVENT_TYPE = "https://api.calendly.com/event_types/ABC123"
BOOKING_URL = "https://calendly.com/d/abc-123/intro-call"


async def test_available_times(client: AsyncClient, calendly_requests: List[httpx.Request]):
    response = await client.get(
        "/api/v1/booking/available-times",
        params={
            "event_type_uri": EVENT_TYPE,
            "start_time": "2026-11-02T00:00:00Z",
            "end_time": "2026-11-03T00:00:00Z",
        },
    )

    assert response.status_code == 200
    slots = response.json()["available_times"]
    assert [s["start_time"][:16] for s in slots] == ["2026-11-02T09:00", "2026-11-02T10:00"]
    assert slots[1]["scheduling_url"] is None
    assert calendly_requests[0].url.params["event_type"] == EVENT_TYPE
    assert calendly_requests[0].headers["Authorization"] == "Bearer calendly-test-token"


async def test_available_times_rejects_inverted_range(client: AsyncClient, calendly_requests: List[httpx.Request]):
    response = await client.get(
        "/api/v1/booking/available-times",
        params={
            "event_type_uri": EVENT_TYPE,
            "start_time": "2026-11-03T00:00:00Z",
            "end_time": "2026-11-02T00:00:00Z",
        },
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "end_time must be after start_time"}
    assert calendly_requests == []


async def test_available_times_accepts_naive_end_time(client: AsyncClient):
    response = await client.get(
        "/api/v1/booking/available-times",
        params={
            "event_type_uri": EVENT_TYPE,
            "start_time": "2026-11-02T00:00:00Z",
            "end_time": "2026-11-03T00:00:00",
        },
    )

    assert response.status_code == 200


async def test_available_times_requires_params(client: AsyncClient):
    assert (await client.get("/api/v1/booking/available-times")).status_code == 422


async def test_book(client: AsyncClient, session: AsyncSession):
    response = await client.post(
        "/api/v1/booking/book",
        json={
            "event_type_uri": EVENT_TYPE,
            "start_time": "2026-11-02T23:30:00Z",
            "name": "Jane Doe",
            "email": "jane@example.com",
            "message": "Hi",
            "timezone": "Asia/Tokyo",
        },
    )

    assert response.status_code == 201
    url = urlsplit(response.json()["scheduling_url"])
    assert f"{url.scheme}://{url.netloc}{url.path}" == BOOKING_URL
    assert parse_qs(url.query) == {
        "name": ["Jane Doe"],
        "email": ["jane@example.com"],
        "a1": ["Hi"],
        "month": ["2026-11"],
        "date": ["2026-11-03"],
    }
    stored = await BookingRequestRepository(session).list()
    assert [b.email for b in stored] == ["jane@example.com"]


@pytest.mark.parametrize(
    "fields,detail",
    [
        ({"name": "", "email": "jane@example.com"}, "Name is required"),
        ({"name": "Jane", "email": ""}, "Email is required"),
        ({"name": "Jane", "email": "not-an-email"}, "Invalid email address"),
    ],
)
async def test_book_validation(client: AsyncClient, calendly_requests: List[httpx.Request], fields, detail):
    response = await client.post(
        "/api/v1/booking/book",
        json={"event_type_uri": EVENT_TYPE, "start_time": "2026-11-02T09:00:00Z", **fields},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": detail}
    assert calendly_requests == []


async def test_book_unknown_post(client: AsyncClient, session: AsyncSession, calendly_requests: List[httpx.Request]):
    response = await client.post(
        "/api/v1/booking/book",
        json={
            "event_type_uri": EVENT_TYPE,
            "start_time": "2026-11-02T09:00:00Z",
            "name": "Jane",
            "email": "jane@example.com",
            "post_id": "missing",
        },
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Post missing not found"}
    assert calendly_requests == []
    assert await BookingRequestRepository(session).list() == []
