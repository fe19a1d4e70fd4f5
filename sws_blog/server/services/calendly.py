"""
Calendly scheduling proxy.

Reads available slots for an event type and creates single-use scheduling
links that are pre-filled with the visitor's details, so the final booking
step happens on Calendly itself.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlencode
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from sws_blog.core.errors import IntegrationNotConfiguredError, UpstreamServiceError, ValidationFailedError
from sws_blog.core.models.io.booking import AvailableTime, BookingCreate
from sws_blog.server.core.config import CalendlyConfig


class CalendlyClient:
    """
    Thin async HTTP client for the Calendly v2 API.

    Responsibilities:
    - list_available_times
    - create_scheduling_link
    """

    def __init__(
        self,
        config: CalendlyConfig,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.base_url = config.api_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def configured(self) -> bool:
        return bool(self.config.api_token)

    def _headers(self) -> dict[str, str]:
        if not self.configured:
            raise IntegrationNotConfiguredError("Calendly")
        return {
            "Authorization": f"Bearer {self.config.api_token}",
            "Content-Type": "application/json",
        }

    async def list_available_times(
        self, event_type_uri: str, start_time: datetime, end_time: datetime
    ) -> List[AvailableTime]:
        if _as_utc(end_time) <= _as_utc(start_time):
            raise ValidationFailedError("end_time must be after start_time")
        params = {
            "event_type": event_type_uri,
            "start_time": _iso_utc(start_time),
            "end_time": _iso_utc(end_time),
        }
        headers = self._headers()
        try:
            self._logger.debug("CalendlyClient.list_available_times: GET %s params=%s", self.base_url, params)
            r = await self._client.get(f"{self.base_url}/event_type_available_times", headers=headers, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamServiceError(
                f"Calendly available times failed: {e.response.status_code}",
                upstream_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamServiceError(f"Calendly request failed: {e}") from e
        data = r.json()
        collection = data.get("collection", []) if isinstance(data, dict) else []
        times = [AvailableTime.model_validate(item) for item in collection]
        self._logger.debug("CalendlyClient.list_available_times: got %d slots", len(times))
        return times

    async def create_scheduling_link(self, event_type_uri: str) -> str:
        """Create a single-use scheduling link and return its booking URL."""
        body = {"max_event_count": 1, "owner": event_type_uri, "owner_type": "EventType"}
        headers = self._headers()
        try:
            self._logger.debug("CalendlyClient.create_scheduling_link: POST %s/scheduling_links", self.base_url)
            r = await self._client.post(f"{self.base_url}/scheduling_links", headers=headers, json=body)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamServiceError(
                f"Calendly scheduling link failed: {e.response.status_code}",
                upstream_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamServiceError(f"Calendly request failed: {e}") from e
        data = r.json()
        booking_url = (data.get("resource") or {}).get("booking_url") if isinstance(data, dict) else None
        if not booking_url:
            raise UpstreamServiceError("Unexpected response shape from scheduling_links", details=data)
        return booking_url

    async def aclose(self) -> None:
        await self._client.aclose()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso_utc(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _local_start(start_time: datetime, tz_name: Optional[str]) -> datetime:
    if start_time.tzinfo is None:
        start_time = start_time.replace(tzinfo=timezone.utc)
    if tz_name:
        try:
            return start_time.astimezone(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return start_time.astimezone(timezone.utc)


def build_prefilled_url(booking_url: str, booking: BookingCreate) -> str:
    """Append invitee prefill and the calendar month/date of the chosen slot to ``booking_url``.

    The date is taken in the visitor's timezone when one was supplied, else UTC.
    """
    local = _local_start(booking.start_time, booking.timezone)
    params = {"name": booking.name.strip(), "email": booking.email.strip()}
    if booking.message and booking.message.strip():
        params["a1"] = booking.message.strip()
    params["month"] = local.strftime("%Y-%m")
    params["date"] = local.strftime("%Y-%m-%d")
    separator = "&" if "?" in booking_url else "?"
    return f"{booking_url}{separator}{urlencode(params)}"
