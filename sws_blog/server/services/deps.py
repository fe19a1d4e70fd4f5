"""
Service Dependencies.

Process-wide singletons (realtime broker, typing tracker, notification
center, outbound API clients) and the per-request services built on top of
them, exposed as ``Annotated`` FastAPI dependencies. Tests replace any of
them through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database import get_session
from sws_blog.server.core.config import settings

from .ai_content import ContentAssistant
from .booking import BookingService
from .calendly import CalendlyClient
from .content_admin import ContentAdminService
from .live_chat import LiveChatService
from .notification_center import ChatNotificationCenter
from .notifications import LiveChatNotifier, SendGridClient
from .public_site import PublicSiteService
from .realtime import RealtimeBroker
from .submissions import SubmissionService
from .typing_tracker import TypingTracker


@lru_cache
def get_broker() -> RealtimeBroker:
    return RealtimeBroker(queue_size=settings.live_chat.subscriber_queue_size)


@lru_cache
def get_typing_tracker() -> TypingTracker:
    live_chat = settings.live_chat
    return TypingTracker(timeout=live_chat.typing_timeout_seconds, debounce=live_chat.typing_debounce_seconds)


@lru_cache
def get_notification_center() -> ChatNotificationCenter:
    return ChatNotificationCenter()


@lru_cache
def get_notifier() -> LiveChatNotifier:
    return LiveChatNotifier(SendGridClient(settings.sendgrid), settings.site)


@lru_cache
def get_calendly_client() -> CalendlyClient:
    return CalendlyClient(settings.calendly)


@lru_cache
def get_content_assistant() -> ContentAssistant:
    return ContentAssistant(settings.ai)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
BrokerDep = Annotated[RealtimeBroker, Depends(get_broker)]
NotificationCenterDep = Annotated[ChatNotificationCenter, Depends(get_notification_center)]
NotifierDep = Annotated[LiveChatNotifier, Depends(get_notifier)]
ContentAssistantDep = Annotated[ContentAssistant, Depends(get_content_assistant)]


def get_public_site(session: SessionDep) -> PublicSiteService:
    return PublicSiteService(session)


def get_content_admin(session: SessionDep) -> ContentAdminService:
    return ContentAdminService(session)


def get_submissions(session: SessionDep) -> SubmissionService:
    return SubmissionService(session)


def get_live_chat(
    session: SessionDep,
    broker: BrokerDep,
    typing: Annotated[TypingTracker, Depends(get_typing_tracker)],
) -> LiveChatService:
    return LiveChatService(session, broker, typing)


def get_booking(
    session: SessionDep,
    calendly: Annotated[CalendlyClient, Depends(get_calendly_client)],
) -> BookingService:
    return BookingService(session, calendly)


PublicSiteDep = Annotated[PublicSiteService, Depends(get_public_site)]
ContentAdminDep = Annotated[ContentAdminService, Depends(get_content_admin)]
SubmissionsDep = Annotated[SubmissionService, Depends(get_submissions)]
LiveChatDep = Annotated[LiveChatService, Depends(get_live_chat)]
BookingDep = Annotated[BookingService, Depends(get_booking)]
