"""Unit tests for server services dependencies.

Singletons are built once per process from settings, and every ``*Dep`` alias
is an ``Annotated`` type wired to its provider.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from sws_blog.server.core.config import settings
from sws_blog.server.services import deps
from sws_blog.server.services.live_chat import LiveChatService
from sws_blog.server.services.public_site import PublicSiteService


@pytest.fixture(autouse=True)
def _clear_singletons():
    for provider in (deps.get_broker, deps.get_typing_tracker, deps.get_notification_center, deps.get_calendly_client):
        provider.cache_clear()
    yield
    for provider in (deps.get_broker, deps.get_typing_tracker, deps.get_notification_center, deps.get_calendly_client):
        provider.cache_clear()


class TestSingletons:
    def test_broker_is_shared(self):
        assert deps.get_broker() is deps.get_broker()
        assert deps.get_broker().queue_size == settings.live_chat.subscriber_queue_size

    def test_typing_tracker_uses_live_chat_settings(self):
        tracker = deps.get_typing_tracker()

        assert tracker is deps.get_typing_tracker()
        assert tracker.timeout == settings.live_chat.typing_timeout_seconds
        assert tracker.debounce == settings.live_chat.typing_debounce_seconds

    def test_notification_center_is_shared(self):
        assert deps.get_notification_center() is deps.get_notification_center()

    def test_calendly_client_uses_settings(self):
        assert deps.get_calendly_client().config == settings.calendly


class TestAnnotatedDeps:
    @pytest.mark.parametrize(
        "alias,provider",
        [
            (deps.PublicSiteDep, deps.get_public_site),
            (deps.ContentAdminDep, deps.get_content_admin),
            (deps.SubmissionsDep, deps.get_submissions),
            (deps.LiveChatDep, deps.get_live_chat),
            (deps.BookingDep, deps.get_booking),
            (deps.BrokerDep, deps.get_broker),
            (deps.NotificationCenterDep, deps.get_notification_center),
        ],
    )
    def test_alias_uses_provider(self, alias, provider):
        assert alias.__metadata__[0].dependency is provider

    @pytest.mark.asyncio
    async def test_request_scoped_services_share_the_session(self, session):
        app = FastAPI()
        seen = {}

        @app.get("/wired")
        async def wired(site: deps.PublicSiteDep, live_chat: deps.LiveChatDep):
            seen["site"], seen["live_chat"] = site, live_chat
            return {}

        async def session_override():
            yield session

        app.dependency_overrides[deps.get_session] = session_override
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            assert (await client.get("/wired")).status_code == 200

        assert isinstance(seen["site"], PublicSiteService)
        assert isinstance(seen["live_chat"], LiveChatService)
        assert seen["site"].session is seen["live_chat"].session is session
        assert seen["live_chat"].broker is deps.get_broker()
