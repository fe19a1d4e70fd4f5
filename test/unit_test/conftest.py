"""Shared fixtures for unit tests.

Each test gets a fresh in-memory SQLite database, fresh realtime/typing/
notification singletons, and outbound API clients wired to
``httpx.MockTransport`` so nothing leaves the process.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import AsyncGenerator, List, Optional, Sequence

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic_ai.models.test import TestModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from sws_blog.core.database import create_all, create_sessionmaker
from sws_blog.core.database.entities.blog import BlogAuthor, BlogCategory, BlogPost, BlogTag, PostStatus
from sws_blog.core.database.entities.submissions import Survey
from sws_blog.core.database.repositories import (
    AuthorRepository,
    CategoryRepository,
    PostRepository,
    SurveyRepository,
    TagRepository,
)
from sws_blog.core.text import utc_now
from sws_blog.server.core.config import AIConfig, CalendlyConfig, SendGridConfig, SiteConfig
from sws_blog.server.services.ai_content import ContentAssistant
from sws_blog.server.services.calendly import CalendlyClient
from sws_blog.server.services.notification_center import ChatNotificationCenter
from sws_blog.server.services.notifications import LiveChatNotifier, SendGridClient
from sws_blog.server.services.realtime import RealtimeBroker
from sws_blog.server.services.typing_tracker import TypingTracker

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
ADMIN_HEADERS = {"Authorization": "Bearer test-admin-token"}
SITE_URL = "https://www.example.com"
BOOKING_URL = "https://calendly.com/d/abc-123/intro-call"


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =====================================================================
# Database
# =====================================================================


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory database with every table for one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def session_factory(test_engine):
    return create_sessionmaker(test_engine)


# =====================================================================
# Data builders
# =====================================================================


@pytest.fixture
def make_author(session: AsyncSession):
    async def _make(name: str = "Marc Example", slug: Optional[str] = None, **fields) -> BlogAuthor:
        author = BlogAuthor(name=name, slug=slug or name.lower().replace(" ", "-"), **fields)
        return await AuthorRepository(session).create(author)

    return _make


@pytest.fixture
def make_category(session: AsyncSession):
    async def _make(name: str = "Web Applications", slug: Optional[str] = None, **fields) -> BlogCategory:
        category = BlogCategory(name=name, slug=slug or name.lower().replace(" ", "-"), **fields)
        return await CategoryRepository(session).create(category)

    return _make


@pytest.fixture
def make_tag(session: AsyncSession):
    async def _make(name: str, slug: Optional[str] = None) -> BlogTag:
        return await TagRepository(session).create(BlogTag(name=name, slug=slug or name.lower().replace(" ", "-")))

    return _make


@pytest.fixture
def make_survey(session: AsyncSession):
    async def _make(name: str = "Project scoping") -> Survey:
        return await SurveyRepository(session).create(Survey(name=name))

    return _make


@pytest.fixture
def make_post(session: AsyncSession):
    """Build a post; published a day ago unless told otherwise."""

    async def _make(
        author: BlogAuthor,
        category: BlogCategory,
        title: str = "Hello World",
        slug: Optional[str] = None,
        status: PostStatus = PostStatus.PUBLISHED,
        published_at: Optional[datetime] = None,
        tags: Sequence[BlogTag] = (),
        **fields,
    ) -> BlogPost:
        if published_at is None and status == PostStatus.PUBLISHED:
            published_at = utc_now() - timedelta(days=1)
        post = BlogPost(
            title=title,
            slug=slug or title.lower().replace(" ", "-"),
            content=fields.pop("content", "Some words about software."),
            author_id=author.id,
            category_id=category.id,
            status=status.value,
            published_at=published_at,
            **fields,
        )
        return await PostRepository(session).save_with_links(post, [t.id for t in tags], [])

    return _make


# =====================================================================
# Realtime and integrations
# =====================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def broker() -> RealtimeBroker:
    return RealtimeBroker(queue_size=10)


@pytest.fixture
def typing_tracker(clock: FakeClock) -> TypingTracker:
    return TypingTracker(timeout=3.0, debounce=1.0, clock=clock)


@pytest.fixture
def notification_center() -> ChatNotificationCenter:
    return ChatNotificationCenter()


@pytest.fixture
def sendgrid_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def sendgrid_config() -> SendGridConfig:
    return SendGridConfig(
        api_key="SG.test-key",
        api_url="http://mock-sendgrid/v3/mail/send",
        notification_email="owner@example.com",
    )


@pytest.fixture
def sendgrid_client(sendgrid_config: SendGridConfig, sendgrid_requests: List[httpx.Request]) -> SendGridClient:
    def handler(request: httpx.Request) -> httpx.Response:
        sendgrid_requests.append(request)
        return httpx.Response(202)

    return SendGridClient(sendgrid_config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.fixture
def notifier(sendgrid_client: SendGridClient) -> LiveChatNotifier:
    return LiveChatNotifier(sendgrid_client, SiteConfig(url=SITE_URL))


@pytest.fixture
def calendly_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def calendly_client(calendly_requests: List[httpx.Request]) -> CalendlyClient:
    """Calendly client answering like the real API for the two endpoints in use."""

    def handler(request: httpx.Request) -> httpx.Response:
        calendly_requests.append(request)
        if request.url.path == "/event_type_available_times":
            return httpx.Response(
                200,
                json={
                    "collection": [
                        {
                            "status": "available",
                            "start_time": "2026-11-02T09:00:00.000000Z",
                            "invitees_remaining": 1,
                            "scheduling_url": "https://calendly.com/d/abc-123/intro-call/2026-11-02T09:00:00Z",
                        },
                        {"status": "available", "start_time": "2026-11-02T10:00:00.000000Z", "invitees_remaining": 1},
                    ]
                },
            )
        if request.url.path == "/scheduling_links":
            return httpx.Response(
                201,
                json={"resource": {"booking_url": BOOKING_URL, "owner": "x", "owner_type": "EventType"}},
            )
        return httpx.Response(404, json={"message": "Not Found"})

    config = CalendlyConfig(api_token="calendly-test-token", api_url="http://mock-calendly")
    return CalendlyClient(config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.fixture
def content_assistant() -> ContentAssistant:
    return ContentAssistant(AIConfig(model="test:content-model"), model=TestModel())


# =====================================================================
# HTTP client
# =====================================================================


@pytest.fixture
def app(
    session: AsyncSession,
    broker: RealtimeBroker,
    typing_tracker: TypingTracker,
    notification_center: ChatNotificationCenter,
    notifier: LiveChatNotifier,
    calendly_client: CalendlyClient,
    content_assistant: ContentAssistant,
):
    """The application with every stateful dependency replaced by a per-test instance."""
    from sws_blog.core.database import get_session
    from sws_blog.server.main import app
    from sws_blog.server.services import deps

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[deps.get_broker] = lambda: broker
    app.dependency_overrides[deps.get_typing_tracker] = lambda: typing_tracker
    app.dependency_overrides[deps.get_notification_center] = lambda: notification_center
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    app.dependency_overrides[deps.get_calendly_client] = lambda: calendly_client
    app.dependency_overrides[deps.get_content_assistant] = lambda: content_assistant
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="client")
async def client_fixture(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client


@pytest_asyncio.fixture(name="admin_client")
async def admin_client_fixture(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://localhost", headers=ADMIN_HEADERS
    ) as client:
        yield client
