"""Tests for engine and session helpers."""

from datetime import datetime

import pytest
from sqlalchemy import DateTime, inspect
from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database import create_engine, create_sessionmaker
from sws_blog.core.database.base import Base


@pytest.mark.parametrize(
    "url",
    [
        "postgres://user:pw@db:5432/blog",
        "postgresql://user:pw@db:5432/blog",
        "postgresql+psycopg2://user:pw@db:5432/blog",
        "postgresql+asyncpg://user:pw@db:5432/blog",
    ],
)
async def test_postgres_urls_use_asyncpg(url):
    engine = create_engine(url)
    try:
        assert engine.url.drivername == "postgresql+asyncpg"
        assert engine.url.database == "blog"
    finally:
        await engine.dispose()


async def test_sqlite_url_is_kept():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        assert engine.url.drivername == "sqlite+aiosqlite"
    finally:
        await engine.dispose()


async def test_create_all_registers_every_table(test_engine):
    async with test_engine.connect() as conn:
        tables = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))

    assert {
        "blog_authors",
        "blog_categories",
        "blog_tags",
        "blog_posts",
        "blog_post_tags",
        "blog_faqs",
        "blog_related_posts",
        "chat_conversations",
        "chat_messages",
        "surveys",
        "enquiries",
        "contact_submissions",
        "newsletter_subscribers",
        "booking_requests",
    } <= tables


async def test_sessionmaker_keeps_objects_after_commit(test_engine):
    factory = create_sessionmaker(test_engine)

    async with factory() as session:
        assert isinstance(session, AsyncSession)
        assert session.sync_session.expire_on_commit is False


def test_timestamp_columns_are_naive_datetime():
    columns = [
        column
        for table in Base.metadata.tables.values()
        for column in table.columns
        if column.name.endswith(("_at", "_for")) or column.name == "start_time"
    ]

    assert columns
    for column in columns:
        assert type(column.type) is DateTime, column
        assert column.type.timezone is False, column


async def test_naive_utc_timestamps_round_trip(make_author):
    author = await make_author(created_at=datetime(2026, 3, 1, 12, 30))

    assert author.created_at == datetime(2026, 3, 1, 12, 30)
    assert author.created_at.tzinfo is None
