"""Tests for PostRepository queries and link-table handling."""

from datetime import timedelta

import pytest
from sqlmodel import select

from sws_blog.core.database.entities.blog import BlogFaq, BlogPost, BlogPostTag, BlogRelatedPost, PostStatus
from sws_blog.core.database.repositories import PostRepository, QueryBuilder
from sws_blog.core.text import utc_now


@pytest.fixture
def repo(session) -> PostRepository:
    return PostRepository(session)


@pytest.fixture
async def refs(make_author, make_category):
    return await make_author(), await make_category()


class TestBaseOperations:
    async def test_get_update_delete(self, repo: PostRepository, refs, make_post):
        post = await make_post(*refs)

        assert (await repo.get_by_id(post.id)).slug == "hello-world"
        assert (await repo.get_by_slug("hello-world")).id == post.id

        post.title = "Renamed"
        await repo.update(post)
        assert (await repo.get_by_id(post.id)).title == "Renamed"

        assert await repo.delete(post.id) is True
        assert await repo.delete(post.id) is False
        assert await repo.get_by_id(post.id) is None

    async def test_list_with_filters_and_pagination(self, repo: PostRepository, refs, make_post):
        for n in range(3):
            await make_post(*refs, title=f"Post {n}", status=PostStatus.DRAFT)
        await make_post(*refs, title="Live")

        assert len(await repo.list(filters={"status": "draft"})) == 3
        assert len(await repo.list(limit=2)) == 2
        assert len(await repo.list(filters={"status": None, "unknown": "x"})) == 4

    async def test_slug_taken(self, repo: PostRepository, refs, make_post):
        post = await make_post(*refs)

        assert await repo.slug_taken("hello-world") is True
        assert await repo.slug_taken("hello-world", exclude_id=post.id) is False
        assert await repo.slug_taken("other") is False


def test_query_builder_ignores_none_values():
    stmt = QueryBuilder.apply_filters(select(BlogPost), BlogPost, {"status": None})

    assert "WHERE" not in str(stmt)


class TestVisibleQueries:
    async def test_featured_order_then_unset_last(self, repo: PostRepository, refs, make_post):
        await make_post(*refs, title="Unordered", is_featured=True)
        await make_post(*refs, title="Second", is_featured=True, featured_order=2)
        await make_post(*refs, title="First", is_featured=True, featured_order=1)
        await make_post(*refs, title="Not Featured")

        assert [p.title for p in await repo.list_featured(5)] == ["First", "Second", "Unordered"]

    async def test_search_is_case_insensitive_substring(self, repo: PostRepository, refs, make_post):
        await make_post(*refs, title="Scaling FastAPI", slug="fastapi")
        await make_post(*refs, title="Plain title", slug="plain", excerpt="Nothing special")

        assert [p.slug for p in await repo.search("fastapi")] == ["fastapi"]
        assert [p.slug for p in await repo.search("SPECIAL")] == ["plain"]

    @pytest.mark.parametrize("query", ["_", "%", "a_b", "100%"])
    async def test_search_treats_wildcards_literally(self, repo: PostRepository, refs, make_post, query):
        await make_post(*refs, title="Plain title", slug="plain")

        assert await repo.search(query) == []

    async def test_search_matches_literal_wildcard_characters(self, repo: PostRepository, refs, make_post):
        await make_post(*refs, title="Plain title", slug="plain")
        await make_post(*refs, title="100% uptime", slug="uptime", primary_keyword="snake_case")

        assert [p.slug for p in await repo.search("100%")] == ["uptime"]
        assert [p.slug for p in await repo.search("_case")] == ["uptime"]

    async def test_list_due_scheduled(self, repo: PostRepository, refs, make_post):
        now = utc_now()
        await make_post(*refs, title="Due", status=PostStatus.SCHEDULED, scheduled_for=now - timedelta(minutes=1))
        await make_post(*refs, title="Later", status=PostStatus.SCHEDULED, scheduled_for=now + timedelta(hours=1))
        await make_post(*refs, title="Draft", status=PostStatus.DRAFT, scheduled_for=now - timedelta(hours=1))

        assert [p.title for p in await repo.list_due_scheduled(now)] == ["Due"]

    async def test_increment_view_count(self, repo: PostRepository, refs, make_post, session):
        post = await make_post(*refs)

        await repo.increment_view_count(post.id)
        await repo.increment_view_count(post.id)
        await session.refresh(post)

        assert post.view_count == 2

    async def test_counts_per_category_and_author(self, repo: PostRepository, refs, make_post):
        author, category = refs
        await make_post(author, category, title="One")
        await make_post(author, category, title="Two")

        assert await repo.count_in_category(category.id) == 2
        assert await repo.count_by_author(author.id) == 2
        assert await repo.count_in_category("other") == 0


class TestLinks:
    async def test_save_with_links_replaces_everything(self, repo: PostRepository, refs, make_post, make_tag):
        a, b = await make_tag("A"), await make_tag("B")
        post = await make_post(*refs)
        await repo.save_with_links(post, [a.id, a.id, b.id], [("Q1", "A1"), ("Q2", "A2")])

        assert sorted(await repo.get_tag_ids(post.id)) == sorted([a.id, b.id])
        assert [(f.question, f.display_order) for f in await repo.get_faqs(post.id)] == [("Q1", 0), ("Q2", 1)]

        await repo.save_with_links(post, [b.id], [("Q3", "A3")])

        assert await repo.get_tag_ids(post.id) == [b.id]
        assert [f.question for f in await repo.get_faqs(post.id)] == ["Q3"]

    async def test_manual_related_keep_given_order_and_skip_self(self, repo: PostRepository, refs, make_post):
        post = await make_post(*refs, title="Main")
        first = await make_post(*refs, title="First")
        second = await make_post(*refs, title="Second")

        await repo.save_with_links(post, [], [], related_post_ids=[second.id, post.id, first.id, second.id])

        assert await repo.get_manual_related_ids(post.id) == [second.id, first.id]

    async def test_delete_removes_link_rows(self, repo: PostRepository, refs, make_post, make_tag, session):
        tag = await make_tag("A")
        post = await make_post(*refs, title="Main", tags=[tag])
        other = await make_post(*refs, title="Other")
        await repo.save_with_links(post, [tag.id], [("Q", "A")], related_post_ids=[other.id])
        await repo.save_with_links(other, [], [], related_post_ids=[post.id])

        await repo.delete(post.id)

        for model in (BlogPostTag, BlogFaq, BlogRelatedPost):
            assert (await session.execute(select(model))).scalars().all() == []
