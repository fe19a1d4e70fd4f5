"""Tests for category, tag and author repositories."""

from sws_blog.core.database.entities.blog import BlogPostTag
from sws_blog.core.database.repositories import AuthorRepository, CategoryRepository, PostRepository, TagRepository


async def test_categories_ordered_and_filtered(session, make_category):
    await make_category("Beta", display_order=1)
    await make_category("Alpha", display_order=1, show_on_homepage=False)
    await make_category("Gamma", display_order=0, show_in_nav=False)
    repo = CategoryRepository(session)

    assert [c.name for c in await repo.list_ordered()] == ["Gamma", "Alpha", "Beta"]
    assert [c.name for c in await repo.list_ordered(nav_only=True)] == ["Alpha", "Beta"]
    assert [c.name for c in await repo.list_ordered(homepage_only=True)] == ["Gamma", "Beta"]


async def test_tags_existing_ids_and_delete_detaches(session, make_author, make_category, make_tag, make_post):
    seo, django = await make_tag("SEO"), await make_tag("Django")
    post = await make_post(await make_author(), await make_category(), tags=[seo, django])
    repo = TagRepository(session)

    assert sorted(await repo.existing_ids([seo.id, "missing"])) == [seo.id]
    assert await repo.existing_ids([]) == []
    assert [t.name for t in await repo.list_ordered()] == ["Django", "SEO"]

    assert await repo.delete(seo.id) is True
    assert await PostRepository(session).get_tag_ids(post.id) == [django.id]
    assert await repo.delete(seo.id) is False
    assert await session.get(BlogPostTag, (post.id, seo.id)) is None


async def test_authors_active_filter(session, make_author):
    await make_author("Zed")
    await make_author("Amy", is_active=False)
    repo = AuthorRepository(session)

    assert [a.name for a in await repo.list_ordered()] == ["Amy", "Zed"]
    assert [a.name for a in await repo.list_ordered(active_only=True)] == ["Zed"]
