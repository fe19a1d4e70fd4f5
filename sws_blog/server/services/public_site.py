"""
Public site read model.

Assembles the JSON behind the public pages: homepage sections, post
listings, post detail with author/category/tags/FAQs, related posts,
taxonomy pages and search. Only visible posts (published, publish date in
the past) are ever returned.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.entities.blog import BlogPost
from sws_blog.core.database.repositories import (
    AuthorRepository,
    CategoryRepository,
    PostRepository,
    TagRepository,
)
from sws_blog.core.errors import NotFoundError, ValidationFailedError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.blog import (
    AuthorListing,
    AuthorRead,
    CategoryListing,
    CategoryRead,
    CategorySection,
    FaqRead,
    HomePage,
    PostDetail,
    PostSummary,
    TagListing,
    TagRead,
)

logger = get_logger(__name__)

FEATURED_LIMIT = 3
LATEST_LIMIT = 6
SECTION_LIMIT = 6
LISTING_LIMIT = 24
SEARCH_LIMIT = 20


def summaries(posts: List[BlogPost]) -> List[PostSummary]:
    return [PostSummary.model_validate(post) for post in posts]


async def build_post_detail(session: AsyncSession, post: BlogPost) -> PostDetail:
    """Resolve the author, category, tags and FAQs of ``post``."""
    posts = PostRepository(session)
    author = await AuthorRepository(session).get_by_id(post.author_id)
    category = await CategoryRepository(session).get_by_id(post.category_id)
    if author is None or category is None:
        raise NotFoundError("Post", post.slug)
    tags = await posts.get_tags(post.id)
    faqs = await posts.get_faqs(post.id)
    return PostDetail.model_validate(
        {
            **post.model_dump(),
            "author": AuthorRead.model_validate(author),
            "category": CategoryRead.model_validate(category),
            "tags": [TagRead.model_validate(tag) for tag in tags],
            "faqs": [FaqRead.model_validate(faq) for faq in faqs],
        }
    )


class PublicSiteService:
    """Read-only queries for the public site."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.categories = CategoryRepository(session)
        self.tags = TagRepository(session)
        self.authors = AuthorRepository(session)

    async def home(self) -> HomePage:
        nav = await self.categories.list_ordered(nav_only=True)
        featured = await self.posts.list_featured(FEATURED_LIMIT)
        latest = await self.posts.list_visible(limit=LATEST_LIMIT)

        sections: List[CategorySection] = []
        for category in await self.categories.list_ordered(homepage_only=True):
            category_posts = await self.posts.list_visible(limit=SECTION_LIMIT, category_id=category.id)
            if not category_posts:
                continue
            sections.append(
                CategorySection(category=CategoryRead.model_validate(category), posts=summaries(category_posts))
            )

        return HomePage(
            nav_categories=[CategoryRead.model_validate(c) for c in nav],
            featured_posts=summaries(featured),
            latest_posts=summaries(latest),
            category_sections=sections,
        )

    async def list_posts(
        self,
        limit: int = LISTING_LIMIT,
        offset: int = 0,
        category_slug: Optional[str] = None,
        tag_slug: Optional[str] = None,
    ) -> List[PostSummary]:
        category_id = tag_id = None
        if category_slug:
            category = await self.categories.get_by_slug(category_slug)
            if category is None:
                raise NotFoundError("Category", category_slug)
            category_id = category.id
        if tag_slug:
            tag = await self.tags.get_by_slug(tag_slug)
            if tag is None:
                raise NotFoundError("Tag", tag_slug)
            tag_id = tag.id
        posts = await self.posts.list_visible(limit=limit, offset=offset, category_id=category_id, tag_id=tag_id)
        return summaries(posts)

    async def get_post(self, slug: str) -> PostDetail:
        """Visible post by slug; counts a view."""
        post = await self.posts.get_visible_by_slug(slug)
        if post is None:
            raise NotFoundError("Post", slug)
        await self.posts.increment_view_count(post.id)
        await self.session.refresh(post)
        return await build_post_detail(self.session, post)

    async def related_posts(self, slug: str, limit: int = 3) -> List[PostSummary]:
        """Manual picks first, then posts sharing the most tags, then same-category posts."""
        post = await self.posts.get_visible_by_slug(slug)
        if post is None:
            raise NotFoundError("Post", slug)

        picked: List[BlogPost] = []
        seen = {post.id}

        def take(candidates: List[BlogPost]) -> None:
            for candidate in candidates:
                if len(picked) >= limit:
                    return
                if candidate.id in seen:
                    continue
                seen.add(candidate.id)
                picked.append(candidate)

        manual_ids = await self.posts.get_manual_related_ids(post.id)
        if manual_ids:
            by_id = {p.id: p for p in await self.posts.get_many(manual_ids, visible_only=True)}
            take([by_id[i] for i in manual_ids if i in by_id])

        if len(picked) < limit:
            tag_ids = await self.posts.get_tag_ids(post.id)
            take(await self.posts.list_visible_sharing_tags(post.id, tag_ids, limit + len(seen)))

        if len(picked) < limit:
            take(
                await self.posts.list_visible(
                    limit=limit, category_id=post.category_id, exclude_ids=list(seen)
                )
            )
        return summaries(picked)

    async def list_categories(self, nav_only: bool = False) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in await self.categories.list_ordered(nav_only=nav_only)]

    async def category_listing(self, slug: str) -> CategoryListing:
        category = await self.categories.get_by_slug(slug)
        if category is None:
            raise NotFoundError("Category", slug)
        posts = await self.posts.list_visible(limit=LISTING_LIMIT, category_id=category.id)
        return CategoryListing(category=CategoryRead.model_validate(category), posts=summaries(posts))

    async def list_tags(self) -> List[TagRead]:
        return [TagRead.model_validate(t) for t in await self.tags.list_ordered()]

    async def tag_listing(self, slug: str) -> TagListing:
        tag = await self.tags.get_by_slug(slug)
        if tag is None:
            raise NotFoundError("Tag", slug)
        posts = await self.posts.list_visible(limit=LISTING_LIMIT, tag_id=tag.id)
        return TagListing(tag=TagRead.model_validate(tag), posts=summaries(posts))

    async def author_listing(self, slug: str) -> AuthorListing:
        author = await self.authors.get_by_slug(slug)
        if author is None or not author.is_active:
            raise NotFoundError("Author", slug)
        posts = await self.posts.list_visible(author_id=author.id)
        return AuthorListing(author=AuthorRead.model_validate(author), posts=summaries(posts))

    async def search(self, query: str) -> List[PostSummary]:
        query = query.strip()
        if not query:
            raise ValidationFailedError("Search query is required")
        return summaries(await self.posts.search(query, limit=SEARCH_LIMIT))
