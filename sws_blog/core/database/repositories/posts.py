"""
Blog post repository.

Data access for posts and their link tables (tags, FAQs, related posts).
"Visible" queries only return posts that are published with a publish date
in the past; admin queries see every status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_, update
from sqlmodel import select

from sws_blog.core.text import utc_now

from ..entities.blog import (
    BlogFaq,
    BlogPost,
    BlogPostTag,
    BlogRelatedPost,
    BlogTag,
    PostStatus,
)
from .base import AsyncBaseRepository, QueryBuilder


class PostRepository(AsyncBaseRepository[BlogPost]):
    """Repository for blog posts."""

    def __init__(self, session) -> None:
        super().__init__(session, BlogPost)

    @staticmethod
    def _visible(stmt, now: Optional[datetime] = None):
        now = now or utc_now()
        return stmt.where(
            BlogPost.status == PostStatus.PUBLISHED.value,
            BlogPost.published_at.is_not(None),  # type: ignore[union-attr]
            BlogPost.published_at <= now,  # type: ignore[operator]
        )

    async def get_visible_by_slug(self, slug: str, now: Optional[datetime] = None) -> Optional[BlogPost]:
        stmt = self._visible(select(BlogPost).where(BlogPost.slug == slug), now)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_visible(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        category_id: Optional[str] = None,
        tag_id: Optional[str] = None,
        author_id: Optional[str] = None,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> List[BlogPost]:
        """Visible posts, newest first."""
        stmt = self._visible(select(BlogPost))
        stmt = QueryBuilder.apply_filters(stmt, BlogPost, {"category_id": category_id, "author_id": author_id})
        if tag_id is not None:
            stmt = stmt.join(BlogPostTag, BlogPostTag.post_id == BlogPost.id).where(BlogPostTag.tag_id == tag_id)
        excluded = list(exclude_ids or [])
        if excluded:
            stmt = stmt.where(BlogPost.id.not_in(excluded))  # type: ignore[union-attr]
        stmt = stmt.order_by(BlogPost.published_at.desc())  # type: ignore[union-attr]
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_featured(self, limit: int) -> List[BlogPost]:
        """Visible featured posts ordered by featured_order (unset last), then newest."""
        stmt = self._visible(select(BlogPost).where(BlogPost.is_featured == True))  # noqa: E712
        stmt = stmt.order_by(
            BlogPost.featured_order.is_(None),  # type: ignore[union-attr]
            BlogPost.featured_order,
            BlogPost.published_at.desc(),  # type: ignore[union-attr]
        ).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(self, query: str, limit: int = 20) -> List[BlogPost]:
        """Visible posts whose title, excerpt or primary keyword contains ``query``."""
        needle = query.lower()
        stmt = self._visible(select(BlogPost)).where(
            or_(
                func.lower(BlogPost.title).contains(needle, autoescape=True),
                func.lower(func.coalesce(BlogPost.excerpt, "")).contains(needle, autoescape=True),
                func.lower(func.coalesce(BlogPost.primary_keyword, "")).contains(needle, autoescape=True),
            )
        )
        stmt = stmt.order_by(BlogPost.published_at.desc()).limit(limit)  # type: ignore[union-attr]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_admin(
        self, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[BlogPost]:
        """All posts regardless of visibility, most recently edited first."""
        stmt = select(BlogPost)
        stmt = QueryBuilder.apply_filters(stmt, BlogPost, {"status": status})
        stmt = stmt.order_by(BlogPost.updated_at.desc())  # type: ignore[attr-defined]
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_many(self, post_ids: Sequence[str], visible_only: bool = False) -> List[BlogPost]:
        if not post_ids:
            return []
        stmt = select(BlogPost).where(BlogPost.id.in_(post_ids))  # type: ignore[union-attr]
        if visible_only:
            stmt = self._visible(stmt)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_in_category(self, category_id: str) -> int:
        stmt = select(func.count()).select_from(BlogPost).where(BlogPost.category_id == category_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_by_author(self, author_id: str) -> int:
        stmt = select(func.count()).select_from(BlogPost).where(BlogPost.author_id == author_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def increment_view_count(self, post_id: str) -> None:
        await self.session.execute(
            update(BlogPost).where(BlogPost.id == post_id).values(view_count=BlogPost.view_count + 1)
        )
        await self.session.commit()

    async def list_due_scheduled(self, now: datetime) -> List[BlogPost]:
        stmt = select(BlogPost).where(
            BlogPost.status == PostStatus.SCHEDULED.value,
            BlogPost.scheduled_for.is_not(None),  # type: ignore[union-attr]
            BlogPost.scheduled_for <= now,  # type: ignore[operator]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Link tables
    # ------------------------------------------------------------------

    async def get_tags(self, post_id: str) -> List[BlogTag]:
        stmt = (
            select(BlogTag)
            .join(BlogPostTag, BlogPostTag.tag_id == BlogTag.id)
            .where(BlogPostTag.post_id == post_id)
            .order_by(BlogTag.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_tag_ids(self, post_id: str) -> List[str]:
        result = await self.session.execute(select(BlogPostTag.tag_id).where(BlogPostTag.post_id == post_id))
        return list(result.scalars().all())

    async def get_faqs(self, post_id: str) -> List[BlogFaq]:
        stmt = select(BlogFaq).where(BlogFaq.post_id == post_id).order_by(BlogFaq.display_order)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save_with_links(
        self,
        post: BlogPost,
        tag_ids: Sequence[str],
        faqs: Sequence[Tuple[str, str]],
        related_post_ids: Optional[Sequence[str]] = None,
    ) -> BlogPost:
        """Persist a post and replace its tags, FAQs and (optionally) manual related posts.

        Everything is written in a single commit so readers never observe a
        post with half of its links replaced.

        Args:
            post: The post to insert or update
            tag_ids: Tag ids, duplicates ignored
            faqs: ``(question, answer)`` pairs in display order
            related_post_ids: Manual related posts; ``None`` leaves them untouched
        """
        self.session.add(post)
        await self.session.flush()

        await self.session.execute(delete(BlogPostTag).where(BlogPostTag.post_id == post.id))
        for tag_id in dict.fromkeys(tag_ids):
            self.session.add(BlogPostTag(post_id=post.id, tag_id=tag_id))

        await self.session.execute(delete(BlogFaq).where(BlogFaq.post_id == post.id))
        for order, (question, answer) in enumerate(faqs):
            self.session.add(BlogFaq(post_id=post.id, question=question, answer=answer, display_order=order))

        if related_post_ids is not None:
            await self.session.execute(
                delete(BlogRelatedPost).where(
                    BlogRelatedPost.post_id == post.id,
                    BlogRelatedPost.is_manual == True,  # noqa: E712
                )
            )
            ordered = [r for r in dict.fromkeys(related_post_ids) if r != post.id]
            for position, related_id in enumerate(ordered):
                self.session.add(
                    BlogRelatedPost(
                        post_id=post.id,
                        related_post_id=related_id,
                        relevance_score=float(len(ordered) - position),
                        is_manual=True,
                    )
                )

        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def delete(self, entity_id: str) -> bool:
        """Delete a post together with its tag links, FAQs and related-post rows."""
        post = await self.get_by_id(entity_id)
        if post is None:
            return False
        await self.session.execute(delete(BlogPostTag).where(BlogPostTag.post_id == entity_id))
        await self.session.execute(delete(BlogFaq).where(BlogFaq.post_id == entity_id))
        await self.session.execute(
            delete(BlogRelatedPost).where(
                or_(BlogRelatedPost.post_id == entity_id, BlogRelatedPost.related_post_id == entity_id)
            )
        )
        await self.session.delete(post)
        await self.session.commit()
        return True

    # ------------------------------------------------------------------
    # Related posts
    # ------------------------------------------------------------------

    async def get_manual_related_ids(self, post_id: str) -> List[str]:
        stmt = (
            select(BlogRelatedPost.related_post_id)
            .where(BlogRelatedPost.post_id == post_id)
            .order_by(BlogRelatedPost.relevance_score.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_visible_sharing_tags(
        self, post_id: str, tag_ids: Sequence[str], limit: int
    ) -> List[BlogPost]:
        """Visible posts ranked by the number of tags shared with ``post_id``."""
        if not tag_ids:
            return []
        shared = func.count(BlogPostTag.tag_id).label("shared")
        stmt = (
            select(BlogPost, shared)
            .join(BlogPostTag, BlogPostTag.post_id == BlogPost.id)
            .where(BlogPostTag.tag_id.in_(tag_ids), BlogPost.id != post_id)  # type: ignore[attr-defined]
            .group_by(BlogPost.id)
            .order_by(shared.desc(), BlogPost.published_at.desc())  # type: ignore[union-attr]
            .limit(limit)
        )
        stmt = self._visible(stmt)
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]
