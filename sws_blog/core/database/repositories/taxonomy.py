"""
Category, tag and author repositories.
"""

from __future__ import annotations

from typing import List, Sequence

from sqlalchemy import delete
from sqlmodel import select

from ..entities.blog import BlogAuthor, BlogCategory, BlogPostTag, BlogTag
from .base import AsyncBaseRepository


class CategoryRepository(AsyncBaseRepository[BlogCategory]):
    """Repository for blog categories."""

    def __init__(self, session) -> None:
        super().__init__(session, BlogCategory)

    async def list_ordered(self, nav_only: bool = False, homepage_only: bool = False) -> List[BlogCategory]:
        """Categories by display_order then name, optionally restricted to nav or homepage ones."""
        stmt = select(BlogCategory)
        if nav_only:
            stmt = stmt.where(BlogCategory.show_in_nav == True)  # noqa: E712
        if homepage_only:
            stmt = stmt.where(BlogCategory.show_on_homepage == True)  # noqa: E712
        stmt = stmt.order_by(BlogCategory.display_order, BlogCategory.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class TagRepository(AsyncBaseRepository[BlogTag]):
    """Repository for blog tags."""

    def __init__(self, session) -> None:
        super().__init__(session, BlogTag)

    async def list_ordered(self) -> List[BlogTag]:
        result = await self.session.execute(select(BlogTag).order_by(BlogTag.name))
        return list(result.scalars().all())

    async def existing_ids(self, tag_ids: Sequence[str]) -> List[str]:
        if not tag_ids:
            return []
        result = await self.session.execute(select(BlogTag.id).where(BlogTag.id.in_(tag_ids)))  # type: ignore[attr-defined]
        return list(result.scalars().all())

    async def delete(self, entity_id: str) -> bool:
        """Delete a tag and detach it from every post."""
        tag = await self.get_by_id(entity_id)
        if tag is None:
            return False
        await self.session.execute(delete(BlogPostTag).where(BlogPostTag.tag_id == entity_id))
        await self.session.delete(tag)
        await self.session.commit()
        return True


class AuthorRepository(AsyncBaseRepository[BlogAuthor]):
    """Repository for blog authors."""

    def __init__(self, session) -> None:
        super().__init__(session, BlogAuthor)

    async def list_ordered(self, active_only: bool = False) -> List[BlogAuthor]:
        stmt = select(BlogAuthor)
        if active_only:
            stmt = stmt.where(BlogAuthor.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt.order_by(BlogAuthor.name))
        return list(result.scalars().all())
