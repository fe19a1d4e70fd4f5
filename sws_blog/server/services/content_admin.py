"""
Admin content management.

Create, update and delete posts, categories, tags and authors. Post saves
derive the slug, word count and read time, stamp the publish date, and
replace the post's tags, FAQs and curated related posts in one commit.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sws_blog.core.database.entities.blog import (
    BlogAuthor,
    BlogCategory,
    BlogPost,
    BlogTag,
    PostStatus,
)
from sws_blog.core.database.repositories import (
    AuthorRepository,
    CategoryRepository,
    PostRepository,
    TagRepository,
)
from sws_blog.core.errors import ConflictError, NotFoundError, ValidationFailedError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.blog import (
    AuthorCreate,
    AuthorRead,
    AuthorUpdate,
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    PostDetail,
    PostRead,
    PostWrite,
    TagCreate,
    TagRead,
    TagUpdate,
)
from sws_blog.core.text import (
    clean_list,
    count_words,
    generate_slug,
    read_time_minutes,
    to_naive_utc,
    utc_now,
)

from .public_site import build_post_detail

logger = get_logger(__name__)

_LIST_FIELDS = ("secondary_keywords", "key_takeaways", "definitive_statements", "questions_answered")

# Update payload keys whose columns cannot be cleared
_NOT_NULL = {"name", "slug", "display_order", "show_in_nav", "show_on_homepage", "is_active", "social_links"}


def resolve_slug(requested: Optional[str], fallback: str) -> str:
    """Normalized slug from the requested value, else from ``fallback`` (title or name)."""
    slug = generate_slug(requested or "") or generate_slug(fallback)
    if not slug:
        raise ValidationFailedError("A slug could not be derived; provide a title with letters or digits")
    return slug


def _changes(payload) -> dict:
    """Fields set on a partial update; an explicit null only clears optional columns."""
    return {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k not in _NOT_NULL}


class ContentAdminService:
    """Write side of the blog used by the admin dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.categories = CategoryRepository(session)
        self.tags = TagRepository(session)
        self.authors = AuthorRepository(session)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def list_posts(
        self, status: Optional[PostStatus] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[PostRead]:
        posts = await self.posts.list_admin(status.value if status else None, limit, offset)
        return [PostRead.model_validate(p) for p in posts]

    async def get_post(self, post_id: str) -> PostDetail:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return await build_post_detail(self.session, post)

    async def create_post(self, payload: PostWrite) -> PostDetail:
        post = BlogPost(title=payload.title, author_id=payload.author_id, category_id=payload.category_id)
        return await self._save_post(post, payload, is_new=True)

    async def update_post(self, post_id: str, payload: PostWrite) -> PostDetail:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return await self._save_post(post, payload, is_new=False)

    async def delete_post(self, post_id: str) -> None:
        if not await self.posts.delete(post_id):
            raise NotFoundError("Post", post_id)
        logger.info(f"Deleted post {post_id}")

    async def _save_post(self, post: BlogPost, payload: PostWrite, is_new: bool) -> PostDetail:
        title = payload.title.strip()
        if not title:
            raise ValidationFailedError("Title is required")
        # An existing post keeps its public URL unless a new slug is sent.
        slug = resolve_slug(payload.slug or (None if is_new else post.slug), title)
        if await self.posts.slug_taken(slug, exclude_id=post.id):
            raise ConflictError(f"Slug '{slug}' is already in use")
        await self._check_references(payload)

        faqs = [
            (faq.question.strip(), faq.answer.strip())
            for faq in payload.faqs
            if faq.question.strip() and faq.answer.strip()
        ]
        words = count_words(payload.content)

        data = payload.model_dump(exclude={"tags", "faqs", "related_post_ids", "slug", "title"})
        for field in _LIST_FIELDS:
            data[field] = clean_list(data[field])
        data["status"] = payload.status.value
        data["published_at"] = to_naive_utc(payload.published_at) or post.published_at
        data["scheduled_for"] = to_naive_utc(payload.scheduled_for)
        data["last_verified_at"] = to_naive_utc(payload.last_verified_at)
        if payload.status == PostStatus.PUBLISHED and data["published_at"] is None:
            data["published_at"] = utc_now()

        for key, value in data.items():
            setattr(post, key, value)
        post.title = title
        post.slug = slug
        post.word_count = words
        post.read_time_minutes = read_time_minutes(words)
        post.updated_at = utc_now()

        saved = await self.posts.save_with_links(post, payload.tags, faqs, payload.related_post_ids)
        logger.info(f"{'Created' if is_new else 'Updated'} post {saved.id} ({saved.slug}, {saved.status})")
        return await build_post_detail(self.session, saved)

    async def _check_references(self, payload: PostWrite) -> None:
        if await self.authors.get_by_id(payload.author_id) is None:
            raise ValidationFailedError(f"Unknown author {payload.author_id}")
        if await self.categories.get_by_id(payload.category_id) is None:
            raise ValidationFailedError(f"Unknown category {payload.category_id}")
        unknown_tags = set(payload.tags) - set(await self.tags.existing_ids(list(set(payload.tags))))
        if unknown_tags:
            raise ValidationFailedError(f"Unknown tags: {', '.join(sorted(unknown_tags))}")
        if payload.related_post_ids:
            found = {p.id for p in await self.posts.get_many(payload.related_post_ids)}
            missing = set(payload.related_post_ids) - found
            if missing:
                raise ValidationFailedError(f"Unknown related posts: {', '.join(sorted(missing))}")

    async def publish_due(self, now: Optional[datetime] = None) -> int:
        """Publish scheduled posts whose scheduled time has passed; returns how many."""
        now = now or utc_now()
        due = await self.posts.list_due_scheduled(now)
        for post in due:
            post.status = PostStatus.PUBLISHED.value
            post.published_at = post.scheduled_for
            post.updated_at = now
            self.session.add(post)
        if due:
            await self.session.commit()
            logger.info(f"Published {len(due)} scheduled post(s)")
        return len(due)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in await self.categories.list_ordered()]

    async def create_category(self, payload: CategoryCreate) -> CategoryRead:
        slug = resolve_slug(payload.slug, payload.name)
        if await self.categories.slug_taken(slug):
            raise ConflictError(f"Slug '{slug}' is already in use")
        await self._check_parent(payload.parent_id, None)
        category = BlogCategory.model_validate({**payload.model_dump(), "slug": slug})
        return CategoryRead.model_validate(await self.categories.create(category))

    async def update_category(self, category_id: str, payload: CategoryUpdate) -> CategoryRead:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        changes = _changes(payload)
        if "slug" in changes or "name" in changes:
            slug = resolve_slug(changes.get("slug") or category.slug, changes.get("name") or category.name)
            if await self.categories.slug_taken(slug, exclude_id=category_id):
                raise ConflictError(f"Slug '{slug}' is already in use")
            changes["slug"] = slug
        if "parent_id" in changes:
            await self._check_parent(changes["parent_id"], category_id)
        for key, value in changes.items():
            setattr(category, key, value)
        category.updated_at = utc_now()
        return CategoryRead.model_validate(await self.categories.update(category))

    async def delete_category(self, category_id: str) -> None:
        if await self.categories.get_by_id(category_id) is None:
            raise NotFoundError("Category", category_id)
        in_use = await self.posts.count_in_category(category_id)
        if in_use:
            raise ConflictError(f"Category {category_id} is used by {in_use} post(s)")
        await self.categories.delete(category_id)

    async def _check_parent(self, parent_id: Optional[str], category_id: Optional[str]) -> None:
        if parent_id is None:
            return
        if parent_id == category_id:
            raise ValidationFailedError("A category cannot be its own parent")
        if await self.categories.get_by_id(parent_id) is None:
            raise ValidationFailedError(f"Unknown parent category {parent_id}")

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def list_tags(self) -> List[TagRead]:
        return [TagRead.model_validate(t) for t in await self.tags.list_ordered()]

    async def create_tag(self, payload: TagCreate) -> TagRead:
        slug = resolve_slug(payload.slug, payload.name)
        if await self.tags.slug_taken(slug):
            raise ConflictError(f"Slug '{slug}' is already in use")
        tag = BlogTag(name=payload.name.strip(), slug=slug, description=payload.description)
        return TagRead.model_validate(await self.tags.create(tag))

    async def update_tag(self, tag_id: str, payload: TagUpdate) -> TagRead:
        tag = await self.tags.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        changes = _changes(payload)
        if "slug" in changes or "name" in changes:
            slug = resolve_slug(changes.get("slug") or tag.slug, changes.get("name") or tag.name)
            if await self.tags.slug_taken(slug, exclude_id=tag_id):
                raise ConflictError(f"Slug '{slug}' is already in use")
            changes["slug"] = slug
        for key, value in changes.items():
            setattr(tag, key, value)
        return TagRead.model_validate(await self.tags.update(tag))

    async def delete_tag(self, tag_id: str) -> None:
        if not await self.tags.delete(tag_id):
            raise NotFoundError("Tag", tag_id)

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------

    async def list_authors(self) -> List[AuthorRead]:
        return [AuthorRead.model_validate(a) for a in await self.authors.list_ordered()]

    async def create_author(self, payload: AuthorCreate) -> AuthorRead:
        slug = resolve_slug(payload.slug, payload.name)
        if await self.authors.slug_taken(slug):
            raise ConflictError(f"Slug '{slug}' is already in use")
        author = BlogAuthor.model_validate({**payload.model_dump(), "slug": slug})
        return AuthorRead.model_validate(await self.authors.create(author))

    async def update_author(self, author_id: str, payload: AuthorUpdate) -> AuthorRead:
        author = await self.authors.get_by_id(author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        changes = _changes(payload)
        if "slug" in changes or "name" in changes:
            slug = resolve_slug(changes.get("slug") or author.slug, changes.get("name") or author.name)
            if await self.authors.slug_taken(slug, exclude_id=author_id):
                raise ConflictError(f"Slug '{slug}' is already in use")
            changes["slug"] = slug
        for key, value in changes.items():
            setattr(author, key, value)
        author.updated_at = utc_now()
        return AuthorRead.model_validate(await self.authors.update(author))

    async def delete_author(self, author_id: str) -> None:
        if await self.authors.get_by_id(author_id) is None:
            raise NotFoundError("Author", author_id)
        in_use = await self.posts.count_by_author(author_id)
        if in_use:
            raise ConflictError(f"Author {author_id} is credited on {in_use} post(s)")
        await self.authors.delete(author_id)
