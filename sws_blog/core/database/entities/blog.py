"""
Blog content entity models.

This module contains the database entities behind the public site and the
admin dashboard: authors, categories, tags, posts and their FAQ, tag and
related-post link tables.

Relationships are resolved explicitly by the repositories rather than through
ORM relationship attributes, which keeps every query visible under async IO.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field

from sws_blog.core.text import utc_now

from ..base import Base, new_id


class PostStatus(str, Enum):
    """Publication lifecycle of a post."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class BlogAuthor(Base, table=True):
    """A person credited on posts.

    Table: blog_authors
    """

    __tablename__ = "blog_authors"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, max_length=64)
    name: str = Field(max_length=200)
    slug: str = Field(max_length=200, unique=True, index=True)
    bio: Optional[str] = Field(default=None)
    avatar_url: Optional[str] = Field(default=None)
    social_links: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    expertise: Optional[List[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"BlogAuthor(id={self.id}, slug={self.slug})"


class BlogCategory(Base, table=True):
    """A top-level grouping of posts, optionally nested under a parent.

    Table: blog_categories
    """

    __tablename__ = "blog_categories"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=200)
    slug: str = Field(max_length=200, unique=True, index=True)
    description: Optional[str] = Field(default=None)
    subtitle: Optional[str] = Field(default=None)
    meta_title: Optional[str] = Field(default=None)
    meta_description: Optional[str] = Field(default=None)
    color: Optional[str] = Field(default=None, max_length=32)
    icon: Optional[str] = Field(default=None, max_length=64)
    display_order: int = Field(default=0)
    show_in_nav: bool = Field(default=True)
    show_on_homepage: bool = Field(default=True)
    parent_id: Optional[str] = Field(default=None, foreign_key="blog_categories.id", max_length=64)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"BlogCategory(id={self.id}, slug={self.slug})"


class BlogTag(Base, table=True):
    """A free-form label attached to posts.

    Table: blog_tags
    """

    __tablename__ = "blog_tags"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=200)
    slug: str = Field(max_length=200, unique=True, index=True)
    description: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"BlogTag(id={self.id}, slug={self.slug})"


class BlogPost(Base, table=True):
    """A blog article with its SEO and AI-optimization fields.

    Table: blog_posts
    """

    __tablename__ = "blog_posts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=500)
    slug: str = Field(max_length=500, unique=True, index=True)
    subtitle: Optional[str] = Field(default=None)
    excerpt: Optional[str] = Field(default=None)
    content: str = Field(default="")
    featured_image: Optional[str] = Field(default=None)
    featured_image_alt: Optional[str] = Field(default=None)
    og_image: Optional[str] = Field(default=None)

    author_id: str = Field(foreign_key="blog_authors.id", index=True, max_length=64)
    category_id: str = Field(foreign_key="blog_categories.id", index=True, max_length=64)

    status: str = Field(default=PostStatus.DRAFT.value, max_length=16, index=True)
    published_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime)
    scheduled_for: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_featured: bool = Field(default=False)
    featured_order: Optional[int] = Field(default=None)

    # SEO
    meta_title: Optional[str] = Field(default=None)
    meta_description: Optional[str] = Field(default=None)
    canonical_url: Optional[str] = Field(default=None)
    primary_keyword: Optional[str] = Field(default=None)
    secondary_keywords: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # AI optimization
    ai_summary: Optional[str] = Field(default=None)
    key_takeaways: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    definitive_statements: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    questions_answered: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    entities: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    topic_cluster: Optional[str] = Field(default=None)
    content_type: Optional[str] = Field(default=None)
    expertise_level: Optional[str] = Field(default=None)
    last_verified_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    sources: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Derived / counters
    read_time_minutes: Optional[int] = Field(default=None)
    word_count: Optional[int] = Field(default=None)
    view_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"BlogPost(id={self.id}, slug={self.slug}, status={self.status})"


class BlogPostTag(Base, table=True):
    """Link table between posts and tags.

    Table: blog_post_tags
    """

    __tablename__ = "blog_post_tags"
    __table_args__ = ({"extend_existing": True},)

    post_id: str = Field(foreign_key="blog_posts.id", primary_key=True, max_length=64)
    tag_id: str = Field(foreign_key="blog_tags.id", primary_key=True, max_length=64, index=True)


class BlogFaq(Base, table=True):
    """A question/answer pair shown under a post.

    Table: blog_faqs
    """

    __tablename__ = "blog_faqs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    post_id: str = Field(foreign_key="blog_posts.id", index=True, max_length=64)
    question: str
    answer: str
    display_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class BlogRelatedPost(Base, table=True):
    """Curated relation between two posts.

    Table: blog_related_posts
    """

    __tablename__ = "blog_related_posts"
    __table_args__ = ({"extend_existing": True},)

    post_id: str = Field(foreign_key="blog_posts.id", primary_key=True, max_length=64)
    related_post_id: str = Field(foreign_key="blog_posts.id", primary_key=True, max_length=64)
    relevance_score: float = Field(default=1.0)
    is_manual: bool = Field(default=True)
