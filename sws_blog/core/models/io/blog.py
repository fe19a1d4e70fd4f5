"""
Blog content I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for the public site and the
admin content API. These models are separate from database entities so the
API contract can evolve independently.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sws_blog.core.database.entities.blog import PostStatus

# =====================================================================
# Nested value objects
# =====================================================================


class EntityRef(BaseModel):
    """A named entity mentioned by a post (person, product, organization...)."""

    name: str
    type: str
    url: Optional[str] = None


class SourceRef(BaseModel):
    """A cited source."""

    title: str
    url: str


class FaqInput(BaseModel):
    """FAQ entry as submitted by the admin form."""

    question: str = ""
    answer: str = ""


# =====================================================================
# Authors
# =====================================================================


class AuthorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    expertise: Optional[List[str]] = None
    is_active: bool


class AuthorCreate(BaseModel):
    name: str = Field(min_length=1, description="Display name")
    slug: Optional[str] = Field(default=None, description="URL slug (generated from name when omitted)")
    user_id: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    expertise: Optional[List[str]] = None
    is_active: bool = True


class AuthorUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    expertise: Optional[List[str]] = None
    is_active: Optional[bool] = None


# =====================================================================
# Categories and tags
# =====================================================================


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    subtitle: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    display_order: int
    show_in_nav: bool
    show_on_homepage: bool
    parent_id: Optional[str] = None


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    subtitle: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    display_order: int = 0
    show_in_nav: bool = True
    show_on_homepage: bool = True
    parent_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    subtitle: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    display_order: Optional[int] = None
    show_in_nav: Optional[bool] = None
    show_on_homepage: Optional[bool] = None
    parent_id: Optional[str] = None


class TagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None


class TagCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None


class TagUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


# =====================================================================
# Posts
# =====================================================================


class FaqRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question: str
    answer: str
    display_order: int


class PostSummary(BaseModel):
    """Card-sized view of a post used by listings."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    featured_image_alt: Optional[str] = None
    author_id: str
    category_id: str
    status: PostStatus
    published_at: Optional[datetime] = None
    is_featured: bool
    read_time_minutes: Optional[int] = None


class PostRead(PostSummary):
    """Full post record (admin view and base of the public detail view)."""

    content: str
    og_image: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    featured_order: Optional[int] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    primary_keyword: Optional[str] = None
    secondary_keywords: List[str] = Field(default_factory=list)
    ai_summary: Optional[str] = None
    key_takeaways: List[str] = Field(default_factory=list)
    definitive_statements: List[str] = Field(default_factory=list)
    questions_answered: List[str] = Field(default_factory=list)
    entities: List[EntityRef] = Field(default_factory=list)
    topic_cluster: Optional[str] = None
    content_type: Optional[str] = None
    expertise_level: Optional[str] = None
    last_verified_at: Optional[datetime] = None
    sources: List[SourceRef] = Field(default_factory=list)
    word_count: Optional[int] = None
    view_count: int
    created_at: datetime
    updated_at: datetime


class PostDetail(PostRead):
    """Post with its author, category, tags and FAQs resolved."""

    author: AuthorRead
    category: CategoryRead
    tags: List[TagRead] = Field(default_factory=list)
    faqs: List[FaqRead] = Field(default_factory=list)


class PostWrite(BaseModel):
    """Fields shared by post create and update payloads."""

    title: str = Field(min_length=1, description="Post title")
    slug: Optional[str] = Field(default=None, description="URL slug (generated from title when blank)")
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: str = ""
    featured_image: Optional[str] = None
    featured_image_alt: Optional[str] = None
    og_image: Optional[str] = None
    author_id: str
    category_id: str
    status: PostStatus = PostStatus.DRAFT
    published_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None
    is_featured: bool = False
    featured_order: Optional[int] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    primary_keyword: Optional[str] = None
    secondary_keywords: List[str] = Field(default_factory=list)
    ai_summary: Optional[str] = None
    key_takeaways: List[str] = Field(default_factory=list)
    definitive_statements: List[str] = Field(default_factory=list)
    questions_answered: List[str] = Field(default_factory=list)
    entities: List[EntityRef] = Field(default_factory=list)
    topic_cluster: Optional[str] = None
    content_type: Optional[str] = None
    expertise_level: Optional[str] = None
    last_verified_at: Optional[datetime] = None
    sources: List[SourceRef] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list, description="Tag ids attached to the post")
    faqs: List[FaqInput] = Field(default_factory=list)
    related_post_ids: Optional[List[str]] = Field(
        default=None, description="Manually curated related posts; omitted keeps the current set"
    )

    @model_validator(mode="after")
    def _scheduled_needs_date(self) -> "PostWrite":
        if self.status == PostStatus.SCHEDULED and self.scheduled_for is None:
            raise ValueError("scheduled_for is required when status is scheduled")
        return self


class PostCreate(PostWrite):
    """Schema for creating a post via the admin API."""


class PostUpdate(PostWrite):
    """Schema for replacing a post via the admin API (PUT semantics)."""


# =====================================================================
# Listings
# =====================================================================


class CategorySection(BaseModel):
    category: CategoryRead
    posts: List[PostSummary]


class HomePage(BaseModel):
    nav_categories: List[CategoryRead]
    featured_posts: List[PostSummary]
    latest_posts: List[PostSummary]
    category_sections: List[CategorySection]


class CategoryListing(BaseModel):
    category: CategoryRead
    posts: List[PostSummary]


class TagListing(BaseModel):
    tag: TagRead
    posts: List[PostSummary]


class AuthorListing(BaseModel):
    author: AuthorRead
    posts: List[PostSummary]


class PublishDueResult(BaseModel):
    published: int = Field(description="Number of scheduled posts that were published")
