"""
Public Site Endpoints.

Read-only JSON behind the public pages: homepage, post listings and detail,
related posts, categories, tags, author pages and search. Only published
posts whose publish date has passed are returned.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from sws_blog.core.models.io.blog import (
    AuthorListing,
    CategoryListing,
    CategoryRead,
    HomePage,
    PostDetail,
    PostSummary,
    TagListing,
    TagRead,
)
from sws_blog.server.services.deps import PublicSiteDep

router = APIRouter()


@router.get(
    "/home",
    response_model=HomePage,
    summary="Homepage",
    description="Navigation categories, featured posts, latest posts and one section per homepage category.",
    response_description="Homepage sections; categories without posts are omitted.",
)
async def get_home(site: PublicSiteDep) -> HomePage:
    """
    Homepage data.

    - **nav_categories**: categories flagged for the navigation bar, by display order
    - **featured_posts**: up to 3 featured posts
    - **latest_posts**: the 6 most recent posts
    - **category_sections**: up to 6 posts per homepage category, empty sections dropped
    """
    return await site.home()


@router.get(
    "/posts",
    response_model=List[PostSummary],
    summary="List Posts",
    description="Published posts, newest first, optionally filtered by category or tag slug.",
    responses={404: {"description": "Unknown category or tag"}},
)
async def list_posts(
    site: PublicSiteDep,
    limit: int = Query(24, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category: Optional[str] = Query(None, description="Category slug"),
    tag: Optional[str] = Query(None, description="Tag slug"),
) -> List[PostSummary]:
    return await site.list_posts(limit=limit, offset=offset, category_slug=category, tag_slug=tag)


@router.get(
    "/posts/{slug}",
    response_model=PostDetail,
    summary="Get Post",
    description="A published post with its author, category, tags and FAQs. Each read counts as a view.",
    responses={404: {"description": "Post not found or not published"}},
)
async def get_post(slug: str, site: PublicSiteDep) -> PostDetail:
    return await site.get_post(slug)


@router.get(
    "/posts/{slug}/related",
    response_model=List[PostSummary],
    summary="Related Posts",
    description="Curated related posts first, then posts sharing the most tags, then posts from the same category.",
    responses={404: {"description": "Post not found or not published"}},
)
async def get_related_posts(slug: str, site: PublicSiteDep, limit: int = Query(3, ge=1, le=12)) -> List[PostSummary]:
    return await site.related_posts(slug, limit=limit)


@router.get("/categories", response_model=List[CategoryRead], summary="List Categories")
async def list_categories(site: PublicSiteDep, nav_only: bool = False) -> List[CategoryRead]:
    return await site.list_categories(nav_only=nav_only)


@router.get(
    "/categories/{slug}",
    response_model=CategoryListing,
    summary="Category Page",
    responses={404: {"description": "Category not found"}},
)
async def get_category(slug: str, site: PublicSiteDep) -> CategoryListing:
    return await site.category_listing(slug)


@router.get("/tags", response_model=List[TagRead], summary="List Tags")
async def list_tags(site: PublicSiteDep) -> List[TagRead]:
    return await site.list_tags()


@router.get(
    "/tags/{slug}",
    response_model=TagListing,
    summary="Tag Page",
    responses={404: {"description": "Tag not found"}},
)
async def get_tag(slug: str, site: PublicSiteDep) -> TagListing:
    return await site.tag_listing(slug)


@router.get(
    "/authors/{slug}",
    response_model=AuthorListing,
    summary="Author Page",
    responses={404: {"description": "Author not found or inactive"}},
)
async def get_author(slug: str, site: PublicSiteDep) -> AuthorListing:
    return await site.author_listing(slug)


@router.get(
    "/search",
    response_model=List[PostSummary],
    summary="Search Posts",
    description="Case-insensitive match on title, excerpt and primary keyword.",
    responses={400: {"description": "Empty query"}},
)
async def search_posts(site: PublicSiteDep, q: str = "") -> List[PostSummary]:
    return await site.search(q)
