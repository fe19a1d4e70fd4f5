"""
Admin Content Endpoints.

CRUD for posts, categories, tags and authors used by the admin dashboard,
plus the manual trigger of scheduled publishing. Mounted behind the admin
bearer-token guard.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from sws_blog.core.database.entities.blog import PostStatus
from sws_blog.core.models.io.blog import (
    AuthorCreate,
    AuthorRead,
    AuthorUpdate,
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    PostCreate,
    PostDetail,
    PostRead,
    PostUpdate,
    PublishDueResult,
    TagCreate,
    TagRead,
    TagUpdate,
)
from sws_blog.server.services.deps import ContentAdminDep

router = APIRouter()

# =====================================================================
# Posts
# =====================================================================


@router.get(
    "/posts",
    response_model=List[PostRead],
    summary="List Posts (admin)",
    description="Every post regardless of status, most recently edited first.",
)
async def list_posts(
    admin: ContentAdminDep,
    status_filter: Optional[PostStatus] = Query(None, alias="status"),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
) -> List[PostRead]:
    return await admin.list_posts(status_filter, limit, offset)


@router.post(
    "/posts/publish-due",
    response_model=PublishDueResult,
    summary="Publish Due Posts",
    description="Publish every scheduled post whose scheduled time has passed.",
)
async def publish_due(admin: ContentAdminDep) -> PublishDueResult:
    """
    Publish due scheduled posts.

    The same routine runs periodically in the background; this endpoint
    triggers it on demand. Each published post keeps its scheduled time as
    its publish date.
    """
    return PublishDueResult(published=await admin.publish_due())


@router.get(
    "/posts/{post_id}",
    response_model=PostDetail,
    summary="Get Post (admin)",
    responses={404: {"description": "Post not found"}},
)
async def get_post(post_id: str, admin: ContentAdminDep) -> PostDetail:
    return await admin.get_post(post_id)


@router.post(
    "/posts",
    response_model=PostDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Create a post and attach its tags, FAQs and curated related posts.",
    response_description="The created post with resolved relations.",
    responses={
        201: {"description": "Post created"},
        400: {"description": "Unknown author, category, tag or related post"},
        409: {"description": "Slug already in use"},
        422: {"description": "Invalid payload (e.g. scheduled without scheduled_for)"},
    },
)
async def create_post(payload: PostCreate, admin: ContentAdminDep) -> PostDetail:
    """
    Create a post.

    - **slug**: derived from the title when omitted
    - **status**: `published` stamps `published_at` when unset; `scheduled` requires `scheduled_for`
    - **tags**: tag ids; replace the post's tags
    - **faqs**: question/answer pairs; blank pairs are dropped, order is kept
    - **related_post_ids**: curated related posts, most relevant first
    """
    return await admin.create_post(payload)


@router.put(
    "/posts/{post_id}",
    response_model=PostDetail,
    summary="Update Post",
    description="Replace a post's fields, tags and FAQs.",
    responses={
        404: {"description": "Post not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_post(post_id: str, payload: PostUpdate, admin: ContentAdminDep) -> PostDetail:
    return await admin.update_post(post_id, payload)


@router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Post",
    responses={404: {"description": "Post not found"}},
)
async def delete_post(post_id: str, admin: ContentAdminDep) -> None:
    await admin.delete_post(post_id)


# =====================================================================
# Categories
# =====================================================================


@router.get("/categories", response_model=List[CategoryRead], summary="List Categories (admin)")
async def list_categories(admin: ContentAdminDep) -> List[CategoryRead]:
    return await admin.list_categories()


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    responses={409: {"description": "Slug already in use"}},
)
async def create_category(payload: CategoryCreate, admin: ContentAdminDep) -> CategoryRead:
    return await admin.create_category(payload)


@router.patch(
    "/categories/{category_id}",
    response_model=CategoryRead,
    summary="Update Category",
    responses={404: {"description": "Category not found"}, 409: {"description": "Slug already in use"}},
)
async def update_category(category_id: str, payload: CategoryUpdate, admin: ContentAdminDep) -> CategoryRead:
    return await admin.update_category(category_id, payload)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Category",
    responses={404: {"description": "Category not found"}, 409: {"description": "Category still has posts"}},
)
async def delete_category(category_id: str, admin: ContentAdminDep) -> None:
    await admin.delete_category(category_id)


# =====================================================================
# Tags
# =====================================================================


@router.get("/tags", response_model=List[TagRead], summary="List Tags (admin)")
async def list_tags(admin: ContentAdminDep) -> List[TagRead]:
    return await admin.list_tags()


@router.post(
    "/tags",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tag",
    responses={409: {"description": "Slug already in use"}},
)
async def create_tag(payload: TagCreate, admin: ContentAdminDep) -> TagRead:
    return await admin.create_tag(payload)


@router.patch(
    "/tags/{tag_id}",
    response_model=TagRead,
    summary="Update Tag",
    responses={404: {"description": "Tag not found"}, 409: {"description": "Slug already in use"}},
)
async def update_tag(tag_id: str, payload: TagUpdate, admin: ContentAdminDep) -> TagRead:
    return await admin.update_tag(tag_id, payload)


@router.delete(
    "/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Tag",
    description="Delete a tag and detach it from every post.",
    responses={404: {"description": "Tag not found"}},
)
async def delete_tag(tag_id: str, admin: ContentAdminDep) -> None:
    await admin.delete_tag(tag_id)


# =====================================================================
# Authors
# =====================================================================


@router.get("/authors", response_model=List[AuthorRead], summary="List Authors (admin)")
async def list_authors(admin: ContentAdminDep) -> List[AuthorRead]:
    return await admin.list_authors()


@router.post(
    "/authors",
    response_model=AuthorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Author",
    responses={409: {"description": "Slug already in use"}},
)
async def create_author(payload: AuthorCreate, admin: ContentAdminDep) -> AuthorRead:
    return await admin.create_author(payload)


@router.patch(
    "/authors/{author_id}",
    response_model=AuthorRead,
    summary="Update Author",
    responses={404: {"description": "Author not found"}, 409: {"description": "Slug already in use"}},
)
async def update_author(author_id: str, payload: AuthorUpdate, admin: ContentAdminDep) -> AuthorRead:
    return await admin.update_author(author_id, payload)


@router.delete(
    "/authors/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Author",
    responses={404: {"description": "Author not found"}, 409: {"description": "Author still credited on posts"}},
)
async def delete_author(author_id: str, admin: ContentAdminDep) -> None:
    await admin.delete_author(author_id)
