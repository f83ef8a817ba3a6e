# storefront_http_api/routers/posts.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront_http_api.auth import Actor
from storefront_http_api.config import Settings
from storefront_http_api.dependencies import (
    get_actor,
    get_optional_actor,
    get_posts_service,
    get_settings_dep,
    require_admin,
)
from storefront_http_api.schemas.common import Envelope, MessageResponse, SortKey
from storefront_http_api.schemas.posts import (
    CommentCreate,
    CommentData,
    LikeState,
    PostData,
    PostListData,
    PostListQuery,
)
from storefront_http_api.schemas.taxonomy import CategoryListData
from storefront_http_api.services import PostsService

from .forms import (
    Submission,
    post_create_from,
    post_image_from,
    post_update_from,
    read_submission,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get(
    "",
    response_model=Envelope[PostListData],
    summary="List published posts",
    description="Search, filter by category/tag slug, sort and paginate published posts.",
)
def list_posts(
    *,
    service: PostsService = Depends(get_posts_service),
    settings: Settings = Depends(get_settings_dep),
    search: Optional[str] = Query(None, description="Case-insensitive text over title, content, excerpt."),
    category: Optional[str] = Query(None, description="Category slug."),
    tag: Optional[str] = Query(None, description="Tag slug."),
    sort: Optional[str] = Query(None, description="newest | oldest | popular | rating | name"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
) -> Envelope[PostListData]:
    query = PostListQuery(
        search=search,
        category=category,
        tag=tag,
        sort=SortKey.parse(sort),
        page=page,
        limit=limit or settings.POSTS_PAGE_SIZE,
    )
    return Envelope(data=service.list_posts(query))


@router.get(
    "/categories",
    response_model=Envelope[CategoryListData],
    summary="Categories used by published posts",
)
def list_post_categories(
    service: PostsService = Depends(get_posts_service),
) -> Envelope[CategoryListData]:
    return Envelope(data=CategoryListData(categories=service.list_categories()))


@router.get(
    "/{slug}",
    response_model=Envelope[PostData],
    summary="Get a post",
    description="Fetch a post by slug (or numeric id). Every fetch counts one view.",
)
def get_post(
    slug: str,
    service: PostsService = Depends(get_posts_service),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Envelope[PostData]:
    return Envelope(data=PostData(post=service.get_post(slug, actor)))


@router.post(
    "",
    response_model=Envelope[PostData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    description="Multipart form (or JSON) with an optional `image` file.",
)
def create_post(
    actor: Actor = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    service: PostsService = Depends(get_posts_service),
) -> Envelope[PostData]:
    post = service.create_post(actor, post_create_from(submission), post_image_from(submission))
    return Envelope(data=PostData(post=post), message="Post created successfully")


@router.put(
    "/{post_id}",
    response_model=Envelope[PostData],
    summary="Update a post",
    description="Partial update; a new `image` replaces the previous one.",
)
def update_post(
    post_id: int,
    actor: Actor = Depends(get_actor),
    submission: Submission = Depends(read_submission),
    service: PostsService = Depends(get_posts_service),
) -> Envelope[PostData]:
    post = service.update_post(
        post_id, actor, post_update_from(submission), post_image_from(submission)
    )
    return Envelope(data=PostData(post=post), message="Post updated successfully")


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete a post",
)
def delete_post(
    post_id: int,
    service: PostsService = Depends(get_posts_service),
    actor: Actor = Depends(get_actor),
) -> MessageResponse:
    service.delete_post(post_id, actor)
    return MessageResponse(message="Post deleted successfully")


@router.post(
    "/{post_id}/comments",
    response_model=Envelope[CommentData],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
def add_comment(
    post_id: int,
    payload: CommentCreate,
    service: PostsService = Depends(get_posts_service),
    actor: Actor = Depends(get_actor),
) -> Envelope[CommentData]:
    comment = service.add_comment(post_id, actor, payload)
    return Envelope(data=CommentData(comment=comment), message="Comment added successfully")


@router.post(
    "/{post_id}/like",
    response_model=Envelope[LikeState],
    summary="Toggle a like",
)
def toggle_like(
    post_id: int,
    service: PostsService = Depends(get_posts_service),
    actor: Actor = Depends(get_actor),
) -> Envelope[LikeState]:
    return Envelope(data=service.toggle_like(post_id, actor))
