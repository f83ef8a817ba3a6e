# storefront_http_api/schemas/posts.py

"""
Schemas for the blog endpoints.

Request structs validate bounds up front so that the content service never
starts a write with bad input; read structs are built from ORM rows.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..db.models import PostStatus
from .common import APIModel, Pagination, RequestModel, SortKey, clean_tag_names
from .taxonomy import CategoryRead, TagRead


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class PostListQuery(APIModel):
    search: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    sort: SortKey = SortKey.NEWEST
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class PostCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=10)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    status: PostStatus = PostStatus.DRAFT
    category: Optional[str] = Field(
        default=None,
        description="Slug of an existing category.",
    )
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        return clean_tag_names(value) or []


class PostUpdate(RequestModel):
    """
    Partial update: only fields that are not None change.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=10)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    status: Optional[PostStatus] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return clean_tag_names(value)


class CommentCreate(RequestModel):
    content: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class CommentRead(APIModel):
    id: int
    post_id: int
    user_id: str
    content: str
    created_at: datetime


class PostSummary(APIModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    status: PostStatus
    author_id: str
    category: Optional[CategoryRead] = None
    tags: List[TagRead] = Field(default_factory=list)
    views: int = 0
    like_count: int = 0
    comment_count: int = 0
    featured_image: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PostDetail(PostSummary):
    content: str
    comments: List[CommentRead] = Field(default_factory=list)


class LikeState(APIModel):
    likes: int
    is_liked: bool


# ---------------------------------------------------------------------------
# Envelope payloads
# ---------------------------------------------------------------------------


class PostListData(APIModel):
    posts: List[PostSummary]
    pagination: Pagination


class PostData(APIModel):
    post: PostDetail


class CommentData(APIModel):
    comment: CommentRead


__all__ = [
    "PostListQuery",
    "PostCreate",
    "PostUpdate",
    "CommentCreate",
    "CommentRead",
    "PostSummary",
    "PostDetail",
    "LikeState",
    "PostListData",
    "PostData",
    "CommentData",
]
