# storefront_http_api/schemas/taxonomy.py

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .common import APIModel, RequestModel


class CategoryRead(APIModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None


class TagRead(APIModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None


class TermCreate(RequestModel):
    """Payload for creating a category or a tag."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class CategoryData(APIModel):
    category: CategoryRead


class CategoryListData(APIModel):
    categories: List[CategoryRead]


class TagData(APIModel):
    tag: TagRead


class TagListData(APIModel):
    tags: List[TagRead]


__all__ = [
    "CategoryRead",
    "TagRead",
    "TermCreate",
    "CategoryData",
    "CategoryListData",
    "TagData",
    "TagListData",
]
