# storefront_http_api/schemas/products.py

"""
Schemas for the catalog endpoints.

Numeric bounds mirror the catalog rules: prices and quantities are never
negative, ratings are whole stars between 1 and 5, SEO fields fit search
engine limits (60 / 160 characters).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..db.models import ProductStatus
from .common import APIModel, Pagination, RequestModel, SortKey, clean_tag_names
from .taxonomy import CategoryRead, TagRead

SKU_PATTERN = r"^[A-Za-z0-9_-]+$"


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class ProductListQuery(APIModel):
    search: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    sort: SortKey = SortKey.NEWEST
    page: int = Field(1, ge=1)
    limit: int = Field(12, ge=1)


# ---------------------------------------------------------------------------
# Nested structures (shared by commands and reads)
# ---------------------------------------------------------------------------


class ProductAttribute(APIModel):
    name: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=255)


class ProductVariant(APIModel):
    name: Optional[str] = None
    value: Optional[str] = None
    price_modifier: float = 0
    inventory: int = Field(0, ge=0)


class SeoFields(APIModel):
    meta_title: Optional[str] = Field(default=None, max_length=60)
    meta_description: Optional[str] = Field(default=None, max_length=160)
    keywords: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class ProductCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    price: float = Field(0, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    brand: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, description="Slug of an existing category.")
    tags: List[str] = Field(default_factory=list)

    quantity: int = Field(0, ge=0)
    sku: Optional[str] = Field(default=None, max_length=64, pattern=SKU_PATTERN)
    track_inventory: bool = True

    attributes: List[ProductAttribute] = Field(default_factory=list)
    variants: List[ProductVariant] = Field(default_factory=list)
    seo: SeoFields = Field(default_factory=SeoFields)

    status: ProductStatus = ProductStatus.ACTIVE
    featured: bool = False
    weight: Optional[float] = Field(default=None, ge=0)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        return clean_tag_names(value) or []


class ProductUpdate(RequestModel):
    """
    Partial update: only fields that are not None change. Images are never
    replaced through this struct, new uploads are appended.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    brand: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = None
    tags: Optional[List[str]] = None

    quantity: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = Field(default=None, max_length=64, pattern=SKU_PATTERN)
    track_inventory: Optional[bool] = None

    attributes: Optional[List[ProductAttribute]] = None
    variants: Optional[List[ProductVariant]] = None
    seo: Optional[SeoFields] = None

    status: Optional[ProductStatus] = None
    featured: Optional[bool] = None
    weight: Optional[float] = Field(default=None, ge=0)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return clean_tag_names(value)


class ReviewCreate(RequestModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class ProductImageRead(APIModel):
    id: int
    url: str
    alt_text: str = ""
    position: int = 0


class InventoryRead(APIModel):
    quantity: int
    sku: Optional[str] = None
    track_inventory: bool = True


class ReviewRead(APIModel):
    id: int
    product_id: int
    user_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ProductSummary(APIModel):
    id: int
    name: str
    slug: str
    description: str
    price: float
    original_price: Optional[float] = None
    discount_percentage: int = 0
    brand: Optional[str] = None
    category: Optional[CategoryRead] = None
    tags: List[TagRead] = Field(default_factory=list)
    images: List[ProductImageRead] = Field(default_factory=list)
    inventory: InventoryRead
    status: ProductStatus
    featured: bool = False
    average_rating: float = 0.0
    review_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductSummary):
    attributes: List[ProductAttribute] = Field(default_factory=list)
    variants: List[ProductVariant] = Field(default_factory=list)
    seo: SeoFields
    weight: Optional[float] = None
    reviews: List[ReviewRead] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Envelope payloads
# ---------------------------------------------------------------------------


class ProductListData(APIModel):
    products: List[ProductSummary]
    pagination: Pagination


class FeaturedProductsData(APIModel):
    products: List[ProductSummary]


class ProductData(APIModel):
    product: ProductDetail


class ReviewData(APIModel):
    review: ReviewRead


class UploadedImage(APIModel):
    url: str
    path: str


__all__ = [
    "SKU_PATTERN",
    "ProductListQuery",
    "ProductAttribute",
    "ProductVariant",
    "SeoFields",
    "ProductCreate",
    "ProductUpdate",
    "ReviewCreate",
    "ProductImageRead",
    "InventoryRead",
    "ReviewRead",
    "ProductSummary",
    "ProductDetail",
    "ProductListData",
    "FeaturedProductsData",
    "ProductData",
    "ReviewData",
    "UploadedImage",
]
