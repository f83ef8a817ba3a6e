# storefront_http_api/db/models.py

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

product_tags = Table(
    "product_tags",
    Base.metadata,
    Column("product_id", ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """
    Shared by posts and products; both reference it by id and filter by slug.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------


class Post(Base):
    """
    A blog article.

    `published_at` is written once, on the first transition to PUBLISHED.
    `views` only ever grows.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)

    status: Mapped[PostStatus] = mapped_column(
        SQLEnum(PostStatus, name="post_status_enum"),
        nullable=False,
        default=PostStatus.DRAFT,
        index=True,
    )

    author_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    featured_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    category: Mapped[Optional[Category]] = relationship("Category")
    tags: Mapped[List[Tag]] = relationship("Tag", secondary=post_tags, order_by="Tag.name")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    likes: Mapped[List["PostLike"]] = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def comment_count(self) -> int:
        return len(self.comments)


class Comment(Base):
    __tablename__ = "post_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    post: Mapped[Post] = relationship("Post", back_populates="comments")


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    post: Mapped[Post] = relationship("Post", back_populates="likes")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Product(Base):
    """
    A catalog item.

    `average_rating` and `review_count` are derived from `reviews` and are
    rewritten by the catalog service on every review create/delete.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    original_price: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Inventory
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sku: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)
    track_inventory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Free-form structured data
    attributes: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    variants: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # SEO
    meta_title: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    meta_keywords: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[ProductStatus] = mapped_column(
        SQLEnum(ProductStatus, name="product_status_enum"),
        nullable=False,
        default=ProductStatus.ACTIVE,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    category: Mapped[Optional[Category]] = relationship("Category")
    tags: Mapped[List[Tag]] = relationship("Tag", secondary=product_tags, order_by="Tag.name")
    images: Mapped[List["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.position",
    )
    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Review.created_at.desc()",
    )

    @property
    def inventory(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity,
            "sku": self.sku,
            "track_inventory": self.track_inventory,
        }

    @property
    def seo(self) -> Dict[str, Any]:
        return {
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "keywords": list(self.meta_keywords or []),
        }

    @property
    def discount_percentage(self) -> int:
        """Whole-number discount against `original_price`, 0 when there is none."""
        if self.original_price and self.original_price > self.price:
            return int(round((self.original_price - self.price) / self.original_price * 100))
        return 0


class ProductImage(Base):
    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    alt_text: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    product: Mapped[Product] = relationship("Product", back_populates="images")


class Review(Base):
    __tablename__ = "product_reviews"
    # NULL user_id never collides, so anonymous reviews are unrestricted.
    __table_args__ = (UniqueConstraint("product_id", "user_id", name="uq_product_reviews_product_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    product: Mapped[Product] = relationship("Product", back_populates="reviews")


__all__ = [
    "Base",
    "PostStatus",
    "ProductStatus",
    "Category",
    "Tag",
    "post_tags",
    "product_tags",
    "Post",
    "Comment",
    "PostLike",
    "Product",
    "ProductImage",
    "Review",
]
