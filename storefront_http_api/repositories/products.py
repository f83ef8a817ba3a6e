# storefront_http_api/repositories/products.py

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, selectinload

from ..db import models
from ..schemas.common import SortKey
from ..schemas.products import ProductListQuery
from .base import Page, paginate


class ProductsRepository:
    """
    Data access for products, their images and their reviews.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(models.Product).options(
            selectinload(models.Product.category),
            selectinload(models.Product.tags),
            selectinload(models.Product.images),
        )

    def _detail_select(self) -> Select[Any]:
        return self._base_select().options(selectinload(models.Product.reviews))

    @staticmethod
    def _ordering(sort: SortKey):
        product = models.Product
        if sort == SortKey.OLDEST:
            return (product.created_at.asc(), product.id.asc())
        if sort in (SortKey.POPULAR, SortKey.RATING):
            return (product.average_rating.desc(), product.review_count.desc(), product.id.desc())
        if sort == SortKey.PRICE_ASC:
            return (product.price.asc(), product.id.asc())
        if sort == SortKey.PRICE_DESC:
            return (product.price.desc(), product.id.desc())
        if sort == SortKey.NAME:
            return (product.name.asc(), product.id.asc())
        return (product.created_at.desc(), product.id.desc())

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_active(self, query: ProductListQuery) -> Page[models.Product]:
        """
        Filtered, sorted page of active products.

        Facets combine with AND. ``featured`` only narrows the listing when
        it is True.
        """
        product = models.Product
        stmt = self._base_select().where(product.status == models.ProductStatus.ACTIVE)

        term = (query.search or "").strip()
        if term:
            stmt = stmt.where(
                or_(
                    product.name.icontains(term, autoescape=True),
                    product.description.icontains(term, autoescape=True),
                    product.brand.icontains(term, autoescape=True),
                )
            )
        if query.category:
            stmt = stmt.where(product.category.has(models.Category.slug == query.category))
        if query.tag:
            stmt = stmt.where(product.tags.any(models.Tag.slug == query.tag))
        if query.min_price is not None:
            stmt = stmt.where(product.price >= query.min_price)
        if query.max_price is not None:
            stmt = stmt.where(product.price <= query.max_price)
        if query.featured:
            stmt = stmt.where(product.featured.is_(True))
        if query.min_rating is not None:
            stmt = stmt.where(product.average_rating >= query.min_rating)

        stmt = stmt.order_by(*self._ordering(query.sort))
        return paginate(self.session, stmt, page=query.page, limit=query.limit)

    def list_featured(self, limit: int) -> List[models.Product]:
        stmt = (
            self._base_select()
            .where(models.Product.status == models.ProductStatus.ACTIVE)
            .where(models.Product.featured.is_(True))
            .order_by(models.Product.created_at.desc(), models.Product.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().unique().all())

    def get_by_id(self, product_id: int) -> Optional[models.Product]:
        stmt = self._detail_select().where(models.Product.id == product_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Optional[models.Product]:
        stmt = self._detail_select().where(models.Product.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def slug_exists(self, slug: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Product.id).where(models.Product.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(models.Product.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def sku_exists(self, sku: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Product.id).where(models.Product.sku == sku)
        if exclude_id is not None:
            stmt = stmt.where(models.Product.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def active_category_ids(self) -> Sequence[int]:
        stmt = (
            select(models.Product.category_id)
            .where(models.Product.status == models.ProductStatus.ACTIVE)
            .where(models.Product.category_id.is_not(None))
            .distinct()
        )
        return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, product: models.Product) -> models.Product:
        self.session.add(product)
        self.session.flush()
        return product

    def delete(self, product: models.Product) -> None:
        self.session.delete(product)
        self.session.flush()

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_image(self, product_id: int, image_id: int) -> Optional[models.ProductImage]:
        stmt = select(models.ProductImage).where(
            models.ProductImage.id == image_id,
            models.ProductImage.product_id == product_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def next_image_position(self, product_id: int) -> int:
        stmt = select(func.max(models.ProductImage.position)).where(
            models.ProductImage.product_id == product_id
        )
        current = self.session.execute(stmt).scalar_one_or_none()
        return 0 if current is None else current + 1

    def delete_image(self, image: models.ProductImage) -> None:
        self.session.delete(image)
        self.session.flush()

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def find_review_by_user(self, product_id: int, user_id: str) -> Optional[models.Review]:
        stmt = select(models.Review).where(
            models.Review.product_id == product_id,
            models.Review.user_id == user_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_review(self, product_id: int, review_id: int) -> Optional[models.Review]:
        stmt = select(models.Review).where(
            models.Review.id == review_id,
            models.Review.product_id == product_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def add_review(self, review: models.Review) -> models.Review:
        self.session.add(review)
        self.session.flush()
        return review

    def delete_review(self, review: models.Review) -> None:
        self.session.delete(review)
        self.session.flush()

    def ratings(self, product_id: int) -> List[int]:
        stmt = select(models.Review.rating).where(models.Review.product_id == product_id)
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["ProductsRepository"]
