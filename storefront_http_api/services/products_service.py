# storefront_http_api/services/products_service.py

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..auth import Actor
from ..config import Settings
from ..db import models
from ..db.models import utcnow
from ..errors import DuplicateError, ForbiddenError, NotFoundError, ValidationError
from ..logging import get_logger
from ..repositories import ProductsRepository, TaxonomyRepository
from ..schemas.products import (
    FeaturedProductsData,
    ProductCreate,
    ProductDetail,
    ProductListData,
    ProductListQuery,
    ProductSummary,
    ProductUpdate,
    ReviewCreate,
    ReviewRead,
)
from ..schemas.taxonomy import CategoryRead
from ..slugs import unique_slug
from ..storage import IncomingFile, StorageGateway, StoredObject, discard_objects
from .base import clamp_limit, commit, numeric_id, pagination_of, resolve_category

logger = get_logger(__name__)

_ONE_DECIMAL = Decimal("0.1")


def summarize_ratings(ratings: Sequence[int]) -> Tuple[float, int]:
    """
    (average rounded half-up to one decimal, count). No ratings -> (0.0, 0).
    """
    if not ratings:
        return 0.0, 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)), len(ratings)


class ProductsService:
    """
    Product catalog: products, their images and reviews.

    ``average_rating`` and ``review_count`` are recomputed from the stored
    reviews in the same transaction as every review insert or delete.
    """

    def __init__(self, session: Session, storage: StorageGateway, settings: Settings) -> None:
        self._session = session
        self._products = ProductsRepository(session)
        self._taxonomy = TaxonomyRepository(session)
        self._storage = storage
        self._settings = settings

    @property
    def bucket(self) -> str:
        return self._settings.PRODUCTS_BUCKET

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_products(self, query: ProductListQuery) -> ProductListData:
        query = query.model_copy(
            update={"limit": clamp_limit(query.limit, self._settings.MAX_PAGE_SIZE)}
        )
        page = self._products.list_active(query)
        return ProductListData(
            products=[ProductSummary.model_validate(p) for p in page.items],
            pagination=pagination_of(page),
        )

    def list_featured(self, limit: Optional[int] = None) -> FeaturedProductsData:
        limit = clamp_limit(limit or self._settings.FEATURED_LIMIT, self._settings.MAX_PAGE_SIZE)
        products = self._products.list_featured(limit)
        return FeaturedProductsData(products=[ProductSummary.model_validate(p) for p in products])

    def get_product(self, identifier: str, actor: Optional[Actor] = None) -> ProductDetail:
        """
        Detail by slug (or numeric id when no slug matches). Products that
        are not active are only shown to admins.
        """
        product = self._products.get_by_slug(identifier)
        if product is None:
            product_id = numeric_id(identifier)
            if product_id is not None:
                product = self._products.get_by_id(product_id)

        if product is None:
            raise NotFoundError("Product", identifier)
        if product.status != models.ProductStatus.ACTIVE and not (actor and actor.is_admin):
            raise NotFoundError("Product", identifier)
        return ProductDetail.model_validate(product)

    def list_categories(self) -> List[CategoryRead]:
        ids = self._products.active_category_ids()
        return [CategoryRead.model_validate(c) for c in self._taxonomy.list_categories(ids)]

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def create_product(
        self,
        payload: ProductCreate,
        images: Sequence[IncomingFile] = (),
    ) -> ProductDetail:
        self._check_image_count(images)
        if payload.sku and self._products.sku_exists(payload.sku):
            raise DuplicateError(f"A product with SKU '{payload.sku}' already exists.")
        category = resolve_category(self._taxonomy, payload.category)

        stored = self._upload_all(images)
        try:
            product = models.Product(
                name=payload.name,
                slug=unique_slug(payload.name, self._products.slug_exists, fallback="product"),
                description=payload.description,
                price=payload.price,
                original_price=payload.original_price,
                brand=payload.brand,
                category=category,
                tags=self._taxonomy.get_or_create_tags(payload.tags),
                quantity=payload.quantity,
                sku=payload.sku or None,
                track_inventory=payload.track_inventory,
                attributes=[a.model_dump() for a in payload.attributes],
                variants=[v.model_dump() for v in payload.variants],
                meta_title=payload.seo.meta_title,
                meta_description=payload.seo.meta_description,
                meta_keywords=list(payload.seo.keywords),
                status=payload.status,
                featured=payload.featured,
                weight=payload.weight,
                average_rating=0.0,
                review_count=0,
                images=[
                    models.ProductImage(url=obj.url, alt_text=payload.name, position=index)
                    for index, obj in enumerate(stored)
                ],
            )
            self._products.add(product)
            commit(self._session, conflict_message="A product with this SKU or slug already exists.")
        except Exception:
            self._session.rollback()
            self._discard_uploads(stored, reason="product_create_failed")
            raise

        logger.info("product_created", product_id=product.id, slug=product.slug, images=len(stored))
        return ProductDetail.model_validate(product)

    def update_product(
        self,
        product_id: int,
        payload: ProductUpdate,
        images: Sequence[IncomingFile] = (),
    ) -> ProductDetail:
        """
        Partial update. New images are appended after the existing ones.
        """
        product = self._require(product_id)
        self._check_image_count(images)

        fields = payload.model_dump(exclude_unset=True, exclude_none=True)
        if payload.sku and self._products.sku_exists(payload.sku, exclude_id=product.id):
            raise DuplicateError(f"A product with SKU '{payload.sku}' already exists.")
        category = None
        if "category" in fields:
            category = resolve_category(self._taxonomy, payload.category)

        stored = self._upload_all(images)
        try:
            if payload.name is not None and payload.name != product.name:
                product.name = payload.name
                product.slug = unique_slug(
                    payload.name,
                    lambda s: self._products.slug_exists(s, exclude_id=product.id),
                    fallback="product",
                )
            for name in (
                "description",
                "price",
                "original_price",
                "brand",
                "quantity",
                "sku",
                "track_inventory",
                "status",
                "featured",
                "weight",
            ):
                value = getattr(payload, name)
                if value is not None:
                    setattr(product, name, value)
            if "category" in fields:
                product.category = category
            if payload.tags is not None:
                product.tags = self._taxonomy.get_or_create_tags(payload.tags)
            if payload.attributes is not None:
                product.attributes = [a.model_dump() for a in payload.attributes]
            if payload.variants is not None:
                product.variants = [v.model_dump() for v in payload.variants]
            if payload.seo is not None:
                product.meta_title = payload.seo.meta_title
                product.meta_description = payload.seo.meta_description
                product.meta_keywords = list(payload.seo.keywords)

            position = self._products.next_image_position(product.id)
            for offset, obj in enumerate(stored):
                product.images.append(
                    models.ProductImage(url=obj.url, alt_text=product.name, position=position + offset)
                )
            product.updated_at = utcnow()

            commit(self._session, conflict_message="A product with this SKU or slug already exists.")
        except Exception:
            self._session.rollback()
            self._discard_uploads(stored, reason="product_update_failed")
            raise

        logger.info("product_updated", product_id=product.id, fields=sorted(fields), images=len(stored))
        return ProductDetail.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        """
        Remove every stored image (continuing past failures), then the
        product with its images and reviews.
        """
        product = self._require(product_id)
        urls = [image.url for image in product.images]

        removed = discard_objects(self._storage, self.bucket, urls, reason="product_deleted")
        self._products.delete(product)
        self._session.commit()

        logger.info("product_deleted", product_id=product_id, images=len(urls), removed=removed)

    def delete_image(self, product_id: int, image_id: int) -> ProductDetail:
        """
        Delete one image: the stored object first, then its record.
        Storage failures propagate and leave the record in place.
        """
        product = self._require(product_id)
        image = self._products.get_image(product.id, image_id)
        if image is None:
            raise NotFoundError("Image", image_id)

        path = self._storage.path_from_url(image.url, self.bucket)
        if path:
            self._storage.delete(path, self.bucket)
        else:
            logger.warning("product_image_not_in_storage", product_id=product.id, url=image.url)

        product.images.remove(image)
        self._products.delete_image(image)
        self._session.commit()

        logger.info("product_image_deleted", product_id=product.id, image_id=image_id)
        return ProductDetail.model_validate(product)

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    def add_review(
        self,
        product_id: int,
        actor: Optional[Actor],
        payload: ReviewCreate,
    ) -> ReviewRead:
        """
        One review per signed-in user and product; anonymous reviews are
        unrestricted.
        """
        product = self._require(product_id)
        user_id = actor.user_id if actor else None
        if user_id and self._products.find_review_by_user(product.id, user_id) is not None:
            raise DuplicateError("You have already reviewed this product")

        review = self._products.add_review(
            models.Review(
                product=product,
                user_id=user_id,
                rating=payload.rating,
                comment=payload.comment,
            )
        )
        self._refresh_rating(product)
        commit(self._session, conflict_message="You have already reviewed this product")

        logger.info(
            "review_added",
            product_id=product.id,
            review_id=review.id,
            rating=review.rating,
            average_rating=product.average_rating,
        )
        return ReviewRead.model_validate(review)

    def delete_review(self, product_id: int, review_id: int, actor: Actor) -> None:
        product = self._require(product_id)
        review = self._products.get_review(product.id, review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        if not actor.can_modify(review.user_id):
            raise ForbiddenError("Not authorized to delete this review")

        if review in product.reviews:
            product.reviews.remove(review)
        self._products.delete_review(review)
        self._refresh_rating(product)
        self._session.commit()

        logger.info("review_deleted", product_id=product.id, review_id=review_id)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, product_id: int) -> models.Product:
        product = self._products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _refresh_rating(self, product: models.Product) -> None:
        product.average_rating, product.review_count = summarize_ratings(
            self._products.ratings(product.id)
        )

    def _check_image_count(self, images: Sequence[IncomingFile]) -> None:
        limit = self._settings.MAX_PRODUCT_IMAGES
        if len(images) > limit:
            raise ValidationError(f"At most {limit} images can be uploaded at once.")

    def _upload_all(self, images: Sequence[IncomingFile]) -> List[StoredObject]:
        """
        Upload in order. If one upload fails, the ones already stored are
        discarded before the error propagates.
        """
        stored: List[StoredObject] = []
        try:
            for image in images:
                stored.append(self._storage.upload_file(image, self.bucket))
        except Exception:
            self._discard_uploads(stored, reason="product_upload_aborted")
            raise
        return stored

    def _discard_uploads(self, stored: Sequence[StoredObject], *, reason: str) -> None:
        if stored:
            discard_objects(self._storage, self.bucket, [obj.url for obj in stored], reason=reason)


__all__ = ["ProductsService", "summarize_ratings"]
