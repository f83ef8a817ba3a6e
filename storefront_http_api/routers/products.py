# storefront_http_api/routers/products.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront_http_api.auth import Actor
from storefront_http_api.config import Settings
from storefront_http_api.dependencies import (
    get_actor,
    get_optional_actor,
    get_products_service,
    get_settings_dep,
    require_admin,
)
from storefront_http_api.schemas.common import Envelope, MessageResponse, SortKey
from storefront_http_api.schemas.products import (
    FeaturedProductsData,
    ProductData,
    ProductListData,
    ProductListQuery,
    ReviewCreate,
    ReviewData,
)
from storefront_http_api.schemas.taxonomy import CategoryListData
from storefront_http_api.services import ProductsService

from .forms import (
    Submission,
    product_create_from,
    product_images_from,
    product_update_from,
    read_submission,
)

router = APIRouter(prefix="/products", tags=["products"])


@router.get(
    "",
    response_model=Envelope[ProductListData],
    summary="List active products",
    description=(
        "Search, filter (category, tag, price range, featured, minimum rating), "
        "sort and paginate the active catalog."
    ),
)
def list_products(
    *,
    service: ProductsService = Depends(get_products_service),
    settings: Settings = Depends(get_settings_dep),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="Category slug."),
    tag: Optional[str] = Query(None, description="Tag slug."),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    featured: Optional[str] = Query(None, description="Only `true` narrows the listing."),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    sort: Optional[str] = Query(None, description="newest | oldest | popular | rating | price_asc | price_desc | name"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
) -> Envelope[ProductListData]:
    query = ProductListQuery(
        search=search,
        category=category,
        tag=tag,
        min_price=min_price,
        max_price=max_price,
        featured=True if (featured or "").strip().lower() == "true" else None,
        min_rating=min_rating,
        sort=SortKey.parse(sort),
        page=page,
        limit=limit or settings.PRODUCTS_PAGE_SIZE,
    )
    return Envelope(data=service.list_products(query))


@router.get(
    "/featured",
    response_model=Envelope[FeaturedProductsData],
    summary="Featured products",
)
def list_featured(
    service: ProductsService = Depends(get_products_service),
    limit: Optional[int] = Query(None, ge=1),
) -> Envelope[FeaturedProductsData]:
    return Envelope(data=service.list_featured(limit))


@router.get(
    "/categories",
    response_model=Envelope[CategoryListData],
    summary="Categories used by active products",
)
def list_product_categories(
    service: ProductsService = Depends(get_products_service),
) -> Envelope[CategoryListData]:
    return Envelope(data=CategoryListData(categories=service.list_categories()))


@router.get(
    "/{slug}",
    response_model=Envelope[ProductData],
    summary="Get a product",
    description="Product with images, attributes, variants and reviews, by slug (or numeric id).",
)
def get_product(
    slug: str,
    service: ProductsService = Depends(get_products_service),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Envelope[ProductData]:
    return Envelope(data=ProductData(product=service.get_product(slug, actor)))


@router.post(
    "",
    response_model=Envelope[ProductData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Multipart form (or JSON) with up to 10 `images` files.",
)
def create_product(
    _admin: Actor = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    service: ProductsService = Depends(get_products_service),
) -> Envelope[ProductData]:
    product = service.create_product(
        product_create_from(submission), product_images_from(submission)
    )
    return Envelope(data=ProductData(product=product), message="Product created successfully")


@router.put(
    "/{product_id}",
    response_model=Envelope[ProductData],
    summary="Update a product",
    description="Partial update; uploaded `images` are appended to the existing ones.",
)
def update_product(
    product_id: int,
    _admin: Actor = Depends(require_admin),
    submission: Submission = Depends(read_submission),
    service: ProductsService = Depends(get_products_service),
) -> Envelope[ProductData]:
    product = service.update_product(
        product_id, product_update_from(submission), product_images_from(submission)
    )
    return Envelope(data=ProductData(product=product), message="Product updated successfully")


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
)
def delete_product(
    product_id: int,
    _admin: Actor = Depends(require_admin),
    service: ProductsService = Depends(get_products_service),
) -> MessageResponse:
    service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")


@router.delete(
    "/{product_id}/images/{image_id}",
    response_model=Envelope[ProductData],
    summary="Delete a product image",
)
def delete_image(
    product_id: int,
    image_id: int,
    _admin: Actor = Depends(require_admin),
    service: ProductsService = Depends(get_products_service),
) -> Envelope[ProductData]:
    product = service.delete_image(product_id, image_id)
    return Envelope(data=ProductData(product=product), message="Image deleted successfully")


@router.post(
    "/{product_id}/reviews",
    response_model=Envelope[ReviewData],
    status_code=status.HTTP_201_CREATED,
    summary="Review a product",
    description="Signed-in users may review a product once; anonymous reviews are allowed.",
)
def add_review(
    product_id: int,
    payload: ReviewCreate,
    service: ProductsService = Depends(get_products_service),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Envelope[ReviewData]:
    review = service.add_review(product_id, actor, payload)
    return Envelope(data=ReviewData(review=review), message="Review added successfully")


@router.delete(
    "/{product_id}/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
)
def delete_review(
    product_id: int,
    review_id: int,
    service: ProductsService = Depends(get_products_service),
    actor: Actor = Depends(get_actor),
) -> MessageResponse:
    service.delete_review(product_id, review_id, actor)
    return MessageResponse(message="Review deleted successfully")
