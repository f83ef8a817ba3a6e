# storefront_http_api/routers/taxonomy.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from storefront_http_api.auth import Actor
from storefront_http_api.dependencies import get_taxonomy_service, require_admin
from storefront_http_api.schemas.common import Envelope
from storefront_http_api.schemas.taxonomy import (
    CategoryData,
    CategoryListData,
    TagData,
    TagListData,
    TermCreate,
)
from storefront_http_api.services import TaxonomyService

router = APIRouter(tags=["taxonomy"])


@router.get("/categories", response_model=Envelope[CategoryListData], summary="List categories")
def list_categories(
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> Envelope[CategoryListData]:
    return Envelope(data=CategoryListData(categories=service.list_categories()))


@router.post(
    "/categories",
    response_model=Envelope[CategoryData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
def create_category(
    payload: TermCreate,
    _admin: Actor = Depends(require_admin),
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> Envelope[CategoryData]:
    return Envelope(data=CategoryData(category=service.create_category(payload)))


@router.get("/tags", response_model=Envelope[TagListData], summary="List tags")
def list_tags(
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> Envelope[TagListData]:
    return Envelope(data=TagListData(tags=service.list_tags()))


@router.post(
    "/tags",
    response_model=Envelope[TagData],
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
)
def create_tag(
    payload: TermCreate,
    _admin: Actor = Depends(require_admin),
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> Envelope[TagData]:
    return Envelope(data=TagData(tag=service.create_tag(payload)))
