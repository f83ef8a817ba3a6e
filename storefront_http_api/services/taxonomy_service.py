# storefront_http_api/services/taxonomy_service.py

from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from ..db import models
from ..errors import DuplicateError
from ..logging import get_logger
from ..repositories import TaxonomyRepository
from ..schemas.taxonomy import CategoryRead, TagRead, TermCreate
from ..slugs import slugify
from .base import commit

logger = get_logger(__name__)


class TaxonomyService:
    """
    Categories and tags. Names are unique through their slug: creating
    "Home & Garden" twice is a duplicate, not a second category.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = TaxonomyRepository(session)

    def list_categories(self) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in self._repo.list_categories()]

    def create_category(self, payload: TermCreate) -> CategoryRead:
        slug = slugify(payload.name, fallback="category")
        if self._repo.category_slug_exists(slug):
            raise DuplicateError(f"Category '{payload.name}' already exists.")

        category = self._repo.add_category(
            models.Category(name=payload.name, slug=slug, description=payload.description)
        )
        commit(self._session, conflict_message=f"Category '{payload.name}' already exists.")
        logger.info("category_created", category_id=category.id, slug=slug)
        return CategoryRead.model_validate(category)

    def list_tags(self) -> List[TagRead]:
        return [TagRead.model_validate(t) for t in self._repo.list_tags()]

    def create_tag(self, payload: TermCreate) -> TagRead:
        slug = slugify(payload.name, fallback="tag")
        if self._repo.tag_slug_exists(slug):
            raise DuplicateError(f"Tag '{payload.name}' already exists.")

        tag = self._repo.add_tag(models.Tag(name=payload.name, slug=slug, description=payload.description))
        commit(self._session, conflict_message=f"Tag '{payload.name}' already exists.")
        logger.info("tag_created", tag_id=tag.id, slug=slug)
        return TagRead.model_validate(tag)


__all__ = ["TaxonomyService"]
