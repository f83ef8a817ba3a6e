# storefront_http_api/repositories/taxonomy.py

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import models
from ..slugs import slugify


class TaxonomyRepository:
    """
    Categories and tags, shared by posts and products.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self, ids: Optional[Iterable[int]] = None) -> List[models.Category]:
        stmt = select(models.Category).order_by(models.Category.name.asc(), models.Category.id.asc())
        if ids is not None:
            stmt = stmt.where(models.Category.id.in_(list(ids)))
        return list(self.session.execute(stmt).scalars().all())

    def get_category_by_slug(self, slug: str) -> Optional[models.Category]:
        stmt = select(models.Category).where(models.Category.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def category_slug_exists(self, slug: str) -> bool:
        return self.get_category_by_slug(slug) is not None

    def add_category(self, category: models.Category) -> models.Category:
        self.session.add(category)
        self.session.flush()
        return category

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def list_tags(self) -> List[models.Tag]:
        stmt = select(models.Tag).order_by(models.Tag.name.asc(), models.Tag.id.asc())
        return list(self.session.execute(stmt).scalars().all())

    def get_tag_by_slug(self, slug: str) -> Optional[models.Tag]:
        stmt = select(models.Tag).where(models.Tag.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def tag_slug_exists(self, slug: str) -> bool:
        return self.get_tag_by_slug(slug) is not None

    def add_tag(self, tag: models.Tag) -> models.Tag:
        self.session.add(tag)
        self.session.flush()
        return tag

    def get_or_create_tags(self, names: Iterable[str]) -> List[models.Tag]:
        """
        Resolve tag names to rows, creating the missing ones. Names that
        slugify to the same value collapse onto one tag.
        """
        tags: List[models.Tag] = []
        seen = set()
        for name in names:
            slug = slugify(name, fallback="tag")
            if slug in seen:
                continue
            seen.add(slug)
            tag = self.get_tag_by_slug(slug)
            if tag is None:
                tag = self.add_tag(models.Tag(name=name, slug=slug))
            tags.append(tag)
        return tags


__all__ = ["TaxonomyRepository"]
