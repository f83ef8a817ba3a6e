# storefront_http_api/services/base.py

"""
Helpers shared by the service classes: transaction boundaries, category
resolution and listing metadata.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import models
from ..errors import DuplicateError, ValidationError
from ..repositories import Page, TaxonomyRepository
from ..schemas.common import Pagination


def commit(session: Session, *, conflict_message: str) -> None:
    """
    Commit the unit of work. A uniqueness violation raised by the database
    rolls the session back and surfaces as DuplicateError.
    """
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateError(conflict_message) from exc


def resolve_category(taxonomy: TaxonomyRepository, slug: Optional[str]) -> Optional[models.Category]:
    """
    Map a category slug from a request onto its row. Blank means "no category".
    """
    if slug is None or not slug.strip():
        return None
    category = taxonomy.get_category_by_slug(slug.strip())
    if category is None:
        raise ValidationError(f"Unknown category '{slug}'.", details={"field": "category"})
    return category


def pagination_of(page: Page) -> Pagination:
    return Pagination(page=page.page, limit=page.limit, total=page.total, pages=page.pages)


def clamp_limit(limit: int, maximum: int) -> int:
    return max(1, min(limit, maximum))


def numeric_id(identifier: str) -> Optional[int]:
    """``"42"`` -> 42; anything that is not a plain positive integer -> None."""
    value = (identifier or "").strip()
    if value.isascii() and value.isdigit():
        return int(value)
    return None


__all__ = ["commit", "resolve_category", "pagination_of", "clamp_limit", "numeric_id"]
