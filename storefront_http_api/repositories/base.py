# storefront_http_api/repositories/base.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """
    One page of a filtered listing.

    `pages` is ceil(total / limit); asking for a page past the end yields
    no items but the same metadata.
    """

    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def paginate(session: Session, stmt: Select[Any], *, page: int, limit: int) -> Page[Any]:
    """
    Execute ``stmt`` for one page and count the full result set.

    The count runs over the unordered statement so ORDER BY never reaches
    the aggregate.
    """
    page = max(page, 1)
    limit = max(limit, 1)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = session.execute(count_stmt).scalar_one()

    result = session.execute(stmt.offset((page - 1) * limit).limit(limit))
    items = list(result.scalars().unique().all())

    return Page(items=items, total=total, page=page, limit=limit)


__all__ = ["Page", "paginate"]
