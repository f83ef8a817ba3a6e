# storefront_http_api/schemas/common.py

from __future__ import annotations

import enum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Base / shared types
# ---------------------------------------------------------------------------


class APIModel(BaseModel):
    """
    Base model for all HTTP schemas.

    - camelCase on the wire, snake_case in Python
    - readable straight from ORM objects
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class RequestModel(APIModel):
    """Inbound payloads reject unknown fields and trim surrounding whitespace."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class SortKey(str, enum.Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    RATING = "rating"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME = "name"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Unknown or missing sort keys mean newest-first."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NEWEST


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class Pagination(APIModel):
    page: int
    limit: int
    total: int
    pages: int


class Envelope(APIModel, Generic[T]):
    """
    Standard response envelope for every endpoint.
    """

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None


class MessageResponse(APIModel):
    success: bool = True
    message: str


class ErrorResponse(APIModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    data: Optional[Any] = None


class FieldError(APIModel):
    field: str
    message: str


class ValidationErrorData(APIModel):
    errors: List[FieldError] = Field(default_factory=list)


MAX_TAG_LENGTH = 50


def clean_tag_names(values: Optional[List[str]]) -> Optional[List[str]]:
    """
    Strip tag names, drop blanks and case-insensitive duplicates.
    """
    if values is None:
        return None
    seen = set()
    cleaned: List[str] = []
    for raw in values:
        name = (raw or "").strip()
        if not name or name.lower() in seen:
            continue
        if len(name) > MAX_TAG_LENGTH:
            raise ValueError(f"Each tag must be less than {MAX_TAG_LENGTH} characters")
        seen.add(name.lower())
        cleaned.append(name)
    return cleaned


__all__ = [
    "APIModel",
    "RequestModel",
    "SortKey",
    "Pagination",
    "Envelope",
    "MessageResponse",
    "ErrorResponse",
    "FieldError",
    "ValidationErrorData",
    "MAX_TAG_LENGTH",
    "clean_tag_names",
]
