# storefront_http_api/slugs.py

"""
Slug derivation.

``slugify`` turns a display name into ``[a-z0-9-]`` with no leading or
trailing hyphen. ``unique_slug`` resolves collisions by appending ``-2``,
``-3``, ... to the base slug and taking the first free candidate.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Callable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

MAX_SLUG_LENGTH = 200


def slugify(value: str, *, fallback: str = "item") -> str:
    """
    Return a URL-safe slug for ``value``.

    Accents are folded to ASCII, everything outside ``[a-z0-9]`` becomes a
    single hyphen. When nothing usable remains, ``fallback`` is returned.
    """
    normalized = unicodedata.normalize("NFKD", value or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub("-", ascii_text).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or fallback


def unique_slug(value: str, exists: Callable[[str], bool], *, fallback: str = "item") -> str:
    """
    Derive a slug from ``value`` that ``exists`` reports as free.
    """
    base = slugify(value, fallback=fallback)
    candidate = base
    counter = 2
    while exists(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


__all__ = ["MAX_SLUG_LENGTH", "slugify", "unique_slug"]
