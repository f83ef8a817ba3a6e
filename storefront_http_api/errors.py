# storefront_http_api/errors.py

"""
Domain error taxonomy.

Services raise these; ``main.create_app`` maps them onto the JSON error
envelope with the matching HTTP status.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for all domain-level exceptions."""

    status_code: int = 500
    code: str = "unexpected_error"

    def __init__(self, message: str, *, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


# --- Input errors ---

class ValidationError(DomainError):
    """Raised when input is malformed or out of range. Always raised before any write."""

    status_code = 400
    code = "validation_error"


class DuplicateError(DomainError):
    """Raised when a uniqueness rule would be broken (SKU, slug, one review per user)."""

    status_code = 400
    code = "duplicate"


class UploadError(DomainError):
    """Raised on rejected content type, oversize payloads or storage transport failures."""

    status_code = 400
    code = "upload_error"


# --- Access errors ---

class UnauthorizedError(DomainError):
    """Raised when an operation requires an identity and none was presented."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(DomainError):
    """Raised when the actor is neither the owner nor an admin."""

    status_code = 403
    code = "forbidden"


# --- Lookup errors ---

class NotFoundError(DomainError):
    """Raised when the requested entity does not exist (or is not visible)."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, identifier: Any = None):
        label = f"{entity} not found" if identifier is None else f"{entity} '{identifier}' not found"
        super().__init__(label)
        self.entity = entity
        self.identifier = identifier


class UnexpectedError(DomainError):
    """Wraps anything else. Reported as 500."""


__all__ = [
    "DomainError",
    "ValidationError",
    "DuplicateError",
    "UploadError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "UnexpectedError",
]
