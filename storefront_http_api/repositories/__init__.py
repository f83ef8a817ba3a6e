# storefront_http_api/repositories/__init__.py
"""
Repository layer public exports.

Repositories wrap a single SQLAlchemy session; they flush but never commit.
Transactions are owned by the services.

    from storefront_http_api.repositories import PostsRepository
"""

from .base import Page, paginate
from .posts import PostsRepository
from .products import ProductsRepository
from .taxonomy import TaxonomyRepository

__all__ = [
    "Page",
    "paginate",
    "PostsRepository",
    "ProductsRepository",
    "TaxonomyRepository",
]
