"""
storefront_http_api.services
----------------------------

Service layer aggregation for the storefront HTTP API.

Routers depend on these classes, never on repositories or storage
backends directly:

    from storefront_http_api.services import PostsService, ProductsService
"""

from .posts_service import PostsService
from .products_service import ProductsService, summarize_ratings
from .taxonomy_service import TaxonomyService

__all__ = [
    "PostsService",
    "ProductsService",
    "TaxonomyService",
    "summarize_ratings",
]
