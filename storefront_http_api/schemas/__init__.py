"""
Top-level export module for HTTP API schemas.
"""

from . import common, posts, products, taxonomy
from .common import (
    APIModel,
    Envelope,
    ErrorResponse,
    MessageResponse,
    Pagination,
    RequestModel,
    SortKey,
)
from .posts import (
    CommentCreate,
    CommentRead,
    LikeState,
    PostCreate,
    PostDetail,
    PostListQuery,
    PostSummary,
    PostUpdate,
)
from .products import (
    ProductCreate,
    ProductDetail,
    ProductListQuery,
    ProductSummary,
    ProductUpdate,
    ReviewCreate,
    ReviewRead,
)
from .taxonomy import CategoryRead, TagRead, TermCreate

__all__ = [
    # Submodules
    "common", "posts", "products", "taxonomy",

    # Common
    "APIModel", "RequestModel", "Envelope", "ErrorResponse", "MessageResponse",
    "Pagination", "SortKey",

    # Posts
    "PostListQuery", "PostCreate", "PostUpdate", "PostSummary", "PostDetail",
    "CommentCreate", "CommentRead", "LikeState",

    # Products
    "ProductListQuery", "ProductCreate", "ProductUpdate", "ProductSummary",
    "ProductDetail", "ReviewCreate", "ReviewRead",

    # Taxonomy
    "CategoryRead", "TagRead", "TermCreate",
]
