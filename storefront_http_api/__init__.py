"""
storefront_http_api
-------------------

HTTP API for the storefront: a blog and a product catalog with comments,
likes and reviews.

The application factory lives in ``storefront_http_api.main``:

    uvicorn storefront_http_api.main:app
"""

from importlib import metadata as _metadata

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

try:
    __version__: str = _metadata.version("storefront-publishing")
except _metadata.PackageNotFoundError:  # When running from source tree
    __version__ = "0.0.0"


__all__ = ["__version__"]
