"""
HTTP routers, one module per resource. ``main.create_app`` mounts them all
under the configured API prefix.
"""

from . import health, posts, products, taxonomy, uploads

__all__ = ["health", "posts", "products", "taxonomy", "uploads"]
