# tests/http_api/test_routes.py

from fastapi.routing import APIRoute

from storefront_http_api.main import app


def _get_api_routes() -> list[APIRoute]:
    """Return only FastAPI APIRoute objects (ignore static/docs/etc.)."""
    return [r for r in app.routes if isinstance(r, APIRoute)]


def test_resource_routes_registered_under_api_prefix() -> None:
    paths = {r.path for r in _get_api_routes()}

    for expected in (
        "/api/posts",
        "/api/posts/{slug}",
        "/api/posts/{post_id}/like",
        "/api/products",
        "/api/products/featured",
        "/api/products/{product_id}/images/{image_id}",
        "/api/products/{product_id}/reviews/{review_id}",
        "/api/categories",
        "/api/tags",
        "/api/uploads/images",
    ):
        assert expected in paths, f"Expected {expected} to be registered."


def test_health_routes_live_outside_the_prefix() -> None:
    paths = {r.path for r in _get_api_routes()}
    assert {"/health/live", "/health/ready"} <= paths


def test_routes_are_tagged_by_resource() -> None:
    """
    Every route under /api/posts and /api/products carries its resource tag
    so the OpenAPI document groups them.
    """
    for route in _get_api_routes():
        if route.path.startswith("/api/posts"):
            assert "posts" in route.tags, f"Route {route.path} is missing the 'posts' tag."
        if route.path.startswith("/api/products"):
            assert "products" in route.tags, f"Route {route.path} is missing the 'products' tag."
