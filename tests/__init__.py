# tests/__init__.py
"""
Test suite for the storefront HTTP API.

Organization:
- `storage`: gateway validation, URL/path mapping and the backends.
- `repositories`: query construction against in-memory SQLite.
- `services`: business rules with a recording storage gateway.
- `http_api`: end-to-end requests through FastAPI's TestClient.
"""
