# storefront_http_api/logging/__init__.py

"""
Logging helpers for the storefront HTTP API.

Application code only needs:

    from storefront_http_api.logging import get_logger

    logger = get_logger(__name__)
    logger.info("post_created", post_id=post.id)

``configure_logging`` (in ``.config``) is called once by the app factory.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

DEFAULT_LOGGER_NAME = "storefront_http_api"


def get_logger(name: Optional[str] = None) -> Any:
    """
    Return a structlog logger bound to ``name`` (the service default when
    omitted).
    """
    return structlog.get_logger(name or DEFAULT_LOGGER_NAME)


from .config import configure_logging  # noqa: E402

__all__ = ["DEFAULT_LOGGER_NAME", "configure_logging", "get_logger"]
