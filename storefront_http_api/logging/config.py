# storefront_http_api/logging/config.py

"""
structlog configuration for the storefront HTTP API.

Production emits one JSON object per line; development uses the colored
console renderer. Log lines carry the current OpenTelemetry trace/span ids
so they can be joined with traces.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from opentelemetry import trace

from ..config import Settings, get_settings


def add_open_telemetry_spans(_, __, event_dict):
    """
    Processor that injects the current trace and span ids into the entry.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        event_dict["trace_id"] = None
        event_dict["span_id"] = None
        return event_dict

    ctx = span.get_span_context()
    event_dict["trace_id"] = format(ctx.trace_id, "032x")
    event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _parse_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and route standard-library logging (uvicorn,
    SQLAlchemy) to the same stream.
    """
    settings = settings or get_settings()
    level = _parse_level(settings.LOG_LEVEL)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_open_telemetry_spans,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


__all__ = ["add_open_telemetry_spans", "configure_logging"]
