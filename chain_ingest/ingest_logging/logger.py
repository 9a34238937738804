"""
Structured logging for ingestion runs.

Every record carries event_type, level, an ISO timestamp, the emitting module
and whatever context the caller passes (network, address, category, counts).
Output goes to stderr so the CLI can keep stdout for its run total.

Defaults come from LOG_FORMAT (json | console) and LOG_LEVEL; the CLI may
reconfigure once at startup via configure_structlog(). Module loggers are
lazy, so a reconfiguration before the first log call applies to them too.

Depends only on the stdlib and structlog so any chain_ingest module can import it.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog._config import BoundLoggerLazyProxy

LOG_FORMATS = ("json", "console")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def parse_level(name: str | None) -> int:
    """'debug' -> logging.DEBUG; unknown or empty names fall back to INFO."""
    level = getattr(logging, (name or "").strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog(log_format: str | None = None, level: int | None = None) -> None:
    """
    (Re)configure structlog.

    log_format: "json" (default) or "console"; None uses LOG_FORMAT.
    level: stdlib level number; None uses LOG_LEVEL.
    """
    fmt = (log_format or LOG_FORMAT).strip().lower()
    min_level = level if level is not None else parse_level(LOG_LEVEL)
    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _add_timestamp,
            _normalize_event,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("category_fetched", network="ethereum", category="token", record_count=12)
    Output (JSON): {"event_type": "category_fetched", "network": "ethereum", ..., "level": "info", "logger": "module.name"}
    """
    return BoundLoggerLazyProxy(None, logger_factory_args=(name,), initial_values={"logger": name})


def bind_network(network: str) -> Any:
    """Return a logger with network bound to all subsequent log calls."""
    return get_logger("chain_ingest").bind(network=network)
