"""
Structured logging for Chain Ingest.

JSON logs with timestamp, level, event_type and key/value context
(network, address, category, counts). Use get_logger() in every module.
"""

from chain_ingest.ingest_logging.logger import (
    LOG_FORMATS,
    bind_network,
    configure_structlog,
    get_logger,
    parse_level,
)

__all__ = ["LOG_FORMATS", "bind_network", "configure_structlog", "get_logger", "parse_level"]
