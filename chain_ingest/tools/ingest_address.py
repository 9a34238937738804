#!/usr/bin/env python3
"""
Ingest every normal, token and internal transaction of an address into the
per-network SQLite stores.

Usage:
  chain-ingest <address> [network]
  py -m chain_ingest.tools.ingest_address 0xabc... polygon --data-dir data

Without a network every configured network is processed, one after another.
Exit code 1 when the address is missing or the network is not configured.
"""

from __future__ import annotations

import argparse
import sys

from chain_ingest.config import load_config
from chain_ingest.core.exceptions import UnknownNetworkError
from chain_ingest.ingest_logging import LOG_FORMATS, configure_structlog, get_logger, parse_level
from chain_ingest.ingestion.orchestrator import run_ingestion

logger = get_logger(__name__)


def _networks_line(names: list[str]) -> str:
    return f"Supported networks: {', '.join(names)}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chain-ingest",
        description="Fetch an address's transactions from block explorers into per-network SQLite stores.",
    )
    parser.add_argument("address", nargs="?", help="Address to ingest")
    parser.add_argument("network", nargs="?", help="Network to ingest (default: all configured networks)")
    parser.add_argument("--data-dir", default=None, help="Directory for the per-network databases")
    parser.add_argument("--timeout", type=float, default=None, help="Explorer request timeout in seconds")
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=None, help="Log renderer (default: LOG_FORMAT or json)")
    parser.add_argument("--log-level", default=None, help="Minimum log level, e.g. debug (default: LOG_LEVEL or info)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.log_format or args.log_level:
        configure_structlog(
            log_format=args.log_format,
            level=parse_level(args.log_level) if args.log_level else None,
        )

    config = load_config(data_dir=args.data_dir, http_timeout_sec=args.timeout)

    address = (args.address or "").strip()
    if not address:
        print("Usage: chain-ingest <address> [network]", file=sys.stderr)
        print(_networks_line(config.network_names), file=sys.stderr)
        print("If no network is given, every network is searched", file=sys.stderr)
        return 1

    try:
        report = run_ingestion(address, config, args.network)
    except UnknownNetworkError as e:
        logger.error("config_unknown_network", network=e.name, available=e.available)
        print(f"Unsupported network: {e.name}", file=sys.stderr)
        print(_networks_line(e.available), file=sys.stderr)
        return 1

    print(f"Total transactions across all networks: {report.total}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
