"""
Environment variable loading for Chain Ingest.

- ETHERSCAN_API_KEY, POLYGONSCAN_API_KEY, BSCSCAN_API_KEY, ARBISCAN_API_KEY,
  OPTIMISTIC_API_KEY: one explorer credential per network (not validated;
  a missing key surfaces as an upstream authentication failure).
- CHAIN_INGEST_DATA_DIR: directory holding one SQLite file per network
  (default: blockchain-data).
- CHAIN_INGEST_HTTP_TIMEOUT: explorer request timeout in seconds (default: 30).
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from chain_ingest.config.networks import (
    DEFAULT_DATA_DIR,
    DEFAULT_HTTP_TIMEOUT_SEC,
    NETWORKS,
    AppConfig,
)
from chain_ingest.ingest_logging import get_logger

logger = get_logger(__name__)

# Project root: config is chain_ingest/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def api_key_env_var(explorer: str) -> str:
    """etherscan -> ETHERSCAN_API_KEY."""
    return f"{explorer.upper()}_API_KEY"


def load_chain_ingest_env() -> None:
    """Load .env from project root, then from the working directory. Safe to call multiple times."""
    from dotenv import find_dotenv, load_dotenv

    load_dotenv(_ENV_PATH)
    load_dotenv(find_dotenv(usecwd=True))


def get_data_dir() -> Path:
    raw = (os.getenv("CHAIN_INGEST_DATA_DIR") or "").strip()
    return Path(raw) if raw else DEFAULT_DATA_DIR


def get_http_timeout() -> float:
    raw = (os.getenv("CHAIN_INGEST_HTTP_TIMEOUT") or "").strip()
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        logger.warning("config_invalid_http_timeout", value=raw, default=DEFAULT_HTTP_TIMEOUT_SEC)
        return DEFAULT_HTTP_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT_SEC


def get_api_keys() -> dict[str, str]:
    """Return explorer id -> key for every explorer whose env var is set."""
    keys: dict[str, str] = {}
    for network in NETWORKS:
        value = (os.getenv(api_key_env_var(network.explorer)) or "").strip()
        if value:
            keys[network.explorer] = value
    return keys


def load_config(
    *,
    data_dir: str | Path | None = None,
    http_timeout_sec: float | None = None,
) -> AppConfig:
    """
    Build the immutable AppConfig once at startup.
    Explicit arguments override the environment.
    """
    load_chain_ingest_env()
    api_keys = get_api_keys()
    config = AppConfig(
        api_keys=api_keys,
        data_dir=Path(data_dir) if data_dir is not None else get_data_dir(),
        http_timeout_sec=http_timeout_sec if http_timeout_sec is not None else get_http_timeout(),
    )
    missing = [n.key for n in config.networks.values() if config.api_key_for(n) is None]
    logger.debug(
        "config_loaded",
        networks=config.network_names,
        data_dir=str(config.data_dir),
        http_timeout_sec=config.http_timeout_sec,
        networks_without_key=missing,
    )
    return config
