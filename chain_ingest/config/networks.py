"""
Network table and immutable run configuration.

Network entries are plain frozen dataclasses; AppConfig bundles the network
table, explorer API keys and storage/HTTP settings into one read-only value
that is built once at startup and handed to every component explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from chain_ingest.core.exceptions import UnknownNetworkError

DEFAULT_DATA_DIR = Path("blockchain-data")
DEFAULT_HTTP_TIMEOUT_SEC = 30.0


@dataclass(frozen=True)
class Network:
    """One Etherscan-style explorer and the storage namespace it feeds."""

    key: str
    """Selector used on the command line (e.g. "ethereum")."""
    name: str
    """Display name used in log output (e.g. "Ethereum Mainnet")."""
    api_url: str
    explorer: str
    """Credential id; selects the API key (e.g. "etherscan")."""
    chain_id: int
    currency: str
    """Native currency symbol (ETH, MATIC, BNB)."""
    db_file: str
    """Storage namespace: SQLite file name under the data dir."""


NETWORKS: tuple[Network, ...] = (
    Network(
        key="ethereum",
        name="Ethereum Mainnet",
        api_url="https://api.etherscan.io/api",
        explorer="etherscan",
        chain_id=1,
        currency="ETH",
        db_file="ethereum.db",
    ),
    Network(
        key="polygon",
        name="Polygon Mainnet",
        api_url="https://api.polygonscan.com/api",
        explorer="polygonscan",
        chain_id=137,
        currency="MATIC",
        db_file="polygon.db",
    ),
    Network(
        key="bsc",
        name="Binance Smart Chain",
        api_url="https://api.bscscan.com/api",
        explorer="bscscan",
        chain_id=56,
        currency="BNB",
        db_file="bsc.db",
    ),
    Network(
        key="arbitrum",
        name="Arbitrum One",
        api_url="https://api.arbiscan.io/api",
        explorer="arbiscan",
        chain_id=42161,
        currency="ETH",
        db_file="arbitrum.db",
    ),
    Network(
        key="optimism",
        name="Optimism",
        api_url="https://api-optimistic.etherscan.io/api",
        explorer="optimistic",
        chain_id=10,
        currency="ETH",
        db_file="optimism.db",
    ),
)


def _freeze(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class AppConfig:
    """
    Process-wide, read-only configuration.

    networks preserves insertion order; that order is the order in which an
    unfiltered run visits networks.
    """

    networks: Mapping[str, Network] = field(default_factory=lambda: _freeze({n.key: n for n in NETWORKS}))
    api_keys: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    """explorer id -> API key. Missing keys are not validated here."""
    data_dir: Path = DEFAULT_DATA_DIR
    http_timeout_sec: float = DEFAULT_HTTP_TIMEOUT_SEC

    def __post_init__(self) -> None:
        object.__setattr__(self, "networks", _freeze(self.networks))
        object.__setattr__(self, "api_keys", _freeze(self.api_keys))
        object.__setattr__(self, "data_dir", Path(self.data_dir))

    @property
    def network_names(self) -> list[str]:
        return list(self.networks)

    def api_key_for(self, network: Network) -> str | None:
        return self.api_keys.get(network.explorer) or None

    def db_path_for(self, network: Network) -> Path:
        return self.data_dir / network.db_file

    def select(self, name: str | None = None) -> list[Network]:
        """
        Resolve a network selector. None (or empty) selects every configured
        network; otherwise the name must match a key (case-insensitive).
        """
        if not name or not name.strip():
            return list(self.networks.values())
        key = name.strip().lower()
        network = self.networks.get(key)
        if network is None:
            raise UnknownNetworkError(name, self.network_names)
        return [network]
