"""
Run orchestrator: one address across the selected networks.

Networks are visited strictly one after another so only one network's
three-way fan-out is in flight against the explorers' rate limits. A network
that fails (storage unavailable, unexpected error) is logged and counted as
0; the remaining networks still run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Sequence

from chain_ingest.config.networks import AppConfig, Network
from chain_ingest.ingest_logging import bind_network, get_logger
from chain_ingest.ingestion.network_ingestor import NetworkIngestor

logger = get_logger(__name__)


@dataclass
class NetworkRunResult:
    network: str
    count: int = 0
    error: str | None = None
    degraded: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunReport:
    address: str
    results: list[NetworkRunResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(r.count for r in self.results)

    @property
    def failed_networks(self) -> list[str]:
        return [r.network for r in self.results if not r.ok]


class RunOrchestrator:
    def __init__(self, ingestor: NetworkIngestor) -> None:
        self._ingestor = ingestor

    async def run(self, address: str, networks: Sequence[Network]) -> int:
        """Return the total number of transactions committed across networks."""
        report = await self.run_report(address, networks)
        return report.total

    async def run_report(self, address: str, networks: Sequence[Network]) -> RunReport:
        report = RunReport(address=address)
        for network in networks:
            log = bind_network(network.key)
            log.info("network_ingest_started", network_name=network.name, address=address)
            try:
                result = await self._ingestor.ingest_network(address, network)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log.exception("network_ingest_failed", network_name=network.name, address=address, error=str(e))
                report.results.append(NetworkRunResult(network=network.key, error=str(e)))
                continue
            log.info(
                "network_ingest_done",
                network_name=network.name,
                transaction_count=result.count,
                degraded_categories=result.degraded,
            )
            report.results.append(
                NetworkRunResult(network=network.key, count=result.count, degraded=result.degraded)
            )
        logger.info(
            "run_completed",
            address=address,
            network_count=len(report.results),
            failed_networks=report.failed_networks,
            total_transactions=report.total,
        )
        return report


def run_ingestion(
    address: str,
    config: AppConfig,
    network_name: str | None = None,
    *,
    ingestor: NetworkIngestor | None = None,
) -> RunReport:
    """
    Blocking entrypoint: resolve the network selector (raises
    UnknownNetworkError before any network is touched), then run.
    """
    address = (address or "").strip()
    if not address:
        raise ValueError("address must be non-empty")
    networks = config.select(network_name)
    orchestrator = RunOrchestrator(ingestor or NetworkIngestor(config))
    return asyncio.run(orchestrator.run_report(address, networks))
