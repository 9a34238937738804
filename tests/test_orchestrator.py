"""
Tests for the run orchestrator: sequential networks, per-network failure
isolation, network selection and the summed total.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import ADDRESS, OK_RESULTS, explorer_transport, ok_payload

from chain_ingest.config.networks import AppConfig
from chain_ingest.core.exceptions import StorageError, UnknownNetworkError
from chain_ingest.database import StoreReconciler
from chain_ingest.ingestion.network_ingestor import IngestResult, NetworkIngestor
from chain_ingest.ingestion.orchestrator import RunOrchestrator, run_ingestion


class StubIngestor:
    """Returns a fixed count per network; raises for networks listed in fail."""

    def __init__(self, counts: dict[str, int], fail: tuple[str, ...] = ()) -> None:
        self.counts = counts
        self.fail = fail
        self.visited: list[str] = []
        self.active = 0
        self.max_active = 0

    async def ingest_network(self, address: str, network) -> IngestResult:
        self.visited.append(network.key)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if network.key in self.fail:
                raise StorageError("disk full", namespace=network.db_file)
            return IngestResult(network=network.key, count=self.counts.get(network.key, 0))
        finally:
            self.active -= 1


def test_total_is_sum_over_networks(config):
    stub = StubIngestor({"ethereum": 3, "polygon": 2, "bsc": 0, "arbitrum": 1, "optimism": 4})
    total = asyncio.run(RunOrchestrator(stub).run(ADDRESS, config.select(None)))
    assert total == 10
    assert stub.visited == ["ethereum", "polygon", "bsc", "arbitrum", "optimism"]


def test_networks_run_one_at_a_time(config):
    stub = StubIngestor({"ethereum": 1, "polygon": 1})
    asyncio.run(RunOrchestrator(stub).run(ADDRESS, config.select(None)))
    assert stub.max_active == 1


def test_failed_network_counts_zero_and_run_continues(config):
    stub = StubIngestor({"ethereum": 3, "polygon": 5, "bsc": 2}, fail=("polygon",))
    report = asyncio.run(RunOrchestrator(stub).run_report(ADDRESS, config.select(None)))

    assert report.total == 5
    assert report.failed_networks == ["polygon"]
    assert stub.visited[-1] == "optimism"
    polygon = next(r for r in report.results if r.network == "polygon")
    assert polygon.count == 0
    assert "disk full" in polygon.error


def test_run_ingestion_single_network(config):
    stub = StubIngestor({"ethereum": 3, "polygon": 7})
    report = run_ingestion(ADDRESS, config, "Polygon", ingestor=stub)
    assert report.total == 7
    assert stub.visited == ["polygon"]


def test_unknown_network_fails_before_any_work(config):
    stub = StubIngestor({"ethereum": 3})
    with pytest.raises(UnknownNetworkError) as exc:
        run_ingestion(ADDRESS, config, "solana", ingestor=stub)
    assert exc.value.name == "solana"
    assert "ethereum" in exc.value.available
    assert stub.visited == []
    assert not config.data_dir.exists()


def test_run_ingestion_rejects_blank_address(config):
    with pytest.raises(ValueError):
        run_ingestion("   ", config, ingestor=StubIngestor({}))


def test_end_to_end_with_explorer_transport(config, clock):
    def by_host(request: httpx.Request) -> httpx.Response:
        # Only the ethereum explorer knows this address
        if request.url.host == "api.etherscan.io":
            return httpx.Response(200, json=ok_payload(OK_RESULTS[request.url.params["action"]]))
        return httpx.Response(200, json={"status": "0", "message": "No transactions found", "result": []})

    ingestor = NetworkIngestor(
        config,
        reconciler=StoreReconciler(config, clock=clock),
        transport=httpx.MockTransport(by_host),
    )
    report = run_ingestion(ADDRESS, config, ingestor=ingestor)

    assert report.total == 4
    assert report.failed_networks == []
    assert (config.data_dir / "ethereum.db").exists()
    assert not (config.data_dir / "polygon.db").exists()

    again = run_ingestion(ADDRESS, config, "ethereum", ingestor=ingestor)
    assert again.total == 4
    assert StoreReconciler(config).open(config.networks["ethereum"]).count_transactions() == 4


def test_unwritable_store_fails_every_network(tmp_path, clock):
    blocker = tmp_path / "data-is-a-file"
    blocker.write_text("")
    config = AppConfig(data_dir=blocker)
    ingestor = NetworkIngestor(
        config,
        reconciler=StoreReconciler(config, clock=clock),
        transport=explorer_transport(),
    )
    report = asyncio.run(RunOrchestrator(ingestor).run_report(ADDRESS, config.select(None)))

    assert report.total == 0
    assert report.failed_networks == config.network_names
    assert all("cannot open" in r.error for r in report.results)
