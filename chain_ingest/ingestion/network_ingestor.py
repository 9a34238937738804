"""
Network ingestor: one address on one network.

Fans out the three category fetches concurrently over a shared HTTP client,
joins all of them, normalizes each category with its own tag, merges them in
[normal, token, internal] order and commits the batch to the network's
namespace. An empty batch is a no-op: nothing is written, not even
bookkeeping.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass, field

import httpx

from chain_ingest.config.networks import AppConfig, Network
from chain_ingest.database.models import CommitResult, TransactionRecord
from chain_ingest.database.reconciler import StoreReconciler
from chain_ingest.explorer.client import ExplorerClient
from chain_ingest.explorer.fetcher import CategoryFetcher
from chain_ingest.explorer.models import CATEGORY_ORDER, CategoryOutcome
from chain_ingest.ingest_logging import get_logger
from chain_ingest.ingestion.normalizer import normalize_batch

logger = get_logger(__name__)


@dataclass
class IngestResult:
    """What one network contributed to a run."""

    network: str
    count: int = 0
    """Size of the committed batch; 0 when nothing was committed."""
    degraded: list[str] = field(default_factory=list)
    """Categories whose fetch failed and contributed nothing."""
    commit: CommitResult | None = None
    """None when the batch was empty and the commit was skipped."""


class NetworkIngestor:
    """
    Runs the fetch → normalize → commit cycle for one network at a time.

    transport is handed to httpx.AsyncClient; tests pass an httpx.MockTransport.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        reconciler: StoreReconciler | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._reconciler = reconciler or StoreReconciler(config)
        self._transport = transport

    async def ingest(self, address: str, network: Network) -> int:
        """Return the number of transactions committed for address on network."""
        result = await self.ingest_network(address, network)
        return result.count

    async def ingest_network(self, address: str, network: Network) -> IngestResult:
        """Raises StorageError when the batch cannot be committed."""
        address = (address or "").strip()
        if not address:
            raise ValueError("address must be non-empty")
        outcomes = await self._fetch_all(address, network)
        degraded = [o.category.value for o in outcomes if not o.ok]

        batch: list[TransactionRecord] = []
        for outcome in outcomes:
            batch.extend(normalize_batch(outcome.records, outcome.category))

        if degraded:
            logger.warning(
                "network_ingest_partial",
                network=network.key,
                address=address,
                degraded_categories=degraded,
            )

        if not batch:
            logger.info("network_ingest_empty", network=network.key, network_name=network.name, address=address)
            return IngestResult(network=network.key, degraded=degraded)

        # sqlite I/O is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        commit = await loop.run_in_executor(
            None,
            functools.partial(self._reconciler.commit, network, batch, address),
        )
        logger.info(
            "network_transactions_saved",
            network=network.key,
            network_name=network.name,
            transaction_count=len(batch),
        )
        return IngestResult(network=network.key, count=len(batch), degraded=degraded, commit=commit)

    async def _fetch_all(self, address: str, network: Network) -> list[CategoryOutcome]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.http_timeout_sec),
            transport=self._transport,
        ) as client:
            explorer = ExplorerClient(network, client, api_key=self._config.api_key_for(network))
            fetcher = CategoryFetcher(explorer)
            outcomes = await asyncio.gather(
                *(fetcher.fetch_outcome(address, category) for category in CATEGORY_ORDER)
            )
        return list(outcomes)
