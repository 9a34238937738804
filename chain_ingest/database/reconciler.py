"""
Store reconciler: commits one network's merged batch into that network's
isolated namespace.

Opens the namespace, applies the unit of work (transactions by hash, address
activity, head block) and drops the handle, so nothing is shared between
networks and no cross-namespace locking is needed.
"""

from __future__ import annotations

from typing import Sequence

from chain_ingest.config.networks import AppConfig, Network
from chain_ingest.database.database import Clock, Database, get_database
from chain_ingest.database.models import CommitResult, TransactionRecord
from chain_ingest.ingest_logging import get_logger

logger = get_logger(__name__)


class StoreReconciler:
    """Idempotent writer for per-network namespaces resolved from AppConfig."""

    def __init__(self, config: AppConfig, *, clock: Clock | None = None) -> None:
        self._config = config
        self._clock = clock

    def open(self, network: Network) -> Database:
        """Open (and create if absent) the namespace for network. Raises StorageError."""
        return get_database(self._config.db_path_for(network), clock=self._clock)

    def commit(
        self,
        network: Network,
        batch: Sequence[TransactionRecord],
        address: str,
    ) -> CommitResult:
        db = self.open(network)
        result = db.commit(batch, address)
        log = logger.info if result.ok else logger.warning
        log(
            "namespace_committed",
            network=network.key,
            namespace=network.db_file,
            address=address,
            batch_size=result.batch_size,
            inserted=result.inserted,
            duplicates=result.duplicates,
            failed=len(result.failed_hashes),
            address_ok=result.address.ok,
            head_ok=result.head.ok,
        )
        return result
