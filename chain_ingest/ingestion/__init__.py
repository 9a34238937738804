"""
Batch ingestion: normalize, per-network fetch/commit cycle, sequential run
over networks.
"""

from chain_ingest.ingestion.network_ingestor import IngestResult, NetworkIngestor
from chain_ingest.ingestion.normalizer import normalize, normalize_batch
from chain_ingest.ingestion.orchestrator import (
    NetworkRunResult,
    RunOrchestrator,
    RunReport,
    run_ingestion,
)

__all__ = [
    "IngestResult",
    "NetworkIngestor",
    "NetworkRunResult",
    "RunOrchestrator",
    "RunReport",
    "normalize",
    "normalize_batch",
    "run_ingestion",
]
