"""
Core utilities: shared exception types used across fetch, ingestion and storage.
"""

from chain_ingest.core.exceptions import (
    ChainIngestError,
    ConfigurationError,
    FetchError,
    StorageError,
    UnknownNetworkError,
)

__all__ = [
    "ChainIngestError",
    "ConfigurationError",
    "FetchError",
    "StorageError",
    "UnknownNetworkError",
]
