"""
Block-explorer access: Etherscan-style HTTP client, raw record model, and the
failure-isolating category fetcher.
"""

from chain_ingest.explorer.client import ExplorerClient
from chain_ingest.explorer.fetcher import CategoryFetcher
from chain_ingest.explorer.models import (
    CATEGORY_ORDER,
    Category,
    CategoryOutcome,
    RawRecord,
)

__all__ = [
    "CATEGORY_ORDER",
    "Category",
    "CategoryFetcher",
    "CategoryOutcome",
    "ExplorerClient",
    "RawRecord",
]
