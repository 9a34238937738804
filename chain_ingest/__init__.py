"""
Chain Ingest: multi-network block-explorer transaction ingestion.

Pulls normal, token-transfer and internal transactions for an address from
Etherscan-style explorers, normalizes them into one schema, and persists them
into one SQLite namespace per network with idempotent upserts plus address
activity and head-block bookkeeping. Runs to completion; no streaming.
"""

__version__ = "0.1.0"
