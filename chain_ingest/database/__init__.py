"""
Database abstraction layer: one SQLite namespace per network holding
transactions, address activity and the network head block.
"""

from chain_ingest.database.database import (
    Database,
    DatabaseBackend,
    SQLiteBackend,
    get_database,
)
from chain_ingest.database.models import (
    AddressActivity,
    CommitResult,
    NetworkHead,
    TransactionRecord,
    WriteResult,
)
from chain_ingest.database.reconciler import StoreReconciler

__all__ = [
    "AddressActivity",
    "CommitResult",
    "Database",
    "DatabaseBackend",
    "NetworkHead",
    "SQLiteBackend",
    "StoreReconciler",
    "TransactionRecord",
    "WriteResult",
    "get_database",
]
