"""
Database abstraction layer for one network namespace: transactions, address
activity, and the network head block.

Uses SQLite, one file per network, so namespaces are physically isolated.
All access goes through the abstract backend interface; SQL and placeholders
are backend-specific (? for SQLite).
"""

from __future__ import annotations

import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence

from chain_ingest.core.exceptions import StorageError
from chain_ingest.database.models import (
    AddressActivity,
    CommitResult,
    NetworkHead,
    TransactionRecord,
    WriteResult,
)
from chain_ingest.explorer.models import Category
from chain_ingest.ingest_logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], int]


def _now() -> int:
    return int(time.time())


# -----------------------------------------------------------------------------
# Schema (SQLite)
# -----------------------------------------------------------------------------

SCHEMA_TRANSACTIONS = """
CREATE TABLE IF NOT EXISTS transactions (
    hash TEXT PRIMARY KEY NOT NULL CHECK (length(hash) > 0),
    block_number INTEGER NOT NULL,
    time_stamp INTEGER NOT NULL,
    from_address TEXT,
    to_address TEXT,
    value TEXT NOT NULL,
    gas TEXT NOT NULL,
    gas_price TEXT NOT NULL,
    gas_used TEXT NOT NULL,
    transaction_type TEXT NOT NULL,
    input TEXT,
    contract_address TEXT,
    cumulative_gas_used TEXT,
    nonce INTEGER NOT NULL DEFAULT 0,
    confirmations INTEGER NOT NULL DEFAULT 0,
    is_error INTEGER NOT NULL DEFAULT 0,
    txreceipt_status TEXT,
    transaction_index INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS ix_transactions_block_number ON transactions(block_number);
CREATE INDEX IF NOT EXISTS ix_transactions_type ON transactions(transaction_type);
"""

SCHEMA_ADDRESSES = """
CREATE TABLE IF NOT EXISTS addresses (
    address TEXT PRIMARY KEY,
    first_seen INTEGER NOT NULL,
    last_checked INTEGER NOT NULL,
    transaction_count INTEGER NOT NULL
);
"""

# Single row, pinned to id = 1
SCHEMA_NETWORK_INFO = """
CREATE TABLE IF NOT EXISTS network_info (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    last_block INTEGER,
    last_updated INTEGER NOT NULL
);
"""

_TX_COLUMNS = (
    "hash, block_number, time_stamp, from_address, to_address, value, gas, gas_price, "
    "gas_used, transaction_type, input, contract_address, cumulative_gas_used, nonce, "
    "confirmations, is_error, txreceipt_status, transaction_index"
)

SQL_INSERT_TRANSACTION = f"""
INSERT INTO transactions ({_TX_COLUMNS})
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(hash) DO NOTHING
"""

# first_seen is only written on insert; the conflict branch leaves it alone
SQL_UPSERT_ADDRESS = """
INSERT INTO addresses (address, first_seen, last_checked, transaction_count)
VALUES (?, ?, ?, ?)
ON CONFLICT(address) DO UPDATE SET
    last_checked = excluded.last_checked,
    transaction_count = excluded.transaction_count
"""

SQL_UPSERT_NETWORK_HEAD = """
INSERT INTO network_info (id, last_block, last_updated)
VALUES (1, (SELECT MAX(block_number) FROM transactions), ?)
ON CONFLICT(id) DO UPDATE SET
    last_block = excluded.last_block,
    last_updated = excluded.last_updated
"""


def _transaction_params(tx: TransactionRecord) -> tuple[Any, ...]:
    return (
        tx.hash,
        tx.block_number,
        tx.timestamp,
        tx.from_address,
        tx.to_address,
        tx.value,
        tx.gas,
        tx.gas_price,
        tx.gas_used,
        Category(tx.category).value,
        tx.input,
        tx.contract_address,
        tx.cumulative_gas_used,
        tx.nonce,
        tx.confirmations,
        tx.is_error,
        tx.receipt_status,
        tx.transaction_index,
    )


def _row_to_transaction(row: sqlite3.Row) -> TransactionRecord:
    return TransactionRecord(
        hash=row["hash"],
        block_number=row["block_number"],
        timestamp=row["time_stamp"],
        from_address=row["from_address"],
        to_address=row["to_address"],
        value=row["value"],
        gas=row["gas"],
        gas_price=row["gas_price"],
        gas_used=row["gas_used"],
        category=Category(row["transaction_type"]),
        input=row["input"],
        contract_address=row["contract_address"],
        cumulative_gas_used=row["cumulative_gas_used"],
        nonce=row["nonce"],
        confirmations=row["confirmations"],
        is_error=row["is_error"],
        receipt_status=row["txreceipt_status"],
        transaction_index=row["transaction_index"],
    )


# -----------------------------------------------------------------------------
# Abstract backend
# -----------------------------------------------------------------------------


class DatabaseBackend(ABC):
    """Abstract interface for one namespace's persistence."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        ...

    @abstractmethod
    def commit_batch(
        self,
        batch: Sequence[TransactionRecord],
        address: str,
        now: int,
    ) -> CommitResult:
        """
        Apply the three-step unit of work in one transaction: insert-or-ignore
        every record by hash, upsert the address activity row, recompute the
        network head. Row-level failures are reported on the result; a failure
        to finalize raises StorageError.
        """
        ...

    @abstractmethod
    def count_transactions(self) -> int:
        ...

    @abstractmethod
    def get_transaction(self, tx_hash: str) -> TransactionRecord | None:
        ...

    @abstractmethod
    def get_transactions(
        self,
        *,
        limit: int = 500,
        category: Category | None = None,
    ) -> list[TransactionRecord]:
        """Return stored transactions ordered by block, then index within block."""
        ...

    @abstractmethod
    def get_address_activity(self, address: str) -> AddressActivity | None:
        ...

    @abstractmethod
    def get_network_head(self) -> NetworkHead | None:
        ...


# -----------------------------------------------------------------------------
# SQLite backend
# -----------------------------------------------------------------------------


class SQLiteBackend(DatabaseBackend):
    """SQLite implementation; single file, one connection per operation."""

    def __init__(self, path: str | Path, *, timeout_sec: float = 5.0) -> None:
        self._path = Path(path)
        self._timeout_sec = timeout_sec

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._path), timeout=self._timeout_sec)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"cannot open {self._path}: {e}", namespace=str(self._path)) from e
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        try:
            with self._cursor() as cur:
                for stmt in (SCHEMA_TRANSACTIONS, SCHEMA_ADDRESSES, SCHEMA_NETWORK_INFO):
                    cur.executescript(stmt)
        except sqlite3.Error as e:
            raise StorageError(f"cannot create schema in {self._path}: {e}", namespace=str(self._path)) from e

    def commit_batch(
        self,
        batch: Sequence[TransactionRecord],
        address: str,
        now: int,
    ) -> CommitResult:
        result = CommitResult(batch_size=len(batch))
        namespace = str(self._path)
        conn = self._connect()
        try:
            cur = conn.cursor()

            for tx in batch:
                try:
                    cur.execute(SQL_INSERT_TRANSACTION, _transaction_params(tx))
                except (sqlite3.Error, ValueError) as e:
                    # A failed statement does not end the enclosing transaction
                    result.failed_hashes.append(tx.hash)
                    logger.warning(
                        "transaction_insert_failed",
                        namespace=namespace,
                        tx_hash=tx.hash,
                        error=str(e),
                    )
                    continue
                if cur.rowcount == 1:
                    result.inserted += 1
                else:
                    result.duplicates += 1

            result.address = self._upsert_address(cur, address, len(batch), now)
            result.head = self._upsert_network_head(cur, now)

            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"commit failed for {namespace}: {e}", namespace=namespace) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return result

    def _upsert_address(self, cur: sqlite3.Cursor, address: str, count: int, now: int) -> WriteResult:
        try:
            cur.execute(SQL_UPSERT_ADDRESS, (address, now, now, count))
        except sqlite3.Error as e:
            logger.warning("address_update_failed", namespace=str(self._path), address=address, error=str(e))
            return WriteResult.failure(str(e))
        return WriteResult.success()

    def _upsert_network_head(self, cur: sqlite3.Cursor, now: int) -> WriteResult:
        try:
            cur.execute(SQL_UPSERT_NETWORK_HEAD, (now,))
        except sqlite3.Error as e:
            logger.warning("network_head_update_failed", namespace=str(self._path), error=str(e))
            return WriteResult.failure(str(e))
        return WriteResult.success()

    def count_transactions(self) -> int:
        with self._cursor() as cur:
            cur.execute("SELECT COUNT(*) FROM transactions")
            return int(cur.fetchone()[0])

    def get_transaction(self, tx_hash: str) -> TransactionRecord | None:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_TX_COLUMNS} FROM transactions WHERE hash = ?", (tx_hash,))
            row = cur.fetchone()
        return _row_to_transaction(row) if row is not None else None

    def get_transactions(
        self,
        *,
        limit: int = 500,
        category: Category | None = None,
    ) -> list[TransactionRecord]:
        sql = f"SELECT {_TX_COLUMNS} FROM transactions"
        params: list[Any] = []
        if category is not None:
            sql += " WHERE transaction_type = ?"
            params.append(Category(category).value)
        sql += " ORDER BY block_number ASC, transaction_index ASC, hash ASC LIMIT ?"
        params.append(limit)
        with self._cursor() as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()
        return [_row_to_transaction(row) for row in rows]

    def get_address_activity(self, address: str) -> AddressActivity | None:
        with self._cursor() as cur:
            cur.execute(
                "SELECT address, first_seen, last_checked, transaction_count FROM addresses WHERE address = ?",
                (address,),
            )
            row = cur.fetchone()
        if row is None:
            return None
        return AddressActivity(
            address=row["address"],
            first_seen=row["first_seen"],
            last_checked=row["last_checked"],
            transaction_count=row["transaction_count"],
        )

    def get_network_head(self) -> NetworkHead | None:
        with self._cursor() as cur:
            cur.execute("SELECT last_block, last_updated FROM network_info WHERE id = 1")
            row = cur.fetchone()
        if row is None:
            return None
        return NetworkHead(last_block=row["last_block"], last_updated=row["last_updated"])


# -----------------------------------------------------------------------------
# Database facade: single entrypoint per namespace; backend is swappable.
# -----------------------------------------------------------------------------


class Database:
    """
    One network namespace: transaction history plus address/head bookkeeping.

    clock returns epoch seconds; injectable so bookkeeping timestamps are
    deterministic in tests.
    """

    def __init__(self, backend: DatabaseBackend, *, clock: Clock | None = None) -> None:
        self._backend = backend
        self._clock = clock or _now

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        self._backend.ensure_schema()

    def commit(self, batch: Sequence[TransactionRecord], address: str) -> CommitResult:
        """Upsert batch by hash, then address activity, then network head, as one unit."""
        return self._backend.commit_batch(list(batch), address, self._clock())

    # --- Reads ---

    def count_transactions(self) -> int:
        return self._backend.count_transactions()

    def get_transaction(self, tx_hash: str) -> TransactionRecord | None:
        return self._backend.get_transaction(tx_hash)

    def get_transactions(
        self,
        *,
        limit: int = 500,
        category: Category | None = None,
    ) -> list[TransactionRecord]:
        return self._backend.get_transactions(limit=limit, category=category)

    def get_address_activity(self, address: str) -> AddressActivity | None:
        return self._backend.get_address_activity(address)

    def get_network_head(self) -> NetworkHead | None:
        return self._backend.get_network_head()


def get_database(path: str | Path, *, clock: Clock | None = None) -> Database:
    """
    Return a Database for the SQLite file at path, with schema ensured.

    path: one file per network namespace (e.g. "blockchain-data/ethereum.db").
    """
    backend = SQLiteBackend(path)
    db = Database(backend, clock=clock)
    db.ensure_schema()
    return db
