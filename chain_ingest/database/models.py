"""
Domain models for database entities.

Canonical transaction rows, address activity, network head, and the explicit
results of a namespace commit. No ORM coupling so backends stay swappable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chain_ingest.explorer.models import Category


@dataclass(frozen=True)
class TransactionRecord:
    """Canonical transaction row; hash is unique within a network namespace."""

    hash: str
    block_number: int
    timestamp: int
    from_address: str
    to_address: str
    """Empty for contract creation."""
    value: str
    gas: str
    gas_price: str
    gas_used: str
    category: Category
    input: str = ""
    contract_address: str | None = None
    cumulative_gas_used: str | None = None
    nonce: int = 0
    confirmations: int = 0
    is_error: int = 0
    receipt_status: str | None = None
    transaction_index: int = 0


@dataclass
class AddressActivity:
    """Per-address bookkeeping row."""

    address: str
    first_seen: int
    """Unix timestamp (seconds) of the first committing run; never moves."""
    last_checked: int
    """Unix timestamp (seconds) of the most recent committing run."""
    transaction_count: int
    """Size of the last committed batch (not cumulative)."""


@dataclass
class NetworkHead:
    """Single-row head-block bookkeeping for a namespace."""

    last_block: int | None
    """MAX(block_number) over every stored transaction; None if the table is empty."""
    last_updated: int


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one bookkeeping write."""

    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> "WriteResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "WriteResult":
        return cls(ok=False, error=error)


@dataclass
class CommitResult:
    """Aggregate outcome of one namespace commit (transactions + bookkeeping)."""

    batch_size: int
    inserted: int = 0
    """Rows newly written."""
    duplicates: int = 0
    """Rows ignored because the hash was already stored."""
    failed_hashes: list[str] = field(default_factory=list)
    """Records that could not be written (row-level failure)."""
    address: WriteResult = field(default_factory=WriteResult.success)
    head: WriteResult = field(default_factory=WriteResult.success)

    @property
    def ok(self) -> bool:
        return not self.failed_hashes and self.address.ok and self.head.ok
