"""
Data models for explorer API output.

RawRecord is the explicitly all-optional shape of one item of an explorer
`result` list, regardless of which action produced it. The normalizer is the
only place that turns it into a canonical TransactionRecord.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Transaction kind requested from the explorer, in commit order."""

    NORMAL = "normal"
    TOKEN = "token"
    INTERNAL = "internal"

    @property
    def action(self) -> str:
        """Etherscan `action` parameter for this category."""
        return _ACTIONS[self]


_ACTIONS = {
    Category.NORMAL: "txlist",
    Category.TOKEN: "tokentx",
    Category.INTERNAL: "txlistinternal",
}

# Commit order of a merged batch
CATEGORY_ORDER: tuple[Category, ...] = (Category.NORMAL, Category.TOKEN, Category.INTERNAL)

# RawRecord attribute -> explorer JSON key
_FIELD_KEYS: dict[str, str] = {
    "hash": "hash",
    "block_number": "blockNumber",
    "timestamp": "timeStamp",
    "from_address": "from",
    "to_address": "to",
    "value": "value",
    "gas": "gas",
    "gas_price": "gasPrice",
    "gas_used": "gasUsed",
    "cumulative_gas_used": "cumulativeGasUsed",
    "input": "input",
    "contract_address": "contractAddress",
    "nonce": "nonce",
    "confirmations": "confirmations",
    "transaction_index": "transactionIndex",
    "is_error": "isError",
    "receipt_status": "txreceipt_status",
}


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class RawRecord:
    """
    One explorer record as received. Every field may be absent (None);
    values are kept as text exactly as the explorer sent them.
    """

    hash: str | None = None
    block_number: str | None = None
    timestamp: str | None = None
    from_address: str | None = None
    to_address: str | None = None
    value: str | None = None
    gas: str | None = None
    gas_price: str | None = None
    gas_used: str | None = None
    cumulative_gas_used: str | None = None
    input: str | None = None
    contract_address: str | None = None
    nonce: str | None = None
    confirmations: str | None = None
    transaction_index: str | None = None
    is_error: str | None = None
    receipt_status: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
    """Explorer keys not mapped above (tokenSymbol, traceId, ...); not persisted."""

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "RawRecord":
        """Build from a single explorer `result` item."""
        known = set(_FIELD_KEYS.values())
        return cls(
            **{attr: _as_text(item.get(key)) for attr, key in _FIELD_KEYS.items()},
            extra={k: v for k, v in item.items() if k not in known},
        )


@dataclass(frozen=True)
class CategoryOutcome:
    """Result of one category fetch: records, or the error that emptied it."""

    category: Category
    records: list[RawRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
