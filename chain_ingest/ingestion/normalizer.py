"""
Record normalizer: raw explorer records to canonical TransactionRecords.

The single place where defaults are applied. Pure and total: every RawRecord
maps to a TransactionRecord. Numeric-string fields (value, gas, gas price,
gas used, cumulative gas used) pass through verbatim so 256-bit amounts never
lose precision; only small counters are parsed to int.
"""

from __future__ import annotations

from typing import Iterable

from chain_ingest.database.models import TransactionRecord
from chain_ingest.explorer.models import Category, RawRecord


def _text_or(value: str | None, default: str) -> str:
    return value if value else default


def _text_or_none(value: str | None) -> str | None:
    return value if value else None


def _int_or(value: str | None, default: int = 0) -> int:
    if value is None:
        return default
    text = value.strip()
    if not text:
        return default
    try:
        return int(text, 10)
    except ValueError:
        return default


def normalize(raw: RawRecord, category: Category) -> TransactionRecord:
    """Apply the defaulting table and stamp category from the caller."""
    return TransactionRecord(
        hash=raw.hash or "",
        block_number=_int_or(raw.block_number),
        timestamp=_int_or(raw.timestamp),
        from_address=raw.from_address or "",
        to_address=raw.to_address or "",
        value=_text_or(raw.value, "0"),
        gas=_text_or(raw.gas, "0"),
        gas_price=_text_or(raw.gas_price, "0"),
        gas_used=_text_or(raw.gas_used, "0"),
        category=Category(category),
        input=raw.input or "",
        contract_address=_text_or_none(raw.contract_address),
        cumulative_gas_used=_text_or_none(raw.cumulative_gas_used),
        nonce=_int_or(raw.nonce),
        confirmations=_int_or(raw.confirmations),
        is_error=_int_or(raw.is_error),
        receipt_status=_text_or_none(raw.receipt_status),
        transaction_index=_int_or(raw.transaction_index),
    )


def normalize_batch(raws: Iterable[RawRecord], category: Category) -> list[TransactionRecord]:
    """Normalize a category's records, preserving order."""
    return [normalize(raw, category) for raw in raws]
