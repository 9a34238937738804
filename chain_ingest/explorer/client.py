"""
Etherscan-style explorer client.

One GET per (address, category) against the network's `api_url` with
module=account, the category action, the full block range in ascending
order, and the network's API key. Any transport error, HTTP error status,
non-JSON body, non-affirmative `status` or non-list `result` raises
FetchError; callers decide how to degrade.
"""

from __future__ import annotations

from typing import Any

import httpx

from chain_ingest.config.networks import Network
from chain_ingest.core.exceptions import FetchError
from chain_ingest.explorer.models import Category, RawRecord
from chain_ingest.ingest_logging import get_logger

logger = get_logger(__name__)

START_BLOCK = 0
END_BLOCK = 99999999
SORT_ORDER = "asc"
STATUS_OK = "1"
NO_RECORDS_MESSAGE = "No transactions found"


def build_params(address: str, category: Category, api_key: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {
        "module": "account",
        "action": category.action,
        "address": address,
        "startblock": START_BLOCK,
        "endblock": END_BLOCK,
        "sort": SORT_ORDER,
    }
    # Sent even when empty so the explorer answers with its own auth error
    params["apikey"] = api_key or ""
    return params


class ExplorerClient:
    """
    Thin async client for one network's explorer.

    The httpx.AsyncClient is owned by the caller so the three category
    requests of a network share one connection pool.
    """

    def __init__(
        self,
        network: Network,
        client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
    ) -> None:
        self._network = network
        self._client = client
        self._api_key = api_key

    @property
    def network(self) -> Network:
        return self._network

    async def fetch_records(self, address: str, category: Category) -> list[RawRecord]:
        """Fetch every record of one category for address; raise FetchError on any failure."""
        params = build_params(address, category, self._api_key)
        try:
            resp = await self._client.get(self._network.api_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"{self._network.name} explorer returned HTTP {e.response.status_code}",
                network=self._network.key,
                category=category.value,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"{self._network.name} explorer request failed: {e}",
                network=self._network.key,
                category=category.value,
            ) from e
        except ValueError as e:
            raise FetchError(
                f"{self._network.name} explorer returned a non-JSON body",
                network=self._network.key,
                category=category.value,
            ) from e

        return self._parse(data, category)

    def _parse(self, data: Any, category: Category) -> list[RawRecord]:
        if not isinstance(data, dict):
            raise FetchError(
                f"{self._network.name} explorer returned an unexpected payload",
                network=self._network.key,
                category=category.value,
            )
        if str(data.get("status")) != STATUS_OK:
            message = data.get("message") or f"{self._network.name} {category.value} API error"
            result = data.get("result")
            # Etherscan reports auth/rate-limit details in `result` as a string
            detail = f"{message}: {result}" if isinstance(result, str) and result else str(message)
            raise FetchError(detail, network=self._network.key, category=category.value)
        result = data.get("result")
        if not isinstance(result, list):
            raise FetchError(
                f"{self._network.name} explorer result is not a list",
                network=self._network.key,
                category=category.value,
            )
        records: list[RawRecord] = []
        for item in result:
            if not isinstance(item, dict):
                logger.debug(
                    "explorer_skip_invalid_item",
                    network=self._network.key,
                    category=category.value,
                    item_type=type(item).__name__,
                )
                continue
            records.append(RawRecord.from_api_item(item))
        return records
