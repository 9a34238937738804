"""
Category fetcher: one category of records for one address on one network.

Failures never propagate: an explorer that cannot serve a category (bad
status, transport error, malformed payload, missing key) is reported as a
diagnostic and degrades to an empty result, so the other categories and
networks of the run are unaffected.
"""

from __future__ import annotations

from chain_ingest.core.exceptions import FetchError
from chain_ingest.explorer.client import NO_RECORDS_MESSAGE, ExplorerClient
from chain_ingest.explorer.models import Category, CategoryOutcome, RawRecord
from chain_ingest.ingest_logging import get_logger

logger = get_logger(__name__)


class CategoryFetcher:
    """Failure-isolating wrapper around ExplorerClient.fetch_records."""

    def __init__(self, client: ExplorerClient) -> None:
        self._client = client

    async def fetch(self, address: str, category: Category) -> list[RawRecord]:
        """Return the category's records, or [] if the fetch failed (see fetch_outcome)."""
        outcome = await self.fetch_outcome(address, category)
        return outcome.records

    async def fetch_outcome(self, address: str, category: Category) -> CategoryOutcome:
        if not address or not address.strip():
            raise ValueError("address must be non-empty")
        category = Category(category)
        network = self._client.network
        logger.info(
            "category_fetch_started",
            network=network.key,
            network_name=network.name,
            address=address,
            category=category.value,
        )
        try:
            records = await self._client.fetch_records(address.strip(), category)
        except FetchError as e:
            if str(e).startswith(NO_RECORDS_MESSAGE):
                logger.info(
                    "category_fetch_empty",
                    network=network.key,
                    category=category.value,
                    message=str(e),
                )
                return CategoryOutcome(category=category, records=[])
            logger.error(
                "category_fetch_failed",
                network=network.key,
                category=category.value,
                error=str(e),
            )
            return CategoryOutcome(category=category, records=[], error=str(e))
        except Exception as e:
            # Anything unexpected from the transport stack degrades the same way
            logger.exception(
                "category_fetch_failed",
                network=network.key,
                category=category.value,
                error=str(e),
            )
            return CategoryOutcome(category=category, records=[], error=str(e))

        logger.info(
            "category_fetched",
            network=network.key,
            category=category.value,
            record_count=len(records),
        )
        return CategoryOutcome(category=category, records=records)
