"""Feed sources: where a feed controller gets partitions, listings and details.

One controller implementation serves three views:

- ``CatalogSource``: every category, scanned round-robin
- ``CategorySource``: a single category (a partition set of size one)
- ``SavedSource``: a fixed, externally supplied list of saved recipes
"""

import logging
from collections.abc import Sequence
from typing import Literal, Protocol

from .api import CatalogAPI
from .config import MAX_PARTITIONS
from .models import DetailRecord, Partition, Summary

logger = logging.getLogger(__name__)

SAVED_PARTITION_ID = "saved"


class FeedSource(Protocol):
    """What the feed controller needs from upstream."""

    async def list_partitions(self) -> list[Partition]: ...

    async def list_summaries(self, partition_id: str) -> list[Summary]: ...

    async def fetch_detail(self, summary: Summary) -> DetailRecord: ...


class CatalogSource:
    """All categories of the catalog, capped at ``max_partitions``."""

    def __init__(self, api: CatalogAPI, max_partitions: int = MAX_PARTITIONS):
        self.api = api
        self.max_partitions = max_partitions

    async def list_partitions(self) -> list[Partition]:
        partitions = await self.api.list_partitions()
        if len(partitions) > self.max_partitions:
            logger.debug("Keeping %d of %d categories", self.max_partitions, len(partitions))
        return partitions[: self.max_partitions]

    async def list_summaries(self, partition_id: str) -> list[Summary]:
        return await self.api.list_summaries(partition_id)

    async def fetch_detail(self, summary: Summary) -> DetailRecord:
        return await self.api.fetch_detail(summary.item_id)


class CategorySource(CatalogSource):
    """A single category; needs no partition bootstrap request."""

    def __init__(self, api: CatalogAPI, category: str):
        super().__init__(api, max_partitions=1)
        self.category = category

    async def list_partitions(self) -> list[Partition]:
        return [Partition(id=self.category, label=self.category)]


class SavedSource:
    """Rehydrate a saved list.

    Membership is the supplied key list instead of a live listing. Keys are
    recipe titles (looked up by name) or recipe ids.
    """

    def __init__(
        self,
        api: CatalogAPI,
        keys: Sequence[str],
        by: Literal["title", "id"] = "title",
    ):
        if by not in ("title", "id"):
            raise ValueError(f"Unknown key type: {by}")
        self.api = api
        self.keys = list(dict.fromkeys(key for key in keys if key))
        self.by = by

    async def list_partitions(self) -> list[Partition]:
        return [Partition(id=SAVED_PARTITION_ID, label="Saved recipes")]

    async def list_summaries(self, partition_id: str) -> list[Summary]:
        if self.by == "title":
            return [Summary(item_id=key, partition_id=partition_id, title=key) for key in self.keys]
        return [Summary(item_id=key, partition_id=partition_id) for key in self.keys]

    async def fetch_detail(self, summary: Summary) -> DetailRecord:
        if self.by == "title":
            return await self.api.lookup_by_title(summary.item_id)
        return await self.api.fetch_detail(summary.item_id)
