"""Serial, rate-limited hydration of summaries into detail records."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace

from .api import NotFound, UpstreamUnavailable
from .config import HYDRATION_DELAY
from .models import DetailRecord, Summary

logger = logging.getLogger(__name__)

DetailFetcher = Callable[[Summary], Awaitable[DetailRecord]]
Sleeper = Callable[[float], Awaitable[None]]


class Hydrator:
    """Fetch details one at a time with a fixed pause between calls.

    The upstream has no bulk endpoint, so a slice of N summaries costs N
    requests. They are issued serially to stay under the rate limit. A failed
    item is logged and left out; the batch as a whole never raises.
    """

    def __init__(
        self,
        fetch: DetailFetcher,
        delay: float = HYDRATION_DELAY,
        sleep: Sleeper = asyncio.sleep,
    ):
        if delay < 0:
            raise ValueError("delay cannot be negative")
        self._fetch = fetch
        self.delay = delay
        self._sleep = sleep

    async def hydrate(self, summaries: Sequence[Summary]) -> list[DetailRecord]:
        """
        Hydrate a batch of summaries.

        Args:
            summaries: Items to fetch, in order

        Returns:
            Records for the items that resolved, in input order, each tagged
            with its summary's partition
        """
        records: list[DetailRecord] = []

        for index, summary in enumerate(summaries):
            if index and self.delay:
                await self._sleep(self.delay)

            try:
                record = await self._fetch(summary)
            except NotFound as e:
                logger.warning("Dropping %s: %s", summary.item_id, e)
                continue
            except UpstreamUnavailable as e:
                logger.warning("Dropping %s after upstream failure: %s", summary.item_id, e)
                continue

            records.append(replace(record, partition_id=summary.partition_id))

        if len(records) < len(summaries):
            logger.info("Partial batch: hydrated %d of %d", len(records), len(summaries))
        return records
