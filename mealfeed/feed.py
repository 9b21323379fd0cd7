"""Incremental, partitioned feed controller.

Each call to ``request_next_page`` loads one page: the next partition in
round-robin order is listed, the unconsumed part of it is sliced off, hydrated
and merged into the feed. The upstream never reports totals, so the end of the
feed is decided heuristically:

- the feed holds ``cap_rounds * partition_count * page_size`` items, or
- a page under-fills on the last partition of a completed round.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal

from .accumulator import merge
from .api import CatalogAPI, CatalogAPIError
from .config import HYDRATION_DELAY, FeedSettings
from .cursors import PartitionCursorSet
from .hydrator import Hydrator
from .models import DetailRecord, Partition
from .sources import CatalogSource, CategorySource, FeedSource, SavedSource

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    IDLE = "idle"
    LOADING_PAGE = "loading_page"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class FeedState:
    """Read-only snapshot of a feed."""

    items: tuple[DetailRecord, ...]
    current_page_index: int
    exhausted: bool
    controller_state: ControllerState = ControllerState.IDLE
    failure: Exception | None = None

    def __len__(self) -> int:
        return len(self.items)


class FeedController:
    """Drive one feed, one page per external trigger.

    A controller owns its feed items and partition cursors; give every view
    its own instance. Only one page loads at a time: requests that arrive while
    a page is loading, or after the feed has ended or failed, are ignored.
    """

    def __init__(
        self,
        source: FeedSource,
        settings: FeedSettings | None = None,
        hydrator: Hydrator | None = None,
        partitions: Sequence[Partition] | None = None,
    ):
        self.source = source
        self.settings = settings or FeedSettings()
        self.hydrator = hydrator or Hydrator(
            source.fetch_detail, delay=self.settings.hydration_delay
        )
        self._initial_partitions = list(partitions) if partitions is not None else None
        self.cursors = PartitionCursorSet()
        self._start_session()

    def _start_session(self) -> None:
        self._partitions: list[Partition] | None = (
            list(self._initial_partitions) if self._initial_partitions is not None else None
        )
        self._items: list[DetailRecord] = []
        self._page_index = 1
        self._state = ControllerState.IDLE
        self._failure: Exception | None = None
        self.cursors.reset()

    # ------------------------------------------------------------------
    # Trigger interface
    # ------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def failure(self) -> Exception | None:
        return self._failure

    @property
    def partitions(self) -> list[Partition] | None:
        """The memoized partition list, or None before the first page."""
        return list(self._partitions) if self._partitions is not None else None

    def get_controller_state(self) -> ControllerState:
        return self._state

    def get_feed_state(self) -> FeedState:
        return FeedState(
            items=tuple(self._items),
            current_page_index=self._page_index,
            exhausted=self._state is ControllerState.EXHAUSTED,
            controller_state=self._state,
            failure=self._failure,
        )

    def reset(self) -> None:
        """Discard the session: items, cursors, failure and partition cache."""
        if self._state is ControllerState.LOADING_PAGE:
            raise RuntimeError("Cannot reset while a page is loading")
        logger.debug("Resetting feed")
        self._start_session()

    async def request_next_page(self) -> bool:
        """
        Load the next page if the controller is idle.

        Returns:
            True if a page attempt ran, False if the request was ignored
        """
        # Checked and set before the first await: this is the only guard
        if self._state is not ControllerState.IDLE:
            logger.debug("Ignoring page request while %s", self._state.value)
            return False
        self._state = ControllerState.LOADING_PAGE

        try:
            await self._load_page()
        except CatalogAPIError as e:
            self._fail(e)
        except Exception as e:
            self._fail(e)
            raise
        return True

    async def load_until(self, pages: int) -> FeedState:
        """Request up to ``pages`` pages, stopping early once not idle."""
        for _ in range(pages):
            if not await self.request_next_page():
                break
            if self._state is not ControllerState.IDLE:
                break
        return self.get_feed_state()

    # ------------------------------------------------------------------
    # Page loading
    # ------------------------------------------------------------------

    def _fail(self, error: Exception) -> None:
        logger.warning("Page %d failed: %s", self._page_index, error)
        self._failure = error
        self._state = ControllerState.FAILED

    async def _ensure_partitions(self) -> list[Partition]:
        if self._partitions is None:
            self._partitions = list(await self.source.list_partitions())
            logger.debug("Loaded %d partitions", len(self._partitions))
        return self._partitions

    async def _load_page(self) -> None:
        partitions = await self._ensure_partitions()
        if not partitions:
            logger.info("No partitions to load from")
            self._state = ControllerState.EXHAUSTED
            return

        page_index = self._page_index
        page_size = self.settings.page_size
        partition_count = len(partitions)
        target = partitions[(page_index - 1) % partition_count]

        summaries = await self.source.list_summaries(target.id)
        self.cursors.record_size(target.id, len(summaries))

        start = self.cursors.consumed_count(target.id)
        page_slice = summaries[start : start + page_size]

        records = await self.hydrator.hydrate(page_slice) if page_slice else []
        before = len(self._items)
        self._items = merge(self._items, records)
        self.cursors.advance(target.id, len(page_slice))

        logger.info(
            "Page %d from %s: %d listed, %d sliced, %d hydrated, %d new",
            page_index,
            target.id,
            len(summaries),
            len(page_slice),
            len(records),
            len(self._items) - before,
        )

        if self._is_exhausted(len(records), partition_count):
            logger.info("Feed exhausted after page %d with %d items", page_index, len(self._items))
            self._state = ControllerState.EXHAUSTED
            return

        self._page_index += 1
        self._state = ControllerState.IDLE

    def _is_exhausted(self, hydrated: int, partition_count: int) -> bool:
        cap = self.settings.item_cap(partition_count)
        if cap is not None and len(self._items) >= cap:
            return True

        completed_round = (
            self._page_index % partition_count == 0 and self._page_index >= partition_count
        )
        return hydrated < self.settings.page_size and completed_round


# ============================================================================
# Feed factories
# ============================================================================


def all_recipes_feed(
    api: CatalogAPI,
    settings: FeedSettings | None = None,
    partitions: Sequence[Partition] | None = None,
) -> FeedController:
    """Feed scanning every category round-robin."""
    settings = settings or FeedSettings()
    source = CatalogSource(api, max_partitions=settings.max_partitions)
    return FeedController(source, settings, partitions=partitions)


def category_feed(
    api: CatalogAPI, category: str, settings: FeedSettings | None = None
) -> FeedController:
    """Feed over a single category, ended only by under-fill."""
    settings = replace(settings or FeedSettings(), cap_rounds=None)
    return FeedController(CategorySource(api, category), settings)


def saved_feed(
    api: CatalogAPI,
    keys: Sequence[str],
    by: Literal["title", "id"] = "title",
    settings: FeedSettings | None = None,
) -> FeedController:
    """Feed rehydrating a saved list of recipe titles or ids."""
    settings = replace(settings or FeedSettings(), cap_rounds=None)
    return FeedController(SavedSource(api, keys, by=by), settings)


async def random_picks(
    api: CatalogAPI,
    count: int = 8,
    delay: float = HYDRATION_DELAY,
    max_attempts: int | None = None,
) -> list[DetailRecord]:
    """
    Collect distinct random recipes.

    Random draws repeat, so draws continue until ``count`` distinct recipes
    are collected or ``max_attempts`` draws were made. Two rows of 8, such as
    popular and trending picks, come from one call with ``count=16`` split
    in half, which keeps the rows from sharing a recipe.

    Args:
        api: Catalog client
        count: Number of distinct recipes wanted
        delay: Pause between draws
        max_attempts: Draw limit, defaults to five draws per wanted recipe

    Returns:
        Up to ``count`` distinct recipes in draw order
    """
    if max_attempts is None:
        max_attempts = count * 5

    picks: list[DetailRecord] = []
    for attempt in range(max_attempts):
        if len(picks) >= count:
            break
        if attempt and delay:
            await asyncio.sleep(delay)
        try:
            record = await api.random_detail()
        except CatalogAPIError as e:
            logger.warning("Random draw failed: %s", e)
            continue
        picks = merge(picks, [record])

    if len(picks) < count:
        logger.info("Collected %d of %d random recipes", len(picks), count)
    return picks
