"""TheMealDB API client for categories, category listings and recipe details."""

import logging
from typing import Any

import httpx

from .config import API_BASE_URL, REQUEST_TIMEOUT
from .models import DetailRecord, Partition, Summary

logger = logging.getLogger(__name__)


class CatalogAPIError(Exception):
    """Base exception for catalog API errors."""

    pass


class UpstreamUnavailable(CatalogAPIError):
    """Network failure, error status or unparseable response."""

    pass


class NotFound(CatalogAPIError):
    """The requested item no longer resolves."""

    pass


class CatalogAPI:
    """Async client for TheMealDB's JSON API."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Accept": "application/json, text/plain, */*",
                "User-Agent": "mealfeed/1.0",
            },
        )

    async def __aenter__(self) -> "CatalogAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(
        self, endpoint: str, params: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """GET an endpoint and return its JSON object.

        Raises:
            NotFound: If the server answers 404
            UpstreamUnavailable: On transport errors, other error statuses
                or a body that is not a JSON object
        """
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s %s", url, params or {})
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFound(f"{endpoint} returned 404") from e
            raise UpstreamUnavailable(f"{endpoint} failed: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"{endpoint} failed: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailable(f"{endpoint} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"{endpoint} returned unexpected payload")
        return data

    @staticmethod
    def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
        """Return the list under ``key``; the API sends null for no results."""
        entries = data.get(key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise UpstreamUnavailable(f"Expected a list under '{key}'")
        return [entry for entry in entries if isinstance(entry, dict)]

    async def list_partitions(self) -> list[Partition]:
        """
        List all recipe categories.

        Returns:
            Categories in upstream order

        Raises:
            UpstreamUnavailable: If the categories cannot be fetched
        """
        try:
            data = await self._get_json("categories.php")
        except NotFound as e:
            raise UpstreamUnavailable(f"Category listing unavailable: {e}") from e
        partitions = [Partition.from_api(entry) for entry in self._entries(data, "categories")]
        return [p for p in partitions if p.id]

    async def list_summaries(self, partition_id: str) -> list[Summary]:
        """
        List every recipe in a category.

        The endpoint has no paging; it always returns the full membership.

        Args:
            partition_id: Category name

        Returns:
            Summaries in upstream order, empty if the category has none

        Raises:
            UpstreamUnavailable: If the listing cannot be fetched
        """
        try:
            data = await self._get_json("filter.php", {"c": partition_id})
        except NotFound as e:
            raise UpstreamUnavailable(f"Listing for '{partition_id}' unavailable: {e}") from e
        entries = self._entries(data, "meals")
        summaries = [Summary.from_api(entry, partition_id) for entry in entries]
        return [s for s in summaries if s.item_id]

    async def fetch_detail(self, item_id: str) -> DetailRecord:
        """
        Fetch the full recipe for an id.

        Raises:
            NotFound: If the id no longer resolves
            UpstreamUnavailable: On network or parse failure
        """
        data = await self._get_json("lookup.php", {"i": item_id})
        meals = self._entries(data, "meals")
        if not meals:
            raise NotFound(f"Recipe {item_id} not found")
        return DetailRecord.from_api(meals[0])

    async def search(self, name: str) -> list[DetailRecord]:
        """Search recipes by name."""
        data = await self._get_json("search.php", {"s": name})
        return [DetailRecord.from_api(entry) for entry in self._entries(data, "meals")]

    async def lookup_by_title(self, title: str) -> DetailRecord:
        """
        Fetch the first recipe matching a title.

        Raises:
            NotFound: If the search has no results
            UpstreamUnavailable: On network or parse failure
        """
        results = await self.search(title)
        if not results:
            raise NotFound(f"Recipe '{title}' not found")
        return results[0]

    async def random_detail(self) -> DetailRecord:
        """Fetch a random recipe."""
        data = await self._get_json("random.php")
        meals = self._entries(data, "meals")
        if not meals:
            raise UpstreamUnavailable("random.php returned no recipe")
        return DetailRecord.from_api(meals[0])
