"""Shared fixtures for mealfeed tests."""

import asyncio

import pytest
import respx

from mealfeed.api import CatalogAPI, NotFound, UpstreamUnavailable
from mealfeed.models import DetailRecord, Partition, Summary


def make_meal(item_id: str, title: str | None = None, category: str = "Beef") -> dict:
    """A lookup.php meal entry."""
    return {
        "idMeal": item_id,
        "strMeal": title or f"Meal {item_id}",
        "strCategory": category,
        "strArea": "British",
        "strInstructions": "Preheat oven.\r\n\r\nBake for 20 minutes.",
        "strMealThumb": f"https://example.com/{item_id}.jpg",
        "strTags": "Pie,Dinner",
        "strYoutube": "",
        "strIngredient1": "Beef",
        "strMeasure1": "500g",
        "strIngredient2": "Onion",
        "strMeasure2": "1",
        "strIngredient3": "",
        "strMeasure3": " ",
        "strIngredient4": None,
        "strMeasure4": None,
        "strSource": None,
    }


class FakeSource:
    """In-memory feed source with call counters.

    ``memberships`` maps partition id to item ids. ``missing`` ids raise
    NotFound on hydration; ``failing_partitions`` raise UpstreamUnavailable
    when listed.
    """

    def __init__(
        self,
        memberships: dict[str, list[str]],
        missing: set[str] | None = None,
        failing_partitions: set[str] | None = None,
        bootstrap_error: Exception | None = None,
    ):
        self.memberships = memberships
        self.missing = missing or set()
        self.failing_partitions = failing_partitions or set()
        self.bootstrap_error = bootstrap_error
        self.partition_calls = 0
        self.summary_calls: list[str] = []
        self.detail_calls: list[str] = []

    async def list_partitions(self) -> list[Partition]:
        self.partition_calls += 1
        await asyncio.sleep(0)  # network suspension point
        if self.bootstrap_error:
            raise self.bootstrap_error
        return [Partition(id=pid, label=pid) for pid in self.memberships]

    async def list_summaries(self, partition_id: str) -> list[Summary]:
        self.summary_calls.append(partition_id)
        await asyncio.sleep(0)
        if partition_id in self.failing_partitions:
            raise UpstreamUnavailable(f"{partition_id} listing failed")
        return [Summary(item_id=i, partition_id=partition_id) for i in self.memberships[partition_id]]

    async def fetch_detail(self, summary: Summary) -> DetailRecord:
        self.detail_calls.append(summary.item_id)
        if summary.item_id in self.missing:
            raise NotFound(summary.item_id)
        return DetailRecord(item_id=summary.item_id, title=f"Meal {summary.item_id}")


def make_ids(prefix: str, count: int) -> list[str]:
    return [f"{prefix}-{i}" for i in range(count)]


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def api_client():
    """Create a fresh CatalogAPI client instance."""
    return CatalogAPI()


@pytest.fixture
def mock_categories_response():
    """Standard categories.php response."""
    return {
        "categories": [
            {
                "idCategory": "1",
                "strCategory": "Beef",
                "strCategoryThumb": "https://example.com/beef.png",
                "strCategoryDescription": "Beef is the culinary name for meat from cattle.",
            },
            {
                "idCategory": "2",
                "strCategory": "Chicken",
                "strCategoryThumb": "https://example.com/chicken.png",
                "strCategoryDescription": "Chicken is a type of domesticated fowl.",
            },
        ]
    }


@pytest.fixture
def mock_meal():
    """Single meal as returned by lookup.php."""
    return make_meal("52874", "Beef and Mustard Pie")


@pytest.fixture
def mock_filter_response():
    """filter.php response listing three meals."""
    return {
        "meals": [
            {"strMeal": "Beef and Mustard Pie", "strMealThumb": "https://example.com/1.jpg", "idMeal": "52874"},
            {"strMeal": "Beef Wellington", "strMealThumb": "https://example.com/2.jpg", "idMeal": "52803"},
            {"strMeal": "Beef Brisket Pot Roast", "strMealThumb": "https://example.com/3.jpg", "idMeal": "52812"},
        ]
    }


@pytest.fixture
def fake_source():
    """The FakeSource class, for building sources per test."""
    return FakeSource


@pytest.fixture
def ids():
    """The make_ids helper."""
    return make_ids


@pytest.fixture
def meal_factory():
    """The make_meal helper."""
    return make_meal
