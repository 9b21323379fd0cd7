"""Tests for the CLI module."""

import json

import httpx
import pytest
from click.testing import CliRunner

from mealfeed.cli import cli
from mealfeed.config import API_BASE_URL
from mealfeed.store import JsonFileStore, SavedRecipes


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def temp_store_file(tmp_path, monkeypatch):
    """Point the store at a temporary file."""
    store_file = tmp_path / "store.json"
    monkeypatch.setattr("mealfeed.config.STORE_FILE", store_file)
    return store_file


@pytest.fixture
def catalog(mock_httpx, mock_categories_response, meal_factory):
    """Mock a two-category catalog of 15 recipes each."""
    memberships = {
        "Beef": [str(i) for i in range(100, 115)],
        "Chicken": [str(i) for i in range(200, 215)],
    }

    def filter_meals(request):
        ids = memberships.get(request.url.params["c"], [])
        return httpx.Response(200, json={"meals": [{"idMeal": i} for i in ids] or None})

    def lookup(request):
        item_id = request.url.params["i"]
        return httpx.Response(200, json={"meals": [meal_factory(item_id)]})

    def search(request):
        title = request.url.params["s"]
        if title == "Gone":
            return httpx.Response(200, json={"meals": None})
        return httpx.Response(200, json={"meals": [meal_factory(f"id-{title}", title)]})

    mock_httpx.get(f"{API_BASE_URL}/categories.php").respond(json=mock_categories_response)
    mock_httpx.get(f"{API_BASE_URL}/filter.php").mock(side_effect=filter_meals)
    mock_httpx.get(f"{API_BASE_URL}/lookup.php").mock(side_effect=lookup)
    mock_httpx.get(f"{API_BASE_URL}/search.php").mock(side_effect=search)
    return mock_httpx


class TestBrowseCommands:
    """Tests for categories and browse."""

    def test_categories(self, runner, catalog):
        """Should list category names."""
        result = runner.invoke(cli, ["categories"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["Beef", "Chicken"]

    def test_categories_failure(self, runner, mock_httpx):
        """An outage should exit with an error."""
        mock_httpx.get(f"{API_BASE_URL}/categories.php").respond(status_code=503)

        result = runner.invoke(cli, ["categories"])

        assert result.exit_code == 1
        assert "Failed to load categories" in result.output

    def test_browse_one_page(self, runner, catalog):
        """One page should show ten recipes from the first category."""
        result = runner.invoke(cli, ["browse", "--delay", "0"])

        assert result.exit_code == 0
        assert "Meal 100" in result.output
        assert "Meal 200" not in result.output
        assert "Recipes: 10 | Page: 2" in result.output

    def test_browse_json(self, runner, catalog):
        """JSON output should carry the feed position and serialized records."""
        result = runner.invoke(cli, ["browse", "--delay", "0", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["page"] == 2
        assert payload["exhausted"] is False
        assert [r["item_id"] for r in payload["recipes"]] == [str(i) for i in range(100, 110)]
        first = payload["recipes"][0]
        assert first["partition_id"] == "Beef"
        assert first["sequence_index"] == 0
        assert first["ingredients"][0] == {"name": "Beef", "measure": "500g"}
        assert first["tags"] == ["Pie", "Dinner"]

    def test_browse_until_exhausted(self, runner, catalog):
        """Loading more pages than exist should end the feed."""
        result = runner.invoke(cli, ["browse", "--delay", "0", "--pages", "5"])

        assert result.exit_code == 0
        assert "Recipes: 20" in result.output
        assert "End of feed." in result.output

    def test_browse_category(self, runner, catalog):
        """A single category should be paged through on its own."""
        result = runner.invoke(cli, ["browse", "--delay", "0", "-c", "Chicken", "-n", "3"])

        assert result.exit_code == 0
        assert "Meal 214" in result.output
        assert "Meal 100" not in result.output
        assert "Recipes: 15" in result.output

    def test_browse_failure(self, runner, mock_httpx):
        """A failed bootstrap should exit with status 1."""
        mock_httpx.get(f"{API_BASE_URL}/categories.php").mock(
            side_effect=httpx.ConnectError("Network unreachable")
        )

        result = runner.invoke(cli, ["browse", "--delay", "0"])

        assert result.exit_code == 1
        assert "Failed to load recipes" in result.output

    def test_rejects_zero_pages(self, runner):
        """Page count must be positive."""
        result = runner.invoke(cli, ["browse", "--pages", "0"])

        assert result.exit_code != 0


class TestShowAndRandom:
    """Tests for show and random."""

    def test_show(self, runner, catalog, temp_store_file):
        """A recipe should be displayed with ingredients and steps."""
        result = runner.invoke(cli, ["show", "Pie"])

        assert result.exit_code == 0
        assert "RECIPE: Pie" in result.output
        assert "500g Beef" in result.output
        assert "1. Preheat oven." in result.output
        assert "[saved]" not in result.output

    def test_show_marks_saved(self, runner, catalog, temp_store_file):
        """Saved recipes should be flagged."""
        SavedRecipes(JsonFileStore()).add("Pie")

        result = runner.invoke(cli, ["show", "Pie"])

        assert "RECIPE: Pie [saved]" in result.output

    def test_show_not_found(self, runner, catalog, temp_store_file):
        """Unknown titles should exit with an error."""
        result = runner.invoke(cli, ["show", "Gone"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_random(self, runner, mock_httpx, meal_factory):
        """Distinct random recipes should be listed."""
        draws = iter(["1", "2", "2", "3"])
        mock_httpx.get(f"{API_BASE_URL}/random.php").mock(
            side_effect=lambda request: httpx.Response(
                200, json={"meals": [meal_factory(next(draws))]}
            )
        )

        result = runner.invoke(cli, ["random", "--count", "3", "--delay", "0"])

        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 3

    def test_random_all_failing(self, runner, mock_httpx):
        """No recipes at all is an error."""
        mock_httpx.get(f"{API_BASE_URL}/random.php").respond(status_code=500)

        result = runner.invoke(cli, ["random", "--count", "1", "--delay", "0"])

        assert result.exit_code == 1


class TestSavedCommands:
    """Tests for save, unsave, like and saved."""

    def test_save_and_unsave(self, runner, temp_store_file):
        """Titles should be added and removed."""
        result = runner.invoke(cli, ["save", "Pie"])
        assert "✓ Saved 'Pie'" in result.output

        result = runner.invoke(cli, ["save", "Pie"])
        assert "already saved" in result.output

        result = runner.invoke(cli, ["unsave", "Pie"])
        assert "✓ Removed 'Pie'" in result.output
        assert SavedRecipes(JsonFileStore()).titles() == []

    def test_like_toggles(self, runner, temp_store_file):
        """Liking twice should unlike."""
        assert "Liked 'Pie'" in runner.invoke(cli, ["like", "Pie"]).output
        assert "Unliked 'Pie'" in runner.invoke(cli, ["like", "Pie"]).output

    def test_saved_empty(self, runner, temp_store_file):
        """No saved recipes should be reported plainly."""
        result = runner.invoke(cli, ["saved"])

        assert result.exit_code == 0
        assert "No saved recipes." in result.output

    def test_saved_rehydrates(self, runner, catalog, temp_store_file):
        """Saved titles should be fetched and missing ones reported."""
        saved = SavedRecipes(JsonFileStore())
        for title in ["Pie", "Gone", "Kumpir"]:
            saved.add(title)

        result = runner.invoke(cli, ["saved", "--delay", "0"])

        assert result.exit_code == 0
        assert "Pie" in result.output
        assert "Kumpir" in result.output
        assert "Recipes: 2" in result.output
        assert "1 saved recipe(s) could not be loaded" in result.output

    def test_saved_json(self, runner, catalog, temp_store_file):
        """Saved recipes should serialize in saved order."""
        saved = SavedRecipes(JsonFileStore())
        for title in ["Pie", "Kumpir"]:
            saved.add(title)

        result = runner.invoke(cli, ["saved", "--delay", "0", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [r["title"] for r in payload["recipes"]] == ["Pie", "Kumpir"]
        assert payload["exhausted"] is True

    def test_saved_corrupt_store(self, runner, temp_store_file):
        """A broken store file should exit with an error."""
        temp_store_file.write_text("{oops", encoding="utf-8")

        result = runner.invoke(cli, ["save", "Pie"])

        assert result.exit_code == 1


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output
