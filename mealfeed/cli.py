"""CLI entry point for Meal Feed."""

import asyncio
import json

import click

from . import __version__
from .api import CatalogAPI, CatalogAPIError
from .config import HYDRATION_DELAY, FeedSettings, configure_logging
from .feed import (
    ControllerState,
    FeedState,
    all_recipes_feed,
    category_feed,
    random_picks,
    saved_feed,
)
from .models import DetailRecord
from .store import JsonFileStore, SavedRecipes, StoreError


def get_saved(key: str = SavedRecipes.SAVED_KEY) -> SavedRecipes:
    """Saved/liked title list backed by the default store file."""
    return SavedRecipes(JsonFileStore(), key=key)


def display_records(records: list[DetailRecord] | tuple[DetailRecord, ...]) -> None:
    """Display recipes one per line."""
    for i, record in enumerate(records, 1):
        origin = ", ".join(part for part in (record.category, record.area) if part)
        origin_str = f" ({origin})" if origin else ""
        click.echo(
            f"{i:3}. {record.title}{origin_str} - {record.cooking_time} min, ★ {record.rating}"
        )


def display_feed(state: FeedState) -> None:
    """Display a feed snapshot and its status."""
    if state.items:
        display_records(state.items)
    else:
        click.echo("No recipes loaded.")

    click.echo()
    click.echo("-" * 60)
    click.echo(f"Recipes: {len(state.items)} | Page: {state.current_page_index}")
    if state.exhausted:
        click.echo("End of feed.")
    click.echo("-" * 60)


def display_json(state: FeedState) -> None:
    """Print a feed snapshot as JSON."""
    payload = {
        "page": state.current_page_index,
        "exhausted": state.exhausted,
        "recipes": [record.to_dict() for record in state.items],
    }
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def display_recipe(record: DetailRecord, saved: bool = False) -> None:
    """Display a single recipe in full."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"RECIPE: {record.title}{' [saved]' if saved else ''}")
    click.echo("=" * 60)

    if record.category:
        click.echo(f"Category: {record.category}")
    if record.area:
        click.echo(f"Cuisine: {record.area}")
    click.echo(f"Cooking time: {record.cooking_time} min | Rating: {record.rating}")
    if record.tags:
        click.echo(f"Tags: {', '.join(record.tags)}")

    click.echo("\nIngredients:")
    for ing in record.ingredients:
        click.echo(f"  - {ing}")

    click.echo("\nInstructions:")
    for i, step in enumerate(record.steps, 1):
        click.echo(f"  {i}. {step}")

    if record.youtube_url:
        click.echo(f"\nVideo: {record.youtube_url}")
    if record.source_url:
        click.echo(f"Source: {record.source_url}")
    click.echo()


def fail_on_error(state: FeedState) -> None:
    if state.controller_state is ControllerState.FAILED:
        click.echo(f"✗ Failed to load recipes: {state.failure}", err=True)
        raise SystemExit(1)


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="mealfeed")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and page loads")
def cli(verbose: bool):
    """Browse TheMealDB recipes page by page."""
    configure_logging("DEBUG" if verbose else None)


# ============================================================================
# Browsing Commands
# ============================================================================


@cli.command()
def categories():
    """List recipe categories."""

    async def _list():
        async with CatalogAPI() as api:
            return await api.list_partitions()

    try:
        partitions = asyncio.run(_list())
    except CatalogAPIError as e:
        click.echo(f"✗ Failed to load categories: {e}", err=True)
        raise SystemExit(1) from None

    for partition in partitions:
        click.echo(partition.label)


@cli.command()
@click.option("--category", "-c", help="Only browse this category")
@click.option("--pages", "-n", type=click.IntRange(min=1), default=1, help="Pages to load")
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=HYDRATION_DELAY,
    help="Seconds between detail requests",
)
@click.option("--json", "as_json", is_flag=True, help="Print recipes as JSON")
def browse(category: str | None, pages: int, delay: float, as_json: bool):
    """Load recipes page by page across categories."""
    settings = FeedSettings(hydration_delay=delay)

    async def _browse():
        async with CatalogAPI() as api:
            if category:
                feed = category_feed(api, category, settings)
            else:
                feed = all_recipes_feed(api, settings)
            return await feed.load_until(pages)

    state = asyncio.run(_browse())
    fail_on_error(state)
    if as_json:
        display_json(state)
    else:
        display_feed(state)


@cli.command()
@click.argument("title")
def show(title: str):
    """Show a recipe by title."""

    async def _show():
        async with CatalogAPI() as api:
            return await api.lookup_by_title(title)

    try:
        record = asyncio.run(_show())
        saved = get_saved().contains(record.title)
    except (CatalogAPIError, StoreError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    display_recipe(record, saved=saved)


@cli.command()
@click.option("--count", "-n", type=click.IntRange(min=1), default=8, help="Number of recipes")
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=HYDRATION_DELAY,
    help="Seconds between requests",
)
def random(count: int, delay: float):
    """Show a handful of distinct random recipes."""

    async def _random():
        async with CatalogAPI() as api:
            return await random_picks(api, count=count, delay=delay)

    picks = asyncio.run(_random())
    if not picks:
        click.echo("✗ No recipes could be fetched.", err=True)
        raise SystemExit(1)
    display_records(picks)


# ============================================================================
# Saved Recipe Commands
# ============================================================================


@cli.command()
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=HYDRATION_DELAY,
    help="Seconds between detail requests",
)
@click.option("--liked", is_flag=True, help="Show liked instead of saved recipes")
@click.option("--json", "as_json", is_flag=True, help="Print recipes as JSON")
def saved(delay: float, liked: bool, as_json: bool):
    """Show saved recipes with full details."""
    key = SavedRecipes.LIKED_KEY if liked else SavedRecipes.SAVED_KEY
    try:
        titles = get_saved(key).titles()
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if not titles:
        click.echo("No liked recipes." if liked else "No saved recipes.")
        return

    settings = FeedSettings(hydration_delay=delay)
    # one extra page so a list that fills its last page still sees the empty one
    pages = len(titles) // settings.page_size + 1

    async def _rehydrate():
        async with CatalogAPI() as api:
            return await saved_feed(api, titles, settings=settings).load_until(pages)

    state = asyncio.run(_rehydrate())
    fail_on_error(state)
    if as_json:
        display_json(state)
        return
    display_feed(state)

    missing = len(titles) - len(state.items)
    if missing > 0:
        click.echo(f"⚠️  {missing} saved recipe(s) could not be loaded")


@cli.command()
@click.argument("title")
def save(title: str):
    """Save a recipe title."""
    try:
        added = get_saved().add(title)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None
    click.echo(f"✓ Saved '{title}'" if added else f"'{title}' is already saved")


@cli.command()
@click.argument("title")
def unsave(title: str):
    """Remove a saved recipe title."""
    try:
        removed = get_saved().remove(title)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None
    click.echo(f"✓ Removed '{title}'" if removed else f"'{title}' was not saved")


@cli.command()
@click.argument("title")
def like(title: str):
    """Toggle the liked flag on a recipe title."""
    try:
        liked = get_saved(SavedRecipes.LIKED_KEY).toggle(title)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None
    click.echo(f"♥ Liked '{title}'" if liked else f"Unliked '{title}'")


if __name__ == "__main__":
    cli()
