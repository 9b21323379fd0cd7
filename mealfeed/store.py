"""Key-value storage for saved and liked recipes.

The feed engine never reads this store. Views (here, the CLI) read the saved
titles from it and hand them to a saved-recipes feed.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from . import config


class StoreError(Exception):
    """Exception raised for store read/write errors."""

    pass


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class JsonFileStore:
    """A JSON object on disk, rewritten on every ``set``."""

    def __init__(self, path: Path | None = None):
        self.path = path or config.STORE_FILE

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to load {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StoreError(f"Failed to save {self.path}: {e}") from e


class SavedRecipes:
    """Title lists kept under a single store key (``savedRecipes``, ``likedRecipes``)."""

    SAVED_KEY = "savedRecipes"
    LIKED_KEY = "likedRecipes"

    def __init__(self, store: KeyValueStore, key: str = SAVED_KEY):
        self.store = store
        self.key = key

    def titles(self) -> list[str]:
        value = self.store.get(self.key, [])
        if not isinstance(value, list):
            raise StoreError(f"'{self.key}' is not a list")
        return [str(title) for title in value]

    def contains(self, title: str) -> bool:
        return title in self.titles()

    def add(self, title: str) -> bool:
        """Add a title; returns False if it was already present."""
        titles = self.titles()
        if title in titles:
            return False
        titles.append(title)
        self.store.set(self.key, titles)
        return True

    def remove(self, title: str) -> bool:
        """Remove a title; returns False if it was not present."""
        titles = self.titles()
        if title not in titles:
            return False
        titles.remove(title)
        self.store.set(self.key, titles)
        return True

    def toggle(self, title: str) -> bool:
        """Flip membership; returns the new state."""
        if self.remove(title):
            return False
        self.add(title)
        return True
