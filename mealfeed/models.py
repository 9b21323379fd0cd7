"""Catalog data models and parsing of TheMealDB payloads."""

import struct
from dataclasses import dataclass, field
from typing import Any

# TheMealDB exposes ingredients as strIngredient1..20 / strMeasure1..20
MAX_INGREDIENT_SLOTS = 20

COOKING_TIMES = [15, 20, 25, 30, 35, 40, 45, 50, 55, 60]
NO_INSTRUCTIONS = "No instructions available."


def _text(data: dict[str, Any], key: str) -> str:
    """Read a string field, treating null and missing values as empty."""
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def title_hash(title: str) -> int:
    """Deterministic signed 32-bit hash of a title.

    Same result as ``hash = (hash << 5) - hash + charCode`` evaluated with
    32-bit integer overflow over UTF-16 code units, so derived values stay
    stable across sessions. Characters outside the BMP count as two units.
    """
    encoded = title.encode("utf-16-le", "surrogatepass")
    h = 0
    for (unit,) in struct.iter_unpack("<H", encoded):
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def stable_cooking_time(title: str) -> int:
    """Cooking time in minutes derived from the title."""
    return COOKING_TIMES[abs(title_hash(title)) % len(COOKING_TIMES)]


def stable_rating(title: str) -> float:
    """Rating between 3.5 and 4.9 derived from the title."""
    return round(3.5 + (abs(title_hash(title)) % 15) / 10, 1)


@dataclass(frozen=True)
class Partition:
    """An upstream subdivision of the catalog (a category)."""

    id: str
    label: str
    description: str = ""
    thumbnail_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Partition":
        # filter.php filters by category name, so the name doubles as id
        name = _text(data, "strCategory")
        return cls(
            id=name,
            label=name,
            description=_text(data, "strCategoryDescription"),
            thumbnail_url=_text(data, "strCategoryThumb"),
        )


@dataclass(frozen=True)
class Summary:
    """Minimal reference to a catalog item before hydration."""

    item_id: str
    partition_id: str
    title: str = ""
    thumbnail_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any], partition_id: str) -> "Summary":
        return cls(
            item_id=_text(data, "idMeal"),
            partition_id=partition_id,
            title=_text(data, "strMeal"),
            thumbnail_url=_text(data, "strMealThumb"),
        )


@dataclass(frozen=True)
class Ingredient:
    """One ingredient line of a recipe."""

    name: str
    measure: str = ""

    def __str__(self) -> str:
        if self.measure:
            return f"{self.measure} {self.name}"
        return self.name


@dataclass(frozen=True)
class DetailRecord:
    """A fully hydrated recipe.

    ``partition_id`` and ``sequence_index`` are assigned by the feed engine;
    records are otherwise immutable once hydrated.
    """

    item_id: str
    title: str
    category: str = ""
    area: str = ""
    instructions: str = ""
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)
    image_url: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
    youtube_url: str = ""
    source_url: str = ""
    partition_id: str = ""
    sequence_index: int = -1

    @classmethod
    def from_api(cls, data: dict[str, Any], partition_id: str | None = None) -> "DetailRecord":
        """Build a record from a lookup/search payload entry.

        Args:
            data: One entry of the ``meals`` array
            partition_id: Provenance; defaults to the record's own category

        Returns:
            DetailRecord with missing fields replaced by empty values
        """
        ingredients = []
        for i in range(1, MAX_INGREDIENT_SLOTS + 1):
            name = _text(data, f"strIngredient{i}")
            if name:
                ingredients.append(Ingredient(name=name, measure=_text(data, f"strMeasure{i}")))

        tags = tuple(tag.strip() for tag in _text(data, "strTags").split(",") if tag.strip())
        category = _text(data, "strCategory")

        return cls(
            item_id=_text(data, "idMeal"),
            title=_text(data, "strMeal"),
            category=category,
            area=_text(data, "strArea"),
            instructions=_text(data, "strInstructions"),
            ingredients=tuple(ingredients),
            image_url=_text(data, "strMealThumb"),
            tags=tags,
            youtube_url=_text(data, "strYoutube"),
            source_url=_text(data, "strSource"),
            partition_id=partition_id if partition_id is not None else category,
        )

    @property
    def steps(self) -> list[str]:
        """Instructions split into non-empty lines."""
        steps = [line.strip() for line in self.instructions.splitlines() if line.strip()]
        return steps or [NO_INSTRUCTIONS]

    @property
    def cooking_time(self) -> int:
        return stable_cooking_time(self.title)

    @property
    def rating(self) -> float:
        return stable_rating(self.title)

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for serialization."""
        return {
            "item_id": self.item_id,
            "title": self.title,
            "category": self.category,
            "area": self.area,
            "instructions": self.instructions,
            "ingredients": [{"name": ing.name, "measure": ing.measure} for ing in self.ingredients],
            "image_url": self.image_url,
            "tags": list(self.tags),
            "youtube_url": self.youtube_url,
            "source_url": self.source_url,
            "partition_id": self.partition_id,
            "sequence_index": self.sequence_index,
        }
