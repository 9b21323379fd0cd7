"""Meal Feed - incremental, partitioned recipe feeds for TheMealDB."""

__version__ = "1.0.0"

from .accumulator import merge
from .api import CatalogAPI, CatalogAPIError, NotFound, UpstreamUnavailable
from .config import FeedSettings
from .cursors import PartitionCursorSet
from .feed import (
    ControllerState,
    FeedController,
    FeedState,
    all_recipes_feed,
    category_feed,
    random_picks,
    saved_feed,
)
from .hydrator import Hydrator
from .models import DetailRecord, Ingredient, Partition, Summary

__all__ = [
    "CatalogAPI",
    "CatalogAPIError",
    "NotFound",
    "UpstreamUnavailable",
    "FeedSettings",
    "FeedController",
    "FeedState",
    "ControllerState",
    "all_recipes_feed",
    "category_feed",
    "saved_feed",
    "random_picks",
    "Hydrator",
    "merge",
    "PartitionCursorSet",
    "Partition",
    "Summary",
    "Ingredient",
    "DetailRecord",
]
