"""Configuration and runtime settings for Meal Feed."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_int(name: str, default: int, minimum: int | None = None) -> int:
    try:
        value = int(os.getenv(name, default))
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_float(name: str, default: float, minimum: float | None = None) -> float:
    try:
        value = float(os.getenv(name, default))
    except ValueError:
        return default
    if minimum is not None and not value >= minimum:
        return default
    return value


# App directories
APP_NAME = "mealfeed"
CONFIG_DIR = Path(os.getenv("MEALFEED_HOME", Path.home() / f".{APP_NAME}"))
STORE_FILE = CONFIG_DIR / "store.json"

# API Configuration
API_BASE_URL = os.getenv("MEALFEED_API_BASE_URL", "https://www.themealdb.com/api/json/v1/1")
REQUEST_TIMEOUT = _env_float("MEALFEED_TIMEOUT", 10.0, minimum=0)

# Feed engine defaults
PAGE_SIZE = _env_int("MEALFEED_PAGE_SIZE", 10, minimum=1)
# seconds between detail fetches
HYDRATION_DELAY = _env_float("MEALFEED_HYDRATION_DELAY", 0.1, minimum=0)
MAX_PARTITIONS = _env_int("MEALFEED_MAX_PARTITIONS", 14, minimum=1)

LOG_LEVEL = os.getenv("MEALFEED_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class FeedSettings:
    """Tunables for a single feed controller.

    ``cap_rounds`` bounds the feed at ``cap_rounds * partition_count * page_size``
    items. ``None`` disables the cap so only the under-fill rule ends the feed.
    """

    page_size: int = PAGE_SIZE
    hydration_delay: float = HYDRATION_DELAY
    max_partitions: int = MAX_PARTITIONS
    cap_rounds: int | None = 1

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.hydration_delay < 0:
            raise ValueError("hydration_delay cannot be negative")
        if self.max_partitions < 1:
            raise ValueError("max_partitions must be at least 1")
        if self.cap_rounds is not None and self.cap_rounds < 1:
            raise ValueError("cap_rounds must be at least 1 or None")

    def item_cap(self, partition_count: int) -> int | None:
        """Maximum feed length for the given number of partitions, if capped."""
        if self.cap_rounds is None:
            return None
        return self.cap_rounds * partition_count * self.page_size


def configure_logging(level: str | int | None = None) -> None:
    """Set up root logging for command-line use."""
    level = level if level is not None else LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
