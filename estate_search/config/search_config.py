"""Search configuration settings for Estate Search."""

from dataclasses import dataclass
import os


PAGE_SIZE = 8
AUTOMATIC_UPDATE_DELAY_MS = 100
UNBOUNDED_PRICE = 99999999

# Filters and sort active when a controller is created
DEFAULT_FILTERS = {
    "priceRange": [0, 500000],
    "zipCodes": [1030, 1140],
    "onlyWithGarden": False,
    "minGardenArea": None,
    "immowebCode": None,
    "freeText": None,
    "minLivingArea": 0,
    "minBedroomCount": 0,
}

DEFAULT_SORTER = {"field": "modificationDate", "order": "descend"}


@dataclass
class SearchSettings:
    """Main search configuration settings."""
    page_size: int = PAGE_SIZE
    debounce_delay_ms: int = AUTOMATIC_UPDATE_DELAY_MS
    unbounded_price: int = UNBOUNDED_PRICE
    endpoint_url: str = "http://localhost:4000/graphql"
    request_timeout_seconds: float = 30.0


def _read_environment() -> dict:
    """Read settings overrides from environment variables."""
    return {
        "page_size": int(os.getenv("ESTATE_SEARCH_PAGE_SIZE", str(PAGE_SIZE))),
        "debounce_delay_ms": int(os.getenv("ESTATE_SEARCH_DEBOUNCE_MS", str(AUTOMATIC_UPDATE_DELAY_MS))),
        "unbounded_price": UNBOUNDED_PRICE,
        "endpoint_url": os.getenv("ESTATE_SEARCH_ENDPOINT", SearchSettings.endpoint_url),
        "request_timeout_seconds": float(os.getenv("ESTATE_SEARCH_TIMEOUT_SECONDS", "30")),
    }


# Default search configuration
SEARCH_CONFIG = _read_environment()


def get_search_settings() -> SearchSettings:
    """Get search settings from configuration."""
    return SearchSettings(**SEARCH_CONFIG)


def load_search_settings() -> SearchSettings:
    """Build settings from the current environment.

    Unlike get_search_settings, this re-reads environment variables, so values
    loaded from a .env file after import are honored.
    """
    return SearchSettings(**_read_environment())
