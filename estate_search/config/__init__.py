"""Configuration module for Estate Search."""

from .search_config import (
    SEARCH_CONFIG,
    PAGE_SIZE,
    AUTOMATIC_UPDATE_DELAY_MS,
    UNBOUNDED_PRICE,
    DEFAULT_FILTERS,
    DEFAULT_SORTER,
    SearchSettings,
    get_search_settings,
    load_search_settings,
)

__all__ = [
    'SEARCH_CONFIG',
    'PAGE_SIZE',
    'AUTOMATIC_UPDATE_DELAY_MS',
    'UNBOUNDED_PRICE',
    'DEFAULT_FILTERS',
    'DEFAULT_SORTER',
    'SearchSettings',
    'get_search_settings',
    'load_search_settings',
]
