"""
Filtering module for estate searches.

This module provides the store holding the user's current search filters and
sort order.
"""

from .filter_store import FilterStore

__all__ = ['FilterStore']
