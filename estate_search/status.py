"""
Search result status resolution.

Combines the overlapping signals of a search (request in flight, failure,
result count, search history) into the single status the UI renders.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple


class SearchResultStatus(str, Enum):
    """Discrete UI-facing state of the search."""
    NO_SEARCH = 'NO_SEARCH'
    NO_RESULTS = 'NO_RESULTS'
    ERROR = 'ERROR'
    LOADING = 'LOADING'
    READY = 'READY'


@dataclass(frozen=True)
class StatusSignals:
    """Inputs of status resolution.

    Attributes:
        is_loading: A replace fetch is in flight ("load more" excluded)
        has_error: The last fetch failed
        result_count: Total number of matches, None when no data is held
        has_searched_before: A search has been submitted at least once
    """
    is_loading: bool
    has_error: bool
    result_count: Optional[int]
    has_searched_before: bool


# Evaluated top to bottom, first match wins
STATUS_RULES: Tuple[Tuple[SearchResultStatus, Callable[[StatusSignals], bool]], ...] = (
    (SearchResultStatus.LOADING, lambda s: s.is_loading),
    (SearchResultStatus.ERROR, lambda s: s.has_error),
    (SearchResultStatus.READY, lambda s: bool(s.result_count)),
    (SearchResultStatus.NO_SEARCH, lambda s: not s.has_searched_before),
)

FALLBACK_STATUS = SearchResultStatus.NO_RESULTS


def resolve_status(
    is_loading: bool,
    has_error: bool,
    result_count: Optional[int],
    has_searched_before: bool
) -> SearchResultStatus:
    """Resolve the status shown to the user.

    Args:
        is_loading: A replace fetch is in flight
        has_error: The last fetch failed
        result_count: Total matches of the held data, or None
        has_searched_before: Whether any search was ever submitted

    Returns:
        The first status in STATUS_RULES whose condition holds, NO_RESULTS otherwise
    """
    signals = StatusSignals(
        is_loading=is_loading,
        has_error=has_error,
        result_count=result_count,
        has_searched_before=has_searched_before,
    )
    for status, applies in STATUS_RULES:
        if applies(signals):
            return status
    return FALLBACK_STATUS
