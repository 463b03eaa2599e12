"""Estate Search - debounced, stateful search over paginated estate listings."""

from estate_search.controller import SearchController
from estate_search.models import FilterSet, SortDescriptor, SortOrder, ResultPage, ListingRecord
from estate_search.status import SearchResultStatus

__all__ = [
    "SearchController",
    "FilterSet",
    "SortDescriptor",
    "SortOrder",
    "ResultPage",
    "ListingRecord",
    "SearchResultStatus",
]
