"""
Filter store implementation for estate searches.

This module holds the current filter values and the active sort descriptor,
and notifies subscribers whenever the filters actually change.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from estate_search.models import FilterSet, SortDescriptor


logger = logging.getLogger(__name__)

FiltersChangedListener = Callable[[FilterSet], None]


class FilterStore:
    """State container for search filters and sort.

    Every mutation replaces the held FilterSet with a new value. Mutations
    that leave the filters deep-equal to the previous value are no-ops and do
    not notify subscribers.

    Attributes:
        filters: Current FilterSet
        sorter: Current SortDescriptor
    """

    def __init__(
        self,
        filters: Union[FilterSet, Mapping, None] = None,
        sorter: Union[SortDescriptor, Mapping, None] = None
    ):
        self._filters = FilterSet.coerce(filters)
        self._sorter = SortDescriptor.coerce(sorter) if sorter is not None else None
        self._listeners: List[FiltersChangedListener] = []

    @property
    def filters(self) -> FilterSet:
        return self._filters

    @property
    def sorter(self) -> Optional[SortDescriptor]:
        return self._sorter

    def subscribe(self, listener: FiltersChangedListener) -> Callable[[], None]:
        """Register a callback invoked with the new FilterSet after each change.

        Args:
            listener: Callable receiving the updated FilterSet

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_filter(self, name: str, value: Any) -> bool:
        """Replace the value of one filter.

        Args:
            name: Filter name
            value: New raw value

        Returns:
            True if the filters changed, False if the value was deep-equal to
            the current one

        Raises:
            UnknownFilterError: If name is not a recognized filter
        """
        updated = self._filters.with_filter(name, value)
        if updated == self._filters:
            logger.debug(f"Filter {name} unchanged, ignoring")
            return False
        return self._replace(updated)

    def clear_filters(self) -> bool:
        """Remove every constraint.

        The store becomes empty rather than returning to its initial values.

        Returns:
            True if the filters changed, False if they were already empty
        """
        if not self._filters:
            return False
        return self._replace(self._filters.cleared())

    def replace_all(self, filters: Union[FilterSet, Mapping]) -> bool:
        """Replace the whole FilterSet, as done on explicit submission."""
        updated = FilterSet.coerce(filters)
        if updated == self._filters:
            return False
        return self._replace(updated)

    def set_sorter(self, sorter: Union[SortDescriptor, Mapping]) -> bool:
        """Replace the active sort descriptor.

        Sort changes are not filter changes: subscribers are not notified.

        Returns:
            True if the sort descriptor changed
        """
        sorter = SortDescriptor.coerce(sorter)
        changed = sorter != self._sorter
        self._sorter = sorter
        return changed

    def reset(
        self,
        filters: Union[FilterSet, Mapping, None],
        sorter: Union[SortDescriptor, Mapping, None]
    ) -> None:
        """Restore filters and sort without notifying subscribers."""
        self._filters = FilterSet.coerce(filters)
        self._sorter = SortDescriptor.coerce(sorter) if sorter is not None else None

    def _replace(self, filters: FilterSet) -> bool:
        self._filters = filters
        for listener in list(self._listeners):
            listener(filters)
        return True
