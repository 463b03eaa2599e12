"""
Data models for Estate Search.

This module defines the core data structures shared by the filter store, the
query parameter builder and the search controller.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from estate_search.error_handling import UnknownFilterError


FILTER_NAMES = (
    'priceRange',
    'zipCodes',
    'onlyWithGarden',
    'minGardenArea',
    'immowebCode',
    'freeText',
    'minLivingArea',
    'minBedroomCount',
    'onlyStillAvailable',
)


def _normalize_value(name: str, value: Any) -> Any:
    """Freeze a raw UI value so equality between snapshots is deep equality."""
    if value is None:
        return None
    if name == 'zipCodes':
        return frozenset(int(zip_code) for zip_code in value)
    if name == 'priceRange':
        return tuple(value)
    return value


class FilterSet(Mapping):
    """Immutable snapshot of the user's search constraints.

    Keys are the filter names listed in FILTER_NAMES. A key that is absent and
    a key whose value is None mean the same thing (no constraint), so None
    values are never stored. Updates go through the ``with_*`` methods, which
    return a new FilterSet and leave the original untouched.
    """

    __slots__ = ('_values',)

    def __init__(self, values: Optional[Mapping] = None):
        normalized = {}
        for name, value in (values or {}).items():
            _check_name(name)
            value = _normalize_value(name, value)
            if value is not None:
                normalized[name] = value
        self._values: Dict[str, Any] = normalized

    @classmethod
    def coerce(cls, value: Union['FilterSet', Mapping, None]) -> 'FilterSet':
        """Return ``value`` as a FilterSet, wrapping plain mappings."""
        if isinstance(value, FilterSet):
            return value
        return cls(value)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FilterSet({self._values!r})"

    def with_filter(self, name: str, value: Any) -> 'FilterSet':
        """Return a copy with one filter replaced.

        Args:
            name: Filter name (must be one of FILTER_NAMES)
            value: New raw value; None removes the constraint

        Returns:
            New FilterSet instance

        Raises:
            UnknownFilterError: If name is not a recognized filter
        """
        updated = dict(self._values)
        updated[name] = value
        return FilterSet(updated)

    def with_filters(self, values: Mapping) -> 'FilterSet':
        """Return a copy with several filters replaced at once."""
        updated = dict(self._values)
        updated.update(values)
        return FilterSet(updated)

    def cleared(self) -> 'FilterSet':
        """Return an empty FilterSet (all constraints removed)."""
        return FilterSet()

    def to_dict(self) -> dict:
        """Convert to a plain dictionary with JSON-friendly values.

        Returns:
            Dictionary with zip codes as a sorted list and the price range as a list
        """
        data = {}
        for name, value in self._values.items():
            if isinstance(value, frozenset):
                value = sorted(value)
            elif isinstance(value, tuple):
                value = list(value)
            data[name] = value
        return data


def _check_name(name: str) -> None:
    if name not in FILTER_NAMES:
        raise UnknownFilterError(name)


class SortOrder(str, Enum):
    """Direction of the active sort."""
    ASCEND = 'ascend'
    DESCEND = 'descend'


@dataclass(frozen=True)
class SortDescriptor:
    """Field and direction describing result ordering.

    Attributes:
        field: Listing field to order by (e.g. "modificationDate", "price")
        order: Sort direction
    """
    field: str
    order: SortOrder = SortOrder.DESCEND

    def __post_init__(self):
        # Accept the raw "ascend"/"descend" strings coming from the UI
        object.__setattr__(self, 'order', SortOrder(self.order))

    @classmethod
    def coerce(cls, value: Union['SortDescriptor', Mapping]) -> 'SortDescriptor':
        """Return ``value`` as a SortDescriptor, accepting ``{field, order}`` mappings."""
        if isinstance(value, SortDescriptor):
            return value
        return cls(field=value['field'], order=value.get('order', SortOrder.DESCEND))

    def to_dict(self) -> dict:
        return {'field': self.field, 'order': self.order.value}


@dataclass(frozen=True)
class Pagination:
    """Window of results requested from the query service.

    Attributes:
        limit: Maximum number of records in the page
        offset: Number of records to skip
    """
    limit: int
    offset: int = 0

    def to_dict(self) -> dict:
        return {'limit': self.limit, 'offset': self.offset}


class PriceHistoryEntry(BaseModel):
    """One price observation for a listing."""
    model_config = ConfigDict(populate_by_name=True)

    price: Optional[int] = None
    date: Optional[datetime] = None


class ListingRecord(BaseModel):
    """Listing record as returned by the estates query.

    Only the fields the application displays are declared; anything else the
    service returns is kept as extra data. Apart from the identifier, every
    field is display-only and tolerates null or loosely typed values.
    """
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    immoweb_code: int = Field(alias='immowebCode')
    price: Optional[int] = None
    zip_code: Optional[int] = Field(default=None, alias='zipCode')
    locality: Optional[str] = None
    street: Optional[str] = None
    street_number: Optional[str] = Field(default=None, alias='streetNumber')
    geolocation: Optional[Any] = None
    images: List[str] = Field(default_factory=list)
    modification_date: Optional[datetime] = Field(default=None, alias='modificationDate')
    has_garden: Optional[bool] = Field(default=None, alias='hasGarden')
    garden_area: Optional[int] = Field(default=None, alias='gardenArea')
    living_area: Optional[int] = Field(default=None, alias='livingArea')
    bedroom_count: Optional[int] = Field(default=None, alias='bedroomCount')
    is_sold: Optional[bool] = Field(default=None, alias='isSold')
    price_history: List[PriceHistoryEntry] = Field(default_factory=list, alias='priceHistory')

    @field_validator('images', 'price_history', mode='before')
    @classmethod
    def _null_list_as_empty(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value

    @field_validator('street_number', mode='before')
    @classmethod
    def _street_number_as_text(cls, value):
        # Some listings carry the number as an integer
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ResultPage(BaseModel):
    """Ordered listing records plus the total number of matches."""
    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(alias='totalCount')
    page: List[ListingRecord] = Field(default_factory=list)

    def appended(self, more: 'ResultPage') -> 'ResultPage':
        """Return a new page with ``more`` appended after the current records.

        The total count is taken from ``more`` since it is the freshest answer
        from the service.
        """
        return ResultPage(total_count=more.total_count, page=[*self.page, *more.page])
