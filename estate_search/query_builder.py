"""
Query parameter construction for estate searches.

This module turns the raw values held by the filter store into the normalized
variables sent to the estates query. An unset filter means "no constraint",
so false flags, zero minimums and empty collections are left out of the
variables entirely instead of being sent as explicit values.
"""

from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, Tuple, Union

from estate_search.config.search_config import PAGE_SIZE, UNBOUNDED_PRICE
from estate_search.models import FilterSet, Pagination, SortDescriptor


class _Omitted:
    """Marker for a query variable that must not be sent."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'OMITTED'


OMITTED = _Omitted()

# Python field name -> variable name in the estates query
_VARIABLE_NAMES = {
    'price_range': 'priceRange',
    'zip_codes': 'zipCodes',
    'free_text': 'freeText',
    'only_with_garden': 'onlyWithGarden',
    'min_garden_area': 'minGardenArea',
    'min_living_area': 'minLivingArea',
    'min_bedroom_count': 'minBedroomCount',
    'only_still_available': 'onlyStillAvailable',
    'immoweb_code': 'immowebCode',
    'order_by': 'orderBy',
    'limit': 'limit',
    'offset': 'offset',
}


@dataclass(frozen=True)
class QueryParameters:
    """Normalized, transport-ready variables for one estates query.

    Optional fields hold either a value or OMITTED. Instances are never
    mutated; use ``with_window`` to derive the parameters of another page.
    """
    price_range: Tuple[int, int]
    order_by: SortDescriptor
    limit: int
    offset: int = 0
    zip_codes: Union[Tuple[int, ...], _Omitted] = OMITTED
    free_text: Union[str, _Omitted] = OMITTED
    only_with_garden: Union[bool, _Omitted] = OMITTED
    min_garden_area: Union[int, _Omitted] = OMITTED
    min_living_area: Union[int, _Omitted] = OMITTED
    min_bedroom_count: Union[int, _Omitted] = OMITTED
    only_still_available: Union[bool, _Omitted] = OMITTED
    immoweb_code: Union[int, _Omitted] = OMITTED

    def with_window(self, pagination: Pagination) -> 'QueryParameters':
        """Return a copy targeting another page of the same search."""
        return replace(self, limit=pagination.limit, offset=pagination.offset)

    def to_variables(self) -> dict:
        """Serialize to the variables dictionary of the estates query.

        Returns:
            Dictionary keyed by query variable names; OMITTED fields are absent
        """
        variables = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is OMITTED:
                continue
            if isinstance(value, SortDescriptor):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = list(value)
            variables[_VARIABLE_NAMES[item.name]] = value
        return variables


class QueryParameterBuilder:
    """Builds QueryParameters from filter store state.

    Attributes:
        page_size: Number of records requested per page
        unbounded_price: Upper price bound used when none is given
    """

    def __init__(self, page_size: int = PAGE_SIZE, unbounded_price: int = UNBOUNDED_PRICE):
        self.page_size = page_size
        self.unbounded_price = unbounded_price

    def build(
        self,
        filters: Union[FilterSet, Mapping, None],
        sort: Union[SortDescriptor, Mapping],
        pagination: Optional[Pagination] = None
    ) -> QueryParameters:
        """Construct query parameters for one page of results.

        Args:
            filters: Current filter values (FilterSet or raw mapping)
            sort: Active sort descriptor
            pagination: Page window, defaults to the first page

        Returns:
            New QueryParameters instance
        """
        filters = FilterSet.coerce(filters)
        pagination = pagination or self.first_page()

        only_with_garden = bool(filters.get('onlyWithGarden'))
        zip_codes = filters.get('zipCodes')
        free_text = filters.get('freeText')
        min_garden_area = filters.get('minGardenArea')

        return QueryParameters(
            price_range=self._normalize_price_range(filters.get('priceRange')),
            zip_codes=tuple(sorted(zip_codes)) if zip_codes else OMITTED,
            free_text=free_text if free_text else OMITTED,
            only_with_garden=True if only_with_garden else OMITTED,
            min_garden_area=(
                min_garden_area
                if only_with_garden and _is_positive(min_garden_area)
                else OMITTED
            ),
            min_living_area=_positive_or_omitted(filters.get('minLivingArea')),
            min_bedroom_count=_positive_or_omitted(filters.get('minBedroomCount')),
            only_still_available=True if filters.get('onlyStillAvailable') else OMITTED,
            immoweb_code=filters.get('immowebCode') or OMITTED,
            order_by=SortDescriptor.coerce(sort),
            limit=pagination.limit,
            offset=pagination.offset,
        )

    def first_page(self) -> Pagination:
        return Pagination(limit=self.page_size, offset=0)

    def next_page(self, loaded_count: int) -> Pagination:
        """Window for "load more": the next page after ``loaded_count`` records."""
        return Pagination(limit=self.page_size, offset=loaded_count)

    def _normalize_price_range(self, price_range) -> Tuple[int, int]:
        # An upper bound of 0 counts as unset, same as a missing one
        lower = price_range[0] if price_range and len(price_range) > 0 else None
        upper = price_range[1] if price_range and len(price_range) > 1 else None

        if upper:
            return (lower or 0, upper)
        if lower:
            return (lower, self.unbounded_price)
        return (0, self.unbounded_price)


def _is_positive(value) -> bool:
    return value is not None and value > 0


def _positive_or_omitted(value):
    return value if _is_positive(value) else OMITTED


def build_query_parameters(
    filters: Union[FilterSet, Mapping, None],
    sort: Union[SortDescriptor, Mapping],
    pagination: Optional[Pagination] = None
) -> QueryParameters:
    """Build parameters with the default page size and price ceiling."""
    return QueryParameterBuilder().build(filters, sort, pagination)
