"""
Property-based tests for query parameter construction.

These tests verify the normalization rules applied when filter values are
turned into estates query variables.
"""

import pytest
from hypothesis import given, settings, strategies as st

from estate_search.models import FilterSet, Pagination, SortDescriptor
from estate_search.query_builder import (
    OMITTED,
    QueryParameterBuilder,
    build_query_parameters,
)


SORTER = SortDescriptor(field='modificationDate', order='descend')
UNBOUNDED = 99999999

prices = st.integers(min_value=1, max_value=5000000)
areas = st.integers(min_value=-10, max_value=2000)
zip_codes = st.sets(st.integers(min_value=1000, max_value=9999), max_size=10)


def test_only_lower_price_bound_gets_unbounded_ceiling():
    """A price range with only a lower bound is capped by the unbounded sentinel."""
    variables = build_query_parameters({'priceRange': [100, None]}, SORTER).to_variables()

    assert variables['priceRange'] == [100, UNBOUNDED]


def test_missing_price_range_defaults_to_full_range():
    variables = build_query_parameters({}, SORTER).to_variables()

    assert variables['priceRange'] == [0, UNBOUNDED]


def test_only_upper_price_bound_starts_at_zero():
    variables = build_query_parameters({'priceRange': [None, 300000]}, SORTER).to_variables()

    assert variables['priceRange'] == [0, 300000]


@given(lower=prices, upper=prices)
@settings(max_examples=100)
def test_complete_price_range_passes_through(lower, upper):
    """
    **Feature: estate-search, Property 1: Complete price ranges are unchanged**

    For any price range with both bounds set, the variables carry the range as given.
    """
    variables = build_query_parameters({'priceRange': [lower, upper]}, SORTER).to_variables()

    assert variables['priceRange'] == [lower, upper]


def test_false_garden_flag_is_omitted():
    variables = build_query_parameters({'onlyWithGarden': False}, SORTER).to_variables()

    assert 'onlyWithGarden' not in variables


def test_garden_area_requires_garden_flag():
    """minGardenArea is dropped unless onlyWithGarden is set."""
    without_garden = build_query_parameters(
        {'minGardenArea': 50, 'onlyWithGarden': False}, SORTER
    ).to_variables()
    with_garden = build_query_parameters(
        {'minGardenArea': 50, 'onlyWithGarden': True}, SORTER
    ).to_variables()

    assert 'minGardenArea' not in without_garden
    assert with_garden['minGardenArea'] == 50
    assert with_garden['onlyWithGarden'] is True


@given(living_area=areas, bedrooms=areas, garden_area=areas)
@settings(max_examples=100)
def test_minimums_only_sent_when_positive(living_area, bedrooms, garden_area):
    """
    **Feature: estate-search, Property 2: Zero minimums mean no constraint**

    For any minimum value, the variable is present exactly when the value is positive.
    """
    variables = build_query_parameters(
        {
            'minLivingArea': living_area,
            'minBedroomCount': bedrooms,
            'minGardenArea': garden_area,
            'onlyWithGarden': True,
        },
        SORTER
    ).to_variables()

    assert ('minLivingArea' in variables) == (living_area > 0)
    assert ('minBedroomCount' in variables) == (bedrooms > 0)
    assert ('minGardenArea' in variables) == (garden_area > 0)


@given(codes=zip_codes)
@settings(max_examples=100)
def test_zip_codes_omitted_when_empty(codes):
    """
    **Feature: estate-search, Property 3: Empty zip code sets are never sent**

    For any set of zip codes, an empty set is omitted and a non-empty one is
    sent as a sorted list.
    """
    variables = build_query_parameters({'zipCodes': codes}, SORTER).to_variables()

    if codes:
        assert variables['zipCodes'] == sorted(codes)
    else:
        assert 'zipCodes' not in variables


@pytest.mark.parametrize('free_text, expected_present', [
    ('', False),
    (None, False),
    ('garden view', True),
])
def test_free_text_empty_string_is_absent(free_text, expected_present):
    variables = build_query_parameters({'freeText': free_text}, SORTER).to_variables()

    assert ('freeText' in variables) == expected_present


@pytest.mark.parametrize('code, expected', [
    (0, None),
    (None, None),
    (9876543, 9876543),
])
def test_falsy_immoweb_code_is_omitted(code, expected):
    variables = build_query_parameters({'immowebCode': code}, SORTER).to_variables()

    assert variables.get('immowebCode') == expected


def test_still_available_flag():
    assert 'onlyStillAvailable' not in build_query_parameters(
        {'onlyStillAvailable': False}, SORTER
    ).to_variables()
    assert build_query_parameters(
        {'onlyStillAvailable': True}, SORTER
    ).to_variables()['onlyStillAvailable'] is True


def test_order_by_and_window():
    """orderBy is always sent; limit is the page size and offset the loaded count."""
    builder = QueryParameterBuilder(page_size=8)
    sorter = SortDescriptor(field='price', order='ascend')

    fresh = builder.build({}, sorter)
    more = builder.build({}, sorter, builder.next_page(16))

    assert fresh.to_variables()['orderBy'] == {'field': 'price', 'order': 'ascend'}
    assert (fresh.limit, fresh.offset) == (8, 0)
    assert (more.limit, more.offset) == (8, 16)


def test_empty_filter_set_is_valid():
    variables = build_query_parameters(FilterSet(), SORTER).to_variables()

    assert set(variables) == {'priceRange', 'orderBy', 'limit', 'offset'}


def test_parameters_are_immutable():
    parameters = build_query_parameters({'freeText': 'loft'}, SORTER)
    moved = parameters.with_window(Pagination(limit=8, offset=24))

    assert parameters.offset == 0
    assert moved.offset == 24
    assert moved.free_text == 'loft'
    with pytest.raises(AttributeError):
        parameters.offset = 5


def test_omitted_marker_is_falsy_singleton():
    assert not OMITTED
    assert type(OMITTED)() is OMITTED
    assert build_query_parameters({}, SORTER).zip_codes is OMITTED
