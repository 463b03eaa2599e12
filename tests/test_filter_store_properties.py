"""
Property-based tests for the filter store.

These tests verify that only real changes reach subscribers.
"""

from hypothesis import given, settings, strategies as st

from estate_search.filtering import FilterStore
from estate_search.models import FilterSet, SortDescriptor


filter_values = st.one_of(
    st.tuples(st.just('minLivingArea'), st.integers(min_value=0, max_value=500)),
    st.tuples(st.just('minBedroomCount'), st.integers(min_value=0, max_value=10)),
    st.tuples(st.just('onlyWithGarden'), st.booleans()),
    st.tuples(st.just('freeText'), st.one_of(st.none(), st.text(max_size=20))),
    st.tuples(
        st.just('zipCodes'),
        st.lists(st.integers(min_value=1000, max_value=9999), max_size=5)
    ),
)


def _recording_store(filters=None):
    store = FilterStore(filters, {'field': 'price', 'order': 'ascend'})
    events = []
    store.subscribe(events.append)
    return store, events


@given(edit=filter_values)
@settings(max_examples=100)
def test_setting_same_value_twice_emits_once(edit):
    """
    **Feature: estate-search, Property 5: Equal edits are no-ops**

    For any filter edit, applying it a second time changes nothing and emits
    no event.
    """
    name, value = edit
    store, events = _recording_store()

    first = store.set_filter(name, value)
    second = store.set_filter(name, value)

    assert second is False
    assert len(events) == (1 if first else 0)


def test_reselecting_same_zip_codes_in_other_order_is_noop():
    store, events = _recording_store({'zipCodes': [1030, 1140]})

    assert store.set_filter('zipCodes', [1140, 1030]) is False
    assert events == []


def test_change_emits_new_filter_set():
    store, events = _recording_store()

    assert store.set_filter('minBedroomCount', 2) is True

    assert events == [FilterSet({'minBedroomCount': 2})]
    assert store.filters['minBedroomCount'] == 2


def test_clear_filters_is_idempotent():
    store, events = _recording_store({'onlyWithGarden': True, 'minGardenArea': 20})

    assert store.clear_filters() is True
    assert store.clear_filters() is False

    assert len(events) == 1
    assert store.filters == FilterSet()


def test_replace_all():
    store, events = _recording_store({'freeText': 'loft'})

    assert store.replace_all({'freeText': 'loft'}) is False
    assert store.replace_all({'minLivingArea': 90}) is True

    assert dict(store.filters) == {'minLivingArea': 90}
    assert len(events) == 1


def test_sorter_changes_do_not_emit_filter_events():
    store, events = _recording_store()

    assert store.set_sorter({'field': 'price', 'order': 'descend'}) is True
    assert store.set_sorter(SortDescriptor('price', 'descend')) is False

    assert store.sorter == SortDescriptor('price', 'descend')
    assert events == []


def test_reset_is_silent_and_unsubscribe_works():
    store, events = _recording_store()
    received = []
    unsubscribe = store.subscribe(received.append)

    store.reset({'minLivingArea': 50}, {'field': 'modificationDate', 'order': 'descend'})
    unsubscribe()
    store.set_filter('minLivingArea', 60)

    assert store.filters['minLivingArea'] == 60
    assert received == []
    assert len(events) == 1
