"""Shared fixtures for Estate Search tests."""

import asyncio
from typing import List, Optional

import pytest

from estate_search.config.search_config import SearchSettings
from estate_search.executor.query_executor import QueryExecutor
from estate_search.models import ListingRecord, ResultPage
from estate_search.query_builder import QueryParameters


def make_page(total_count: int, offset: int = 0, limit: int = 8) -> ResultPage:
    """Build a result page holding records ``offset .. offset + limit`` of ``total_count``."""
    count = max(0, min(limit, total_count - offset))
    return ResultPage(
        total_count=total_count,
        page=[
            ListingRecord(immoweb_code=1000 + offset + i, price=250000 + i)
            for i in range(count)
        ]
    )


class RecordingExecutor(QueryExecutor):
    """Query executor fake recording every call.

    With ``hold=False`` each call answers immediately with a page of
    ``total_count`` matches. With ``hold=True`` each call waits on a future
    appended to ``pending``; tests resolve it with a ResultPage or an
    exception.
    """

    def __init__(self, total_count: int = 5, hold: bool = False):
        self.total_count = total_count
        self.hold = hold
        self.calls: List[QueryParameters] = []
        self.more_calls: List[QueryParameters] = []
        self.pending: List[asyncio.Future] = []
        self.failure: Optional[Exception] = None

    async def fetch(self, parameters: QueryParameters) -> ResultPage:
        self.calls.append(parameters)
        return await self._answer(parameters)

    async def fetch_more(self, parameters: QueryParameters) -> ResultPage:
        self.more_calls.append(parameters)
        return await self._answer(parameters)

    async def _answer(self, parameters: QueryParameters) -> ResultPage:
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        if self.failure is not None:
            raise self.failure
        return make_page(self.total_count, parameters.offset, parameters.limit)


@pytest.fixture
def fast_settings() -> SearchSettings:
    """Settings with a short debounce delay."""
    return SearchSettings(debounce_delay_ms=20)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def holding_executor() -> RecordingExecutor:
    return RecordingExecutor(hold=True)


@pytest.fixture
def page_factory():
    return make_page


@pytest.fixture
def executor_factory():
    return RecordingExecutor
