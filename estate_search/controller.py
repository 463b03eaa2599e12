"""
Search controller for Estate Search.

Coordinates the filter store, the debouncer, the query parameter builder and
the query executor, and exposes the single public contract the UI talks to.
"""

import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Set, Union

from estate_search.config.search_config import (
    DEFAULT_FILTERS,
    DEFAULT_SORTER,
    SearchSettings,
    get_search_settings,
)
from estate_search.error_handling import ControllerDisposedError, ErrorHandler
from estate_search.executor.query_executor import NetworkStatus, QueryExecutor, QueryState
from estate_search.filtering.filter_store import FilterStore
from estate_search.models import FilterSet, ListingRecord, ResultPage, SortDescriptor
from estate_search.query_builder import QueryParameterBuilder, QueryParameters
from estate_search.scheduling.debouncer import Debouncer
from estate_search.status import SearchResultStatus, resolve_status


# Configure logging
logger = logging.getLogger(__name__)

StateListener = Callable[['SearchController'], None]


class SearchController:
    """
    Debounced, stateful search controller.

    Filter edits are submitted after a quiet period; sort changes and explicit
    searches are submitted immediately. Every replace fetch takes a request
    token and only the response of the latest token is applied, so a slow
    stale response can never overwrite a newer one. "Load more" responses are
    appended unless a replace fetch was submitted after them.

    All methods must be called from the event loop thread.

    Attributes:
        executor: Query executor running the estates query
        settings: Search configuration settings
        store: Filter store holding filters and sort
        builder: Query parameter builder
        debouncer: Debouncer for deferred submissions
        error_handler: Failure logger
    """

    def __init__(
        self,
        executor: QueryExecutor,
        settings: Optional[SearchSettings] = None,
        initial_filters: Union[FilterSet, Mapping, None] = None,
        initial_sorter: Union[SortDescriptor, Mapping, None] = None
    ):
        """
        Initialize the search controller.

        Args:
            executor: Query executor used for every fetch
            settings: Search settings (uses defaults if not provided)
            initial_filters: Filters at creation, DEFAULT_FILTERS if not provided
            initial_sorter: Sort at creation, DEFAULT_SORTER if not provided
        """
        self.executor = executor
        self.settings = settings or get_search_settings()

        self._initial_filters = FilterSet.coerce(
            DEFAULT_FILTERS if initial_filters is None else initial_filters
        )
        self._initial_sorter = SortDescriptor.coerce(
            DEFAULT_SORTER if initial_sorter is None else initial_sorter
        )

        self.store = FilterStore(self._initial_filters, self._initial_sorter)
        self.builder = QueryParameterBuilder(
            page_size=self.settings.page_size,
            unbounded_price=self.settings.unbounded_price
        )
        self.debouncer = Debouncer(delay_ms=self.settings.debounce_delay_ms)
        self.error_handler = ErrorHandler()

        self._has_searched_before = False
        self._data: Optional[ResultPage] = None
        self._error: Optional[BaseException] = None

        # Token of the latest replace fetch, and the one still awaited (if any)
        self._request_token = 0
        self._pending_token: Optional[int] = None

        self._tasks: Set[asyncio.Task] = set()
        self._more_tasks: Set[asyncio.Task] = set()
        self._listeners: List[StateListener] = []
        self._disposed = False

        self._unsubscribe_store = self.store.subscribe(self._on_filters_changed)

    # Read-only state

    @property
    def filters(self) -> FilterSet:
        return self.store.filters

    @property
    def sorter(self) -> SortDescriptor:
        return self.store.sorter

    @property
    def results(self) -> Optional[List[ListingRecord]]:
        """Records loaded so far, None before the first response."""
        return self._data.page if self._data is not None else None

    @property
    def total_count(self) -> Optional[int]:
        return self._data.total_count if self._data is not None else None

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_first_search(self) -> bool:
        """True until a search has been submitted."""
        return not self._has_searched_before

    @property
    def query_state(self) -> QueryState:
        """Snapshot of the loading, network status, error and data signals."""
        if self._pending_token is not None:
            network_status = NetworkStatus.LOADING
        elif self._more_tasks:
            network_status = NetworkStatus.FETCH_MORE
        elif self._error is not None:
            network_status = NetworkStatus.ERROR
        else:
            network_status = NetworkStatus.READY

        return QueryState(
            loading=self._pending_token is not None or bool(self._more_tasks),
            network_status=network_status,
            error=self._error,
            data=self._data,
            called=self._has_searched_before,
        )

    @property
    def status(self) -> SearchResultStatus:
        return resolve_status(
            is_loading=self.query_state.is_replace_loading,
            has_error=self._error is not None,
            result_count=self.total_count,
            has_searched_before=self._has_searched_before,
        )

    @property
    def disposed(self) -> bool:
        return self._disposed

    # Operations

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a callback invoked after every observable state change.

        Args:
            listener: Callable receiving this controller

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_filter(self, name: str, value: Any) -> None:
        """
        Set one filter and schedule a deferred search if it changed.

        Args:
            name: Filter name
            value: New raw value

        Raises:
            UnknownFilterError: If name is not a recognized filter
            ControllerDisposedError: If the controller has been disposed
        """
        self._check_not_disposed()
        self.store.set_filter(name, value)

    def clear_filters(self) -> None:
        """Remove every filter and schedule a deferred search if anything was set."""
        self._check_not_disposed()
        self.store.clear_filters()

    def set_sorter(self, sorter: Union[SortDescriptor, Mapping]) -> None:
        """Change the sort and search immediately with the current filters."""
        self._check_not_disposed()
        self.store.set_sorter(sorter)
        filters, sorter = self.store.filters, self.store.sorter
        self.debouncer.run_immediately(lambda: self._submit_fetch(filters, sorter))

    def search(
        self,
        filters: Union[FilterSet, Mapping, None] = None,
        sorter: Union[SortDescriptor, Mapping, None] = None
    ) -> None:
        """
        Search immediately, bypassing the debounce delay.

        Args:
            filters: Filters to submit, the current ones if not provided
            sorter: Sort to submit, the current one if not provided
        """
        self._check_not_disposed()
        if filters is not None:
            self.store.replace_all(filters)
        if sorter is not None:
            self.store.set_sorter(sorter)

        filters, sorter = self.store.filters, self.store.sorter
        self.debouncer.run_immediately(lambda: self._submit_fetch(filters, sorter))

    def load_more(self) -> None:
        """Fetch the next page and append it to the loaded results."""
        self._check_not_disposed()

        loaded_count = len(self._data.page) if self._data is not None else 0
        parameters = self.builder.build(
            self.store.filters,
            self.store.sorter,
            self.builder.next_page(loaded_count)
        )

        self._has_searched_before = True
        task = self._start(self._run_load_more(parameters, self._request_token))
        self._more_tasks.add(task)
        task.add_done_callback(self._more_tasks.discard)

        logger.debug(f"Load more submitted at offset {loaded_count}")
        self._notify()

    def reset(self) -> None:
        """
        Restore the initial filters and sort and forget every result.

        Pending and in-flight requests are cancelled; the controller returns to
        the "no search yet" state.
        """
        self._check_not_disposed()
        self.debouncer.cancel()
        self._cancel_tasks()

        self._request_token += 1
        self._pending_token = None
        self._data = None
        self._error = None
        self._has_searched_before = False
        self.store.reset(self._initial_filters, self._initial_sorter)

        logger.info("Search controller reset")
        self._notify()

    def dispose(self) -> None:
        """Cancel the pending timer and in-flight requests, and detach listeners."""
        if self._disposed:
            return
        self.debouncer.dispose()
        self._cancel_tasks()
        self._unsubscribe_store()
        self._listeners.clear()
        self._disposed = True
        logger.debug("Search controller disposed")

    async def wait_idle(self) -> None:
        """Wait until no deferred submission or fetch is pending."""
        while True:
            pending = set(self._tasks)
            if self.debouncer.pending is not None:
                pending.add(self.debouncer.pending)
            if not pending:
                return
            await asyncio.wait(pending)

    # Internals

    def _on_filters_changed(self, filters: FilterSet) -> None:
        sorter = self.store.sorter
        self.debouncer.schedule_deferred(lambda: self._submit_fetch(filters, sorter))
        self._notify()

    def _submit_fetch(self, filters: FilterSet, sorter: SortDescriptor) -> None:
        parameters = self.builder.build(filters, sorter, self.builder.first_page())

        self._request_token += 1
        token = self._request_token
        self._pending_token = token
        self._has_searched_before = True

        logger.debug(f"Search {token} submitted with {parameters.to_variables()}")
        self._start(self._run_fetch(parameters, token))
        self._notify()

    async def _run_fetch(self, parameters: QueryParameters, token: int) -> None:
        try:
            page = await self.executor.fetch(parameters)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if token != self._request_token:
                logger.debug(f"Discarding failure of superseded search {token}")
                return
            self.error_handler.log_error("fetch", e, token=token, offset=parameters.offset)
            self._pending_token = None
            self._error = e
            self._notify()
            return

        if token != self._request_token:
            logger.debug(f"Discarding response of superseded search {token}")
            return

        self._pending_token = None
        self._error = None
        self._data = page
        logger.info(f"Search {token} returned {len(page.page)} of {page.total_count} results")
        self._notify()

    async def _run_load_more(self, parameters: QueryParameters, token: int) -> None:
        failure = None
        page = None
        try:
            page = await self.executor.fetch_more(parameters)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            failure = e

        self._more_tasks.discard(asyncio.current_task())

        if token != self._request_token:
            logger.debug(f"Discarding load more at offset {parameters.offset}, results were replaced")
            self._notify()
            return

        if failure is not None:
            self.error_handler.log_error("fetch_more", failure, offset=parameters.offset)
            self._error = failure
        else:
            self._error = None
            self._data = self._data.appended(page) if self._data is not None else page
        self._notify()

    def _start(self, coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_tasks(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._more_tasks.clear()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Search state listener failed")

    def _check_not_disposed(self) -> None:
        if self._disposed:
            raise ControllerDisposedError("Search controller has been disposed")
