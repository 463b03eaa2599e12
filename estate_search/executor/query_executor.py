"""
Query executor contract.

The executor runs one paginated estates query. It is an external
collaborator of the search controller, which tracks the loading, error and
data signals of the requests it submits.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from estate_search.models import ResultPage
from estate_search.query_builder import QueryParameters


class NetworkStatus(IntEnum):
    """Network state of the current query, numbered like Apollo Client's."""
    LOADING = 1
    FETCH_MORE = 3
    READY = 7
    ERROR = 8


@dataclass(frozen=True)
class QueryState:
    """Snapshot of the query signals.

    Attributes:
        loading: Any fetch is in flight, including "load more"
        network_status: Which kind of request is in flight, or the outcome
        error: Error of the last failed fetch
        data: Results currently held
        called: Whether a fetch was ever submitted
    """
    loading: bool = False
    network_status: NetworkStatus = NetworkStatus.READY
    error: Optional[BaseException] = None
    data: Optional[ResultPage] = None
    called: bool = False

    @property
    def is_replace_loading(self) -> bool:
        """True when a fetch that will replace the results is in flight."""
        return self.loading and self.network_status != NetworkStatus.FETCH_MORE


class QueryExecutor(ABC):
    """Executes parameterized estates queries."""

    @abstractmethod
    async def fetch(self, parameters: QueryParameters) -> ResultPage:
        """
        Execute a query whose result replaces the current page.

        Args:
            parameters: Normalized query parameters

        Returns:
            The requested page of results

        Raises:
            Exception: Any failure; the controller surfaces it unchanged
        """

    async def fetch_more(self, parameters: QueryParameters) -> ResultPage:
        """Execute a continuation query whose records are appended."""
        return await self.fetch(parameters)

    async def close(self) -> None:
        """Release transport resources."""
