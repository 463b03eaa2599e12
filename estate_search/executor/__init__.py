"""Query execution module for the estates search service."""

from estate_search.executor.query_executor import (
    NetworkStatus,
    QueryExecutor,
    QueryState,
)
from estate_search.executor.graphql_executor import ESTATES_QUERY, GraphQLQueryExecutor

__all__ = [
    "NetworkStatus",
    "QueryExecutor",
    "QueryState",
    "ESTATES_QUERY",
    "GraphQLQueryExecutor",
]
