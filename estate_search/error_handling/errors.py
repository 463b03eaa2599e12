"""
Exception hierarchy for Estate Search.
"""

from typing import Optional


class SearchError(Exception):
    """Base class for all errors raised by the estate_search package."""


class QueryTransportError(SearchError):
    """The query service could not be reached or returned an unusable answer.

    Attributes:
        status: HTTP status code when the service answered, None otherwise
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class UnknownFilterError(SearchError):
    """A filter name outside the recognized set was used."""

    def __init__(self, name: str):
        super().__init__(f"Unknown filter: {name!r}")
        self.name = name


class ControllerDisposedError(SearchError):
    """An operation was attempted on a disposed search controller."""
