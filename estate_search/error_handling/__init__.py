"""
Error handling module for Estate Search.

Provides the exception hierarchy and failure logging.
"""

from .errors import (
    SearchError,
    QueryTransportError,
    UnknownFilterError,
    ControllerDisposedError,
)
from .error_handler import ErrorHandler

__all__ = [
    'SearchError',
    'QueryTransportError',
    'UnknownFilterError',
    'ControllerDisposedError',
    'ErrorHandler',
]
