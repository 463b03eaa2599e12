"""
Error reporting for Estate Search.

Search failures are never retried automatically: the controller records the
error for display and the UI decides whether to search again. This module
logs those failures with diagnostic context and turns them into
human-readable recovery hints.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict

from .errors import QueryTransportError


# Configure logging
logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Logs query failures and provides recovery suggestions.

    Attributes:
        error_count: Number of failures logged through this handler
    """

    def __init__(self):
        self.error_count = 0

    def log_error(
        self,
        operation_name: str,
        error: BaseException,
        **context: Any
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed (e.g. "fetch")
            error: The exception that occurred
            **context: Extra diagnostic values (offset, request token, ...)
        """
        self.error_count += 1

        details = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': {k: str(v) for k, v in context.items()},
        }

        logger.error(
            f"Operation failed: {operation_name} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {details}")

    def describe(self, error: BaseException) -> Dict[str, Any]:
        """
        Provide recovery suggestions for a failed search.

        Args:
            error: The exception surfaced by the query service

        Returns:
            Dictionary with error analysis and recovery suggestions
        """
        error_str = str(error).lower()

        suggestions = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'timestamp': datetime.now().isoformat(),
            'recovery_suggestions': []
        }

        if isinstance(error, asyncio.TimeoutError) or 'timeout' in error_str or 'timed out' in error_str:
            suggestions['recovery_suggestions'].extend([
                'Increase ESTATE_SEARCH_TIMEOUT_SECONDS',
                'Check your internet connection speed',
                'Try narrowing the search filters'
            ])
        elif 'connect' in error_str:
            suggestions['recovery_suggestions'].extend([
                'Verify the query service is running',
                'Check that ESTATE_SEARCH_ENDPOINT points to the GraphQL endpoint',
                'Ensure no firewall is blocking the connection'
            ])
        elif isinstance(error, QueryTransportError) and error.status is not None:
            suggestions['recovery_suggestions'].extend([
                f'The service answered with HTTP {error.status}',
                'Check the service logs for the failing request'
            ])
        else:
            suggestions['recovery_suggestions'].extend([
                'Retry the search',
                'Check the service logs for errors'
            ])

        logger.warning(f"Search error: {error}")
        logger.info(f"Recovery suggestions: {suggestions['recovery_suggestions']}")

        return suggestions
