"""
GraphQL query executor - runs the estates query against the search service.
"""

import asyncio
import logging
from typing import Optional

import aiohttp
from pydantic import ValidationError

from estate_search.error_handling import QueryTransportError
from estate_search.models import ResultPage
from estate_search.query_builder import QueryParameters
from .query_executor import QueryExecutor


logger = logging.getLogger(__name__)


ESTATES_QUERY = """
query estates(
    $priceRange: [Int],
    $zipCodes: [Int],
    $freeText: String,
    $onlyWithGarden: Boolean,
    $minGardenArea: Int,
    $minLivingArea: Int,
    $minBedroomCount: Int,
    $onlyStillAvailable: Boolean,
    $immowebCode: Int,
    $orderBy: OrderByInput,
    $limit: Int,
    $offset: Int
) {
    estates(priceRange: $priceRange,
            zipCodes: $zipCodes,
            freeText: $freeText,
            onlyWithGarden: $onlyWithGarden,
            minGardenArea: $minGardenArea,
            minLivingArea: $minLivingArea,
            minBedroomCount: $minBedroomCount,
            onlyStillAvailable: $onlyStillAvailable,
            immowebCode: $immowebCode,
            orderBy: $orderBy,
            limit: $limit,
            offset: $offset) {
        totalCount
        page {
            immowebCode
            price
            zipCode
            locality
            images
            modificationDate
            hasGarden
            gardenArea
            agencyLogo
            agencyName
            geolocation
            street
            streetNumber
            isAuction
            isSold
            isUnderOption
            description
            livingArea
            bedroomCount
            isLiked
            isVisited
            priceHistory {
                price
                date
            }
        }
    }
}
"""


class GraphQLQueryExecutor(QueryExecutor):
    """
    Executes the estates query over HTTP with aiohttp.

    Usable as an async context manager; the HTTP session is created lazily
    and reused across queries.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.endpoint_url = endpoint_url
        self.timeout_seconds = timeout_seconds
        self._session = session

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Explicitly close the session when done"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _ensure_session(self):
        """Ensure we have an open session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
            )

    async def fetch(self, parameters: QueryParameters) -> ResultPage:
        """
        Run the estates query.

        Args:
            parameters: Normalized query parameters

        Returns:
            ResultPage parsed from the response

        Raises:
            QueryTransportError: On connection failures, timeouts, non-200
                responses, GraphQL errors or malformed payloads
        """
        await self._ensure_session()

        variables = parameters.to_variables()
        logger.debug(f"Posting estates query to {self.endpoint_url} with {variables}")

        try:
            async with self._session.post(
                self.endpoint_url,
                json={"query": ESTATES_QUERY, "variables": variables},
                headers={"Accept": "application/json"}
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise QueryTransportError(
                        f"Search service error: {response.status} - {error_text}",
                        status=response.status
                    )
                payload = await response.json()
        except aiohttp.ClientError as e:
            raise QueryTransportError(f"Could not connect to search service: {e}") from e
        except asyncio.TimeoutError as e:
            raise QueryTransportError(
                f"Search service timed out after {self.timeout_seconds}s"
            ) from e

        return self._parse_payload(payload)

    def _parse_payload(self, payload: dict) -> ResultPage:
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise QueryTransportError(f"GraphQL errors: {messages}")

        estates = (payload.get("data") or {}).get("estates")
        if estates is None:
            raise QueryTransportError("Response has no estates data")

        try:
            return ResultPage.model_validate(estates)
        except ValidationError as e:
            raise QueryTransportError(f"Malformed estates data: {e}") from e
