"""
Base Pharmacology Search Client

Defines the boundary the query controller talks to: a count query, a paged
data query and the parsers that turn raw responses into a count and a
sequence of records.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, NamedTuple, Optional

from ..models.pharmacology_models import PharmacologyRecord, ResolvedQueryParameters

logger = logging.getLogger(__name__)


class SearchResponse(NamedTuple):
    """Outcome of one search API call."""
    success: bool
    status: Optional[int]
    raw: Any


class PharmacologySearchClient(ABC):
    """Base class for target pharmacology search backends."""

    def __init__(self, server_name: str, timeout: float = 30.0):
        """
        Initialize search client.

        Args:
            server_name: Human-readable name for logging
            timeout: Request timeout in seconds
        """
        self.server_name = server_name
        self.timeout = timeout

    @abstractmethod
    async def count_query(self, uri: str, params: ResolvedQueryParameters) -> SearchResponse:
        """
        Count the results matching params for the target uri.

        Paging and ordering do not apply to counts.

        Raises:
            TransportFailureError: If no response could be obtained
        """

    @abstractmethod
    async def data_query(
        self,
        uri: str,
        params: ResolvedQueryParameters,
        page: int,
        page_size: int,
    ) -> SearchResponse:
        """
        Fetch one page of results matching params for the target uri.

        Raises:
            TransportFailureError: If no response could be obtained
        """

    @abstractmethod
    def parse_count(self, raw: Any) -> int:
        """
        Read the total result count from a count response.

        Raises:
            MalformedResponseError: If the response holds no usable count
        """

    @abstractmethod
    def parse_results(self, raw: Any) -> List[PharmacologyRecord]:
        """
        Read the result records from a data response, in response order.

        Raises:
            MalformedResponseError: If the response holds no result list
        """

    async def aclose(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> "PharmacologySearchClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
