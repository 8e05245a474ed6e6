"""
Query Controller

Runs the count-then-data protocol for one widget instance:

1. resolve the filter criteria into API parameters
2. count matching results
3. stop on failure (FAILED) or on a zero count (EMPTY)
4. fetch the requested page and render it into the placement surface

Failures never touch the placement surface or the pagination state and are
reported through the error signal. Nothing is retried here.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .exceptions import (
    RenderError,
    SearchError,
    TargetPharmaException,
    TransportFailureError,
    format_error_for_logging,
)
from .filter_resolver import resolve_filters
from .logging_config import fetch_correlation, log_with_context
from .pagination import PaginationState
from ..clients.base import PharmacologySearchClient
from ..models.pharmacology_models import FilterCriteria, PharmacologyRecord
from ..rendering.renderer import PlacementSurface, ResultRenderer

logger = logging.getLogger(__name__)


class FetchState(Enum):
    """Protocol states of a single fetch."""
    IDLE = "idle"
    COUNT_PENDING = "count_pending"
    DATA_PENDING = "data_pending"
    RENDERED = "rendered"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class FetchOutcome:
    """Terminal result of one fetch."""
    state: FetchState
    page: int
    count: Optional[int] = None
    records: List[PharmacologyRecord] = field(default_factory=list)
    target_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state in (FetchState.RENDERED, FetchState.EMPTY)


@dataclass(frozen=True)
class ErrorEvent:
    """Payload of the error signal."""
    message: str
    error: Optional[Exception] = None


ErrorHandler = Callable[[ErrorEvent], None]


class QueryController:
    """
    Sequences the count and data queries for fixed filter criteria.

    Fetches may overlap. Each one moves through its own states, which are
    logged under the fetch's correlation id; the controller only keeps the
    terminal state of the most recently finished fetch in ``last_state``.
    """

    def __init__(
        self,
        client: PharmacologySearchClient,
        uri: str,
        criteria: FilterCriteria,
        pagination: PaginationState,
        renderer: ResultRenderer,
        surface: PlacementSurface,
    ):
        """
        Initialize the controller.

        Args:
            client: Search backend
            uri: Target concept URI the pharmacology is fetched for
            criteria: Filter criteria, fixed for this controller
            pagination: Pagination state owned by this controller
            renderer: Renders records into markup
            surface: Placement surface the markup is written to
        """
        self.client = client
        self.uri = uri
        self.criteria = criteria
        self.pagination = pagination
        self.renderer = renderer
        self.surface = surface
        self.last_state = FetchState.IDLE
        self._error_handlers: List[ErrorHandler] = []

    def on_error(self, handler: ErrorHandler) -> None:
        """Register a handler for the error signal."""
        self._error_handlers.append(handler)

    async def fetch(self, template: str, target_id: str, page: Optional[int] = None) -> FetchOutcome:
        """
        Run the count-then-data protocol.

        Args:
            template: Jinja2 template used to render the page
            target_id: Placement id whose content the rendered page replaces
            page: Page to fetch; defaults to the current page

        Returns:
            FetchOutcome with state RENDERED, EMPTY or FAILED
        """
        page, page_size = self.pagination.request(page)
        with fetch_correlation():
            started = time.monotonic()
            log_with_context(logger, logging.INFO, f"Fetching pharmacology page {page} for {self.uri}",
                             page=page, page_size=page_size, uri=self.uri)

            outcome = await self._run(template, target_id, page, page_size)
            self.last_state = outcome.state

            log_with_context(logger, logging.INFO, f"Fetch of page {page} finished: {outcome.state.value}",
                             state=outcome.state.value, page=page, count=outcome.count,
                             duration_ms=round((time.monotonic() - started) * 1000, 1))
            return outcome

    async def fetch_page(self, page: int, template: str, target_id: str) -> FetchOutcome:
        """Fetch an explicit page with the same criteria; the current page moves there on success."""
        return await self.fetch(template, target_id, page=page)

    async def _run(self, template: str, target_id: str, page: int, page_size: int) -> FetchOutcome:
        params = resolve_filters(self.criteria)

        self._transition(FetchState.COUNT_PENDING, page)
        try:
            response = await self.client.count_query(self.uri, params)
            if not response.success:
                raise TransportFailureError(
                    self.client.server_name,
                    f"Count query failed with status {response.status}",
                    status=response.status,
                )
            count = self.client.parse_count(response.raw)
        except Exception as e:
            error = self._as_search_error(e)
            return self._fail(page, target_id, f"Pharmacology count failed: {error.message}", error)

        if count == 0:
            logger.info("Count is 0, skipping data query")
            return FetchOutcome(FetchState.EMPTY, page, count=0, target_id=target_id)

        self._transition(FetchState.DATA_PENDING, page, count=count)
        try:
            response = await self.client.data_query(self.uri, params, page, page_size)
            if not response.success:
                raise TransportFailureError(
                    self.client.server_name,
                    f"Data query failed with status {response.status}",
                    status=response.status,
                )
            records = self.client.parse_results(response.raw)
        except Exception as e:
            error = self._as_search_error(e)
            return self._fail(page, target_id, f"Pharmacology data fetch failed: {error.message}", error, count)

        try:
            markup = self.renderer.render(records, template)
        except Exception as e:
            error = RenderError(f"Template rendering failed: {type(e).__name__}: {e}", target_id)
            return self._fail(page, target_id, error.message, error, count)

        self.surface.replace_content(target_id, markup)
        self.pagination.advance_to(page)
        logger.debug(f"Rendered {len(records)} records into #{target_id}")
        return FetchOutcome(FetchState.RENDERED, page, count=count, records=records, target_id=target_id)

    def _as_search_error(self, error: Exception) -> SearchError:
        """Anything the client boundary raises ends the fetch as a transport failure."""
        if isinstance(error, SearchError):
            return error
        wrapped = TransportFailureError(
            self.client.server_name,
            f"{type(error).__name__}: {error}",
            details={'error_type': type(error).__name__},
        )
        wrapped.__cause__ = error
        return wrapped

    def _transition(self, state: FetchState, page: int, **fields) -> None:
        log_with_context(logger, logging.DEBUG, f"Page {page}: {state.value}",
                         state=state.value, page=page, **fields)

    def _fail(self, page: int, target_id: str, message: str, error: TargetPharmaException,
              count: Optional[int] = None) -> FetchOutcome:
        logger.error(message, extra=format_error_for_logging(error))
        self._emit_error(ErrorEvent(message, error))
        return FetchOutcome(FetchState.FAILED, page, count=count, target_id=target_id, error=message)

    def _emit_error(self, event: ErrorEvent) -> None:
        for handler in list(self._error_handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error handler {handler!r} raised")
