"""
Target Pharmacology Widget

Displays pharmacology results for a target. Results can be filtered and
paged. Requires an app ID and key for the Open PHACTS API.

Example:
    >>> surface = PlacementSurface()
    >>> async with TargetPharmacologyWidget({
    ...     'appID': '949a7c9c',
    ...     'appKey': '734a274b418b0dbe57fc40f86e85e20e',
    ...     'appURL': 'https://beta.openphacts.org/1.5',
    ...     'URI': 'http://www.conceptwiki.org/concept/5de0f011-68e0-4917-bac2-6d65e8f7effb',
    ...     'assayOrganism': 'Homo sapiens',
    ...     'target': 'YourOwnDivId',
    ... }, surface=surface) as widget:
    ...     widget.on_error(lambda event: print(event.message))
    ...     await widget.load()
    ...     await widget.fetch_page(2)
"""

import logging
from typing import Any, Dict, Optional, Union

from .clients.base import PharmacologySearchClient
from .clients.target_search import TargetPharmacologySearch
from .core.config import Config
from .core.exceptions import MissingConfigurationError
from .core.pagination import PaginationState
from .core.query_controller import ErrorHandler, FetchOutcome, QueryController
from .models.pharmacology_models import WidgetOptions
from .rendering.renderer import PlacementSurface, ResultRenderer
from .rendering.templates import DEFAULT_BODY_TEMPLATE, DEFAULT_TABLE_TEMPLATE, TABLE_BODY_ID

logger = logging.getLogger(__name__)


class TargetPharmacologyWidget:
    """Target pharmacology results bound to one placement surface."""

    def __init__(
        self,
        options: Union[WidgetOptions, Dict[str, Any]],
        surface: Optional[PlacementSurface] = None,
        client: Optional[PharmacologySearchClient] = None,
        renderer: Optional[ResultRenderer] = None,
        config: Optional[Config] = None,
    ):
        """
        Build the widget from its construction options.

        Args:
            options: WidgetOptions or a dict of option names (appID, URI, ...)
            surface: Placement surface results are rendered into
            client: Search client; built from appURL/appID/appKey when omitted
            renderer: Result renderer
            config: Fallback for options not given (API location, credentials, page size)

        Raises:
            MissingConfigurationError: If no API URL is available
        """
        if not isinstance(options, WidgetOptions):
            options = WidgetOptions.model_validate(options)
        self.options = options
        self.surface = surface if surface is not None else PlacementSurface()

        if client is None:
            config = config or Config()
            app_url = options.app_url or config.app_url
            if not app_url:
                raise MissingConfigurationError('app_url')
            client = TargetPharmacologySearch(
                app_url,
                app_id=options.app_id or config.app_id,
                app_key=options.app_key or config.app_key,
                timeout=config.timeout,
            )
        self.client = client

        page_size = options.page_size
        if page_size is None and config is not None:
            page_size = config.page_size

        self.criteria = options.to_criteria()
        self.pagination = PaginationState(options.page, page_size)
        self.controller = QueryController(
            client=self.client,
            uri=options.uri,
            criteria=self.criteria,
            pagination=self.pagination,
            renderer=renderer or ResultRenderer(),
            surface=self.surface,
        )
        logger.debug(f"Widget created for {options.uri} -> #{options.target}")

    @property
    def page(self) -> int:
        return self.pagination.page

    @property
    def page_size(self) -> int:
        return self.pagination.page_size

    def on_error(self, handler: ErrorHandler) -> None:
        """
        Register an error handler.

        The handler receives an ErrorEvent whose message describes the failed
        count or data query.
        """
        self.controller.on_error(handler)

    async def load(self) -> FetchOutcome:
        """Fetch the current page and replace the target placement with the full table."""
        template = self.options.template or DEFAULT_TABLE_TEMPLATE
        return await self.controller.fetch(template, self.options.target)

    async def fetch_page(
        self,
        page: int,
        template: Optional[str] = None,
        replace_id: Optional[str] = None,
    ) -> FetchOutcome:
        """
        Fetch more pharmacology results and replace the current ones in the table.

        Args:
            page: The required page
            template: Jinja2 template to populate with results; defaults to the table body only
            replace_id: Placement id to replace; defaults to the table body
        """
        return await self.controller.fetch_page(
            page,
            template or DEFAULT_BODY_TEMPLATE,
            replace_id or TABLE_BODY_ID,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "TargetPharmacologyWidget":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
