"""
Pagination state for one widget instance.
"""

import logging
from typing import Optional, Tuple

from .exceptions import InvalidPaginationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50


def _check_positive(field: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidPaginationError(field, value)
    return value


class PaginationState:
    """
    Current page and fixed page size.

    The page only moves through advance_to(), which the controller calls
    after a page has been rendered. It is never incremented ahead of a fetch.
    """

    def __init__(self, page: Optional[int] = None, page_size: Optional[int] = None):
        self._page = _check_positive('page', DEFAULT_PAGE if page is None else page)
        self._page_size = _check_positive('page_size', DEFAULT_PAGE_SIZE if page_size is None else page_size)

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def request(self, page: Optional[int] = None) -> Tuple[int, int]:
        """
        Page/size pair for the next fetch.

        Args:
            page: Explicit target page; defaults to the current page

        Raises:
            InvalidPaginationError: If page is not a positive integer
        """
        target = self._page if page is None else _check_positive('page', page)
        return target, self._page_size

    def advance_to(self, page: int) -> None:
        """Record that page has been fetched and rendered."""
        self._page = _check_positive('page', page)
        logger.debug(f"Pagination advanced to page {page}")

    def __repr__(self) -> str:
        return f"PaginationState(page={self._page}, page_size={self._page_size})"
