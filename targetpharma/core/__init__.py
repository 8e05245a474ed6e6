"""
Core Components

Filter resolution, pagination and the count-then-data query controller.
"""

from .filter_resolver import resolve_filters, resolve_range, serialize_relations, split_relations, encode_sort
from .pagination import PaginationState
from .query_controller import QueryController, FetchState, FetchOutcome, ErrorEvent

__all__ = [
    'resolve_filters',
    'resolve_range',
    'serialize_relations',
    'split_relations',
    'encode_sort',
    'PaginationState',
    'QueryController',
    'FetchState',
    'FetchOutcome',
    'ErrorEvent',
]
