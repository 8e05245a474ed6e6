"""
Search Client Layer

Boundary to the remote pharmacology search API.
"""

from .base import PharmacologySearchClient, SearchResponse
from .target_search import TargetPharmacologySearch

__all__ = [
    'PharmacologySearchClient',
    'SearchResponse',
    'TargetPharmacologySearch',
]
