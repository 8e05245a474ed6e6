"""
Data Models

Pydantic models for filter criteria, resolved query parameters and results.
"""

from .pharmacology_models import (
    FilterCriteria,
    ResolvedQueryParameters,
    TargetOrganism,
    PharmacologyRecord,
    WidgetOptions,
)

__all__ = [
    'FilterCriteria',
    'ResolvedQueryParameters',
    'TargetOrganism',
    'PharmacologyRecord',
    'WidgetOptions',
]
