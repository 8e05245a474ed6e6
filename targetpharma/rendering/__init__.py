"""
Rendering

Jinja2 result templates and the placement surface results are written to.
"""

from .renderer import ResultRenderer, PlacementSurface
from .templates import DEFAULT_TABLE_TEMPLATE, DEFAULT_BODY_TEMPLATE, TABLE_BODY_ID

__all__ = [
    'ResultRenderer',
    'PlacementSurface',
    'DEFAULT_TABLE_TEMPLATE',
    'DEFAULT_BODY_TEMPLATE',
    'TABLE_BODY_ID',
]
