"""
Target Pharmacology - filtered, paged pharmacology results for a target

Resolves user-facing filter options into Open PHACTS query parameters, runs
a count query followed by a paged data query, and renders the results with
Jinja2 templates.
"""

from .widget import TargetPharmacologyWidget

__version__ = "0.1.0"

__all__ = ['TargetPharmacologyWidget']
