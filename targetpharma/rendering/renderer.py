"""
Result rendering and placement.

ResultRenderer turns parsed records into markup with a Jinja2 template;
PlacementSurface holds the rendered markup per placement id and stands in
for the page the widget is embedded in.
"""

import logging
from typing import Dict, Optional, Sequence

import jinja2

from ..models.pharmacology_models import PharmacologyRecord

logger = logging.getLogger(__name__)


class ResultRenderer:
    """Renders pharmacology records with Jinja2 (HTML autoescaped)."""

    def __init__(self, environment: Optional[jinja2.Environment] = None):
        self._env = environment or jinja2.Environment(autoescape=True)
        self._compiled: Dict[str, jinja2.Template] = {}

    def compile(self, template: str) -> jinja2.Template:
        compiled = self._compiled.get(template)
        if compiled is None:
            compiled = self._env.from_string(template)
            self._compiled[template] = compiled
        return compiled

    def render(self, records: Sequence[PharmacologyRecord], template: str) -> str:
        """
        Render records in order.

        Args:
            records: Parsed result records
            template: Jinja2 template; records are available as ``pharmacology``

        Returns:
            Rendered markup
        """
        context = [record.to_template_context() for record in records]
        return self.compile(template).render(pharmacology=context)


class PlacementSurface:
    """
    Rendered content keyed by placement id.

    replace_content overwrites unconditionally, so when two fetches finish
    out of order the later write wins.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._content: Dict[str, str] = dict(initial or {})

    def replace_content(self, target_id: str, markup: str) -> None:
        logger.debug(f"Replacing content of #{target_id} ({len(markup)} chars)")
        self._content[target_id] = markup

    def content(self, target_id: str) -> Optional[str]:
        return self._content.get(target_id)

    def __contains__(self, target_id: str) -> bool:
        return target_id in self._content

    def to_dict(self) -> Dict[str, str]:
        return dict(self._content)
