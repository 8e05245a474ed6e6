"""
YAML Runner

Batch fetches driven by a YAML file:

    options:                 # widget options (camelCase, as for the widget)
      URI: http://www.conceptwiki.org/concept/...
      activity: IC50
      activityUnit: nM
      activityCondition: '>='
      activityValue: 5
    pages: [1, 2, 3]         # optional, defaults to the options' page
    output_dir: results      # optional

Every page is rendered as a full table and written to
``<output_dir>/<target>_page<N>.html``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..core.config import Config
from ..core.query_controller import FetchOutcome, FetchState
from ..models.pharmacology_models import WidgetOptions
from ..rendering.templates import DEFAULT_TABLE_TEMPLATE
from ..widget import TargetPharmacologyWidget
from . import report_outcome, write_output

logger = logging.getLogger(__name__)


class YAMLRunner:
    """YAML-based batch executor for pharmacology fetches."""

    def __init__(self, config: Optional[Config] = None, output_dir: str = "results"):
        self.config = config or Config()
        self.output_dir = Path(output_dir)

    async def run(self, yaml_path: str) -> int:
        """
        Run the fetches described in a YAML file.

        Returns:
            Exit code (0 when every page rendered or was empty, 1 otherwise)
        """
        batch = self.load(yaml_path)
        if batch is None:
            return 1

        options, pages, output_dir = batch
        outcomes = await self.execute(options, pages, output_dir)
        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        if failed:
            logger.error(f"{len(failed)} of {len(outcomes)} page fetches failed")
            return 1
        logger.info(f"✅ {len(outcomes)} page fetch(es) completed")
        return 0

    def load(self, yaml_path: str) -> Optional[Tuple[WidgetOptions, List[int], Path]]:
        """Load and validate a batch file; returns (options, pages, output_dir) or None."""
        yaml_file = Path(yaml_path)
        if not yaml_file.exists():
            logger.error(f"❌ YAML file not found: {yaml_path}")
            return None

        logger.info(f"📄 Loading batch from: {yaml_path}")
        try:
            with open(yaml_file, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"❌ YAML parsing error: {e}")
            return None

        if not isinstance(config, dict) or not isinstance(config.get('options'), dict):
            logger.error("❌ Batch file needs an 'options' mapping")
            return None

        try:
            options = WidgetOptions.model_validate(config['options'])
        except ValidationError as e:
            logger.error(f"❌ Invalid widget options: {e}")
            return None

        pages = config.get('pages', [options.page or 1])
        if (not isinstance(pages, list) or not pages
                or not all(isinstance(p, int) and not isinstance(p, bool) and p > 0 for p in pages)):
            logger.error("❌ 'pages' must be a non-empty list of positive integers")
            return None

        output_dir = Path(config.get('output_dir', self.output_dir))
        return options, pages, output_dir

    async def execute(self, options: WidgetOptions, pages: List[int], output_dir: Path) -> List[FetchOutcome]:
        """Fetch each page in order, writing every rendered page to output_dir."""
        outcomes = []
        template = options.template or DEFAULT_TABLE_TEMPLATE

        async with TargetPharmacologyWidget(options, config=self.config) as widget:
            for page in pages:
                # Each page replaces the whole table so it can be written on its own
                outcome = await widget.fetch_page(page, template=template, replace_id=options.target)
                outcomes.append(outcome)
                report_outcome(outcome)
                if outcome.state is FetchState.RENDERED:
                    markup = widget.surface.content(options.target)
                    await write_output(output_dir / f"{options.target}_page{page}.html", markup)

        return outcomes

