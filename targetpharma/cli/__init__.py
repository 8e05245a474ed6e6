"""
Target Pharmacology CLI

Command-line interface for fetching and rendering target pharmacology pages.
Supports single fetches from command-line filters and YAML batch files.
"""

import asyncio
import argparse
import sys
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from ..core.config import Config
from ..core.exceptions import TargetPharmaException
from ..core.logging_config import setup_structured_logging
from ..core.query_controller import FetchOutcome, FetchState
from ..widget import TargetPharmacologyWidget

logger = logging.getLogger(__name__)

CONDITIONS = ['>', '<', '=', '<=', '>=']


class ColoredFormatter(logging.Formatter):
    """User-friendly colored formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Keep only the last component of the logger name
        record.name = record.name.split('.')[-1]

        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"

        return super().format(record)


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Widget options from parsed command-line arguments. Unset flags are left out."""
    mapping = {
        'URI': args.uri,
        'appURL': args.app_url,
        'appID': args.app_id,
        'appKey': args.app_key,
        'assayOrganism': args.assay_organism,
        'targetOrganism': args.target_organism,
        'activity': args.activity,
        'activityUnit': args.activity_unit,
        'activityCondition': args.activity_condition,
        'activityValue': args.activity_value,
        'activityRelations': args.activity_relation,
        'pchemblCondition': args.pchembl_condition,
        'pchemblValue': args.pchembl_value,
        'sortBy': args.sort_by,
        'sortDirection': args.sort_direction,
        'lens': args.lens,
        'targetType': args.target_type,
        'page': args.page,
        'pageSize': args.page_size,
        'target': args.target,
    }
    return {key: value for key, value in mapping.items() if value is not None}


async def write_output(path: Path, markup: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, 'w') as f:
        await f.write(markup)
    logger.info(f"Wrote {path}")


async def run_fetch(options: Dict[str, Any], output: Optional[str], config: Config) -> int:
    """Fetch one page and write the rendered table."""
    async with TargetPharmacologyWidget(options, config=config) as widget:
        outcome = await widget.load()
        markup = widget.surface.content(widget.options.target)

    report_outcome(outcome)
    if markup is not None:
        if output:
            await write_output(Path(output), markup)
        else:
            print(markup)
    return 0 if outcome.succeeded else 1


def report_outcome(outcome: FetchOutcome) -> None:
    if outcome.state is FetchState.RENDERED:
        print(f"✅ Page {outcome.page}: {len(outcome.records)} of {outcome.count} results", file=sys.stderr)
    elif outcome.state is FetchState.EMPTY:
        print("ℹ️  No pharmacology results match these filters", file=sys.stderr)
    else:
        print(f"❌ {outcome.error}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="targetpharma",
        description="Target pharmacology search - filtered, paged Open PHACTS results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch the first page of IC50 activities >= 5 nM for a target
  python -m targetpharma.cli fetch --uri http://www.conceptwiki.org/concept/5de0f011-68e0-4917-bac2-6d65e8f7effb \\
      --activity IC50 --activity-unit nM --activity-condition '>=' --activity-value 5 -o results/page1.html

  # YAML batch execution
  python -m targetpharma.cli yaml examples/pharmacology.yaml
        """
    )

    parser.add_argument(
        "command",
        choices=["fetch", "yaml"],
        help="Command to execute"
    )
    parser.add_argument(
        "file_path",
        nargs="?",
        help="Path to YAML options file (yaml command)"
    )

    parser.add_argument("--uri", help="Target concept URI (fetch command)")
    parser.add_argument("--app-url", help="Open PHACTS API URL (default: OPS_APP_URL)")
    parser.add_argument("--app-id", help="Application ID (default: OPS_APP_ID)")
    parser.add_argument("--app-key", help="Application key (default: OPS_APP_KEY)")

    parser.add_argument("--assay-organism", help="Assay organism, e.g. 'Homo sapiens'")
    parser.add_argument("--target-organism", help="Target organism")
    parser.add_argument("--activity", help="Activity type, e.g. IC50")
    parser.add_argument("--activity-unit", help="Activity unit, e.g. nM")
    parser.add_argument("--activity-condition", choices=CONDITIONS, help="Activity value condition")
    parser.add_argument("--activity-value", help="Activity value")
    parser.add_argument(
        "--activity-relation",
        action="append",
        choices=CONDITIONS,
        help="Allowed activity relation (repeatable)"
    )
    parser.add_argument("--pchembl-condition", choices=CONDITIONS, help="pChembl value condition")
    parser.add_argument("--pchembl-value", help="pChembl value")
    parser.add_argument("--sort-by", help="Column to sort on, e.g. activityStandardValue")
    parser.add_argument("--sort-direction", choices=["ascending", "descending"], help="Sort direction")
    parser.add_argument("--lens", help="Scientific lens")
    parser.add_argument("--target-type", help="Target type")
    parser.add_argument("--page", type=int, help="Page to fetch (default: 1)")
    parser.add_argument("--page-size", type=int, help="Results per page (default: 50)")
    parser.add_argument("--target", help="Placement id of the rendered table")

    parser.add_argument("--output", "-o", help="Write rendered HTML here instead of stdout")
    parser.add_argument("--output-dir", default="results", help="Output directory (yaml command)")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    return parser


def configure_logging(verbose: bool, json_logs: bool, config: Config) -> None:
    if json_logs or config.structured_logging:
        setup_structured_logging("DEBUG" if verbose else config.log_level, log_file=config.log_file)
        return

    if verbose:
        log_level = logging.DEBUG
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        log_level = getattr(logging, config.log_level.upper())
        log_format = '%(levelname)s - %(message)s'

    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter(log_format))
    logging.basicConfig(level=log_level, handlers=[handler], force=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_file(args.config) if args.config else Config()
    except TargetPharmaException as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(args.verbose, args.json_logs, config)

    try:
        if args.command == "fetch":
            if not args.uri:
                print("❌ Error: --uri is required for 'fetch' command", file=sys.stderr)
                return 1
            return asyncio.run(run_fetch(options_from_args(args), args.output, config))

        elif args.command == "yaml":
            if not args.file_path:
                print("❌ Error: YAML file path is required for 'yaml' command", file=sys.stderr)
                print("Usage: python -m targetpharma.cli yaml <yaml_file>", file=sys.stderr)
                return 1

            from .yaml_runner import YAMLRunner
            runner = YAMLRunner(config, output_dir=args.output_dir)
            return asyncio.run(runner.run(args.file_path))

        parser.print_help()
        return 1

    except KeyboardInterrupt:
        print("\n\n⚠️  Operation cancelled by user", file=sys.stderr)
        return 1
    except TargetPharmaException as e:
        logger.error(f"Command failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1
