"""
Command-line interface for urchin radar.

Commands:
  info     Show settings (lookback window, thresholds)
  species  List the species catalog
  survey   Fetch GBIF occurrences for the catalog and print per-species
           grid summaries (or JSON with --json)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import math
import sys

import httpx

from urchin_radar import __version__
from urchin_radar.analysis.serialization import aggregation_to_dict
from urchin_radar.catalog import DEFAULT_CATALOG, select_species
from urchin_radar.config import get_settings
from urchin_radar.datasources.gbif import FetchError
from urchin_radar.flows.survey import survey


def positive_int(value: str) -> int:
    """argparse type: an integer greater than zero."""
    try:
        number = int(value)
    except ValueError:
        msg = f"invalid int value: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if number <= 0:
        msg = f"must be positive, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def positive_float(value: str) -> float:
    """argparse type: a finite number greater than zero."""
    try:
        number = float(value)
    except ValueError:
        msg = f"invalid float value: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if not math.isfinite(number) or number <= 0:
        msg = f"must be a positive number, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="urchin-radar",
        description="Sea urchin occurrence grids and invasiveness risk from GBIF",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")
    subparsers.add_parser("species", help="List the species catalog")

    # 'survey' command - fetch and grid occurrences
    survey_parser = subparsers.add_parser("survey", help="Fetch occurrences and grid them")
    survey_parser.add_argument(
        "--species",
        action="append",
        dest="species_ids",
        metavar="ID",
        help="Species id to include (repeatable; default: whole catalog)",
    )
    survey_parser.add_argument(
        "--max-records",
        type=positive_int,
        default=None,
        help="Per-species record cap (default: max_records_per_species from settings)",
    )
    survey_parser.add_argument(
        "--cell-size",
        type=positive_float,
        default=None,
        help="Grid cell size in degrees (default: cell_size_deg from settings)",
    )
    survey_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of a summary table",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Lookback: {settings.lookback_years} years")
    print(f"Thresholds: high={settings.high_threshold} medium={settings.medium_threshold}")
    return 0


def cmd_species(_args: argparse.Namespace) -> int:
    """Handle the 'species' command."""
    for species in DEFAULT_CATALOG:
        print(f"{species.id:<12} {species.display_name} - {species.region_hint}")
    return 0


def cmd_survey(args: argparse.Namespace) -> int:
    """Handle the 'survey' command: fetch, aggregate, report."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    try:
        catalog = select_species(args.species_ids) if args.species_ids else list(DEFAULT_CATALOG)
    except KeyError as e:
        print(f"Error: unknown species id {e}", file=sys.stderr)
        return 1

    try:
        results = asyncio.run(
            survey(
                catalog,
                max_records=args.max_records,
                cell_size_deg=args.cell_size,
            )
        )
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Error: could not reach GBIF ({e})", file=sys.stderr)
        return 1

    if args.json:
        payload = {
            species_id: aggregation_to_dict(result, include_samples=False, sort_cells=True)
            for species_id, result in results.items()
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{'species':<12} {'records':>8} {'cells':>6} {'high':>5} {'med':>5} {'low':>5} {'high%':>6}")
    for species_id, result in results.items():
        s = result.summary
        print(
            f"{species_id:<12} {s.total_records:>8} {s.cell_count:>6} "
            f"{s.high_count:>5} {s.med_count:>5} {s.low_count:>5} {s.high_risk_percent:>5.1f}%"
        )
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "species": cmd_species,
        "survey": cmd_survey,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
