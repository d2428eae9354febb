"""
Price a project file from the command line.

The input is a JSON document with the same shape the engine accepts:
  {"categories": [...], "settings": {...}}

Usage:
  estimate-project project.json
  estimate-project project.json --section payments --out payments.json
  estimate-project project.json --strict --no-cache --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import structlog

from config.settings import settings as app_settings
from services.calculator_engine import CalculatorEngine
from utils.logging_config import configure_logging

logger = structlog.get_logger(__name__)

SECTIONS = ("totals", "breakdowns", "payments", "all")


def _load_project(path: str) -> Dict[str, Any]:
    """Read and parse a project file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it is not JSON or not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("project file must contain a JSON object")
    return data


def build_report(engine: CalculatorEngine, section: str) -> Dict[str, Any]:
    """Results for the requested section, in wire form."""
    report: Dict[str, Any] = {}
    totals = None
    if section in ("totals", "all"):
        totals = engine.totals()
        report["totals"] = totals.to_dict()
    if section in ("breakdowns", "all"):
        report["breakdowns"] = engine.category_breakdowns().to_dict()
    if section in ("payments", "all"):
        grand_total = totals.total if totals is not None else None
        report["payments"] = engine.payment_details(grand_total).to_dict()
    report["status"] = engine.status().to_dict()
    return report


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Estimate project costs from a JSON project file")
    parser.add_argument("project", help="Path to a JSON file with 'categories' and 'settings'")
    parser.add_argument(
        "--section",
        choices=SECTIONS,
        default="all",
        help="Which results to print (default: all)",
    )
    parser.add_argument("--strict", action="store_true", help="Reject unknown measurement types")
    parser.add_argument("--no-cache", action="store_true", help="Disable result memoization")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL or INFO)")
    parser.add_argument("--out", required=False, help="Write JSON here instead of stdout")
    args = parser.parse_args(argv)

    configure_logging(args.log_level or app_settings.log_level)

    try:
        project = _load_project(args.project)
    except (OSError, ValueError) as e:
        print(f"Could not read project file {args.project}: {e}", file=sys.stderr)
        return 2

    options = {"strict_validation": args.strict}
    if args.no_cache:
        options["enable_caching"] = False

    engine = CalculatorEngine(
        project.get("categories"),
        project.get("settings"),
        options=options,
    )
    report = build_report(engine, args.section)
    logger.info("project_estimated", project=args.project, section=args.section)

    output = json.dumps(report, indent=2, sort_keys=True)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        print(f"Wrote {args.out}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
