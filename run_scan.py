#!/usr/bin/env python3
"""
Command-line scanner for PHP type declarations.

Builds a ClassFinder from an optional config file, scans the given roots and
writes one JSON object per declaration (JSON lines) to a file or stdout.

Usage:
    python run_scan.py --root src
    python run_scan.py --root src --root lib --exclude vendor --mode class --mode enum
    python run_scan.py --root src --config class_scanner.yaml --output-file out/classes.jsonl
"""

import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional, TextIO

from core.scan_config import ConfigValidationError, FinderConfig, load_finder_config
from core.structured_logging import configure_structured_logging, set_scan_id
from extraction.errors import ClassScanError
from extraction.models import KindMask, ScanStats
from finder.class_finder import ClassFinder

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="PHP class/interface/enum/trait scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_scan.py --root src\n"
            "  python run_scan.py --root src --exclude vendor --mode class\n"
        ),
    )

    parser.add_argument(
        "--root",
        action="append",
        required=True,
        help="Directory to scan. Repeat for several roots.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Directory, relative path or glob to skip. Repeatable. Added to config excludes.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML or JSON file providing mode, filters, exclude and continue_on_error.",
    )
    parser.add_argument(
        "--mode",
        action="append",
        default=None,
        help="Declaration kind to find (class, interface, enum, trait, all). Overrides config.",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        default=False,
        help="Skip files that fail to parse instead of aborting the scan.",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Path for the JSON lines output. Default: stdout.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )

    return parser.parse_args(argv)


def build_finder(args: argparse.Namespace) -> tuple[ClassFinder, List[str]]:
    """Create the finder and the exclusion list from config plus CLI overrides."""
    config = load_finder_config(args.config) if args.config else FinderConfig()
    finder = ClassFinder.from_config(config)

    if args.mode:
        finder = ClassFinder(
            KindMask.from_names(args.mode),
            finder.filters,
            continue_on_error=finder.continue_on_error,
        )
    if args.continue_on_error and not finder.continue_on_error:
        finder = ClassFinder(finder.mask, finder.filters, continue_on_error=True)

    return finder, list(config.exclude) + list(args.exclude)


def write_declarations(
    finder: ClassFinder,
    roots: List[str],
    exclude: List[str],
    out: TextIO,
    stats: ScanStats,
) -> int:
    """Stream declarations to ``out`` as JSON lines.

    Returns:
        Number of lines written.
    """
    lines_written = 0
    for declaration in finder.find(roots, exclude, stats=stats):
        out.write(json.dumps(declaration.to_dict(), ensure_ascii=False) + "\n")
        lines_written += 1
    return lines_written


def run(args: argparse.Namespace) -> int:
    """Execute one scan. Returns the process exit code."""
    scan_id = set_scan_id()
    logger.info("Scan %s over %s", scan_id, ", ".join(args.root))

    t0 = time.time()
    stats = ScanStats()
    try:
        finder, exclude = build_finder(args)
    except ConfigValidationError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid argument: %s", e)
        return 1
    logger.info("Using %r", finder)

    try:
        if args.output_file:
            os.makedirs(os.path.dirname(os.path.abspath(args.output_file)), exist_ok=True)
            with open(args.output_file, "w", encoding="utf-8") as f:
                lines = write_declarations(finder, args.root, exclude, f, stats)
        else:
            lines = write_declarations(finder, args.root, exclude, sys.stdout, stats)

    except (ClassScanError, ValueError) as e:
        logger.error("Scan failed: %s", e)
        return 1

    logger.info("Scan completed in %.2fs: %d declarations written (%s)", time.time() - t0, lines, stats)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the scanner."""
    args = parse_args(argv)
    configure_structured_logging(getattr(logging, args.log_level))
    sys.exit(run(args))


if __name__ == "__main__":
    main()
