"""
Command-line entry point.

Reads an SBOM JSON file (Syft, SPDX or CycloneDX), decomposes every license
field and prints a table, or exports CSV when --csv is given.

Exit codes:
  0  success
  1  input/output error (unreadable file, malformed JSON, unknown format)
  2  --strict was given and at least one license field failed to parse
"""

import argparse
import logging
import sys
from typing import List, Optional

from sbom_licenses.services.license_workflow import analyze_document, count_failures
from sbom_licenses.services.sbom.exporter import LAYOUTS, export_csv_file, render_table
from sbom_licenses.services.sbom.loader import SbomLoadError, load_sbom
from sbom_licenses.utility.config import DEFAULT_LAYOUT, LOG_LEVEL, MAX_WORKERS
from sbom_licenses.utility.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARSE_FAILURES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sbom-licenses",
        description="Parse SBOM JSON output and export license data to CSV or display it as a table",
    )
    parser.add_argument("-f", "--file", dest="input_file", required=True,
                        help="Input SBOM JSON file (Syft, SPDX or CycloneDX)")
    parser.add_argument("--csv", dest="csv_output",
                        help="Export to CSV file (prints a table if not specified)")
    parser.add_argument("--layout", choices=LAYOUTS, default=DEFAULT_LAYOUT,
                        help="One row per package or one row per license entry (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=MAX_WORKERS,
                        help="Number of worker threads (default: %(default)s)")
    parser.add_argument("--strict", action="store_true",
                        help="Exit with status 2 if any license field cannot be parsed")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        help="Logging level (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.workers < 1:
        parser.error("--workers must be at least 1")

    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        doc = load_sbom(args.input_file)
        _, reports = analyze_document(doc, max_workers=args.workers)
    except SbomLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if args.csv_output:
        try:
            export_csv_file(args.csv_output, reports, args.layout)
        except OSError as exc:
            print(f"Error creating CSV file {args.csv_output}: {exc}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Successfully exported {len(reports)} artifacts to {args.csv_output}")
    else:
        print(render_table(reports, args.layout))

    failures = count_failures(reports)
    if failures and args.strict:
        logger.error("%d license field(s) could not be parsed", failures)
        return EXIT_PARSE_FAILURES
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
