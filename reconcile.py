"""Command-line runner that finds licensed objects missing permission ranges.

This script parses the license report and the object export, reconciles them,
prints every object that is not covered by a licensed range and writes a
permissions import file (`missing-permissions.csv` by default).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException

from permission_audit import (
    ReconciliationError,
    load_inventory,
    load_license_report,
    reconcile_inventory,
    report_violations,
)
from permission_audit.inventory import SheetSelector, first_sheet, prompt_for_sheet
from permission_audit.models import ReconciliationResult
from permission_audit.report import DEFAULT_OUTPUT

logger = logging.getLogger("reconcile")


def setup_logging(level_str: str = "WARNING") -> None:
    """Configure logging."""

    level = getattr(logging, level_str.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _sheet_selector(*, interactive: bool) -> SheetSelector:
    """Return the sheet selector matching the command-line options."""

    return prompt_for_sheet if interactive else first_sheet


def run(
    *,
    license_path: Path,
    objects_path: Path,
    output_path: Path,
    select_sheet: SheetSelector,
    sheet_name: str | None = None,
) -> ReconciliationResult:
    """Run the full reconciliation and emit console output and the CSV file."""

    # The license is parsed first so a malformed report fails before the workbook is opened.
    range_set = load_license_report(license_path)
    objects = load_inventory(objects_path, select_sheet=select_sheet, sheet_name=sheet_name)
    objects = load_inventory(objects_path, select_sheet=select_sheet)
    result = reconcile_inventory(range_set, objects)
    report_violations(result.violations, output_path=output_path)
    return result


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for a reconciliation run."""

    parser = argparse.ArgumentParser(
        description="Find licensed objects that are not covered by a permission range."
    )
    parser.add_argument(
        "-l", "--license", type=Path, required=True, help="Path to detailed permission report text file"
    )
    parser.add_argument(
        "-o", "--objects", type=Path, required=True, help="Path to exported objects in xlsx format"
    )
    parser.add_argument(
        "--output", type=Path, default=DEFAULT_OUTPUT, help="Path of the missing permissions CSV"
    )
    parser.add_argument("--sheet", default=None, help="Worksheet to read instead of prompting")
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; use the first worksheet when the workbook has several",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    setup_logging(args.log_level)

    select_sheet = _sheet_selector(interactive=not args.non_interactive and sys.stdin.isatty())
    try:
        run(
            license_path=args.license,
            objects_path=args.objects,
            output_path=args.output,
            select_sheet=select_sheet,
            sheet_name=args.sheet,
        )
    except (ReconciliationError, OSError, InvalidFileException, BadZipFile) as exc:
        logger.debug("Reconciliation aborted", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
