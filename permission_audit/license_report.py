"""Section scanner that extracts granted object ranges from a license report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from .errors import UnsupportedLicenseFormatError
from .models import LicenseRange, ObjectType, RangeSet
from .normalize import parse_object_type, parse_range_bound

logger = logging.getLogger(__name__)

LICENSE_ENCODING = "cp1252"
SECTION_START_MARKER = "Object Assignment"
SECTION_END_MARKER = "Module Objects and Permissions"
# Column headings and rulers printed between the start marker and the first row.
HEADER_LINES_AFTER_START = 5
ROW_FIELD_COUNT = 5

# Ranges every license grants for customizations, checked before parsed ranges.
DEFAULT_RANGES = (
    LicenseRange(ObjectType.TABLE_DATA, 50000, 50009, "RIMDX"),
    LicenseRange(ObjectType.PAGE, 50000, 50099, "X"),
    LicenseRange(ObjectType.REPORT, 50000, 50099, "X"),
    LicenseRange(ObjectType.CODEUNIT, 50000, 50099, "X"),
    LicenseRange(ObjectType.XMLPORT, 50000, 50099, "X"),
    LicenseRange(ObjectType.QUERY, 50000, 50099, "X"),
)


class ScanState(Enum):
    """Position of the scanner relative to the object assignment section."""

    SEEKING_START = auto()
    SKIPPING_HEADER = auto()
    COLLECTING_ROWS = auto()
    DONE = auto()


@dataclass(slots=True)
class SectionScanner:
    """Line-by-line state machine over a license report.

    The header skip is a fixed count taken from the known report layout; the
    skipped lines are not inspected.
    """

    state: ScanState = ScanState.SEEKING_START
    header_lines_remaining: int = HEADER_LINES_AFTER_START

    def feed(self, line: str) -> bool:
        """Advance the state for one line and return whether it is a data row."""

        if self.state is ScanState.SEEKING_START:
            if line == SECTION_START_MARKER:
                self.state = ScanState.SKIPPING_HEADER
                self.header_lines_remaining = HEADER_LINES_AFTER_START
            return False

        if self.state is ScanState.SKIPPING_HEADER:
            self.header_lines_remaining -= 1
            if self.header_lines_remaining == 0:
                self.state = ScanState.COLLECTING_ROWS
            return False

        if self.state is ScanState.COLLECTING_ROWS:
            if line == SECTION_END_MARKER:
                self.state = ScanState.DONE
                return False
            return line != ""

        return False

    @property
    def found_section(self) -> bool:
        """Return whether the start marker has been seen."""

        return self.state is not ScanState.SEEKING_START


def default_range_set() -> RangeSet:
    """Return a new range set holding only the built-in customization ranges."""

    return RangeSet(list(DEFAULT_RANGES))


def parse_range_line(line: str, *, line_number: int) -> LicenseRange:
    """Parse one `type quantity from to permissions` row.

    The quantity column is not trusted; the range quantity is derived from the
    bounds instead.
    """

    fields = line.split()
    if len(fields) != ROW_FIELD_COUNT:
        raise UnsupportedLicenseFormatError(
            f"Line {line_number}: expected {ROW_FIELD_COUNT} fields, found {len(fields)}: {line!r}"
        )

    type_name, _quantity, from_field, to_field, permission_codes = fields
    range_from = parse_range_bound(from_field, line_number=line_number)
    range_to = parse_range_bound(to_field, line_number=line_number)
    if range_from > range_to:
        raise UnsupportedLicenseFormatError(f"Line {line_number}: range starts after it ends: {line!r}")

    return LicenseRange(
        object_type=parse_object_type(type_name),
        range_from=range_from,
        range_to=range_to,
        permission_codes=permission_codes,
    )


def _report_lines(text: str) -> list[str]:
    """Split on line feeds only; form feeds in printed reports stay inside a line."""

    return [line.removesuffix("\r") for line in text.split("\n")]


def parse_license_ranges(text: str) -> list[LicenseRange]:
    """Return the ranges listed in the object assignment section, in file order."""

    scanner = SectionScanner()
    ranges: list[LicenseRange] = []

    for line_number, line in enumerate(_report_lines(text), start=1):
        if scanner.feed(line):
            ranges.append(parse_range_line(line, line_number=line_number))
        if scanner.state is ScanState.DONE:
            break

    if not scanner.found_section:
        raise UnsupportedLicenseFormatError(f"License report has no {SECTION_START_MARKER!r} section")
    if scanner.state is not ScanState.DONE:
        logger.warning("License report has no %r marker; read ranges to end of file", SECTION_END_MARKER)

    return ranges


def parse_license_report(text: str) -> RangeSet:
    """Build the full range set: built-in ranges first, then the report's ranges."""

    range_set = default_range_set()
    parsed = parse_license_ranges(text)
    range_set.extend(parsed)
    logger.info("Parsed %d license ranges (%d built-in)", len(parsed), len(DEFAULT_RANGES))
    return range_set


def read_license_report(path: str | Path) -> str:
    """Read a license report exported in the legacy Windows-1252 encoding."""

    license_path = Path(path)
    logger.info("Reading license report: %s", license_path)
    # Undefined code points are replaced rather than aborting the decode.
    return license_path.read_text(encoding=LICENSE_ENCODING, errors="replace")


def load_license_report(path: str | Path) -> RangeSet:
    """Read and parse a license report file."""

    return parse_license_report(read_license_report(path))
