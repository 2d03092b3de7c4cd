"""Tests for extracting license ranges from the detailed permission report."""

from __future__ import annotations

from pathlib import Path

import pytest

from permission_audit.errors import UnknownObjectTypeError, UnsupportedLicenseFormatError
from permission_audit.license_report import (
    DEFAULT_RANGES,
    HEADER_LINES_AFTER_START,
    ScanState,
    SectionScanner,
    default_range_set,
    load_license_report,
    parse_license_ranges,
    parse_license_report,
    parse_range_line,
)
from permission_audit.models import LicenseRange, ObjectType

REPORT_HEADER = """\
Detailed Permission Report
Licensed to: CRONUS International Ltd.

Object Assignment
-----------------

Object Type    Quantity   Range From   Range To   Permissions
-----------     --------   ----------   --------   -----------

"""

REPORT_FOOTER = """\
Module Objects and Permissions
Module   Object Type   From   To   Permissions   Extra Column
"""


def _report(*rows: str) -> str:
    """Build a report with the given object assignment rows."""
    return REPORT_HEADER + "".join(f"{row}\n" for row in rows) + REPORT_FOOTER


def test_default_ranges_cover_customization_allowances() -> None:
    """The built-in seed grants the basic customization ranges in a fixed order."""
    assert [(r.object_type, r.range_from, r.range_to, r.permission_codes) for r in DEFAULT_RANGES] == [
        (ObjectType.TABLE_DATA, 50000, 50009, "RIMDX"),
        (ObjectType.PAGE, 50000, 50099, "X"),
        (ObjectType.REPORT, 50000, 50099, "X"),
        (ObjectType.CODEUNIT, 50000, 50099, "X"),
        (ObjectType.XMLPORT, 50000, 50099, "X"),
        (ObjectType.QUERY, 50000, 50099, "X"),
    ]


def test_default_range_set_is_a_fresh_copy() -> None:
    """Appending to one default range set does not change the seed."""
    range_set = default_range_set()
    range_set.append(LicenseRange(ObjectType.PAGE, 60000, 60010, "X"))
    assert len(default_range_set()) == len(DEFAULT_RANGES)


def test_parse_license_ranges_reads_rows_in_file_order() -> None:
    """Rows between the header block and end marker become ranges in order."""
    text = _report(
        "Codeunit        10         70000        70009      X",
        "",
        "TableData       100        70000        70099      RIMDX",
        "XMLport         1          70100        70100      X",
    )

    ranges = parse_license_ranges(text)

    assert ranges == [
        LicenseRange(ObjectType.CODEUNIT, 70000, 70009, "X"),
        LicenseRange(ObjectType.TABLE_DATA, 70000, 70099, "RIMDX"),
        LicenseRange(ObjectType.XMLPORT, 70100, 70100, "X"),
    ]


def test_parse_license_report_appends_after_defaults() -> None:
    """Built-in ranges come first so they win first-match lookups."""
    text = _report("Page  5  50090  50200  RIMDX")

    range_set = parse_license_report(text)

    assert list(range_set)[: len(DEFAULT_RANGES)] == list(DEFAULT_RANGES)
    assert list(range_set)[-1] == LicenseRange(ObjectType.PAGE, 50090, 50200, "RIMDX")
    covering = range_set.find_covering(ObjectType.PAGE, 50095)
    assert covering is not None
    assert covering.permission_codes == "X"


def test_quantity_column_is_not_trusted() -> None:
    """A wrong quantity in the report does not change the derived quantity."""
    license_range = parse_range_line("Report 999 60000 60009 X", line_number=1)
    assert license_range.quantity == 10


def test_lines_after_end_marker_are_ignored() -> None:
    """The module section uses a different layout and is never parsed."""
    text = _report("Query 1 60000 60000 X") + "Query  1  60001  60001  X  extra  columns\n"
    assert len(parse_license_ranges(text)) == 1


def test_header_lines_are_skipped_without_inspection() -> None:
    """Five lines after the start marker are skipped even if they look like rows."""
    text = (
        "Object Assignment\n"
        "Page 1 60000 60000 X\n"
        "not a row\n"
        "\n"
        "also not a row at all\n"
        "-----\n"
        "Report 1 60000 60000 X\n"
        "Module Objects and Permissions\n"
    )
    assert parse_license_ranges(text) == [LicenseRange(ObjectType.REPORT, 60000, 60000, "X")]


def test_crlf_line_endings_are_accepted() -> None:
    """Markers still match exactly when the report uses Windows line endings."""
    text = _report("Codeunit 10 70000 70009 X").replace("\n", "\r\n")
    assert parse_license_ranges(text) == [LicenseRange(ObjectType.CODEUNIT, 70000, 70009, "X")]


def test_missing_end_marker_reads_to_end_of_input() -> None:
    """Without the end marker every remaining non-blank line is a row."""
    text = REPORT_HEADER + "Codeunit 10 70000 70009 X\n\n"
    assert parse_license_ranges(text) == [LicenseRange(ObjectType.CODEUNIT, 70000, 70009, "X")]


def test_missing_start_marker_is_fatal() -> None:
    """A report without the object assignment section is an unknown format."""
    text = "Detailed Permission Report\nCodeunit 10 70000 70009 X\n"
    with pytest.raises(UnsupportedLicenseFormatError, match="Object Assignment"):
        parse_license_report(text)


def test_marker_must_match_the_whole_line() -> None:
    """Indented or decorated marker lines do not start the section."""
    text = "  Object Assignment\nObject Assignment:\n"
    with pytest.raises(UnsupportedLicenseFormatError):
        parse_license_ranges(text)


@pytest.mark.parametrize(
    "row",
    [
        "Codeunit 10 70000 70009",
        "Codeunit 10 70000 70009 X extra",
        "Codeunit",
    ],
)
def test_rows_without_five_fields_are_fatal(row: str) -> None:
    """Any row layout other than five fields is unimplemented."""
    with pytest.raises(UnsupportedLicenseFormatError, match="expected 5 fields"):
        parse_license_ranges(_report(row))


def test_row_error_reports_source_line_number() -> None:
    """Format errors point at the offending line of the report."""
    text = _report("Codeunit 10 70000 70009 X", "Page 1 2")
    with pytest.raises(UnsupportedLicenseFormatError, match="Line 11"):
        parse_license_ranges(text)


def test_unknown_object_type_in_report_is_fatal() -> None:
    """Unknown type names fail the parse."""
    with pytest.raises(UnknownObjectTypeError):
        parse_license_ranges(_report("Dataport 10 70000 70009 X"))


def test_inverted_range_in_report_is_fatal() -> None:
    """A row whose start is after its end cannot become a range."""
    with pytest.raises(UnsupportedLicenseFormatError, match="starts after it ends"):
        parse_license_ranges(_report("Page 10 70009 70000 X"))


def test_underscored_range_bound_in_report_is_fatal() -> None:
    """Bounds written with digit separators are rejected, not read as numbers."""
    with pytest.raises(UnsupportedLicenseFormatError, match="Line 10: range bound"):
        parse_license_ranges(_report("Codeunit 1 50_000 50_001 X"))


def test_scanner_transitions_through_each_state() -> None:
    """The scanner moves from seeking to skipping to collecting to done."""
    scanner = SectionScanner()
    assert scanner.feed("preamble") is False
    assert scanner.state is ScanState.SEEKING_START

    assert scanner.feed("Object Assignment") is False
    assert scanner.state is ScanState.SKIPPING_HEADER
    for _ in range(HEADER_LINES_AFTER_START):
        assert scanner.feed("Page 1 1 1 X") is False
    assert scanner.state is ScanState.COLLECTING_ROWS

    assert scanner.feed("") is False
    assert scanner.feed("Page 1 1 1 X") is True
    assert scanner.feed("Module Objects and Permissions") is False
    assert scanner.state is ScanState.DONE
    assert scanner.feed("Page 1 1 1 X") is False


def test_load_license_report_decodes_windows_1252(tmp_path: Path) -> None:
    """License files are read in the legacy Western-European encoding."""
    path = tmp_path / "license.txt"
    text = "Lizenz für Müller GmbH\n" + _report("Codeunit 10 70000 70009 X")
    path.write_bytes(text.encode("cp1252"))

    range_set = load_license_report(path)

    assert len(range_set) == len(DEFAULT_RANGES) + 1


def test_load_license_report_missing_file_raises(tmp_path: Path) -> None:
    """An unreadable license file is an I/O failure."""
    with pytest.raises(FileNotFoundError):
        load_license_report(tmp_path / "missing.txt")
