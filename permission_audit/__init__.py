"""Public API exports for license range parsing, inventory loading and reconciliation."""

from .errors import (
    InvalidObjectIdError,
    ReconciliationError,
    SheetSelectionError,
    UnknownObjectTypeError,
    UnsupportedLicenseFormatError,
    UnsupportedRowFormatError,
)
from .inventory import first_sheet, load_inventory, parse_inventory_rows, pick_sheet, prompt_for_sheet
from .license_report import (
    DEFAULT_RANGES,
    default_range_set,
    load_license_report,
    parse_license_ranges,
    parse_license_report,
)
from .models import InventoryObject, LicenseRange, ObjectType, RangeSet, ReconciliationResult
from .reconcile import find_covering_range, find_violations, reconcile_inventory
from .report import render_permissions_csv, report_violations, write_permissions_csv

__all__ = [
    "DEFAULT_RANGES",
    "InvalidObjectIdError",
    "InventoryObject",
    "LicenseRange",
    "ObjectType",
    "RangeSet",
    "ReconciliationError",
    "ReconciliationResult",
    "SheetSelectionError",
    "UnknownObjectTypeError",
    "UnsupportedLicenseFormatError",
    "UnsupportedRowFormatError",
    "default_range_set",
    "find_covering_range",
    "find_violations",
    "first_sheet",
    "load_inventory",
    "load_license_report",
    "parse_inventory_rows",
    "parse_license_ranges",
    "parse_license_report",
    "pick_sheet",
    "prompt_for_sheet",
    "reconcile_inventory",
    "render_permissions_csv",
    "report_violations",
    "write_permissions_csv",
]
