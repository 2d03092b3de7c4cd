"""Core typed models shared by the license parser, inventory loader and reconciler."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class ObjectType(Enum):
    """Closed set of object types found in license reports and inventory exports."""

    TABLE_DATA = "TableData"
    TABLE = "Table"
    REPORT = "Report"
    CODEUNIT = "Codeunit"
    XMLPORT = "XMLport"
    MENU_SUITE = "MenuSuite"
    PAGE = "Page"
    QUERY = "Query"
    SYSTEM = "System"
    FIELD_NUMBER = "FieldNumber"
    PAGE_EXTENSION = "PageExtension"
    TABLE_EXTENSION = "TableExtension"
    ENUM = "Enum"
    ENUM_EXTENSION = "EnumExtension"
    PROFILE = "Profile"
    PROFILE_EXTENSION = "ProfileExtension"
    PERMISSION_SET = "PermissionSet"
    PERMISSION_SET_EXTENSION = "PermissionSetExtension"
    REPORT_EXTENSION = "ReportExtension"

    @property
    def requires_license(self) -> bool:
        """Return whether objects of this type must be covered by a license range."""

        return self in _LICENSED_TYPES

    @property
    def display_name(self) -> str:
        """Return the spelling used in console output and the permissions CSV."""

        return _DISPLAY_NAMES.get(self, self.value)

    def __str__(self) -> str:
        return self.display_name


_LICENSED_TYPES = frozenset(
    {
        ObjectType.TABLE_DATA,
        ObjectType.REPORT,
        ObjectType.CODEUNIT,
        ObjectType.XMLPORT,
        ObjectType.QUERY,
        ObjectType.PAGE,
    }
)

# The license import format expects an upper-case "P" for XMLPort.
_DISPLAY_NAMES = {ObjectType.XMLPORT: "XMLPort"}


@dataclass(frozen=True, slots=True)
class LicenseRange:
    """One granted object-id range from a license report."""

    object_type: ObjectType
    range_from: int
    range_to: int
    permission_codes: str = ""

    def __post_init__(self) -> None:
        if self.range_from > self.range_to:
            raise ValueError(
                f"Invalid {self.object_type} range: {self.range_from} is greater than {self.range_to}"
            )

    @property
    def quantity(self) -> int:
        """Return the number of ids covered by the range."""

        return self.range_to - self.range_from + 1

    def covers(self, object_type: ObjectType, object_id: int) -> bool:
        """Return whether the range grants the given object type and id."""

        return self.object_type is object_type and self.range_from <= object_id <= self.range_to


@dataclass(frozen=True, slots=True)
class InventoryObject:
    """Canonical representation of one object row from the inventory export."""

    object_type: ObjectType
    id: int
    name: str


@dataclass(slots=True)
class RangeSet:
    """Ordered collection of license ranges.

    Order is significant: lookups return the first covering range, and
    built-in ranges are stored before ranges parsed from a report.
    """

    ranges: list[LicenseRange] = field(default_factory=list)

    def append(self, license_range: LicenseRange) -> None:
        self.ranges.append(license_range)

    def extend(self, license_ranges: Iterable[LicenseRange]) -> None:
        self.ranges.extend(license_ranges)

    def find_covering(self, object_type: ObjectType, object_id: int) -> LicenseRange | None:
        """Return the first range covering the type and id, or None."""

        for license_range in self.ranges:
            if license_range.covers(object_type, object_id):
                return license_range
        return None

    def __iter__(self) -> Iterator[LicenseRange]:
        return iter(self.ranges)

    def __len__(self) -> int:
        return len(self.ranges)


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Violations found by one reconciliation run plus how many objects each filter kept."""

    violations: tuple[InventoryObject, ...]
    total_objects: int
    licensed_objects: int
    checked_objects: int
    range_count: int

    @property
    def covered_objects(self) -> int:
        """Return the number of checked objects that matched a license range."""

        return self.checked_objects - len(self.violations)

    @property
    def has_violations(self) -> bool:
        return bool(self.violations)
