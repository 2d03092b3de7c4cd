"""Reconciliation of inventory objects against licensed object ranges."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import InventoryObject, LicenseRange, RangeSet, ReconciliationResult

logger = logging.getLogger(__name__)

# Ids below the band belong to the base application; ids above are not licensable here.
CUSTOMIZATION_ID_MIN = 50000
CUSTOMIZATION_ID_MAX = 99999


def in_customization_band(object_id: int) -> bool:
    """Return whether an id falls inside the licensable customization band."""

    return CUSTOMIZATION_ID_MIN <= object_id <= CUSTOMIZATION_ID_MAX


def needs_coverage(obj: InventoryObject) -> bool:
    """Return whether an object must be covered by a license range."""

    return obj.object_type.requires_license and in_customization_band(obj.id)


def find_covering_range(obj: InventoryObject, range_set: RangeSet) -> LicenseRange | None:
    """Return the first range, in stored order, that covers the object."""

    return range_set.find_covering(obj.object_type, obj.id)


def find_violations(range_set: RangeSet, objects: Sequence[InventoryObject]) -> list[InventoryObject]:
    """Return objects that need a license range but have none, in inventory order."""

    return [obj for obj in objects if needs_coverage(obj) and find_covering_range(obj, range_set) is None]


def reconcile_inventory(range_set: RangeSet, objects: Sequence[InventoryObject]) -> ReconciliationResult:
    """Reconcile the inventory against the range set and count each filter stage."""

    licensed_objects = sum(1 for obj in objects if obj.object_type.requires_license)
    checked = [obj for obj in objects if needs_coverage(obj)]
    violations = tuple(find_violations(range_set, checked))

    result = ReconciliationResult(
        violations=violations,
        total_objects=len(objects),
        licensed_objects=licensed_objects,
        checked_objects=len(checked),
        range_count=len(range_set),
    )
    logger.info(
        "Checked %d of %d objects against %d ranges: %d covered, %d missing",
        result.checked_objects,
        result.total_objects,
        result.range_count,
        result.covered_objects,
        len(result.violations),
    )
    return result
