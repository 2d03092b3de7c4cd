"""Console and CSV output for objects missing license permissions."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from .models import InventoryObject

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("missing-permissions.csv")

PERMISSIONS_HEADER = (
    "ObjectType",
    "FromObjectID",
    "ToObjectID",
    "Read",
    "Insert",
    "Modify",
    "Delete",
    "Execute",
    "AvailableRange",
    "Used",
    "ObjectTypeRemaining",
    "CompanyObjectPermissionID",
)
PERMISSION_LEVEL = "Direct"
AVAILABLE_RANGE_LABEL = "50000 - 99999"
NO_VIOLATIONS_MESSAGE = "No violations: every licensed object is covered by a permission range."


def format_console_line(obj: InventoryObject) -> str:
    """Return the `<id> <type>\\t<name>` line printed for a missing object."""

    return f"{obj.id} {obj.object_type.display_name}\t{obj.name}"


def permission_row(obj: InventoryObject) -> list[str]:
    """Return CSV fields for a single-id range covering the object."""

    object_id = str(obj.id)
    quantity = obj.id - obj.id + 1
    return [
        obj.object_type.display_name,
        object_id,
        object_id,
        PERMISSION_LEVEL,
        PERMISSION_LEVEL,
        PERMISSION_LEVEL,
        PERMISSION_LEVEL,
        PERMISSION_LEVEL,
        AVAILABLE_RANGE_LABEL,
        str(quantity),
        "0",
        "0",
    ]


def render_permissions_csv(violations: Sequence[InventoryObject]) -> str:
    """Render the permissions import file.

    Fields are comma-joined without quoting or escaping. Object names are not
    part of the file.
    """

    lines = [",".join(PERMISSIONS_HEADER)]
    lines.extend(",".join(permission_row(obj)) for obj in violations)
    return "\n".join(lines) + "\n"


def write_permissions_csv(violations: Sequence[InventoryObject], *, output_path: Path) -> None:
    """Write the permissions import file for the given violations."""

    output_path.write_text(render_permissions_csv(violations), encoding="utf-8")
    logger.info("Wrote %d permission rows to %s", len(violations), output_path)


def report_violations(
    violations: Sequence[InventoryObject],
    *,
    output_path: Path = DEFAULT_OUTPUT,
    stream: TextIO | None = None,
) -> Path | None:
    """Print missing objects and write the permissions file.

    Returns the written path, or None when there was nothing to report and no
    file was written.
    """

    out = stream if stream is not None else sys.stdout
    if not violations:
        print(NO_VIOLATIONS_MESSAGE, file=out)
        return None

    for obj in violations:
        print(format_console_line(obj), file=out)

    write_permissions_csv(violations, output_path=output_path)
    print(f"Wrote missing permissions to {output_path}", file=out)
    return output_path
