"""Field-level normalization helpers used by license and inventory parsing."""

from __future__ import annotations

import math
import re
from typing import Any

from .errors import InvalidObjectIdError, UnknownObjectTypeError, UnsupportedLicenseFormatError
from .models import ObjectType

# Names are matched exactly. XMLport is the only type with two accepted spellings.
_OBJECT_TYPES_BY_NAME: dict[str, ObjectType] = {object_type.value: object_type for object_type in ObjectType}
_OBJECT_TYPES_BY_NAME["XMLPort"] = ObjectType.XMLPORT

_RANGE_BOUND_RE = re.compile(r"[+-]?[0-9]+")


def parse_object_type(value: str) -> ObjectType:
    """Return the object type for an exact, case-sensitive type name.

    Surrounding whitespace is ignored, but casing is not: `codeunit` is
    rejected rather than guessed.
    """

    name = value.strip()
    try:
        return _OBJECT_TYPES_BY_NAME[name]
    except KeyError:
        raise UnknownObjectTypeError(name) from None


def parse_object_id(value: Any) -> int:
    """Coerce a spreadsheet cell value to an object id.

    Integers are used as-is and floats are truncated toward zero. Every other
    value is rejected; there is no sentinel substitute.
    """

    # bool is an int subclass but never a meaningful id.
    if isinstance(value, bool):
        raise InvalidObjectIdError(f"Object id is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidObjectIdError(f"Object id is not a finite number: {value!r}")
        return math.trunc(value)
    raise InvalidObjectIdError(f"Object id is not a number: {value!r}")


def parse_range_bound(value: str, *, line_number: int) -> int:
    """Parse one range bound from a license report line.

    Only an optional sign followed by ASCII digits is a bound; `int()` alone
    would also take underscores and other scripts' digits.
    """

    if _RANGE_BOUND_RE.fullmatch(value) is None:
        raise UnsupportedLicenseFormatError(f"Line {line_number}: range bound is not an integer: {value!r}")
    return int(value)


def cell_text(value: Any) -> str:
    """Render a spreadsheet cell value as text, mapping empty cells to ''."""

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
