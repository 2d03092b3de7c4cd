"""Exception types raised when license or inventory input cannot be processed."""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for fatal errors that abort a reconciliation run."""


class UnsupportedLicenseFormatError(ReconciliationError, ValueError):
    """License report layout does not match the expected section structure."""


class UnknownObjectTypeError(ReconciliationError, ValueError):
    """Object type name is not one of the known object types."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown object type: {name!r}")
        self.name = name


class UnsupportedRowFormatError(ReconciliationError, ValueError):
    """Inventory row does not carry the type, id and name cells."""


class InvalidObjectIdError(ReconciliationError, ValueError):
    """Inventory object id is not an integer or floating point value."""


class SheetSelectionError(ReconciliationError):
    """No usable worksheet could be selected from the inventory workbook."""
