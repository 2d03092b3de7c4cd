"""Inventory export loading: workbook sheet selection and row normalization."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, TextIO, TypeAlias

from openpyxl import load_workbook

from .errors import SheetSelectionError, UnsupportedRowFormatError
from .models import InventoryObject
from .normalize import cell_text, parse_object_id, parse_object_type

logger = logging.getLogger(__name__)

MIN_ROW_CELLS = 3

SheetSelector: TypeAlias = Callable[[Sequence[str]], str | None]


def first_sheet(sheet_names: Sequence[str]) -> str | None:
    """Non-interactive selector that always picks the first sheet."""

    return sheet_names[0] if sheet_names else None


def prompt_for_sheet(
    sheet_names: Sequence[str],
    *,
    input_fn: Callable[[str], str] = input,
    stream: TextIO | None = None,
) -> str | None:
    """Ask the operator to choose a sheet by number.

    An empty answer selects the first sheet and `q` cancels. Invalid answers
    are asked again.
    """

    out = stream if stream is not None else sys.stderr
    print("Select the sheet with the exported objects:", file=out)
    for index, name in enumerate(sheet_names, start=1):
        marker = ">" if index == 1 else " "
        print(f"{marker} {index}. {name}", file=out)

    while True:
        try:
            answer = input_fn(f"Sheet [1-{len(sheet_names)}, q to cancel] (1): ").strip()
        except EOFError:
            return None
        if answer == "":
            return sheet_names[0]
        if answer.lower() == "q":
            return None
        if answer.isascii() and answer.isdecimal() and 1 <= int(answer) <= len(sheet_names):
            return sheet_names[int(answer) - 1]
        print(f"Not a sheet number: {answer}", file=out)


def pick_sheet(
    sheet_names: Sequence[str],
    select_sheet: SheetSelector = prompt_for_sheet,
    *,
    sheet_name: str | None = None,
) -> str:
    """Return the sheet to read.

    A `sheet_name` given up front must exist, even in a one-sheet workbook.
    Otherwise `select_sheet` is asked only when there is a choice.
    """

    if not sheet_names:
        raise SheetSelectionError("Inventory workbook has no sheets")
    if sheet_name is not None:
        selected: str | None = sheet_name
    elif len(sheet_names) == 1:
        return sheet_names[0]
    else:
        selected = select_sheet(sheet_names)

    if selected is None:
        raise SheetSelectionError("No sheet selected")
    if selected not in sheet_names:
        raise SheetSelectionError(f"Selected sheet does not exist: {selected!r}")
    return selected


def _is_blank_row(row: Sequence[Any]) -> bool:
    """Return True when every cell in the row is empty."""

    return all(cell is None or (isinstance(cell, str) and cell.strip() == "") for cell in row)


def _pad_rows(rows: Iterable[Sequence[Any]]) -> list[tuple[Any, ...]]:
    """Pad every row with empty cells to the width of the widest row.

    Sheets saved without a dimension record come back ragged, each row ending
    at its last filled cell.
    """

    materialized = [tuple(row) for row in rows]
    width = max((len(row) for row in materialized), default=0)
    return [row + (None,) * (width - len(row)) for row in materialized]


def parse_inventory_rows(rows: Iterable[Sequence[Any]]) -> list[InventoryObject]:
    """Convert export rows into inventory objects, discarding the header row.

    Each data row needs the type, id and name cells; trailing cells are
    ignored. Rows holding only empty or whitespace cells, which exports often
    trail with, are skipped.
    """

    objects: list[InventoryObject] = []
    row_iter = iter(rows)
    next(row_iter, None)

    for row_number, row in enumerate(row_iter, start=2):
        if _is_blank_row(row):
            logger.debug("Skipping blank inventory row %d", row_number)
            continue
        if len(row) < MIN_ROW_CELLS:
            raise UnsupportedRowFormatError(
                f"Row {row_number}: expected at least {MIN_ROW_CELLS} cells, found {len(row)}"
            )

        object_type, object_id, name = row[:MIN_ROW_CELLS]
        objects.append(
            InventoryObject(
                object_type=parse_object_type(cell_text(object_type)),
                id=parse_object_id(object_id),
                name=cell_text(name),
            )
        )

    return objects


def load_inventory(
    path: str | Path,
    *,
    select_sheet: SheetSelector = prompt_for_sheet,
    sheet_name: str | None = None,
) -> list[InventoryObject]:
    """Load inventory objects from an xlsx export."""

    workbook_path = Path(path)
    logger.info("Reading inventory workbook: %s", workbook_path)
    workbook = load_workbook(workbook_path, read_only=True, data_only=True)
    try:
        selected = pick_sheet(workbook.sheetnames, select_sheet, sheet_name=sheet_name)
        logger.info("Using sheet %r", selected)
        rows = _pad_rows(workbook[selected].iter_rows(values_only=True))
        objects = parse_inventory_rows(rows)
    finally:
        workbook.close()

    logger.info("Loaded %d inventory objects", len(objects))
    return objects
