"""Pytest configuration for local package import resolution and shared fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    # Ensure tests can import `permission_audit` and the runner without installation.
    sys.path.insert(0, project_root_str)

SheetRows = dict[str, list[tuple[object, ...]]]
WorkbookWriter = Callable[[Path, SheetRows], Path]


@pytest.fixture
def write_workbook() -> WorkbookWriter:
    """Return a helper that saves an object export with one sheet per entry, in order."""

    def _write(path: Path, sheets: SheetRows) -> Path:
        workbook = Workbook()
        default_sheet = workbook.active
        for title, rows in sheets.items():
            sheet = workbook.create_sheet(title)
            for row in rows:
                sheet.append(list(row))
        workbook.remove(default_sheet)
        workbook.save(path)
        return path

    return _write
