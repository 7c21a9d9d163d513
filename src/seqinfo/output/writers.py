"""
Report output adapters: delimited text and xlsx spreadsheet.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TextIO

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..core.constants import DEFAULT_SEPARATOR, SHEET_NAME


def print_table(rows: Iterable[Sequence[str]], sep: str = DEFAULT_SEPARATOR, stream: TextIO | None = None) -> None:
    """Write each row joined by ``sep``, one line per row."""
    out = stream or sys.stdout
    for row in rows:
        out.write(sep.join(row) + "\n")
    out.flush()


def write_xlsx(rows: Iterable[Sequence[str]], path: Path) -> Path:
    """Write rows to a new workbook at ``path``, replacing any existing file.

    Control characters that worksheets cannot hold are dropped from cells.

    Args:
        rows: Table rows, labels first.
        path: Destination ``.xlsx`` file.

    Returns:
        Path: The written file.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME
    for i, row in enumerate(rows, 1):
        for j, value in enumerate(row, 1):
            ws.cell(row=i, column=j, value=ILLEGAL_CHARACTERS_RE.sub("", value))
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
