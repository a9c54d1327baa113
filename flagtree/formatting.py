# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Column alignment for help text.

`align` pads delimited lines so that every column lines up. Cells may span
several lines: each embedded newline starts a new output row, and the other
columns of that row are filled with empty cells, so a multi-line cell is not
measured as one very wide cell.

Cell contents are never trimmed. Leading whitespace inside a multi-line cell is
how indented continuation lines are written, and it must survive alignment.

Example:
    align(["  -h, --help\tPrint help", "  --num <n>\tsome number"])
"""
from __future__ import annotations

from typing import Sequence


def pad(text: str, width: int) -> str:
    """Right-pad `text` with spaces to `width`. Longer text is returned unchanged."""
    if width <= len(text):
        return text
    return text + " " * (width - len(text))


def split_rows(lines: Sequence[str], delimiter: str = "\t") -> list[list[str]]:
    """
    Split delimited lines into a grid of single-line cells.

    `"col1\\tcol2\\nline2\\tcol3"` becomes:
        ["col1", "col2",  "col3"]
        ["",     "line2", ""    ]
    """
    rows: list[list[str]] = []
    for line in lines:
        cell_lines = [cell.split("\n") for cell in line.split(delimiter)]
        height = max(len(cell) for cell in cell_lines)
        for index in range(height):
            rows.append(
                [cell[index] if index < len(cell) else "" for cell in cell_lines]
            )
    return rows


def align(
    lines: Sequence[str],
    delimiter: str = "\t",
    min_column_width: int = 20,
    column_padding: int = 3,
) -> list[str]:
    """
    Align delimited lines into equal-width columns.

    Args:
        lines (Sequence[str]): Lines containing zero or more delimiters.
        delimiter (str): The column separator within each line.
        min_column_width (int): Minimum width of every column.
        column_padding (int): Spaces placed between columns.

    Returns:
        list[str]: One output line per row; multi-line cells produce extra rows.
    """
    rows = split_rows(lines, delimiter)

    widths: dict[int, int] = {}
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(len(cell), widths.get(index, min_column_width))

    separator = " " * column_padding
    return [
        separator.join(pad(cell, widths[index]) for index, cell in enumerate(row))
        for row in rows
    ]
