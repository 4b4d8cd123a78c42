"""
Column formatters for SummaryTable.

A formatter takes a column of values and the column name and returns one
display string per value. Formatters own numeric precision; the table
only lays the strings out. Every cell a formatter returns is right-padded
to the same width, max(len(name), widest value) + 2, which gives adjacent
columns a two-space gutter.

Missing values (None or NaN) render as NA_MARKER so unavailable
statistics are never mistaken for numbers.
"""

from typing import Any, Callable, Sequence
import math

from pystatmodel.core.tolerances import NA_MARKER

Formatter = Callable[[Sequence[Any], str], list[str]]

# Cells separating adjacent columns
GUTTER = 2


def is_missing(value: Any) -> bool:
    """True for None and floating NaN."""
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def pad_cells(cells: Sequence[str], name: str) -> list[str]:
    """Right-justify cells to a common width that also fits the header."""
    width = max([len(name), *(len(c) for c in cells)]) + GUTTER
    return [c.rjust(width) for c in cells]


def format_strings(values: Sequence[Any], name: str) -> list[str]:
    """Render values with str()."""
    return pad_cells(
        [NA_MARKER if is_missing(v) else str(v) for v in values], name
    )


def format_int(values: Sequence[Any], name: str) -> list[str]:
    return pad_cells(
        [NA_MARKER if is_missing(v) else f"{int(v):d}" for v in values], name
    )


def float_formatter(precision: int = 4) -> Formatter:
    """Formatter rendering floats in fixed notation with `precision` decimals."""
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")

    def fmt(values: Sequence[Any], name: str) -> list[str]:
        return pad_cells(
            [NA_MARKER if is_missing(v) else f"{float(v):.{precision}f}" for v in values],
            name,
        )

    return fmt


format_float = float_formatter(4)


def format_pvalue(values: Sequence[Any], name: str) -> list[str]:
    """p-values: fixed notation, scientific below 1e-4."""
    cells = []
    for v in values:
        if is_missing(v):
            cells.append(NA_MARKER)
        elif 0 < v < 1e-4:
            cells.append(f"{float(v):.2e}")
        else:
            cells.append(f"{float(v):.4f}")
    return pad_cells(cells, name)
