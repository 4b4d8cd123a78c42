"""
Fixed-width text summaries of fitted models.

SummaryTable is pure layout. It knows nothing about models: callers hand
it a title, a block of "key: value" metadata strings, and named columns
with a formatter per column (see pystatmodel.inference.formatting).

Layout:

            <centered title>
    ===========================
    <top[0]>    <gap>    <top[1]>
    <top[2]>    <gap>    <top[3]>
    ---------------------------
      col1  col2  col3
    ---------------------------
      ...   ...   ...
    ---------------------------
    <msg lines>
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

from pystatmodel.core.exceptions import DimensionError
from pystatmodel.inference.formatting import Formatter

# Spaces between the two columns of the top block
TOP_GAP = 10


@dataclass
class SummaryTable:
    """
    Summary values for a fitted model, renderable as text.

    Attributes:
        title: Title line, centered over the table
        colnames: Column names
        colfmt: Formatter for each column
        cols: cols[j] is the j'th column's values
        top: Metadata strings shown above the table, two per line
        msg: Messages shown below the table
        gap: Spaces between the two columns of the top block
    """
    title: str
    colnames: list[str]
    colfmt: list[Formatter]
    cols: list[Sequence[Any]]
    top: list[str] = field(default_factory=list)
    msg: list[str] = field(default_factory=list)
    gap: int = TOP_GAP

    def _formatted(self) -> tuple[list[list[str]], list[int]]:
        """Format every column; return the cells and each column's width."""
        if not (len(self.colnames) == len(self.colfmt) == len(self.cols)):
            raise DimensionError(
                f"SummaryTable: {len(self.colnames)} names, {len(self.colfmt)} formatters "
                f"and {len(self.cols)} columns"
            )

        tab = []
        widths = []
        for name, fmt, col in zip(self.colnames, self.colfmt, self.cols):
            cells = list(fmt(col, name))
            tab.append(cells)
            widths.append(max([len(name), *(len(c) for c in cells)]))

        nrows = {len(cells) for cells in tab}
        if len(nrows) > 1:
            details = ", ".join(f"{n}={len(c)}" for n, c in zip(self.colnames, tab))
            raise DimensionError(f"SummaryTable: columns have different lengths: {details}")

        return tab, widths

    def _top_width(self) -> int:
        return max((len(x) for x in self.top), default=0)

    def width(self) -> int:
        """Total width of the table."""
        _, widths = self._formatted()
        return self._total_width(widths)

    def _total_width(self, widths: list[int]) -> int:
        tw = max(sum(widths), len(self.title))
        if self.top:
            tw = max(tw, self.gap + 2 * self._top_width())
        return tw

    def _top_block(self) -> list[str]:
        """Metadata strings in two left-aligned columns."""
        w = self._top_width()
        lines = []
        for j in range(0, len(self.top), 2):
            pair = self.top[j:j + 2]
            line = (" " * self.gap).join(x.ljust(w) for x in pair)
            lines.append(line.rstrip())
        return lines

    def draw(self) -> str:
        """Render the table as a string."""
        tab, widths = self._formatted()
        tw = self._total_width(widths)

        lines = []

        kr = max((tw - len(self.title)) // 2, 0)
        lines.append(" " * kr + self.title)

        lines.append("=" * tw)
        lines.extend(self._top_block())
        lines.append("-" * tw)

        lines.append("".join(name.rjust(w) for name, w in zip(self.colnames, widths)))
        lines.append("-" * tw)

        nrows = len(tab[0]) if tab else 0
        for i in range(nrows):
            lines.append("".join(tab[j][i].rjust(widths[j]) for j in range(len(tab))))
        lines.append("-" * tw)

        lines.extend(self.msg)

        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.draw()
