"""Per-column fit results and their tab-separated text form."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from os import PathLike

from .model import FitResult, fit_gaussian_with_bias
from .xlsx import read_numeric_columns

HEADERS = ("A", "mu", "sigma", "b", "offset", "RMSE")
MIN_POINTS = 5


def _format_value(value: float) -> str:
    return f"{value:.5f}"


@dataclass(frozen=True)
class ColumnFit:
    """The fit of one worksheet column."""

    label: str
    fit: FitResult

    @property
    def values(self) -> tuple[float, ...]:
        """Fitted parameters followed by the RMSE, in header order."""
        return (*self.fit.params, self.fit.rmse)

    @property
    def cells(self) -> tuple[str, ...]:
        """The values as they are shown in the table."""
        return tuple(_format_value(v) for v in self.values)


@dataclass
class ResultTable:
    """Rows of column fits under the headers A, mu, sigma, b, offset, RMSE."""

    rows: list[ColumnFit] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ColumnFit]:
        return iter(self.rows)

    def add(self, label: str, fit: FitResult) -> ColumnFit:
        """Append a row and return it."""
        row = ColumnFit(label, fit)
        self.rows.append(row)
        return row

    def column(self, name: str) -> list[float]:
        """Values under a header, as read back from the displayed text."""
        try:
            index = HEADERS.index(name)
        except ValueError:
            raise KeyError(name) from None
        return [float(row.cells[index]) for row in self.rows]


def fit_columns(
    columns: Mapping[int, Sequence[tuple[int, float]]],
    min_points: int = MIN_POINTS,
) -> ResultTable:
    """Fit every column that holds at least ``min_points`` values."""
    table = ResultTable()
    for col, points in columns.items():
        if len(points) < min_points:
            continue
        xs = [float(row) for row, _ in points]
        ys = [value for _, value in points]
        table.add(f"column {col}", fit_gaussian_with_bias(xs, ys))
    return table


def load_results(path: str | PathLike[str], sheet_name: str) -> ResultTable:
    """Read a worksheet and fit each of its numeric columns."""
    return fit_columns(read_numeric_columns(path, sheet_name))


def format_table(table: ResultTable, title: str) -> str:
    """Title, header line and rows, tab separated, each line ending in CRLF."""
    lines = [title, "\t".join(HEADERS), *("\t".join(row.cells) for row in table)]
    return "".join(line + "\r\n" for line in lines) + "\r\n"


def clipboard_text(
    tables: Mapping[str, ResultTable] | Iterable[tuple[str, ResultTable]],
) -> str:
    """Concatenate the formatted tables, given as title to table pairs."""
    pairs = tables.items() if isinstance(tables, Mapping) else tables
    return "".join(format_table(table, title) for title, table in pairs)