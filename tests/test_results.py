import zipfile

import numpy as np
import pytest

from bandfit.model import FitResult, gaussian_with_bias
from bandfit.results import (
    ResultTable,
    clipboard_text,
    fit_columns,
    format_table,
    load_results,
)
from bandfit.xlsx import WorkbookError

MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG = "http://schemas.openxmlformats.org/package/2006/relationships"

PARAMS = (3.0, 15.0, 3.0, 0.1, 5.0)
HEADER_LINE = "A\tmu\tsigma\tb\toffset\tRMSE"


def _points(count=30):
    xs = np.arange(1, count + 1, dtype=float)
    ys = gaussian_with_bias(xs, PARAMS)
    return [(int(x), float(y)) for x, y in zip(xs, ys)]


def _write_workbook(path, name, columns):
    cells = "".join(
        f'<row r="{row}">'
        + "".join(
            f'<c r="{chr(64 + col)}{row}"><v>{value!r}</v></c>'
            for col, points in sorted(columns.items())
            for r, value in points
            if r == row
        )
        + "</row>"
        for row in sorted({r for points in columns.values() for r, _ in points})
    )
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(
            "xl/worksheets/sheet1.xml",
            f'<worksheet xmlns="{MAIN}"><sheetData>{cells}</sheetData></worksheet>',
        )
        zf.writestr(
            "xl/workbook.xml",
            f'<workbook xmlns="{MAIN}" xmlns:r="{REL}"><sheets>'
            f'<sheet name="{name}" sheetId="1" r:id="rId1"/></sheets></workbook>',
        )
        zf.writestr(
            "xl/_rels/workbook.xml.rels",
            f'<Relationships xmlns="{PKG}"><Relationship Id="rId1" '
            f'Type="{REL}/worksheet" Target="worksheets/sheet1.xml"/></Relationships>',
        )
    return path


def _table_with(*fits):
    table = ResultTable()
    for n, fit in enumerate(fits, start=1):
        table.add(f"column {n}", fit)
    return table


def test_fit_columns_skips_short_columns():
    table = fit_columns({1: _points()[:4], 2: _points()})
    assert [row.label for row in table] == ["column 2"]


def test_fit_columns_recovers_parameters():
    table = fit_columns({1: _points()})
    assert table.column("mu") == pytest.approx([PARAMS[1]], abs=1e-4)
    assert table.column("sigma") == pytest.approx([PARAMS[2]], abs=1e-4)


def test_column_values_are_rounded_to_five_places():
    table = _table_with(FitResult(1.234567891, 2.0, 3.0, 4.0, 5.0, 0.123456789))
    assert table.column("A") == [round(1.234567891, 5)]
    assert table.column("RMSE") == [round(0.123456789, 5)]


def test_unknown_column_raises():
    with pytest.raises(KeyError):
        _table_with(FitResult(1.0, 2.0, 3.0, 4.0, 5.0, 0.5)).column("width")


def test_format_table_layout():
    table = _table_with(FitResult(1.0, 2.0, 3.0, 4.0, 5.0, 0.5))
    text = format_table(table, "NG")
    assert text == (
        "NG\r\n"
        + HEADER_LINE
        + "\r\n"
        + "1.00000\t2.00000\t3.00000\t4.00000\t5.00000\t0.50000\r\n\r\n"
    )


def test_format_empty_table():
    assert format_table(ResultTable(), "OK") == "OK\r\n" + HEADER_LINE + "\r\n\r\n"


def test_clipboard_text_keeps_order():
    ng = _table_with(FitResult(1.0, 2.0, 3.0, 4.0, 5.0, 0.5))
    ok = ResultTable()
    text = clipboard_text([("NG", ng), ("OK", ok)])
    assert text == format_table(ng, "NG") + format_table(ok, "OK")
    assert clipboard_text({"NG": ng, "OK": ok}) == text


def test_load_results_from_workbook(tmp_path):
    path = _write_workbook(tmp_path / "band.xlsx", "NG", {1: _points(), 2: _points()[:3]})
    table = load_results(path, "NG")
    assert len(table) == 1
    assert table.column("offset") == pytest.approx([PARAMS[4]], abs=1e-3)


def test_load_results_missing_sheet(tmp_path):
    path = _write_workbook(tmp_path / "band.xlsx", "NG", {1: _points()})
    with pytest.raises(WorkbookError):
        load_results(path, "OK")