import zipfile

import pytest

from bandfit.xlsx import WorkbookError, read_numeric_columns

MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG = "http://schemas.openxmlformats.org/package/2006/relationships"


def _letters(col):
    letters = ""
    while col:
        col, rem = divmod(col - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def _cell_xml(row, col, value):
    ref = f"{_letters(col)}{row}"
    if isinstance(value, bool):
        return f'<c r="{ref}" t="b"><v>{int(value)}</v></c>'
    if isinstance(value, str):
        return f'<c r="{ref}" t="inlineStr"><is><t>{value}</t></is></c>'
    return f'<c r="{ref}"><v>{value!r}</v></c>'


def write_workbook(path, sheets):
    with zipfile.ZipFile(path, "w") as zf:
        entries, rels = [], []
        for n, (name, cells) in enumerate(sheets.items(), start=1):
            rows = {}
            for (r, c), v in sorted(cells.items()):
                rows.setdefault(r, []).append(_cell_xml(r, c, v))
            data = "".join(f'<row r="{r}">{"".join(cs)}</row>' for r, cs in rows.items())
            zf.writestr(
                f"xl/worksheets/sheet{n}.xml",
                f'<?xml version="1.0"?><worksheet xmlns="{MAIN}"><sheetData>{data}</sheetData></worksheet>',
            )
            entries.append(f'<sheet name="{name}" sheetId="{n}" r:id="rId{n}"/>')
            rels.append(
                f'<Relationship Id="rId{n}" Type="{REL}/worksheet" Target="worksheets/sheet{n}.xml"/>'
            )
        zf.writestr(
            "xl/workbook.xml",
            f'<workbook xmlns="{MAIN}" xmlns:r="{REL}"><sheets>{"".join(entries)}</sheets></workbook>',
        )
        zf.writestr(
            "xl/_rels/workbook.xml.rels",
            f'<Relationships xmlns="{PKG}">{"".join(rels)}</Relationships>',
        )
    return path


def test_reads_integers_and_floats(tmp_path):
    path = write_workbook(
        tmp_path / "data.xlsx",
        {"NG": {(1, 1): 3, (2, 1): 2.5, (4, 1): 7, (1, 2): 1.25}},
    )
    columns = read_numeric_columns(path, "NG")
    assert columns == {1: [(1, 3.0), (2, 2.5), (4, 7.0)], 2: [(1, 1.25)]}


def test_skips_text_and_boolean_cells(tmp_path):
    path = write_workbook(
        tmp_path / "data.xlsx",
        {"OK": {(1, 1): "header", (2, 1): True, (3, 1): 4.5}},
    )
    assert read_numeric_columns(path, "OK") == {1: [(3, 4.5)]}


def test_selects_named_sheet(tmp_path):
    path = write_workbook(
        tmp_path / "data.xlsx",
        {"NG": {(1, 1): 1.0}, "OK": {(1, 3): 9.0}},
    )
    assert read_numeric_columns(path, "OK") == {3: [(1, 9.0)]}


def test_row_and_column_limits(tmp_path):
    path = write_workbook(
        tmp_path / "data.xlsx",
        {"NG": {(1, 1): 1.0, (6, 1): 2.0, (1, 4): 3.0}},
    )
    assert read_numeric_columns(path, "NG", max_rows=5, max_cols=3) == {1: [(1, 1.0)]}


def test_missing_sheet_raises(tmp_path):
    path = write_workbook(tmp_path / "data.xlsx", {"NG": {(1, 1): 1.0}})
    with pytest.raises(WorkbookError, match="OK"):
        read_numeric_columns(path, "OK")


def test_missing_file_raises(tmp_path):
    with pytest.raises(WorkbookError):
        read_numeric_columns(tmp_path / "absent.xlsx", "NG")


def test_not_a_zip_raises(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a workbook")
    with pytest.raises(WorkbookError):
        read_numeric_columns(path, "NG")