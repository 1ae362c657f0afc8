"""Reading numeric cells from a worksheet of an .xlsx workbook."""

from __future__ import annotations

import posixpath
import re
import xml.etree.ElementTree as ET
import zipfile
from collections.abc import Iterator
from os import PathLike

MAX_ROWS = 1000
MAX_COLS = 90

_MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_DOC_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
_OFFICE_DOCUMENT = _DOC_REL_NS + "/officeDocument"

_CELL_REF = re.compile(r"^([A-Za-z]+)(\d+)$")


class WorkbookError(Exception):
    """The workbook or one of its sheets could not be read."""


def _tag(name: str) -> str:
    return f"{{{_MAIN_NS}}}{name}"


def _parse(archive: zipfile.ZipFile, part: str) -> ET.Element:
    try:
        data = archive.read(part)
    except KeyError as exc:
        raise WorkbookError(f"workbook part {part!r} is missing") from exc
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise WorkbookError(f"workbook part {part!r} is malformed: {exc}") from exc


def _resolve(base_dir: str, target: str) -> str:
    if target.startswith("/"):
        return target.lstrip("/")
    return posixpath.normpath(posixpath.join(base_dir, target))


def _relationships(archive: zipfile.ZipFile, part: str) -> dict[str, tuple[str, str]]:
    directory, name = posixpath.split(part)
    rels_part = posixpath.join(directory, "_rels", name + ".rels")
    root = _parse(archive, rels_part)
    return {
        rel.get("Id", ""): (rel.get("Type", ""), _resolve(directory, rel.get("Target", "")))
        for rel in root.iter(f"{{{_PKG_REL_NS}}}Relationship")
    }


def _workbook_part(archive: zipfile.ZipFile) -> str:
    if "_rels/.rels" in archive.namelist():
        for rel_type, target in _relationships(archive, "").values():
            if rel_type == _OFFICE_DOCUMENT:
                return target
    return "xl/workbook.xml"


def _sheet_part(archive: zipfile.ZipFile, sheet_name: str) -> str:
    workbook = _workbook_part(archive)
    root = _parse(archive, workbook)
    for sheet in root.iter(_tag("sheet")):
        if sheet.get("name") != sheet_name:
            continue
        rel_id = sheet.get(f"{{{_DOC_REL_NS}}}id")
        relation = _relationships(archive, workbook).get(rel_id or "")
        if relation is None:
            raise WorkbookError(f"worksheet {sheet_name!r} has no target part")
        return relation[1]
    raise WorkbookError(f"no worksheet named {sheet_name!r}")


def _column_index(letters: str) -> int:
    index = 0
    for letter in letters.upper():
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index


def _numeric_cells(root: ET.Element) -> Iterator[tuple[int, int, float]]:
    row_index = 0
    for row in root.iter(_tag("row")):
        row_index = int(row.get("r", row_index + 1))
        col_index = 0
        for cell in row.findall(_tag("c")):
            ref = cell.get("r")
            if ref is None:
                col_index += 1
                cell_row = row_index
            else:
                match = _CELL_REF.match(ref)
                if match is None:
                    raise WorkbookError(f"malformed cell reference {ref!r}")
                col_index = _column_index(match.group(1))
                cell_row = int(match.group(2))
            if cell.get("t", "n") != "n":
                continue
            value = cell.find(_tag("v"))
            if value is None or not (value.text or "").strip():
                continue
            try:
                number = float(value.text)
            except ValueError:
                continue
            yield cell_row, col_index, number


def read_numeric_columns(
    path: str | PathLike[str],
    sheet_name: str,
    max_rows: int = MAX_ROWS,
    max_cols: int = MAX_COLS,
) -> dict[int, list[tuple[int, float]]]:
    """Return the numeric cells of a sheet grouped by column.

    Keys are 1-based column numbers in ascending order; each value lists
    ``(row, value)`` pairs in ascending row order. Only the first ``max_rows``
    rows and ``max_cols`` columns are read; text, boolean and error cells are
    skipped.
    """
    try:
        archive = zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise WorkbookError(f"cannot open workbook {path}: {exc}") from exc
    with archive:
        root = _parse(archive, _sheet_part(archive, sheet_name))
        columns: dict[int, list[tuple[int, float]]] = {}
        for row, col, value in _numeric_cells(root):
            if 1 <= row <= max_rows and 1 <= col <= max_cols:
                columns.setdefault(col, []).append((row, value))
    return {col: sorted(columns[col]) for col in sorted(columns)}