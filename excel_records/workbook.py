"""
Workbook access for the import/export engines.

The engines only need a small capability from a spreadsheet document:

* read side (:class:`WorkbookSource`): count sheets, walk a sheet's rows,
  read a cell by column index;
* write side (:class:`WorkbookSink`): create sheets, rows and string cells,
  then serialise the whole workbook once.

``xlsx`` files are handled with openpyxl, legacy ``xls`` files with xlrd
(read) and xlwt (write).
"""

import logging
import os

from openpyxl import Workbook, load_workbook

from .errors import (
    EmptyFileNameError,
    InvalidFileTypeError,
    UnsupportedExtensionError,
    UnsupportedFileKindError,
)

logger = logging.getLogger(__name__)

EXCEL_XLS = "xls"
EXCEL_XLSX = "xlsx"
FILE_KINDS = (EXCEL_XLS, EXCEL_XLSX)


def cell_at(cells, index):
    """Return the value at *index*, or ``None`` past the end of the row."""
    if 0 <= index < len(cells):
        return cells[index]
    return None


def _is_blank(values):
    return all(v is None for v in values)


# ------------------------------------------------------------------
# File kind checks
# ------------------------------------------------------------------

def file_extension(filename):
    """Return the extension of *filename* without the dot ('' if none)."""
    return os.path.splitext(os.path.basename(filename))[1][1:]


def check_file(filename):
    """Validate an uploaded file name and return its file kind."""
    if not filename:
        raise EmptyFileNameError("file name must not be empty")
    extension = file_extension(str(filename))
    if not extension:
        raise InvalidFileTypeError(f"{filename}: file type is unknown")
    if extension not in FILE_KINDS:
        raise UnsupportedExtensionError(f"{filename}: not an Excel file")
    return extension


def check_file_kind(file_kind):
    if file_kind not in FILE_KINDS:
        raise UnsupportedFileKindError(
            f"unsupported file kind {file_kind!r}, expected one of {FILE_KINDS}")


# ------------------------------------------------------------------
# Read side
# ------------------------------------------------------------------

class WorkbookSource:
    """Read-only view of a workbook."""

    def sheet_count(self) -> int:
        raise NotImplementedError

    def sheet(self, index):
        """Return the sheet at *index*, or ``None`` for an absent slot."""
        raise NotImplementedError

    def close(self):
        pass


class XlsxSheet:
    def __init__(self, ws):
        self.ws = ws
        self.title = ws.title

    def rows(self):
        """Yield ``(row_number, values)`` for each non-blank row (0-based)."""
        for row_number, values in enumerate(self.ws.iter_rows(values_only=True)):
            if _is_blank(values):
                continue
            yield row_number, list(values)


class XlsxSource(WorkbookSource):
    """openpyxl-backed source; cached values are read, not formulas."""

    def __init__(self, source):
        self.wb = load_workbook(source, data_only=True)

    def sheet_count(self):
        return len(self.wb.worksheets)

    def sheet(self, index):
        return XlsxSheet(self.wb.worksheets[index])

    def close(self):
        self.wb.close()


class XlsSheet:
    def __init__(self, sheet):
        self.sheet = sheet
        self.title = sheet.name

    def rows(self):
        import xlrd

        empty = (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK)
        for row_number in range(self.sheet.nrows):
            values = [None if c.ctype in empty else c.value
                      for c in self.sheet.row(row_number)]
            if _is_blank(values):
                continue
            yield row_number, values


class XlsSource(WorkbookSource):
    """xlrd-backed source for legacy ``.xls`` files."""

    def __init__(self, source):
        import xlrd

        if hasattr(source, "read"):
            self.book = xlrd.open_workbook(file_contents=source.read())
        else:
            self.book = xlrd.open_workbook(os.fspath(source))

    def sheet_count(self):
        return self.book.nsheets

    def sheet(self, index):
        return XlsSheet(self.book.sheet_by_index(index))

    def close(self):
        self.book.release_resources()


def open_source(source, file_kind):
    """Open *source* (path or binary stream) as a :class:`WorkbookSource`."""
    check_file_kind(file_kind)
    if file_kind == EXCEL_XLS:
        return XlsSource(source)
    return XlsxSource(source)


# ------------------------------------------------------------------
# Write side
# ------------------------------------------------------------------

class WorkbookSink:
    """Write-only workbook under construction."""

    def create_sheet(self, name):
        raise NotImplementedError

    def save(self, out):
        raise NotImplementedError


class XlsxRow:
    def __init__(self, ws, index):
        self.ws = ws
        self.index = index

    def set_cell(self, index, text):
        # empty strings stay blank so they read back as absent
        if text == "":
            return
        self.ws.cell(row=self.index + 1, column=index + 1, value=text)


class XlsxSheetWriter:
    def __init__(self, ws):
        self.ws = ws

    def create_row(self, index):
        return XlsxRow(self.ws, index)


class XlsxSink(WorkbookSink):
    def __init__(self):
        self.wb = Workbook()
        self.wb.remove(self.wb.active)

    def create_sheet(self, name):
        return XlsxSheetWriter(self.wb.create_sheet(title=name))

    def save(self, out):
        self.wb.save(out)
        self.wb.close()


class XlsRow:
    def __init__(self, row):
        self.row = row

    def set_cell(self, index, text):
        if text == "":
            return
        self.row.write(index, text)


class XlsSheetWriter:
    def __init__(self, sheet):
        self.sheet = sheet

    def create_row(self, index):
        return XlsRow(self.sheet.row(index))


class XlsSink(WorkbookSink):
    def __init__(self):
        import xlwt

        self.book = xlwt.Workbook(encoding="utf-8")

    def create_sheet(self, name):
        return XlsSheetWriter(self.book.add_sheet(name))

    def save(self, out):
        self.book.save(out)


def new_sink(file_kind):
    """Return an empty :class:`WorkbookSink` for *file_kind*."""
    check_file_kind(file_kind)
    if file_kind == EXCEL_XLS:
        return XlsSink()
    return XlsxSink()
