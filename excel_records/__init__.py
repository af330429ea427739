"""Excel <-> Records mapper.

Maps spreadsheet rows to typed Python records and back, driven by
per-field column declarations:

  * **Import** – every row after the header row of every sheet becomes
    one record; cell values are coerced to each field's type.
  * **Export** – records are written under a header row, split across
    several sheets once they exceed the per-sheet limit.

Both ``.xlsx`` (openpyxl) and legacy ``.xls`` (xlrd / xlwt) files are
supported.
"""

from .coercion import DATE_FORMAT, UNSET, ValueKind, cell_to_field, field_to_cell
from .errors import (
    DataEmptyError,
    EmptyFileNameError,
    EmptyWorkbookError,
    ExcelRecordsError,
    InvalidFileTypeError,
    NoMappedFieldsError,
    NoOutputTargetError,
    SchemaEmptyError,
    TypeCoercionError,
    UnsupportedExtensionError,
    UnsupportedFileKindError,
)
from .exporter import DEFAULT_SHEET_SIZE, Page, export_bytes, export_records, paginate
from .importer import import_excel, import_records
from .schema import Column, FieldSlot, Schema, column, resolve_schema
from .workbook import EXCEL_XLS, EXCEL_XLSX, FILE_KINDS, check_file, open_source

__all__ = [
    "Column",
    "column",
    "FieldSlot",
    "Schema",
    "resolve_schema",
    "ValueKind",
    "UNSET",
    "DATE_FORMAT",
    "cell_to_field",
    "field_to_cell",
    "import_records",
    "import_excel",
    "export_records",
    "export_bytes",
    "paginate",
    "Page",
    "DEFAULT_SHEET_SIZE",
    "EXCEL_XLS",
    "EXCEL_XLSX",
    "FILE_KINDS",
    "check_file",
    "open_source",
    "ExcelRecordsError",
    "EmptyFileNameError",
    "InvalidFileTypeError",
    "UnsupportedExtensionError",
    "UnsupportedFileKindError",
    "NoOutputTargetError",
    "EmptyWorkbookError",
    "SchemaEmptyError",
    "NoMappedFieldsError",
    "DataEmptyError",
    "TypeCoercionError",
]
