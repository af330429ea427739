"""
Error types raised by the import/export engines.

Every failure is reported to the caller of the operation that hit it;
nothing is retried and no record is skipped.
"""


class ExcelRecordsError(Exception):
    """Base class for all excel_records errors."""


# ------------------------------------------------------------------
# File checks
# ------------------------------------------------------------------

class EmptyFileNameError(ExcelRecordsError):
    """The uploaded file has no name."""


class InvalidFileTypeError(ExcelRecordsError):
    """The file name carries no extension, so its type is unknown."""


class UnsupportedExtensionError(ExcelRecordsError):
    """The file extension is not one of the spreadsheet kinds."""


class UnsupportedFileKindError(ExcelRecordsError):
    """Export was asked for a file kind other than xls/xlsx."""


class NoOutputTargetError(ExcelRecordsError):
    """Export was called without an output stream or path."""


class EmptyWorkbookError(ExcelRecordsError, OSError):
    """The workbook being imported has no sheets."""


# ------------------------------------------------------------------
# Schema / data
# ------------------------------------------------------------------

class SchemaEmptyError(ExcelRecordsError):
    """The record type declares no fields at all."""


class NoMappedFieldsError(ExcelRecordsError):
    """The record type has fields but none is mapped to a column."""


class DataEmptyError(ExcelRecordsError):
    """A row holds no cell data to map."""


class TypeCoercionError(ExcelRecordsError, ValueError):
    """A cell value could not be converted to its field's type."""

    def __init__(self, value, kind, reason=None):
        self.value = value
        self.kind = kind
        message = f"cannot convert {value!r} to {kind}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
