"""
Import: spreadsheet rows -> typed records.

Row 0 of every sheet is the header row and is always skipped.  Each
following row becomes one record, its cells read by column index in
schema order.
"""

import logging
import os

from .coercion import UNSET, cell_to_field
from .errors import DataEmptyError, EmptyWorkbookError
from .schema import resolve_schema
from .workbook import cell_at, check_file, open_source

logger = logging.getLogger(__name__)

HEADER_ROW = 0


def _fill_record(record, schema, cells):
    for slot in schema:
        value = cell_to_field(cell_at(cells, slot.column_index), slot.kind)
        if value is not UNSET:
            slot.set(record, value)
    return record


def import_records(source, record_type, factory=None, schema=None):
    """Read every data row of *source* into a list of *record_type*.

    Parameters
    ----------
    source : WorkbookSource
        The opened workbook.
    record_type : type
        Class whose mapped fields receive the cell values.
    factory : callable, optional
        Builds a blank record; defaults to ``record_type()``.
    schema : Schema, optional
        A prebuilt schema for *record_type*; resolved when omitted.

    Returns
    -------
    list
        Records in sheet order, then row order.
    """
    if schema is None:
        schema = resolve_schema(record_type)
    if factory is None:
        factory = record_type

    sheet_count = source.sheet_count()
    if sheet_count == 0:
        raise EmptyWorkbookError("no sheets")

    records = []
    for index in range(sheet_count):
        sheet = source.sheet(index)
        if sheet is None:
            continue
        before = len(records)
        for row_number, cells in sheet.rows():
            if row_number <= HEADER_ROW:
                continue
            if not cells:
                raise DataEmptyError(f"sheet {index} row {row_number} has no cells")
            records.append(_fill_record(factory(), schema, cells))
        logger.debug(f"Sheet {getattr(sheet, 'title', index)!r}: {len(records) - before} records")

    logger.info(f"Imported {len(records)} records from {sheet_count} sheet(s)")
    return records


def import_excel(file, record_type, filename=None, factory=None):
    """Import an uploaded workbook given as a path or binary stream.

    The file kind comes from *filename* (or from *file* itself when it is
    a path), checked with :func:`~excel_records.workbook.check_file`.
    """
    if file is None:
        raise FileNotFoundError("file does not exist")
    if filename is None and isinstance(file, (str, os.PathLike)):
        filename = os.fspath(file)
    file_kind = check_file(filename)
    schema = resolve_schema(record_type)

    source = open_source(file, file_kind)
    try:
        return import_records(source, record_type, factory=factory, schema=schema)
    finally:
        source.close()
