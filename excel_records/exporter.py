"""
Export: typed records -> one or more sheets.

Records are split into pages of ``sheet_size`` rows (10000 by default);
each page becomes one sheet whose first row holds the column headers.
With several pages the sheets are named ``title0``, ``title1``, ...;
a single page is named ``title``.
"""

import io
import logging
from dataclasses import dataclass

from .coercion import field_to_cell
from .errors import NoOutputTargetError
from .schema import resolve_schema
from .workbook import check_file_kind, new_sink

logger = logging.getLogger(__name__)

DEFAULT_SHEET_SIZE = 10000


@dataclass(frozen=True)
class Page:
    """Slice ``[start, end)`` of the records destined for one sheet."""
    index: int
    start: int
    end: int

    def __len__(self):
        return self.end - self.start


def effective_sheet_size(sheet_size):
    if sheet_size is None or sheet_size <= 0:
        return DEFAULT_SHEET_SIZE
    return sheet_size


def paginate(record_count, sheet_size=None, legacy_window=False):
    """Split *record_count* records into pages.

    By default page ``i`` covers
    ``[i * size, min((i + 1) * size, record_count))``, so every record is
    written. With ``legacy_window`` each page ends at ``(i + 1) * size - 1``
    (clamped to *record_count*), so every full page holds ``size - 1``
    records and the record on the boundary is never written.
    """
    size = effective_sheet_size(sheet_size)
    page_count = record_count // size
    if record_count % size > 0:
        page_count += 1
    if page_count == 0:
        # header-only sheet; a workbook needs at least one
        return [Page(0, 0, 0)]

    pages = []
    for i in range(page_count):
        start = i * size
        bound = (i + 1) * size - 1 if legacy_window else (i + 1) * size
        pages.append(Page(i, start, min(bound, record_count)))
    return pages


def sheet_name(title, page_index, page_count):
    if page_count > 1:
        return f"{title}{page_index}"
    return title


def _write_page(sink, name, schema, records, page):
    sheet = sink.create_sheet(name)
    header = sheet.create_row(0)
    for slot in schema:
        header.set_cell(slot.column_index, slot.header)

    row_index = 1
    for position in range(page.start, page.end):
        record = records[position]
        row = sheet.create_row(row_index)
        for slot in schema:
            row.set_cell(slot.column_index, field_to_cell(slot.get(record), slot.kind))
        row_index += 1
    logger.debug(f"Sheet {name!r}: records [{page.start}, {page.end})")


def export_records(file_kind, title, sheet_size, records, record_type, out,
                   schema=None, legacy_window=False):
    """Write *records* as a workbook of kind *file_kind* to *out*.

    Parameters
    ----------
    file_kind : str
        ``"xls"`` or ``"xlsx"``.
    title : str
        Sheet name (suffixed with the page index when paginated).
    sheet_size : int or None
        Records per sheet; ``None`` or non-positive means 10000.
    records : sequence
        Records to write, in order.
    record_type : type
        Class of the records; its mapped fields become the columns.
    out : path or binary stream
        Where the serialised workbook is written.
    schema : Schema, optional
        A prebuilt schema for *record_type*.
    legacy_window : bool
        The default window is ``[i * size, min((i + 1) * size, n))``, which
        differs from the historical bound ``min((i + 1) * size - 1, n)``.
        Pass ``True`` to reproduce the historical window, which leaves the
        last record of every full page unwritten.
    """
    check_file_kind(file_kind)
    if out is None:
        raise NoOutputTargetError("no output target given")
    if schema is None:
        schema = resolve_schema(record_type)

    records = list(records)
    pages = paginate(len(records), sheet_size, legacy_window=legacy_window)
    sink = new_sink(file_kind)
    for page in pages:
        _write_page(sink, sheet_name(title, page.index, len(pages)), schema, records, page)

    sink.save(out)
    logger.info(f"Exported {len(records)} records to {len(pages)} {file_kind} sheet(s)")
    return pages


def export_bytes(file_kind, title, sheet_size, records, record_type,
                 schema=None, legacy_window=False):
    """Like :func:`export_records` but return the serialised workbook."""
    buffer = io.BytesIO()
    export_records(file_kind, title, sheet_size, records, record_type, buffer,
                   schema=schema, legacy_window=legacy_window)
    return buffer.getvalue()
