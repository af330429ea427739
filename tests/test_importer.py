"""Tests for the import engine (excel_records.importer)."""

import datetime
import io
import os
import sys
import unittest
from unittest.mock import Mock

import pytest
from openpyxl import Workbook

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_records.errors import (
    DataEmptyError,
    EmptyFileNameError,
    EmptyWorkbookError,
    InvalidFileTypeError,
    NoMappedFieldsError,
    SchemaEmptyError,
    TypeCoercionError,
    UnsupportedExtensionError,
)
from excel_records.importer import import_excel, import_records
from excel_records.schema import resolve_schema
from excel_records.workbook import open_source
from tests.sample_records import (
    Employee,
    FakeSheet,
    FakeSource,
    Nothing,
    Payload,
    Product,
    Tag,
    Unmapped,
)

HEADER = ["Name", "Age", "Badge", "Level", "Rating", "Salary", "Grade", "Hired"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _create_staff_workbook(path):
    """Two sheets of employees typed in by hand (numbers and real dates)."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Staff"
    ws.append(HEADER)
    ws.append(["Alice", 42.9, 9000000001, 3, 4.5, 1234.5, "Senior",
               datetime.datetime(2020, 1, 2, 3, 4, 5)])
    ws.append(["Bob", "31", "9000000002", "1", "2.25", "99", "J", "2019-05-06 07:08:09"])
    ws.append([None] * 8)                    # blank row
    ws.append(["Carol"])                     # short row

    ws2 = wb.create_sheet("More")
    ws2.append(HEADER)
    ws2.append(["Dan", 50])
    wb.save(path)
    wb.close()


# ---------------------------------------------------------------------------
# Engine against in-memory sheets
# ---------------------------------------------------------------------------

class TestImportRecords(unittest.TestCase):
    def test_header_row_is_skipped(self):
        source = FakeSource([FakeSheet([["Label"], ["a"], ["b"]])])
        records = import_records(source, Tag)
        self.assertEqual([r.label for r in records], ["a", "b"])

    def test_header_only_sheet_gives_nothing(self):
        source = FakeSource([FakeSheet([["Label"]])])
        self.assertEqual(import_records(source, Tag), [])

    def test_sheet_then_row_order(self):
        source = FakeSource([
            FakeSheet([["Label"], ["s0r1"], ["s0r2"]]),
            FakeSheet([["Label"], ["s1r1"]]),
        ])
        records = import_records(source, Tag)
        self.assertEqual([r.label for r in records], ["s0r1", "s0r2", "s1r1"])

    def test_absent_sheet_slot_skipped(self):
        source = FakeSource([None, FakeSheet([["Label"], ["x"]])])
        self.assertEqual([r.label for r in import_records(source, Tag)], ["x"])

    def test_no_sheets(self):
        with self.assertRaises(EmptyWorkbookError) as ctx:
            import_records(FakeSource([]), Tag)
        self.assertIsInstance(ctx.exception, OSError)
        self.assertIn("no sheets", str(ctx.exception))

    def test_short_row_reads_missing_cells_as_absent(self):
        source = FakeSource([FakeSheet([HEADER, ["Zed"]])])
        (record,) = import_records(source, Employee)
        self.assertEqual(record.name, "Zed")
        self.assertIsNone(record.age)
        self.assertIsNone(record.hired)

    def test_empty_row_raises(self):
        source = FakeSource([FakeSheet([["Label"], []])])
        with self.assertRaises(DataEmptyError):
            import_records(source, Tag)

    def test_coercion_failure_aborts(self):
        source = FakeSource([FakeSheet([HEADER, ["ok", "1"], ["bad", "one"]])])
        with self.assertRaises(TypeCoercionError):
            import_records(source, Employee)

    def test_schema_errors_before_rows(self):
        source = Mock()
        with self.assertRaises(SchemaEmptyError):
            import_records(source, Nothing)
        with self.assertRaises(NoMappedFieldsError):
            import_records(source, Unmapped)
        source.sheet_count.assert_not_called()

    def test_factory_used_per_row(self):
        factory = Mock(side_effect=lambda: Product())
        source = FakeSource([FakeSheet([["SKU", "Price"], ["p-1", "9.5"], ["p-2", ""]])])
        records = import_records(source, Product, factory=factory)
        self.assertEqual(factory.call_count, 2)
        self.assertEqual([(r.sku, r.price) for r in records], [("p-1", 9.5), ("p-2", None)])

    def test_prebuilt_schema(self):
        schema = resolve_schema(Tag)
        source = FakeSource([FakeSheet([["Label"], ["x"]])])
        self.assertEqual(import_records(source, Tag, schema=schema)[0].label, "x")

    def test_raw_passthrough(self):
        source = FakeSource([FakeSheet([["Key", "Blob"], ["k", 12.5]])])
        (record,) = import_records(source, Payload)
        self.assertEqual(record.blob, 12.5)


# ---------------------------------------------------------------------------
# Real xlsx files
# ---------------------------------------------------------------------------

@pytest.fixture()
def staff_path(tmp_path):
    path = str(tmp_path / "staff.xlsx")
    _create_staff_workbook(path)
    return path


def test_import_xlsx_values(staff_path):
    records = import_excel(staff_path, Employee)
    assert [r.name for r in records] == ["Alice", "Bob", "Carol", "Dan"]

    alice, bob, carol, dan = records
    assert alice.age == 42                      # truncated, not rounded
    assert alice.badge == 9000000001
    assert alice.level == 3
    assert alice.rating == 4.5
    assert alice.grade == "S"
    assert alice.hired == datetime.datetime(2020, 1, 2, 3, 4, 5)

    assert bob.age == 31
    assert bob.salary == 99.0
    assert bob.hired == datetime.datetime(2019, 5, 6, 7, 8, 9)

    assert carol.age is None
    assert carol.hired is None
    assert dan.age == 50


def test_import_xlsx_from_stream(staff_path):
    with open(staff_path, "rb") as f:
        records = import_excel(f, Employee, filename="upload.xlsx")
    assert len(records) == 4


def test_open_source_lists_sheets(staff_path):
    source = open_source(staff_path, "xlsx")
    try:
        assert source.sheet_count() == 2
        rows = list(source.sheet(0).rows())
        assert [n for n, _ in rows] == [0, 1, 2, 4]   # blank row 3 not yielded
    finally:
        source.close()


@pytest.mark.parametrize("filename, error", [
    ("", EmptyFileNameError),
    ("staff", InvalidFileTypeError),
    ("staff.csv", UnsupportedExtensionError),
])
def test_import_excel_checks_filename(filename, error):
    with pytest.raises(error):
        import_excel(io.BytesIO(b""), Employee, filename=filename)


def test_import_excel_requires_file():
    with pytest.raises(FileNotFoundError):
        import_excel(None, Employee)
