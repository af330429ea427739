"""Export a record collection and import it back."""

import io
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_records.exporter import export_bytes, export_records
from excel_records.importer import import_excel, import_records
from excel_records.workbook import open_source
from tests.sample_records import Employee, Product, Tag, make_employees


def _reimport(data, file_kind, record_type, **kwargs):
    source = open_source(io.BytesIO(data), file_kind)
    try:
        return import_records(source, record_type, **kwargs)
    finally:
        source.close()


@pytest.mark.parametrize("file_kind", ["xlsx", "xls"])
def test_round_trip_every_kind(file_kind):
    originals = make_employees(12)
    originals[3].age = None
    originals[4].hired = None
    originals[5].grade = None
    originals[6].name = None

    data = export_bytes(file_kind, "Staff", 5, originals, Employee)
    assert _reimport(data, file_kind, Employee) == originals


@pytest.mark.parametrize("file_kind", ["xlsx", "xls"])
def test_round_trip_plain_class(file_kind):
    originals = []
    for sku, price in [("p-1", 9.99), ("p-2", None), ("p-3", 120.0)]:
        product = Product()
        product.sku = sku
        product.price = price
        originals.append(product)

    data = export_bytes(file_kind, "Products", None, originals, Product)
    imported = _reimport(data, file_kind, Product)
    assert [(p.sku, p.price) for p in imported] == [(p.sku, p.price) for p in originals]


def test_round_trip_through_files(tmp_path):
    originals = [Tag(label=f"row {i}") for i in range(30)]
    path = str(tmp_path / "tags.xlsx")
    export_records("xlsx", "Tags", 7, originals, Tag, path)
    assert import_excel(path, Tag) == originals


def test_header_row_never_imported():
    data = export_bytes("xlsx", "Tags", 2, [Tag(label="x")] * 5, Tag)
    imported = _reimport(data, "xlsx", Tag)
    assert all(t.label != "Label" for t in imported)
    assert len(imported) == 5


def test_legacy_window_loses_boundary_records():
    originals = [Tag(label=str(i)) for i in range(10)]
    data = export_bytes("xlsx", "Tags", 4, originals, Tag, legacy_window=True)
    labels = [t.label for t in _reimport(data, "xlsx", Tag)]
    assert labels == ["0", "1", "2", "4", "5", "6", "8", "9"]
