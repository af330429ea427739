#!/usr/bin/env python
"""
Excel <-> Records – CLI entry point.

Usage:
    # Show the columns a record type maps to
    python -m excel_records.main headers --record-type mypkg.models:Employee

    # Import a workbook and print one JSON object per record
    python -m excel_records.main import staff.xlsx --record-type mypkg.models:Employee

    # Export a JSON list of objects to a workbook
    python -m excel_records.main export staff.json --record-type mypkg.models:Employee --output staff.xlsx
"""

import argparse
import importlib
import json
import logging
import os
import sys

from excel_records.coercion import UNSET, cell_to_field
from excel_records.config import load_config, setup_logging
from excel_records.errors import ExcelRecordsError
from excel_records.exporter import export_records
from excel_records.importer import import_excel
from excel_records.schema import resolve_schema
from excel_records.workbook import check_file

logger = logging.getLogger(__name__)


def load_record_type(path):
    """Resolve ``package.module:ClassName`` to a class."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"record type must look like 'package.module:ClassName', got {path!r}")
    module = importlib.import_module(module_name)
    target = module
    for part in attr.split("."):
        target = getattr(target, part)
    return target


def record_to_dict(record, schema):
    return {slot.name: slot.get(record) for slot in schema}


def record_from_dict(item, record_type, schema):
    """Build a record from a JSON object keyed by field name or header."""
    record = record_type()
    for slot in schema:
        raw = item.get(slot.name, item.get(slot.header))
        value = cell_to_field(raw, slot.kind)
        if value is not UNSET:
            slot.set(record, value)
    return record


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

def cmd_headers(args, config):
    schema = resolve_schema(load_record_type(args.record_type))
    for slot in schema:
        print(f"{slot.column_index}\t{slot.header}\t{slot.kind}\t{slot.name}")


def cmd_import(args, config):
    record_type = load_record_type(args.record_type)
    schema = resolve_schema(record_type)
    records = import_excel(args.excel_file, record_type)
    for record in records:
        print(json.dumps(record_to_dict(record, schema), default=str, ensure_ascii=False))


def cmd_export(args, config):
    record_type = load_record_type(args.record_type)
    schema = resolve_schema(record_type)
    file_kind = check_file(args.output)

    with open(args.json_file, "r", encoding="utf-8") as f:
        items = json.load(f)
    if not isinstance(items, list):
        raise ValueError(f"{args.json_file}: expected a JSON list of objects")
    records = [record_from_dict(item, record_type, schema) for item in items]

    title = args.title or config["sheet_title"]
    sheet_size = args.sheet_size if args.sheet_size is not None else config["sheet_size"]
    legacy = args.legacy_window or bool(config["legacy_page_window"])

    out_dir = os.path.dirname(args.output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    pages = export_records(file_kind, title, sheet_size, records, record_type, args.output,
                           schema=schema, legacy_window=legacy)
    print(f"Wrote {len(records)} records to {args.output} ({len(pages)} sheet(s))")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Excel ↔ Records: map spreadsheet rows to typed records and back"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Path to config YAML file")
    common.add_argument("--log-level", default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")
    common.add_argument("--record-type", required=True,
                        help="Record class as 'package.module:ClassName'")

    sub = parser.add_subparsers(dest="command", required=True)

    # ---- headers ----
    sub.add_parser("headers", parents=[common],
                   help="Print the columns a record type maps to")

    # ---- import ----
    p_imp = sub.add_parser("import", parents=[common],
                           help="Import a workbook and print records as JSON lines")
    p_imp.add_argument("excel_file", help="Path to the workbook (.xls / .xlsx)")

    # ---- export ----
    p_exp = sub.add_parser("export", parents=[common],
                           help="Export a JSON list of records to a workbook")
    p_exp.add_argument("json_file", help="Path to a JSON file holding a list of objects")
    p_exp.add_argument("--output", required=True, help="Output workbook (.xls / .xlsx)")
    p_exp.add_argument("--title", default=None, help="Sheet title (default from config)")
    p_exp.add_argument("--sheet-size", type=int, default=None,
                       help="Records per sheet (default from config, 10000)")
    p_exp.add_argument("--legacy-window", action="store_true",
                       help="Use the historical size-1 page window")
    return parser


COMMANDS = {
    "headers": cmd_headers,
    "import": cmd_import,
    "export": cmd_export,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    setup_logging(args.log_level or config["log_level"])

    try:
        COMMANDS[args.command](args, config)
    except (ExcelRecordsError, OSError, ValueError, ImportError, AttributeError) as exc:
        logger.error(f"{args.command} failed: {exc}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
