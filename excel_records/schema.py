"""
Schema discovery: which fields of a record type map to spreadsheet columns.

A field is mapped when it carries a :class:`Column` marker, either through
:func:`column` on a dataclass field::

    @dataclass
    class Employee:
        name: str = column("Name")
        age: int = column("Age")
        hired: datetime = column("Hired")
        notes: str = None                 # not mapped

or through ``typing.Annotated`` on any class annotation::

    class Employee:
        name: Annotated[str, Column("Name")]

Mapped fields keep their declaration order unless a ``Column.order`` is
given; column indexes are always contiguous from 0.
"""

import dataclasses
import datetime
import logging
import sys
import typing
from dataclasses import dataclass
from typing import Any, Optional, Union

from .coercion import ValueKind
from .errors import NoMappedFieldsError, SchemaEmptyError

logger = logging.getLogger(__name__)

COLUMN_METADATA_KEY = "excel_column"

if sys.version_info >= (3, 10):
    from types import UnionType
    _UNION_TYPES = (Union, UnionType)
else:
    _UNION_TYPES = (Union,)


@dataclass(frozen=True)
class Column:
    """Column declaration attached to a record field."""
    header: str
    order: Optional[int] = None
    kind: Optional[ValueKind] = None

    def __post_init__(self):
        if self.kind is not None:
            object.__setattr__(self, "kind", ValueKind(self.kind))


def column(header, order=None, kind=None, **kwargs):
    """Declare a mapped dataclass field with header text *header*.

    The field defaults to ``None`` unless ``default`` or
    ``default_factory`` is passed.
    """
    if "default_factory" not in kwargs:
        kwargs.setdefault("default", None)
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[COLUMN_METADATA_KEY] = Column(header, order=order, kind=kind)
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldSlot:
    """One mapped field: its column position, header, kind and attribute."""
    column_index: int
    header: str
    kind: ValueKind
    name: str

    def get(self, record):
        return getattr(record, self.name)

    def set(self, record, value):
        setattr(record, self.name, value)


class Schema:
    """Ordered, immutable collection of :class:`FieldSlot` for one type."""

    def __init__(self, record_type, slots):
        self.record_type = record_type
        self._slots = tuple(slots)
        if not self._slots:
            raise NoMappedFieldsError(
                f"{_type_name(record_type)} has no mapped fields")
        indexes = [slot.column_index for slot in self._slots]
        if indexes != list(range(len(indexes))):
            raise ValueError(f"column indexes must be contiguous from 0, got {indexes}")

    @property
    def headers(self) -> list[str]:
        return [slot.header for slot in self._slots]

    def __iter__(self):
        return iter(self._slots)

    def __len__(self):
        return len(self._slots)

    def __getitem__(self, index):
        return self._slots[index]

    def __repr__(self):
        return f"Schema({_type_name(self.record_type)}, headers={self.headers})"


# ------------------------------------------------------------------
# Field scanning
# ------------------------------------------------------------------

def _type_name(record_type):
    return getattr(record_type, "__qualname__", repr(record_type))


def _split_annotated(hint):
    """Return (base_type, Column or None) for an annotation."""
    if typing.get_origin(hint) is typing.Annotated:
        base, *extras = typing.get_args(hint)
        for extra in extras:
            if isinstance(extra, Column):
                return base, extra
        return base, None
    return hint, None


def _unwrap_optional(hint):
    if typing.get_origin(hint) in _UNION_TYPES:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def kind_for_annotation(hint) -> ValueKind:
    """Map a Python annotation to the value kind used for coercion."""
    hint, _ = _split_annotated(_unwrap_optional(hint))
    hint = _unwrap_optional(hint)
    if hint is str:
        return ValueKind.TEXT
    if hint is int:
        return ValueKind.INTEGER
    if hint is float:
        return ValueKind.DOUBLE
    if hint is datetime.datetime:
        return ValueKind.DATETIME
    return ValueKind.RAW


def _declared_fields(record_type):
    """Yield (name, annotation, Column or None) in declaration order."""
    hints = typing.get_type_hints(record_type, include_extras=True)
    if dataclasses.is_dataclass(record_type):
        for f in dataclasses.fields(record_type):
            hint = hints.get(f.name, f.type)
            base, marker = _split_annotated(hint)
            yield f.name, base, f.metadata.get(COLUMN_METADATA_KEY, marker)
        return
    for name, hint in hints.items():
        if typing.get_origin(hint) is typing.ClassVar:
            continue
        base, marker = _split_annotated(hint)
        yield name, base, marker


def resolve_schema(record_type: type) -> Schema:
    """Build the :class:`Schema` for *record_type*.

    Raises :class:`SchemaEmptyError` if the type declares no fields and
    :class:`NoMappedFieldsError` if none of its fields is mapped.
    """
    declared = list(_declared_fields(record_type))
    if not declared:
        raise SchemaEmptyError(f"{_type_name(record_type)} declares no fields")

    mapped: list[tuple[Any, str, Column, Any]] = []
    for position, (name, hint, marker) in enumerate(declared):
        if marker is None:
            continue
        sort_key = marker.order if marker.order is not None else position
        mapped.append((sort_key, name, marker, hint))

    if not mapped:
        raise NoMappedFieldsError(
            f"{_type_name(record_type)} has {len(declared)} fields but none is mapped")

    # stable: equal keys keep declaration order
    mapped.sort(key=lambda entry: entry[0])

    slots = []
    for index, (_key, name, marker, hint) in enumerate(mapped):
        kind = marker.kind if marker.kind is not None else kind_for_annotation(hint)
        slots.append(FieldSlot(column_index=index, header=marker.header, kind=kind, name=name))

    schema = Schema(record_type, slots)
    logger.debug(f"Resolved {schema!r}")
    return schema
