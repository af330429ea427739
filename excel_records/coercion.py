"""
Value coercion between spreadsheet cells and typed record fields.

Import direction (:func:`cell_to_field`) works on the *string form* of the
cell value, the way a user-typed spreadsheet is read: ``"42.9"`` in an
integer column becomes ``42`` (truncated), ``"2020-01-02 03:04:05"`` in a
date-time column becomes that exact :class:`datetime.datetime`.

Export direction (:func:`field_to_cell`) always produces a plain string.

``None`` is the absent marker.  An absent cell gives ``None`` for text
fields; for every other kind an absent or empty cell returns :data:`UNSET`,
which tells the caller to leave the field at its default.
"""

import datetime
import re
from enum import Enum

from .errors import TypeCoercionError


# Fixed ``yyyy-MM-dd HH:mm:ss`` pattern used in both directions
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

INT32_RANGE = (-2 ** 31, 2 ** 31 - 1)
INT64_RANGE = (-2 ** 63, 2 ** 63 - 1)
INT16_RANGE = (-2 ** 15, 2 ** 15 - 1)
FLOAT32_MAX = 3.4028234663852886e38

# ASCII digits only; int() also accepts "1_000", " 42 " and "٤٢"
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class ValueKind(str, Enum):
    """Value types a mapped field can declare."""
    TEXT = "text"
    INTEGER = "integer"
    LONG = "long"
    SHORT = "short"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    DATETIME = "datetime"
    RAW = "raw"

    def __str__(self):
        return self.value


class _Unset:
    """Sentinel: leave the target field untouched."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


# ------------------------------------------------------------------
# Cell -> field
# ------------------------------------------------------------------

def _parse_int(text, kind, bounds):
    if not _INT_PATTERN.fullmatch(text):
        raise TypeCoercionError(text, kind, "not a decimal integer")
    number = int(text)
    low, high = bounds
    if not low <= number <= high:
        raise TypeCoercionError(text, kind, f"out of range [{low}, {high}]")
    return number


def _parse_float(text, kind):
    # float() also takes "1_0", " 1 " and non-ASCII digits
    if not text.isascii() or "_" in text or text != text.strip():
        raise TypeCoercionError(text, kind, "not a decimal number")
    try:
        return float(text)
    except ValueError as exc:
        raise TypeCoercionError(text, kind, str(exc)) from None


def _truncate_int32(number):
    # double -> int cast: NaN gives 0, out-of-range values clamp
    if number != number:
        return 0
    low, high = INT32_RANGE
    if number >= high:
        return high
    if number <= low:
        return low
    return int(number)


def _to_integer(value, text):
    # "42.9" -> 42: truncate through a double first, never round
    if isinstance(value, float):
        return _truncate_int32(value)
    if "." in text:
        return _truncate_int32(_parse_float(text, ValueKind.INTEGER))
    return _parse_int(text, ValueKind.INTEGER, INT32_RANGE)


def _to_float32(text):
    number = _parse_float(text, ValueKind.FLOAT)
    if abs(number) > FLOAT32_MAX and number == number:
        return float("inf") if number > 0 else float("-inf")
    return number


def _to_datetime(value, text):
    if isinstance(value, datetime.datetime):
        return value
    try:
        return datetime.datetime.strptime(text, DATE_FORMAT)
    except ValueError as exc:
        raise TypeCoercionError(text, ValueKind.DATETIME, str(exc)) from None


def cell_to_field(value, kind):
    """Convert a raw cell value into the value stored on a field of *kind*.

    Returns :data:`UNSET` when the field should keep its default value.
    Raises :class:`TypeCoercionError` when the value cannot be parsed.
    """
    kind = ValueKind(kind)

    if kind is ValueKind.RAW:
        return value
    if kind is ValueKind.TEXT:
        return None if value is None else str(value)

    if value is None:
        return UNSET
    text = str(value)
    if text == "":
        return UNSET

    if kind is ValueKind.INTEGER:
        return _to_integer(value, text)
    if kind is ValueKind.LONG:
        return _parse_int(text, kind, INT64_RANGE)
    if kind is ValueKind.SHORT:
        return _parse_int(text, kind, INT16_RANGE)
    if kind is ValueKind.FLOAT:
        return _to_float32(text)
    if kind is ValueKind.DOUBLE:
        return _parse_float(text, kind)
    if kind is ValueKind.DATETIME:
        return _to_datetime(value, text)
    # CHAR
    return text[0]


# ------------------------------------------------------------------
# Field -> cell
# ------------------------------------------------------------------

def field_to_cell(value, kind):
    """Render a field value as the string written into its cell."""
    if value is None:
        return ""
    if ValueKind(kind) is ValueKind.DATETIME and isinstance(value, (datetime.date, datetime.datetime)):
        return value.strftime(DATE_FORMAT)
    return str(value)
