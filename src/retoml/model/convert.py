"""Conversion between the document model and plain Python data.

``value_from`` turns Python objects into TOML values for assignment
(``table["port"] = 8080``).  ``unwrap`` goes the other way, dropping all
formatting.  ``table_from`` builds standard tables from nested mappings,
which is what a generated document wants for its top-level sections.
"""
from __future__ import annotations

import datetime as _dt
from collections.abc import Mapping
from typing import Any, Final

from retoml.model.array import Array
from retoml.model.datetime import Datetime
from retoml.model.inline_table import InlineTable
from retoml.model.table import ArrayOfTables, Table
from retoml.model.table_like import Item
from retoml.model.value import Formatted, Value

I64_MIN: Final[int] = -(2**63)
I64_MAX: Final[int] = 2**63 - 1


def value_from(obj: Any) -> Value:
    """Convert ``obj`` into a TOML value.

    Values of the model pass through unchanged.  ``dict`` becomes an
    ``InlineTable``, ``list``/``tuple`` an ``Array``, and ``datetime``
    objects a ``Datetime``.

    Raises
    ------
    TypeError
        For objects with no TOML equivalent, including ``Table`` (tables
        are items, not values).
    ValueError
        For integers outside the signed 64-bit range.
    """
    if isinstance(obj, (Formatted, Array, InlineTable)):
        return obj
    if isinstance(obj, bool):
        return Formatted(obj)
    if isinstance(obj, int):
        if not I64_MIN <= obj <= I64_MAX:
            raise ValueError(f"integer {obj} does not fit in 64 bits")
        return Formatted(obj)
    if isinstance(obj, (float, str, Datetime)):
        return Formatted(obj)
    if isinstance(obj, (_dt.datetime, _dt.date, _dt.time)):
        return Formatted(Datetime.from_python(obj))
    if isinstance(obj, (Table, ArrayOfTables)):
        raise TypeError(f"a {obj.type_name()} cannot be stored as a value")
    if isinstance(obj, Mapping):
        return InlineTable(obj)
    if isinstance(obj, (list, tuple)):
        return Array(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to a TOML value")


def table_from(data: Mapping[str, Any]) -> Table:
    """Build a standard table from a mapping.

    Nested mappings become sub-tables and non-empty lists of mappings
    become arrays of tables; everything else goes through ``value_from``.
    A sub-table holding only further tables is marked implicit so it gets
    no header of its own.
    """
    table = Table()
    for key, obj in data.items():
        if isinstance(obj, Mapping):
            child = table_from(obj)
            child.implicit = not child.is_empty() and all(
                isinstance(item, (Table, ArrayOfTables)) for item in child.values()
            )
            table[key] = child
        elif _is_table_list(obj):
            table[key] = ArrayOfTables(table_from(t) for t in obj)
        else:
            table[key] = value_from(obj)
    return table


def _is_table_list(obj: Any) -> bool:
    return isinstance(obj, (list, tuple)) and bool(obj) and all(isinstance(t, Mapping) for t in obj)


def unwrap(item: Item) -> Any:
    """Return the plain Python data held by ``item``.

    Dates and times become ``datetime`` objects where Python can represent
    them; a leap second or a date such as Feb 30 stays a ``Datetime``.
    """
    if isinstance(item, Formatted):
        value = item.value
        if isinstance(value, Datetime):
            try:
                return value.to_python()
            except ValueError:
                return value
        return value
    if isinstance(item, Array):
        return [unwrap(v) for v in item]
    if isinstance(item, ArrayOfTables):
        return [unwrap(t) for t in item]
    if isinstance(item, (Table, InlineTable)):
        return {name: unwrap(child) for name, child in item.items()}
    raise TypeError(f"cannot unwrap {type(item).__name__}")
