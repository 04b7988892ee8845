"""retoml document model.

Exports the node types of a parsed document, their formatting carriers
(``Repr`` and ``Decor``), and the serializer for exporting documents to
JSON/YAML.
"""
from __future__ import annotations

from retoml.model.repr import Decor, Repr
from retoml.model.datetime import Date, Datetime, DatetimeKind, Offset, Time
from retoml.model.key import Key, KeyMut
from retoml.model.value import Formatted, Value
from retoml.model.array import Array
from retoml.model.table_like import Item, TableKeyValue
from retoml.model.inline_table import InlineTable
from retoml.model.table import ArrayOfTables, Table
from retoml.model.document import Document
from retoml.model.convert import table_from, unwrap, value_from
from retoml.model.serializer import DocumentSerializer

__all__ = [
    # Formatting
    "Decor",
    "Repr",
    # Keys
    "Key",
    "KeyMut",
    # Values
    "Formatted",
    "Value",
    "Array",
    "InlineTable",
    "Date",
    "Time",
    "Offset",
    "Datetime",
    "DatetimeKind",
    # Tables
    "Item",
    "TableKeyValue",
    "Table",
    "ArrayOfTables",
    "Document",
    # Conversion
    "value_from",
    "table_from",
    "unwrap",
    "DocumentSerializer",
]
