"""Export of documents to JSON and YAML, and import from plain data.

Usage
-----
::

    from retoml import parse_document
    from retoml.model.serializer import DocumentSerializer

    serializer = DocumentSerializer()
    doc = parse_document(text)
    json_text = serializer.to_json(doc)
    yaml_text = serializer.to_yaml(doc)
    doc2 = serializer.from_yaml(yaml_text)

Export drops all formatting.  Dates and times are written as their TOML
text (``1979-05-27T07:32:00Z``) because neither JSON nor YAML has a type
for every TOML date-time shape; ``inf`` and ``nan`` are written as the
strings ``"inf"``, ``"-inf"`` and ``"nan"`` in JSON, which has no literal
for them.
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

import yaml

from retoml.model.array import Array
from retoml.model.convert import table_from
from retoml.model.datetime import Datetime
from retoml.model.document import Document
from retoml.model.inline_table import InlineTable
from retoml.model.table import ArrayOfTables, Table
from retoml.model.table_like import Item
from retoml.model.value import Formatted


class DocumentSerializer:
    """Converts between ``Document`` objects and plain dict/list data."""

    # ------------------------------------------------------------------
    # Serialization (Document → dict)
    # ------------------------------------------------------------------

    def to_dict(self, doc: Document) -> dict[str, object]:
        """Return the document's content as JSON-compatible data."""
        return self._table_to_dict(doc.as_table())

    def _table_to_dict(self, table: Table | InlineTable) -> dict[str, object]:
        return {name: self._item_to_data(item) for name, item in table.items()}

    def _item_to_data(self, item: Item) -> object:
        if isinstance(item, Formatted):
            return self._scalar_to_data(item.value)
        if isinstance(item, Array):
            return [self._item_to_data(v) for v in item]
        if isinstance(item, ArrayOfTables):
            return [self._table_to_dict(t) for t in item]
        if isinstance(item, (Table, InlineTable)):
            return self._table_to_dict(item)
        raise TypeError(f"Unknown item type: {type(item).__name__}")

    @staticmethod
    def _scalar_to_data(value: object) -> object:
        if isinstance(value, Datetime):
            return str(value)
        if isinstance(value, float) and (math.isinf(value) or math.isnan(value)):
            if math.isnan(value):
                return "nan"
            return "inf" if value > 0 else "-inf"
        return value

    # ------------------------------------------------------------------
    # Deserialization (dict → Document)
    # ------------------------------------------------------------------

    def from_dict(self, data: Mapping[str, Any]) -> Document:
        """Build a new document from plain data.

        Nested mappings become ``[section]`` tables and lists of mappings
        become ``[[section]]`` arrays of tables.
        """
        return Document(table_from(data))

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, doc: Document, indent: int = 2) -> str:
        """Serialize a document to a JSON string."""
        return json.dumps(self.to_dict(doc), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> Document:
        """Build a document from a JSON object."""
        data: dict[str, object] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, doc: Document) -> str:
        """Serialize a document to a YAML string."""
        return yaml.dump(self.to_dict(doc), default_flow_style=False, allow_unicode=True, sort_keys=False)

    def from_yaml(self, text: str) -> Document:
        """Build a document from a YAML mapping."""
        data: dict[str, object] = yaml.safe_load(text)
        return self.from_dict(data)
