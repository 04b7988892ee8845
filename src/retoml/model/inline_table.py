"""Inline tables: ``{ name = "x", point.x = 1 }``."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from retoml.model.repr import Decor
from retoml.model.table_like import Item, TableKeyValue, TableLike


class InlineTable(TableLike):
    """A brace-delimited table written as a single value.

    Dotted keys inside the braces (``{ a.b = 1 }``) are stored as nested
    inline tables flagged ``dotted``; such tables are never written with
    their own braces, only through the keys of their leaves.

    Parameters
    ----------
    mapping:
        Initial entries.  Plain Python values are converted.
    """

    __slots__ = ("_items", "preamble", "decor", "dotted")

    def __init__(self, mapping: Mapping[str, Any] | None = None) -> None:
        self._items: dict[str, TableKeyValue] = {}
        self.preamble: str = ""
        self.decor: Decor = Decor()
        self.dotted: bool = False
        for key, value in (mapping or {}).items():
            self[key] = value

    @classmethod
    def new_dotted(cls) -> "InlineTable":
        """Create the empty table that hosts one segment of a dotted key."""
        table = cls()
        table.dotted = True
        return table

    def _convert(self, value: Any) -> Item:
        from retoml.model.convert import value_from

        return value_from(value)

    def _is_dotted_child(self, item: Item) -> bool:
        return isinstance(item, InlineTable) and item.dotted

    def type_name(self) -> str:
        return "inline table"

    def decorated(self, prefix: str, suffix: str) -> "InlineTable":
        """Replace the decor and return ``self``."""
        self.decor = Decor(prefix, suffix)
        return self

    def format(self) -> None:
        """Reset every key and value inside the braces to the default layout."""
        self.preamble = ""
        for kv in self._items.values():
            kv.key.format()
            kv.dotted_path = []
            value = kv.value
            value.decor.clear()  # type: ignore[union-attr]
            if isinstance(value, InlineTable):
                value.format()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InlineTable):
            return NotImplemented
        return self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"InlineTable({dict(self.items())!r})"

    def __str__(self) -> str:
        from retoml.encode.encoder import encode_value

        return encode_value(self, ("", ""))
