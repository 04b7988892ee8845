"""Standard tables (``[a.b]``) and arrays of tables (``[[a.b]]``)."""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from retoml.model.key import Key
from retoml.model.repr import Decor
from retoml.model.table_like import Item, TableKeyValue, TableLike


class Table(TableLike):
    """A table written with a header line, or the document root.

    Parameters
    ----------
    mapping:
        Initial entries.  Plain Python values are converted; ``Table`` and
        ``ArrayOfTables`` items are stored as they are.

    Attributes
    ----------
    decor:
        Trivia before the header line (prefix) and between the closing
        bracket and the line end (suffix).
    implicit:
        True for a table that only exists because a deeper header or a
        dotted key named it.  An implicit table with no values of its own
        gets no header when encoded.
    dotted:
        True for a table created by a dotted key (``a.b = 1``); its values
        are written as dotted keys in the parent's body.
    position:
        Index of the header in the source, used to emit tables in the order
        they were written.  None for programmatic tables.
    eol:
        Terminator of the header line; None means ``"\\n"``.
    header_path:
        The keys of the header line as written, for their spacing.  The
        spelling of each segment comes from the tree key, which is the
        first spelling seen.  None for tables without a parsed header.
    """

    __slots__ = ("_items", "decor", "implicit", "dotted", "position", "eol", "header_path")

    def __init__(self, mapping: Mapping[str, Any] | None = None) -> None:
        self._items: dict[str, TableKeyValue] = {}
        self.decor: Decor = Decor()
        self.implicit: bool = False
        self.dotted: bool = False
        self.position: int | None = None
        self.eol: str | None = None
        self.header_path: list[Key] | None = None
        for key, value in (mapping or {}).items():
            self[key] = value

    @classmethod
    def new_implicit(cls, dotted: bool = False) -> "Table":
        """Create an empty table that only hosts deeper keys."""
        table = cls()
        table.implicit = True
        table.dotted = dotted
        return table

    def _convert(self, value: Any) -> Item:
        if isinstance(value, (Table, ArrayOfTables)):
            return value
        from retoml.model.convert import value_from

        return value_from(value)

    def _is_dotted_child(self, item: Item) -> bool:
        return isinstance(item, Table) and item.dotted

    def type_name(self) -> str:
        return "table"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Table({dict(self.items())!r})"


class ArrayOfTables:
    """The tables of a ``[[name]]`` header, one per occurrence.

    Parameters
    ----------
    tables:
        Initial tables; mappings are converted to ``Table``.
    """

    __slots__ = ("_tables",)

    def __init__(self, tables: Iterable[Table | Mapping[str, Any]] | None = None) -> None:
        self._tables: list[Table] = []
        for table in tables or ():
            self.append(table)

    def type_name(self) -> str:
        return "array of tables"

    def append(self, table: Table | Mapping[str, Any]) -> Table:
        """Append a table and return it."""
        if not isinstance(table, Table):
            table = Table(table)
        self._tables.append(table)
        return table

    def is_empty(self) -> bool:
        return not self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables)

    def __getitem__(self, index: int) -> Table:
        return self._tables[index]

    def __delitem__(self, index: int) -> None:
        del self._tables[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayOfTables):
            return NotImplemented
        return self._tables == other._tables

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ArrayOfTables({self._tables!r})"
