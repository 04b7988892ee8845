"""Behaviour shared by standard tables and inline tables.

Both kinds map decoded key strings to ``TableKeyValue`` entries in
insertion order.  The entry keeps the ``Key`` object (spelling and decor)
next to the item so that formatting survives edits to the value.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from retoml.model.key import Key, KeyMut
from retoml.model.value import is_value

if TYPE_CHECKING:
    from retoml.model.table import ArrayOfTables, Table
    from retoml.model.value import Value

Item = Union["Value", "Table", "ArrayOfTables"]


@dataclass(slots=True)
class TableKeyValue:
    """One ``key = value`` entry, or a sub-table stored under its key.

    Parameters
    ----------
    key:
        The leaf key, with the spelling and decor it was written with.
    value:
        The stored item.
    dotted_path:
        For an entry written as a dotted key (``a.b.c = 1``), the leading
        segments (``a.b``) as they were spelled on that line.
    eol:
        Line terminator written after the entry: ``"\\n"``, ``"\\r\\n"``,
        or ``""`` when the entry ended the file.  None means ``"\\n"``.
    position:
        Index of the entry among the lines (or inline pairs) of its source,
        so entries are written in the order they were read even when dotted
        keys interleave.  None for programmatic entries, which are written
        after every entry that precedes them in the table.
    """

    key: Key
    value: Item
    dotted_path: list[Key] = field(default_factory=list)
    eol: str | None = None
    position: int | None = None


class TableLike(ABC):
    """Mapping API over ``dict[str, TableKeyValue]``.

    Subclasses set ``_items`` and implement ``_convert`` to turn assigned
    Python values into items they can hold.
    """

    __slots__ = ()

    _items: dict[str, TableKeyValue]

    @abstractmethod
    def _convert(self, value: Any) -> Item:
        """Turn an assigned Python value into an item this table can hold."""

    @abstractmethod
    def _is_dotted_child(self, item: Item) -> bool:
        """Return True if ``item`` is written through dotted keys of this table."""

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: str | Key) -> Item:
        return self._items[_name(key)].value

    def __setitem__(self, key: str | Key, value: Any) -> None:
        item = self._convert(value)
        name = _name(key)
        existing = self._items.get(name)
        if existing is not None:
            old = existing.value
            if is_value(old) and is_value(item):
                item.decor = old.decor.copy()
            existing.value = item
            return
        new_key = key.copy() if isinstance(key, Key) else Key(key)
        self._items[name] = TableKeyValue(new_key, item)

    def __delitem__(self, key: str | Key) -> None:
        del self._items[_name(key)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Key):
            return key.get() in self._items
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def keys(self) -> list[str]:
        return list(self._items)

    def values(self) -> list[Item]:
        return [kv.value for kv in self._items.values()]

    def items(self) -> list[tuple[str, Item]]:
        return [(name, kv.value) for name, kv in self._items.items()]

    def get(self, key: str, default: Any = None) -> Any:
        kv = self._items.get(key)
        return default if kv is None else kv.value

    def is_empty(self) -> bool:
        return not self._items

    def remove(self, key: str) -> Item | None:
        """Remove ``key`` and return its item, or None if absent."""
        kv = self._items.pop(key, None)
        return None if kv is None else kv.value

    # ------------------------------------------------------------------
    # Keys and entries
    # ------------------------------------------------------------------

    def key(self, name: str) -> Key:
        """Return the stored ``Key`` for ``name``.

        Raises
        ------
        KeyError
            If ``name`` is not present.
        """
        return self._items[name].key

    def key_mut(self, name: str) -> KeyMut:
        """Return an editing view of the stored ``Key`` for ``name``."""
        return self._items[name].key.as_mut()

    def iter_kvs(self) -> Iterator[TableKeyValue]:
        """Iterate over the raw entries in insertion order."""
        return iter(self._items.values())

    def entry_format(self, key: Key, default: Callable[[], Item]) -> Item:
        """Return the item under ``key``, inserting ``default()`` if absent.

        A newly inserted entry stores ``key`` itself, so the first spelling
        seen is the one that is kept.
        """
        kv = self._items.get(key.get())
        if kv is None:
            kv = TableKeyValue(key, default())
            self._items[key.get()] = kv
        return kv.value

    def insert_kv(self, kv: TableKeyValue) -> TableKeyValue | None:
        """Insert ``kv`` unless its key is taken; return the existing entry if so."""
        name = kv.key.get()
        existing = self._items.get(name)
        if existing is None:
            self._items[name] = kv
        return existing

    # ------------------------------------------------------------------
    # Dotted-key flattening
    # ------------------------------------------------------------------

    def iter_leaves(self, parent: tuple[Key, ...] = ()) -> Iterator[tuple[list[Key], TableKeyValue]]:
        """Yield ``(path, entry)`` for every value, descending into dotted children.

        ``path`` runs from this table to the leaf key, so ``a.b = 1`` held
        in a dotted child ``a`` yields ``([a, b], entry)``.
        """
        for kv in self._items.values():
            path = (*parent, kv.key)
            if self._is_dotted_child(kv.value):
                yield from kv.value.iter_leaves(path)  # type: ignore[union-attr]
            elif not _is_table(kv.value):
                yield list(path), kv

    def get_values(self) -> list[tuple[list[Key], "Value"]]:
        """Return ``(key_path, value)`` for every value, flattening dotted keys."""
        return [(path, kv.value) for path, kv in self.iter_leaves()]  # type: ignore[misc]


def _name(key: str | Key) -> str:
    return key.get() if isinstance(key, Key) else key


def _is_table(item: object) -> bool:
    from retoml.model.table import ArrayOfTables, Table

    return isinstance(item, (Table, ArrayOfTables))
