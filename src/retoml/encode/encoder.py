"""Encoder: document model → TOML text.

The ``TomlEncoder`` writes every node from its stored representation and
decor, so an unmodified parsed document comes back byte-for-byte.  Where
a node has no decor (``None`` on either side) the encoder falls back to
the default for the node's position:

======================  ==============  ===============
position                prefix          suffix
======================  ==============  ===============
key in a table body     ``""``          ``" "``
key in an inline table  ``" "``         ``" "``
key in a header         ``""``          ``""``
value after ``=``       ``" "``         ``""``
last inline value       ``" "``         ``" "``
first array element     ``""``          ``""``
other array elements    ``" "``         ``""``
table header            ``"\\n"``       ``""``
first table header      ``""``          ``""``
======================  ==============  ===============

Tables are emitted in the order their headers appeared in the source
(``Table.position``), not in tree order, so interleaved headers such as
``[a]``, ``[b]``, ``[a.c]`` keep their layout.

Usage
-----
::

    from retoml.encode import encode_document

    text = encode_document(doc)
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Final

from retoml.model.array import Array
from retoml.model.document import Document
from retoml.model.inline_table import InlineTable
from retoml.model.key import Key
from retoml.model.repr import Decor
from retoml.model.table import ArrayOfTables, Table
from retoml.model.table_like import TableKeyValue, TableLike
from retoml.model.value import Formatted, Value

DecorDefault = tuple[str, str]

DEFAULT_KEY_DECOR: Final[DecorDefault] = ("", " ")
DEFAULT_INLINE_KEY_DECOR: Final[DecorDefault] = (" ", " ")
DEFAULT_KEY_PATH_DECOR: Final[DecorDefault] = ("", "")
DEFAULT_VALUE_DECOR: Final[DecorDefault] = (" ", "")
DEFAULT_TRAILING_VALUE_DECOR: Final[DecorDefault] = (" ", " ")
DEFAULT_LEADING_VALUE_DECOR: Final[DecorDefault] = ("", "")
DEFAULT_TABLE_DECOR: Final[DecorDefault] = ("\n", "")


class TomlEncoder:
    """Accumulates TOML text for one encoding pass.

    A line that ended the source file has an empty terminator; if anything
    is written after it (for example a key added later) a ``"\\n"`` is
    inserted first so the output stays valid.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._pending_eol = False

    def getvalue(self) -> str:
        """Return everything written so far."""
        return "".join(self._parts)

    def _write(self, text: str) -> None:
        if not text:
            return
        if self._pending_eol:
            self._parts.append("\n")
            self._pending_eol = False
        self._parts.append(text)

    def _end_line(self, eol: str | None) -> None:
        if eol is None:
            eol = "\n"
        if eol:
            self._write(eol)
        else:
            self._pending_eol = True

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def write_key(self, key: Key, default: DecorDefault) -> None:
        """Write ``key`` with its decor."""
        self._write(key.decor.prefix_or(default[0]))
        self._write(key.to_repr().as_raw())
        self._write(key.decor.suffix_or(default[1]))

    def write_key_path(self, path: list[Key], default: DecorDefault) -> None:
        """Write a dotted key; ``default`` applies to the outer sides only."""
        last = len(path) - 1
        for i, key in enumerate(path):
            if i:
                self._write(".")
            prefix = default[0] if i == 0 else DEFAULT_KEY_PATH_DECOR[0]
            suffix = default[1] if i == last else DEFAULT_KEY_PATH_DECOR[1]
            self.write_key(key, (prefix, suffix))

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def write_value(self, value: Value, default: DecorDefault) -> None:
        """Write any value with its decor."""
        if isinstance(value, Formatted):
            self._write_decorated(value.decor, default, value.display_repr())
        elif isinstance(value, Array):
            self._write(value.decor.prefix_or(default[0]))
            self._write_array_body(value)
            self._write(value.decor.suffix_or(default[1]))
        elif isinstance(value, InlineTable):
            self._write(value.decor.prefix_or(default[0]))
            self._write_inline_table_body(value)
            self._write(value.decor.suffix_or(default[1]))
        else:
            raise TypeError(f"cannot encode {type(value).__name__} as a value")

    def _write_decorated(self, decor: Decor, default: DecorDefault, text: str) -> None:
        self._write(decor.prefix_or(default[0]))
        self._write(text)
        self._write(decor.suffix_or(default[1]))

    def _write_array_body(self, array: Array) -> None:
        self._write("[")
        for i, elem in enumerate(array):
            if i:
                self._write(",")
            self.write_value(elem, DEFAULT_VALUE_DECOR if i else DEFAULT_LEADING_VALUE_DECOR)
        if array.trailing_comma and not array.is_empty():
            self._write(",")
        self._write(array.trailing)
        self._write("]")

    def _write_inline_table_body(self, table: InlineTable) -> None:
        self._write("{")
        self._write(table.preamble)
        leaves = _in_source_order(table.iter_leaves())
        last = len(leaves) - 1
        for i, (path, kv) in enumerate(leaves):
            if i:
                self._write(",")
            self.write_key_path(_line_path(path, kv), DEFAULT_INLINE_KEY_DECOR)
            self._write("=")
            self.write_value(kv.value, DEFAULT_TRAILING_VALUE_DECOR if i == last else DEFAULT_VALUE_DECOR)  # type: ignore[arg-type]
        self._write("}")

    # ------------------------------------------------------------------
    # Tables and documents
    # ------------------------------------------------------------------

    def write_document(self, doc: Document) -> None:
        """Write every table in source order, then the trailing trivia."""
        tables: list[tuple[int, Table, list[Key], bool]] = []
        last_position = 0

        def collect(table: Table, path: list[Key], is_array: bool) -> None:
            nonlocal last_position
            if table.position is not None:
                last_position = table.position
            tables.append((last_position, table, list(path), is_array))

        _visit_nested_tables(doc.as_table(), [], False, collect)
        tables.sort(key=lambda entry: entry[0])

        first_table = True
        for _, table, path, is_array in tables:
            first_table = self._write_table(table, path, is_array, first_table)
        self._write(doc.trailing)

    def _write_table(self, table: Table, path: list[Key], is_array: bool, first_table: bool) -> bool:
        leaves = list(table.iter_leaves())
        # An implicit table without values of its own needs no header; its
        # sub-tables carry the full path.
        visible = is_array or not (table.implicit and not leaves)

        if not path:
            if leaves:
                first_table = False
        elif visible:
            default = ("", DEFAULT_TABLE_DECOR[1]) if first_table else DEFAULT_TABLE_DECOR
            first_table = False
            open_, close = ("[[", "]]") if is_array else ("[", "]")
            self._write(table.decor.prefix_or(default[0]))
            self._write(open_)
            self.write_key_path(_header_path(path, table), DEFAULT_KEY_PATH_DECOR)
            self._write(close)
            self._write(table.decor.suffix_or(default[1]))
            self._end_line(table.eol)

        self.write_body(table)
        return first_table

    def write_body(self, table: TableLike) -> None:
        """Write the ``key = value`` lines of a table, without its header."""
        for key_path, kv in _in_source_order(table.iter_leaves()):
            self.write_key_path(_line_path(key_path, kv), DEFAULT_KEY_DECOR)
            self._write("=")
            self.write_value(kv.value, DEFAULT_VALUE_DECOR)  # type: ignore[arg-type]
            self._end_line(kv.eol)


def _visit_nested_tables(
    table: Table,
    path: list[Key],
    is_array: bool,
    callback: Callable[[Table, list[Key], bool], None],
) -> None:
    if not table.dotted:
        callback(table, path, is_array)
    for kv in table.iter_kvs():
        child = kv.value
        if isinstance(child, Table):
            key = kv.key
            if child.dotted:
                # Dotted keys carry line-level trivia that does not belong in a header.
                key = Key(key.get(), key.repr)
            path.append(key)
            _visit_nested_tables(child, path, False, callback)
            path.pop()
        elif isinstance(child, ArrayOfTables):
            for element in child:
                path.append(kv.key)
                _visit_nested_tables(element, path, True, callback)
                path.pop()


def _line_path(tree_path: list[Key], kv: TableKeyValue) -> list[Key]:
    """Pick the keys to write for a (possibly dotted) key/value line.

    A dotted entry remembers the leading keys as written on its own line;
    they are used while they still name the same tables as the tree path.
    Otherwise the tree keys are written without the trivia of the line that
    first created them.
    """
    prefix = kv.dotted_path
    if prefix and len(prefix) == len(tree_path) - 1 and all(
        a.get() == b.get() for a, b in zip(prefix, tree_path)
    ):
        return [*prefix, kv.key]
    return [*(Key(key.get(), key.repr) for key in tree_path[:-1]), tree_path[-1]]


def _in_source_order(leaves: Iterable[tuple[list[Key], TableKeyValue]]) -> list[tuple[list[Key], TableKeyValue]]:
    """Sort a table's leaves back into the order they were read.

    Dotted keys group their values under one tree entry, so ``a.x``,
    ``b``, ``a.y`` come out of the tree as ``a.x``, ``a.y``, ``b``.  An
    entry without a position goes after every entry that precedes it in
    the tree.
    """
    ordered: list[tuple[int, list[Key], TableKeyValue]] = []
    last = -1
    for path, kv in leaves:
        if kv.position is None:
            ordered.append((last, path, kv))
        else:
            last = max(last, kv.position)
            ordered.append((kv.position, path, kv))
    ordered.sort(key=lambda entry: entry[0])
    return [(path, kv) for _, path, kv in ordered]


def _header_path(tree_path: list[Key], table: Table) -> list[Key]:
    """Pick the keys to write in a table header.

    Every header keeps its own spacing, while the spelling of each segment
    is the tree key's, so ``[a."b"]`` after ``[a.'b'.c]`` prints as
    ``[a.'b']``.
    """
    written = table.header_path
    if written is None or len(written) != len(tree_path) or any(
        a.get() != b.get() for a, b in zip(written, tree_path)
    ):
        return tree_path
    return [Key(tree.get(), tree.repr, own.decor) for tree, own in zip(tree_path, written)]


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------


def encode_document(doc: Document) -> str:
    """Encode a whole document."""
    encoder = TomlEncoder()
    encoder.write_document(doc)
    return encoder.getvalue()


def encode_value(value: Value, default: DecorDefault = ("", "")) -> str:
    """Encode one value, using ``default`` where its decor is unset."""
    encoder = TomlEncoder()
    encoder.write_value(value, default)
    return encoder.getvalue()


def encode_key_path(path: list[Key], default: DecorDefault = DEFAULT_KEY_PATH_DECOR) -> str:
    """Encode a dotted key such as ``a."b c".d``."""
    encoder = TomlEncoder()
    encoder.write_key_path(path, default)
    return encoder.getvalue()


def encode_table_body(table: TableLike) -> str:
    """Encode the ``key = value`` lines of a table without its header."""
    encoder = TomlEncoder()
    encoder.write_body(table)
    return encoder.getvalue()
