"""Document assembly.

The document grammar reports what it recognizes (trivia, key/value lines,
table headers) to a ``ParseState``, which builds the table tree.  One
table is "current" at a time: the root until the first header, then the
table each header opens.  The current table is detached from the tree
while its body is read and attached again by ``finalize_table`` when the
next header (or the end of input) arrives.

All semantic checks of the document live here: duplicate keys, tables
defined twice, dotted keys extending a value, and dotted keys reopening a
table that was defined with a header.
"""
from __future__ import annotations

from retoml.model.document import Document
from retoml.model.key import Key
from retoml.model.repr import Decor
from retoml.model.table import ArrayOfTables, Table
from retoml.model.table_like import TableKeyValue
from retoml.parser.errors import DottedKeyExtendWrongType, DuplicateKey


class ParseState:
    """Mutable builder owned by a single ``document`` parse.

    Attributes
    ----------
    document:
        The document being built.
    trailing:
        Trivia seen since the last key/value or header; it becomes the
        prefix of whatever comes next.
    keyval_position:
        Number of key/value lines read so far.
    """

    def __init__(self) -> None:
        self.document = Document()
        self.trailing = ""
        self.current_table_position = 0
        self.current_table = _new_root()
        self.current_is_array = False
        self.current_table_path: list[Key] = []
        self.keyval_position = 0

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def on_ws(self, text: str) -> None:
        self.trailing += text

    def on_comment(self, text: str) -> None:
        self.trailing += text

    def _take_trailing(self) -> str:
        text, self.trailing = self.trailing, ""
        return text

    # ------------------------------------------------------------------
    # Key/value lines
    # ------------------------------------------------------------------

    def on_keyval(self, path: list[Key], kv: TableKeyValue) -> None:
        """Insert a parsed ``key = value`` line into the current table.

        Parameters
        ----------
        path:
            Leading segments of a dotted key, empty for a simple key.
        kv:
            The entry for the last segment.

        Raises
        ------
        DuplicateKey
            If the key is already present, or a dotted key reaches into a
            table that was defined with a header.
        DottedKeyExtendWrongType
            If a dotted key runs through a value.
        """
        first_key = path[0] if path else kv.key
        first_key.decor.prefix = self._take_trailing() + (first_key.decor.prefix or "")
        kv.position = self.keyval_position
        self.keyval_position += 1

        table = self.descend_path(self.current_table, path, dotted=True)
        # Dotted keys may only add to dotted tables; a header table's
        # direct keys must be written under its header.
        if table.dotted == (not path):
            raise DuplicateKey(key=kv.key.get(), table=None)

        if table.insert_kv(kv) is not None:
            raise DuplicateKey(key=kv.key.get(), table=(*self.current_table_path, *path))

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def on_std_header(self, path: list[Key], trailing: str, eol: str) -> None:
        """Handle ``[path]``: close the current table and open a new one."""
        self.finalize_table()
        decor = Decor(self._take_trailing(), trailing)
        self.start_table(path, decor, eol)

    def on_array_header(self, path: list[Key], trailing: str, eol: str) -> None:
        """Handle ``[[path]]``: close the current table and open an array element."""
        self.finalize_table()
        decor = Decor(self._take_trailing(), trailing)
        self.start_array_table(path, decor, eol)

    def start_table(self, path: list[Key], decor: Decor, eol: str) -> None:
        root = self.document.as_table()
        parent = self.descend_path(root, path[:-1], dotted=False)
        existing = parent.get(path[-1].get())
        if existing is not None:
            # Only a table that so far exists because of deeper headers
            # may be given its own header.  It stays in the tree under the
            # key first used for it.
            if isinstance(existing, Table) and existing.implicit and not existing.dotted:
                self.current_table = existing
            else:
                raise DuplicateKey.from_path(path, len(path) - 1)
        self._open(path, decor, eol, is_array=False)

    def start_array_table(self, path: list[Key], decor: Decor, eol: str) -> None:
        root = self.document.as_table()
        parent = self.descend_path(root, path[:-1], dotted=False)
        entry = parent.entry_format(path[-1], ArrayOfTables)
        if not isinstance(entry, ArrayOfTables):
            raise DuplicateKey.from_path(path, len(path) - 1)
        self._open(path, decor, eol, is_array=True)

    def _open(self, path: list[Key], decor: Decor, eol: str, *, is_array: bool) -> None:
        self.current_table_position += 1
        table = self.current_table
        table.decor = decor
        table.implicit = False
        table.dotted = False
        table.position = self.current_table_position
        table.eol = eol
        table.header_path = list(path)
        self.current_is_array = is_array
        self.current_table_path = path

    def finalize_table(self) -> None:
        """Attach the current table to the tree and reset to a fresh one."""
        table, self.current_table = self.current_table, Table()
        path, self.current_table_path = self.current_table_path, []

        if not path:
            self.document.root = table
            return

        root = self.document.as_table()
        parent = self.descend_path(root, path[:-1], dotted=False)
        leaf = path[-1]
        if self.current_is_array:
            entry = parent.entry_format(leaf, ArrayOfTables)
            if not isinstance(entry, ArrayOfTables):
                raise DuplicateKey.from_path(path, len(path) - 1)
            entry.append(table)
            return

        entry = parent.entry_format(leaf, lambda: table)
        if entry is table:
            return
        # ``[a.b.c]`` re-created ``a.b`` while ``[a.b]`` was open.
        if isinstance(entry, Table) and entry.implicit:
            parent[leaf] = table
        else:
            raise DuplicateKey.from_path(path, len(path) - 1)

    # ------------------------------------------------------------------
    # Tree navigation
    # ------------------------------------------------------------------

    @staticmethod
    def descend_path(table: Table, path: list[Key], dotted: bool) -> Table:
        """Walk ``path`` from ``table``, creating implicit tables on the way.

        Through an array of tables the walk continues in its last element.

        Raises
        ------
        DottedKeyExtendWrongType
            If a segment names a value.
        """
        for i, key in enumerate(path):
            entry = table.entry_format(key, lambda: Table.new_implicit(dotted))
            if isinstance(entry, ArrayOfTables):
                table = entry[len(entry) - 1]
            elif isinstance(entry, Table):
                table = entry
            else:
                raise DottedKeyExtendWrongType.from_path(path, i, entry.type_name())
        return table

    def into_document(self) -> Document:
        """Finish the parse and return the document."""
        self.finalize_table()
        self.document.trailing = self._take_trailing()
        return self.document


def _new_root() -> Table:
    root = Table()
    root.position = 0
    return root
