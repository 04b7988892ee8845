"""The parsed document: a root table plus trailing trivia."""
from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from retoml.model.key import Key
from retoml.model.table import Table
from retoml.model.table_like import Item


class Document:
    """A TOML document that re-encodes to its source text.

    ``str(parse_document(text)) == text`` for every ``text`` that parses.
    Mapping access (``doc["key"]``) reads and writes the root table.

    Parameters
    ----------
    root:
        The root table; a new empty one when omitted.
    trailing:
        Whitespace and comments after the last key or header.
    """

    __slots__ = ("root", "trailing")

    def __init__(self, root: Table | None = None, trailing: str = "") -> None:
        self.root: Table = root if root is not None else Table()
        self.trailing: str = trailing

    @classmethod
    def parse(cls, text: str) -> "Document":
        """Parse ``text``; see ``retoml.parse_document``."""
        from retoml.parser.entry import parse_document

        return parse_document(text)

    def as_table(self) -> Table:
        return self.root

    def __getitem__(self, key: str | Key) -> Item:
        return self.root[key]

    def __setitem__(self, key: str | Key, value: Any) -> None:
        self.root[key] = value

    def __delitem__(self, key: str | Key) -> None:
        del self.root[key]

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def get(self, key: str, default: Any = None) -> Any:
        return self.root.get(key, default)

    def keys(self) -> list[str]:
        return self.root.keys()

    def items(self) -> list[tuple[str, Item]]:
        return self.root.items()

    def unwrap(self) -> dict[str, Any]:
        """Return the content as plain Python data."""
        from retoml.model.convert import unwrap

        return unwrap(self.root)

    to_python = unwrap

    def __repr__(self) -> str:
        return f"Document({dict(self.root.items())!r})"

    def __str__(self) -> str:
        from retoml.encode.encoder import encode_document

        return encode_document(self)
