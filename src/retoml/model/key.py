"""Keys of key/value pairs and table headers.

There are three spellings of a key::

    [dependencies."nom"]
    version = "5.0"
    'literal key' = "nonsense"
    "basic string key" = 42

1. Bare keys (``version`` and ``dependencies``).
2. Basic quoted keys (``"basic string key"`` and ``"nom"``).
3. Literal quoted keys (``'literal key'``).

A ``Key`` remembers its spelling (``repr``) and surrounding trivia
(``decor``), but its identity is the decoded string alone: keys compare,
hash and sort by ``get()``, so ``'a'`` and ``"a"`` and ``a`` are the same
key.  This is what lets differently quoted table headers merge into one
table.
"""
from __future__ import annotations

import functools
import re
from typing import Final

from retoml.encode.strings import StringStyle, to_string_repr
from retoml.model.repr import Decor, Repr

# unquoted-key = 1*( ALPHA / DIGIT / %x2D / %x5F ) ; A-Z / a-z / 0-9 / - / _
BARE_KEY_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]+")


def is_bare_key(text: str) -> bool:
    """Return True if ``text`` can be written without quotes."""
    return BARE_KEY_RE.fullmatch(text) is not None


def to_key_repr(key: str) -> Repr:
    """Synthesize the canonical spelling of ``key``.

    Bare when possible, else a one-line literal string.  Literal quoting
    needs no escapes, but cannot spell an apostrophe or control
    characters; those keys fall back to a one-line basic string.
    """
    if is_bare_key(key):
        return Repr(key)
    literal_ok = "'" not in key and not any(
        (c < " " and c != "\t") or c == "\x7f" for c in key
    )
    return Repr(to_string_repr(key, StringStyle.ONELINE_SINGLE, literal=literal_ok))


@functools.total_ordering
class Key:
    """A table key with optional source representation and decor.

    Parameters
    ----------
    key:
        The decoded key string.  Read-only after construction.
    repr:
        Source spelling, if known.
    decor:
        Surrounding trivia.
    """

    __slots__ = ("_key", "repr", "decor")

    def __init__(self, key: str, repr: Repr | None = None, decor: Decor | None = None) -> None:
        self._key: str = key
        self.repr: Repr | None = repr
        self.decor: Decor = decor if decor is not None else Decor()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> list["Key"]:
        """Parse a possibly dotted key expression such as ``a."b c".d``."""
        from retoml.parser.entry import parse_key_path

        return parse_key_path(text)

    @classmethod
    def parse_simple(cls, text: str) -> "Key":
        """Parse exactly one simple key, consuming the whole text."""
        from retoml.parser.entry import parse_key

        return parse_key(text)

    def with_repr_unchecked(self, repr: Repr) -> "Key":
        """Set the representation without validating it; returns ``self``."""
        self.repr = repr
        return self

    def with_decor(self, decor: Decor) -> "Key":
        """Set the decor; returns ``self``."""
        self.decor = decor
        return self

    def copy(self) -> "Key":
        """Return an independent copy, including repr and decor."""
        return Key(self._key, self.repr, self.decor.copy())

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self) -> str:
        """Return the decoded key."""
        return self._key

    def to_repr(self) -> Repr:
        """Return the stored representation, or synthesize the canonical one."""
        if self.repr is not None:
            return self.repr
        return to_key_repr(self._key)

    def as_mut(self) -> "KeyMut":
        """Return a view that can edit formatting but not identity."""
        return KeyMut(self)

    def format(self) -> None:
        """Reset to the canonical representation and clear decor."""
        self.repr = to_key_repr(self._key)
        self.decor.clear()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Key):
            return self._key == other._key
        if isinstance(other, str):
            return self._key == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Key):
            return self._key < other._key
        if isinstance(other, str):
            return self._key < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"Key({self._key!r})"

    def __str__(self) -> str:
        return self.to_repr().as_raw()


class KeyMut:
    """Exclusive editing view of a ``Key``.

    Exposes the key's decor and representation for editing while keeping
    the decoded string, and therefore the key's place in its table, fixed.

    Parameters
    ----------
    key:
        The key being edited.
    """

    __slots__ = ("_key",)

    def __init__(self, key: Key) -> None:
        self._key = key

    def get(self) -> str:
        """Return the decoded key."""
        return self._key.get()

    def to_repr(self) -> Repr:
        """Return the key's representation (stored or canonical)."""
        return self._key.to_repr()

    @property
    def decor(self) -> Decor:
        """The key's decor, editable in place."""
        return self._key.decor

    @decor.setter
    def decor(self, decor: Decor) -> None:
        self._key.decor = decor

    def set_repr_unchecked(self, repr: Repr) -> None:
        """Replace the spelling; the caller guarantees it decodes to ``get()``."""
        self._key.repr = repr

    def format(self) -> None:
        """Reset to the canonical representation and clear decor."""
        self._key.format()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyMut):
            return self._key == other._key
        return self._key == other

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"KeyMut({self._key.get()!r})"

    def __str__(self) -> str:
        return str(self._key)
