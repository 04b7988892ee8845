"""Source-formatting carriers: ``Repr`` and ``Decor``.

``Repr`` is the verbatim spelling of a key or scalar value (``0x1F`` rather
than ``31``, ``'a b'`` rather than ``a b``).  ``Decor`` is the whitespace
and comment text immediately before and after a node.  Together they let
an unmodified document re-encode byte-for-byte.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Repr:
    """The exact source text of a key or value.

    Parameters
    ----------
    raw:
        The text, retained verbatim.
    """

    raw: str

    def as_raw(self) -> str:
        """Return the raw text."""
        return self.raw

    def __str__(self) -> str:
        return self.raw


@dataclass(slots=True)
class Decor:
    """Prefix and suffix trivia surrounding a node.

    Either side may be ``None``, meaning "not set": the encoder then uses
    the default for the node's position (for example a single space after
    ``=``).  Parsed nodes always carry strings, possibly empty.

    Parameters
    ----------
    prefix:
        Text written before the node.
    suffix:
        Text written after the node.
    """

    prefix: str | None = None
    suffix: str | None = None

    def clear(self) -> None:
        """Forget both sides so the encoder falls back to its defaults."""
        self.prefix = None
        self.suffix = None

    def prefix_or(self, default: str) -> str:
        """Return the prefix, or ``default`` when unset."""
        return default if self.prefix is None else self.prefix

    def suffix_or(self, default: str) -> str:
        """Return the suffix, or ``default`` when unset."""
        return default if self.suffix is None else self.suffix

    def copy(self) -> "Decor":
        """Return an independent copy."""
        return Decor(self.prefix, self.suffix)
