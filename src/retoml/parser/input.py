"""Read-only input cursor for the grammar rules.

Every grammar rule is a plain function ``Input -> tuple[Input, T]``.  A rule
never mutates its input; it returns a *narrowed* view (same source, later
position) alongside the value it recognized.  Because ``Input`` is a frozen
value, a caller can hold on to an earlier view and retry from it, which is
all the backtracking the combinators in ``retoml.parser.combinators`` need.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Input:
    """Immutable ``(source, pos)`` view over TOML text.

    Parameters
    ----------
    source:
        The complete text being parsed.  Shared by every view derived from
        the same root input.
    pos:
        0-based character offset of the first unconsumed character.
    """

    source: str
    pos: int = 0

    def __repr__(self) -> str:
        preview = self.source[self.pos : self.pos + 16]
        return f"Input({self.pos}, {preview!r})"

    @property
    def at_eof(self) -> bool:
        """Return True when no characters remain."""
        return self.pos >= len(self.source)

    @property
    def remaining(self) -> int:
        """Return the number of unconsumed characters."""
        return len(self.source) - self.pos

    def peek(self, n: int = 1) -> str:
        """Return up to ``n`` characters without consuming them."""
        return self.source[self.pos : self.pos + n]

    def first(self) -> str:
        """Return the next character, or ``""`` at end of input."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def startswith(self, literal: str) -> bool:
        """Return True if the unconsumed text starts with ``literal``."""
        return self.source.startswith(literal, self.pos)

    def advance(self, n: int = 1) -> "Input":
        """Return a new view with ``n`` more characters consumed."""
        return Input(self.source, min(self.pos + n, len(self.source)))

    def slice_to(self, other: "Input") -> str:
        """Return the text consumed between this view and a later ``other``."""
        return self.source[self.pos : other.pos]

    def byte_offset(self) -> int:
        """Return the UTF-8 byte offset corresponding to ``pos``."""
        return len(self.source[: self.pos].encode("utf-8"))
