"""Recursion guard for self-recursive grammar rules.

Arrays and inline tables may nest arbitrarily, and dotted keys become one
table level per segment.  To keep a hostile document from exhausting the
interpreter stack, every rule that can recurse takes a ``RecursionCheck``
and calls ``recursing`` before descending.  The guard is a frozen value
copied into each call, never shared state, so concurrent parses do not
interfere with each other.
"""
from __future__ import annotations

from dataclasses import dataclass

from retoml.config import RECURSION_LIMIT, SETTINGS
from retoml.parser.errors import ParserError, RecursionLimitExceeded
from retoml.parser.input import Input


@dataclass(frozen=True, slots=True)
class RecursionCheck:
    """Depth counter threaded by value through recursive rules.

    Parameters
    ----------
    current:
        Number of nested levels entered so far.
    """

    current: int = 0

    @staticmethod
    def check_depth(depth: int) -> None:
        """Raise ``RecursionLimitExceeded`` if ``depth`` reaches the limit."""
        if SETTINGS.unbounded:
            return
        if depth >= RECURSION_LIMIT:
            raise RecursionLimitExceeded()

    def recursing(self, inp: Input) -> "RecursionCheck":
        """Return a guard one level deeper, or fail at ``inp``.

        Raises
        ------
        ParserError
            A recoverable error whose cause is ``RecursionLimitExceeded``;
            the enclosing ``cut`` makes it fatal.
        """
        if SETTINGS.unbounded:
            return self
        deeper = RecursionCheck(self.current + 1)
        if deeper.current < RECURSION_LIMIT:
            return deeper
        raise ParserError(inp, cause=RecursionLimitExceeded())
