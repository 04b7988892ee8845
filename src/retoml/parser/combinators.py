"""Parser-combinator helpers.

A *parser* here is any callable ``Input -> tuple[Input, T]`` that raises
``ParserError`` on failure.  Most of the grammar is straight-line code
(``inp, x = rule(inp)``); these helpers cover the two shapes that repeat:
anchored regular expressions and ordered choice.

``alt`` only moves on after a *recoverable* error; a fatal error always
propagates to the entry point.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeVar

from retoml.parser.errors import ParserError
from retoml.parser.input import Input

T = TypeVar("T")

Parser = Callable[[Input], tuple[Input, T]]


def regex(pattern: re.Pattern[str]) -> Parser[str]:
    """Match ``pattern`` anchored at the current position.

    A pattern that can match the empty string never fails.
    """

    def parse(inp: Input) -> tuple[Input, str]:
        m = pattern.match(inp.source, inp.pos)
        if m is None:
            raise ParserError(inp)
        return Input(inp.source, m.end()), m.group()

    return parse


def alt(*parsers: Parser[T]) -> Parser[T]:
    """Ordered choice: the first alternative to succeed wins.

    When every alternative fails softly, the last failure is re-raised.
    """

    def parse(inp: Input) -> tuple[Input, T]:
        last: ParserError | None = None
        for parser in parsers:
            try:
                return parser(inp)
            except ParserError as err:
                if err.fatal:
                    raise
                last = err
        assert last is not None
        raise last

    return parse
