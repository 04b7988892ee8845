"""Array grammar.

::

    array        = "[" [ array-values ] ws-comment-newline "]"
    array-values = ws-comment-newline val ws-comment-newline [ "," array-values ]

Whitespace and comments around each element become that element's decor;
whatever follows the last element (or its trailing comma) is kept as the
array's ``trailing`` text.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from retoml.model.array import Array
from retoml.parser.errors import CharLiteral, Expected, Expression, ParserError
from retoml.parser.input import Input
from retoml.parser.recursion import RecursionCheck
from retoml.parser.trivia import ws_comment_newline

if TYPE_CHECKING:
    from retoml.model.value import Value

ARRAY_OPEN = "["
ARRAY_CLOSE = "]"
ARRAY_SEP = ","


def _array_value(inp: Input, check: RecursionCheck) -> tuple[Input, "Value"]:
    from retoml.parser.value import value

    rest, prefix = ws_comment_newline(inp)
    rest, val = value(rest, check)
    rest, suffix = ws_comment_newline(rest)
    return rest, val.decorated(prefix, suffix)


def _array_values(inp: Input, check: RecursionCheck) -> tuple[Input, Array]:
    check = check.recursing(inp)
    values: list[Value] = []
    trailing_comma = False
    rest = inp
    try:
        rest, first = _array_value(inp, check)
    except ParserError as err:
        if err.fatal:
            raise
    else:
        values.append(first)
        while rest.first() == ARRAY_SEP:
            try:
                after, elem = _array_value(rest.advance(), check)
            except ParserError as err:
                if err.fatal:
                    raise
                break
            values.append(elem)
            rest = after
        if rest.first() == ARRAY_SEP:
            rest = rest.advance()
            trailing_comma = True
    rest, trailing = ws_comment_newline(rest)
    return rest, Array.from_values(values, trailing=trailing, trailing_comma=trailing_comma)


def array(inp: Input, check: RecursionCheck) -> tuple[Input, Array]:
    """Parse ``[ ... ]``; committed once the ``[`` has been seen."""
    if inp.first() != ARRAY_OPEN:
        raise ParserError(inp)
    try:
        rest, arr = _array_values(inp.advance(), check)
    except ParserError as err:
        err.fatal = True
        raise
    if rest.first() != ARRAY_CLOSE:
        raise (
            ParserError(rest, fatal=True)
            .add_context(Expression("array"))
            .add_context(Expected(CharLiteral(ARRAY_CLOSE)))
        )
    return rest.advance(), arr
