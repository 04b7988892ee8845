"""Key grammar.

::

    key        = simple-key / dotted-key
    dotted-key = simple-key 1*( dot-sep simple-key )
    simple-key = quoted-key / unquoted-key
    dot-sep    = ws "." ws

Each segment of a dotted key becomes its own ``Key`` carrying the exact
spelling and the whitespace on either side of it.
"""
from __future__ import annotations

from retoml.model.key import BARE_KEY_RE, Key
from retoml.model.repr import Decor, Repr
from retoml.parser.errors import Expression, ParserError, RecursionLimitExceeded
from retoml.parser.input import Input
from retoml.parser.recursion import RecursionCheck
from retoml.parser.strings import APOSTROPHE, QUOTATION_MARK, basic_string, literal_string
from retoml.parser.trace import traced
from retoml.parser.trivia import ws

DOT_SEP = "."


def unquoted_key(inp: Input) -> tuple[Input, str]:
    """``1*( ALPHA / DIGIT / "-" / "_" )``"""
    m = BARE_KEY_RE.match(inp.source, inp.pos)
    if m is None:
        raise ParserError(inp)
    return Input(inp.source, m.end()), m.group()


def simple_key(inp: Input) -> tuple[Input, tuple[str, str]]:
    """One key segment, returned as ``(raw, decoded)``."""
    c = inp.first()
    if c == QUOTATION_MARK:
        rest, decoded = basic_string(inp)
    elif c == APOSTROPHE:
        rest, decoded = literal_string(inp)
    else:
        rest, decoded = unquoted_key(inp)
    return rest, (inp.slice_to(rest), decoded)


def _segment(inp: Input) -> tuple[Input, Key]:
    rest, prefix = ws(inp)
    rest, (raw, decoded) = simple_key(rest)
    rest, suffix = ws(rest)
    return rest, Key(decoded, Repr(raw), Decor(prefix, suffix))


@traced("key")
def key(inp: Input) -> tuple[Input, list[Key]]:
    """A possibly dotted key, one ``Key`` per segment.

    Raises
    ------
    ParserError
        If no key is present, or a dotted key has too many segments to
        insert without exceeding the nesting limit.
    """
    try:
        rest, first = _segment(inp)
    except ParserError as err:
        raise err.add_context(Expression("key")) from None
    path = [first]
    while rest.first() == DOT_SEP:
        try:
            after, segment = _segment(rest.advance())
        except ParserError as err:
            if err.fatal:
                raise err.add_context(Expression("key")) from None
            break
        path.append(segment)
        rest = after
    try:
        RecursionCheck.check_depth(len(path))
    except RecursionLimitExceeded as cause:
        raise ParserError(inp, cause=cause) from None
    return rest, path
