"""Document grammar.

::

    toml       = expression *( newline expression )
    expression = ws [ comment ]
               / ws keyval ws [ comment ]
               / ws table ws [ comment ]
    table      = std-table / array-table
    std-table  = "[" ws key ws "]"
    array-table = "[[" ws key ws "]]"

Each line is dispatched on its first character after leading whitespace.
Whatever is recognized is handed to ``ParseState``; the grammar itself
keeps no state.
"""
from __future__ import annotations

from retoml.model.document import Document
from retoml.model.key import Key
from retoml.model.table_like import TableKeyValue
from retoml.parser.errors import (
    CharLiteral,
    CustomError,
    Expected,
    Expression,
    ParserError,
    StringLiteral,
)
from retoml.parser.input import Input
from retoml.parser.key import key
from retoml.parser.recursion import RecursionCheck
from retoml.parser.state import ParseState
from retoml.parser.trace import traced
from retoml.parser.trivia import BOM, COMMENT_START, comment, line_ending, line_trailing, newline, ws
from retoml.parser.value import value

STD_TABLE_OPEN = "["
STD_TABLE_CLOSE = "]"
ARRAY_TABLE_OPEN = "[["
ARRAY_TABLE_CLOSE = "]]"
KEYVAL_SEP = "="


def _line_trailing(inp: Input) -> tuple[Input, tuple[str, str]]:
    try:
        return line_trailing(inp)
    except ParserError as err:
        err.fatal = True
        raise err.add_context(Expected(CharLiteral("\n"))).add_context(Expected(CharLiteral("#"))) from None


# ---------------------------------------------------------------------------
# Key/value lines
# ---------------------------------------------------------------------------


@traced("keyval")
def parse_keyval(inp: Input) -> tuple[Input, tuple[list[Key], TableKeyValue]]:
    """``key = value`` followed by the rest of the line.

    The whitespace after ``=`` and the whitespace and comment after the
    value become the value's decor; the line terminator is kept on the
    entry.
    """
    rest, path = key(inp)
    if rest.first() != KEYVAL_SEP:
        raise (
            ParserError(rest, fatal=True)
            .add_context(Expected(CharLiteral(".")))
            .add_context(Expected(CharLiteral(KEYVAL_SEP)))
        )
    try:
        rest, prefix = ws(rest.advance())
        rest, val = value(rest, RecursionCheck())
    except ParserError as err:
        err.fatal = True
        raise
    rest, (suffix, eol) = _line_trailing(rest)
    leaf = path.pop()
    kv = TableKeyValue(leaf, val.decorated(prefix, suffix), dotted_path=path, eol=eol)
    return rest, (path, kv)


def _keyval(inp: Input, state: ParseState) -> Input:
    try:
        rest, (path, kv) = parse_keyval(inp)
    except ParserError as err:
        err.fatal = True
        raise
    try:
        state.on_keyval(path, kv)
    except CustomError as cause:
        raise ParserError(inp, fatal=True, cause=cause) from None
    return rest


# ---------------------------------------------------------------------------
# Table headers
# ---------------------------------------------------------------------------


def _header(inp: Input, open_: str, close: str) -> tuple[Input, tuple[list[Key], str, str]]:
    rest, path = key(inp.advance(len(open_)))
    if not rest.startswith(close):
        raise (
            ParserError(rest)
            .add_context(Expected(CharLiteral(".")))
            .add_context(Expected(StringLiteral(close)))
        )
    rest, (trailing, eol) = _line_trailing(rest.advance(len(close)))
    return rest, (path, trailing, eol)


@traced("table header")
def table(inp: Input, state: ParseState) -> Input:
    """``[a.b]`` or ``[[a.b]]`` and the rest of its line."""
    is_array = inp.startswith(ARRAY_TABLE_OPEN)
    try:
        if is_array:
            rest, (path, trailing, eol) = _header(inp, ARRAY_TABLE_OPEN, ARRAY_TABLE_CLOSE)
        else:
            rest, (path, trailing, eol) = _header(inp, STD_TABLE_OPEN, STD_TABLE_CLOSE)
    except ParserError as err:
        err.fatal = True
        raise err.add_context(Expression("table header")) from None
    try:
        if is_array:
            state.on_array_header(path, trailing, eol)
        else:
            state.on_std_header(path, trailing, eol)
    except CustomError as cause:
        raise ParserError(inp, fatal=True, cause=cause).add_context(Expression("table header")) from None
    return rest


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def _comment_line(inp: Input, state: ParseState) -> Input:
    rest, _ = comment(inp)
    try:
        rest, _ = line_ending(rest)
    except ParserError as err:
        err.fatal = True
        raise
    state.on_comment(inp.slice_to(rest))
    return rest


def _ws(inp: Input, state: ParseState) -> Input:
    rest, text = ws(inp)
    state.on_ws(text)
    return rest


def document(inp: Input) -> tuple[Input, Document]:
    """Parse a whole document; the input must be consumed entirely."""
    state = ParseState()
    rest = inp
    if rest.startswith(BOM):
        rest = rest.advance()
    rest = _ws(rest, state)
    while not rest.at_eof:
        c = rest.first()
        if c == COMMENT_START:
            rest = _comment_line(rest, state)
        elif c == STD_TABLE_OPEN:
            rest = table(rest, state)
        elif c in ("\n", "\r"):
            try:
                rest, eol = newline(rest)
            except ParserError:
                # A lone CR.
                break
            state.on_ws(eol)
        else:
            rest = _keyval(rest, state)
        rest = _ws(rest, state)
    if not rest.at_eof:
        raise ParserError(rest, fatal=True)
    try:
        return rest, state.into_document()
    except CustomError as cause:
        raise ParserError(rest, fatal=True, cause=cause) from None
