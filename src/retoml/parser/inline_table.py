"""Inline table grammar.

::

    inline-table         = "{" ws [ inline-table-keyvals ] ws "}"
    inline-table-keyvals = keyval [ "," inline-table-keyvals ]

A dotted key inside the braces (``{ a.b = 1 }``) creates intermediate
inline tables flagged ``dotted`` so they are written back as dotted keys.
No trailing comma is accepted.
"""
from __future__ import annotations

from retoml.model.inline_table import InlineTable
from retoml.model.key import Key
from retoml.model.table_like import TableKeyValue
from retoml.parser.errors import (
    CharLiteral,
    CustomError,
    DottedKeyExtendWrongType,
    DuplicateKey,
    Expected,
    Expression,
    ParserError,
)
from retoml.parser.input import Input
from retoml.parser.key import key
from retoml.parser.recursion import RecursionCheck
from retoml.parser.trivia import ws

INLINE_TABLE_OPEN = "{"
INLINE_TABLE_CLOSE = "}"
INLINE_TABLE_SEP = ","
KEYVAL_SEP = "="


def keyval(inp: Input, check: RecursionCheck) -> tuple[Input, tuple[list[Key], TableKeyValue]]:
    """``key = value`` inside braces.

    Returns the leading segments of the key (empty for a simple key) and
    the entry for the last segment.
    """
    from retoml.parser.value import value

    rest, path = key(inp)
    if rest.first() != KEYVAL_SEP:
        raise (
            ParserError(rest, fatal=True)
            .add_context(Expected(CharLiteral(".")))
            .add_context(Expected(CharLiteral(KEYVAL_SEP)))
        )
    try:
        rest, prefix = ws(rest.advance())
        rest, val = value(rest, check)
        rest, suffix = ws(rest)
    except ParserError as err:
        err.fatal = True
        raise
    leaf = path.pop()
    return rest, (path, TableKeyValue(leaf, val.decorated(prefix, suffix), dotted_path=path))


def descend_path(table: InlineTable, path: list[Key]) -> InlineTable:
    """Walk ``path`` from ``table``, creating dotted inline tables as needed."""
    for i, segment in enumerate(path):
        child = table.entry_format(segment, InlineTable.new_dotted)
        if not isinstance(child, InlineTable):
            raise DottedKeyExtendWrongType.from_path(path, i, child.type_name())
        table = child
    return table


def table_from_pairs(pairs: list[tuple[list[Key], TableKeyValue]], preamble: str) -> InlineTable:
    """Assemble the parsed pairs into one inline table.

    Raises
    ------
    DuplicateKey
        If two pairs resolve to the same key.
    DottedKeyExtendWrongType
        If a dotted key runs through a value that is not an inline table.
    """
    root = InlineTable()
    root.preamble = preamble
    for position, (path, kv) in enumerate(pairs):
        kv.position = position
        table = descend_path(root, path)
        if table.insert_kv(kv) is not None:
            raise DuplicateKey(key=kv.key.get(), table=None)
    return root


def _keyvals(inp: Input, check: RecursionCheck) -> tuple[Input, InlineTable]:
    check = check.recursing(inp)
    pairs: list[tuple[list[Key], TableKeyValue]] = []
    rest = inp
    try:
        rest, pair = keyval(inp, check)
    except ParserError as err:
        if err.fatal:
            raise
    else:
        pairs.append(pair)
        while rest.first() == INLINE_TABLE_SEP:
            try:
                after, pair = keyval(rest.advance(), check)
            except ParserError as err:
                if err.fatal:
                    raise
                break
            pairs.append(pair)
            rest = after
    rest, preamble = ws(rest)
    try:
        return rest, table_from_pairs(pairs, preamble)
    except CustomError as cause:
        raise ParserError(inp, cause=cause) from None


def inline_table(inp: Input, check: RecursionCheck) -> tuple[Input, InlineTable]:
    """Parse ``{ ... }``; committed once the ``{`` has been seen."""
    if inp.first() != INLINE_TABLE_OPEN:
        raise ParserError(inp)
    try:
        rest, table = _keyvals(inp.advance(), check)
    except ParserError as err:
        err.fatal = True
        raise
    if rest.first() != INLINE_TABLE_CLOSE:
        raise (
            ParserError(rest, fatal=True)
            .add_context(Expression("inline table"))
            .add_context(Expected(CharLiteral(INLINE_TABLE_CLOSE)))
        )
    return rest.advance(), table
