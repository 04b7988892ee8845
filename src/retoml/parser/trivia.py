"""Whitespace, comments and line endings.

::

    ws                 = *( %x20 / %x09 )
    comment            = "#" *non-eol          ; non-eol = TAB / %x20-7E / non-ascii
    newline            = LF / CRLF
    line-ending        = newline / EOF
    line-trailing      = ws [ comment ] line-ending
    ws-comment-newline = *( wschar / newline / comment )

All rules return the exact text they consumed, which is what ends up in
decor and trailing trivia.
"""
from __future__ import annotations

import re
from typing import Final

from retoml.parser.combinators import regex
from retoml.parser.errors import ParserError
from retoml.parser.input import Input

BOM: Final[str] = "\ufeff"
COMMENT_START: Final[str] = "#"

_NON_EOL: Final[str] = "\t\x20-\x7e\x80-\U0010ffff"

WS_RE: Final[re.Pattern[str]] = re.compile(r"[ \t]*")
COMMENT_RE: Final[re.Pattern[str]] = re.compile(f"#[{_NON_EOL}]*")
WS_NEWLINE_RE: Final[re.Pattern[str]] = re.compile(r"(?:[ \t]|\r?\n)*")
WS_COMMENT_NEWLINE_RE: Final[re.Pattern[str]] = re.compile(f"(?:[ \\t]|\\r?\\n|#[{_NON_EOL}]*)*")

ws = regex(WS_RE)
comment = regex(COMMENT_RE)
ws_newline = regex(WS_NEWLINE_RE)
ws_comment_newline = regex(WS_COMMENT_NEWLINE_RE)


def newline(inp: Input) -> tuple[Input, str]:
    """Match ``\\n`` or ``\\r\\n`` and return it as written."""
    if inp.startswith("\n"):
        return inp.advance(), "\n"
    if inp.startswith("\r\n"):
        return inp.advance(2), "\r\n"
    raise ParserError(inp)


def ws_newlines(inp: Input) -> tuple[Input, str]:
    """A newline followed by any run of whitespace and newlines."""
    rest, _ = newline(inp)
    rest, _ = ws_newline(rest)
    return rest, inp.slice_to(rest)


def line_ending(inp: Input) -> tuple[Input, str]:
    """Match a newline or the end of input; return ``""`` at EOF."""
    if inp.at_eof:
        return inp, ""
    return newline(inp)


def line_trailing(inp: Input) -> tuple[Input, tuple[str, str]]:
    """Match the rest of a line after a key/value or header.

    Returns ``(trailing, eol)``: the whitespace and comment before the line
    end, and the line terminator itself.
    """
    rest, _ = ws(inp)
    if rest.first() == COMMENT_START:
        rest, _ = comment(rest)
    trailing = inp.slice_to(rest)
    rest, eol = line_ending(rest)
    return rest, (trailing, eol)
